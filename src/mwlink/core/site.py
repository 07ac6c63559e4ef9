"""Immutable snapshots of a wiki's siteinfo.

A :class:`SiteDescriptor` is built once from the ``query`` part of an
``action=query&meta=siteinfo`` answer and never changes afterwards. Lookup
tables are keyed by lowercased, space-normalized names.
"""

import re
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping, Optional, Tuple


def normalize_key(name: str) -> str:
    return re.sub(r"[ _]+", " ", name).strip().lower()


def _flag(entry: dict, key: str) -> bool:
    # formatversion=1 marks true flags with an empty string
    value = entry.get(key, False)
    return value is True or value == ""


@dataclass(frozen=True)
class Namespace:
    id: int
    name: str
    canonical: str = ""
    aliases: Tuple[str, ...] = ()
    case_sensitive: bool = False

    @property
    def names(self) -> Tuple[str, ...]:
        return tuple(x for x in (self.name, self.canonical, *self.aliases) if x)


@dataclass(frozen=True)
class Interwiki:
    prefix: str
    url: str
    api: str = ""


@dataclass(frozen=True)
class MagicWord:
    name: str
    aliases: Tuple[str, ...]
    case_sensitive: bool = False

    def match(self, text: str) -> Optional[str]:
        """Return the alias *text* starts with, if any.

        Aliases ending with a colon are prefixes (``SUBST:``); other aliases
        must be the whole text or be followed by a colon (``PAGENAME:Foo``).
        """
        for alias in self.aliases:
            if self.case_sensitive:
                subject, needle = text, alias
            else:
                subject, needle = text.lower(), alias.lower()
            if needle.endswith(":"):
                if subject.startswith(needle):
                    return alias
            elif subject == needle or subject.startswith(needle + ":"):
                return alias
        return None


@dataclass(frozen=True)
class SiteDescriptor:
    url_pattern: str
    api_url: str
    server: str = ""
    main_page: str = ""
    case_sensitive: bool = False
    namespaces: Mapping[int, Namespace] = field(default_factory=lambda: MappingProxyType({}))
    interwikis: Mapping[str, Interwiki] = field(default_factory=lambda: MappingProxyType({}))
    magic_words: Mapping[str, MagicWord] = field(default_factory=lambda: MappingProxyType({}))
    namespace_index: Mapping[str, int] = field(default_factory=lambda: MappingProxyType({}))

    @classmethod
    def from_siteinfo(cls, siteinfo: dict, url_pattern: str, api_url: str) -> "SiteDescriptor":
        general = siteinfo.get("general", {})
        server = general.get("server", "")
        if server.startswith("//"):
            server = "https:" + server

        aliases = {}
        for alias in siteinfo.get("namespacealiases", []):
            aliases.setdefault(int(alias["id"]), []).append(alias["*"])

        namespaces = {}
        for data in siteinfo.get("namespaces", {}).values():
            nsid = int(data["id"])
            namespaces[nsid] = Namespace(
                id=nsid,
                name=data.get("*", data.get("name", "")),
                canonical=data.get("canonical", ""),
                aliases=tuple(aliases.get(nsid, ())),
                case_sensitive=data.get("case", "first-letter") == "case-sensitive",
            )

        namespace_index = {}
        for namespace in namespaces.values():
            for name in namespace.names:
                namespace_index.setdefault(normalize_key(name), namespace.id)

        interwikis = {}
        for data in siteinfo.get("interwikimap", []):
            prefix = normalize_key(data["prefix"])
            interwikis[prefix] = Interwiki(
                prefix=prefix,
                url=data["url"],
                api=data.get("api", ""),
            )

        magic_words = {}
        for data in siteinfo.get("magicwords", []):
            magic_words[data["name"]] = MagicWord(
                name=data["name"],
                aliases=tuple(data.get("aliases", ())),
                case_sensitive=_flag(data, "case-sensitive"),
            )

        return cls(
            url_pattern=url_pattern,
            api_url=api_url,
            server=server,
            main_page=general.get("mainpage", ""),
            case_sensitive=general.get("case", "first-letter") == "case-sensitive",
            namespaces=MappingProxyType(namespaces),
            interwikis=MappingProxyType(interwikis),
            magic_words=MappingProxyType(magic_words),
            namespace_index=MappingProxyType(namespace_index),
        )
