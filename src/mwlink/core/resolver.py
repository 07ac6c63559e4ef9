"""Resolve link candidates to pages on a wiki.

A candidate's text is peeled one ``prefix:`` at a time: a namespace of the
current site ends the chain, an interwiki prefix moves resolution to the
target wiki and continues there. Namespace names win over interwiki
prefixes, and the first interwiki hop to a site that is not a reachable
MediaWiki stops the chain.
"""

import re
from dataclasses import dataclass
from typing import Optional, Tuple

from mwlink.core import nshandling, titles
from mwlink.core.nshandling import NsHandler
from mwlink.core.site import Namespace, SiteDescriptor

prefix_rx = re.compile(r"^\s*:?\s*([^:#]+?)\s*:(.*)$", re.DOTALL)


@dataclass(frozen=True)
class ResolvedTitle:
    site: Optional[SiteDescriptor]
    namespace: Optional[Namespace]
    namespace_name: Optional[str]
    title: str
    interwikis: Tuple[str, ...]
    link_format: str
    is_transclusion: bool = False
    is_mediawiki: bool = True
    capitalize: bool = True

    @property
    def full_title(self):
        if self.namespace is None or self.namespace.id == nshandling.NS_MAIN:
            return self.title
        return f"{self.namespace_name or self.namespace.name}:{self.title}"

    @property
    def key(self):
        """Identity used to drop repeated links within one message."""
        return ":".join([*self.interwikis, self.full_title])

    def url(self, space_char="_"):
        return titles.get_link(self.full_title, self.link_format, space_char)

    def markdown(self, style="url", space_char="_"):
        url = self.url(space_char)
        if style == "titled":
            return f"[{titles.code_span(self.key)}](<{url}>)"
        return f"<{url}>"


class _Transclusion:
    """Where a ``{{...}}`` candidate points before prefixes are looked at."""

    def __init__(self, namespace, text, follow_prefixes=True):
        self.namespace = namespace
        self.text = text
        self.follow_prefixes = follow_prefixes


def classify_transclusion(handler: NsHandler, text: str) -> Optional[_Transclusion]:
    """Find the page a transclusion refers to, or None for magic words."""
    site = handler.site
    if text.startswith(":"):
        return _Transclusion(None, text[1:])

    rest = handler.strip_magic(text, nshandling.SUBSTITUTION_WORDS)
    if rest is not None:
        text = rest.strip()
        if text.startswith(":"):
            return _Transclusion(None, text[1:])

    rest = handler.strip_magic(text, ("int",))
    if rest is not None:
        return _Transclusion(site.namespaces.get(nshandling.NS_MEDIAWIKI), rest, False)

    match = prefix_rx.match(text)
    if match:
        namespace = handler.find_namespace(match.group(1))
        if namespace is not None and namespace.id == nshandling.NS_SPECIAL:
            return _Transclusion(namespace, match.group(2), False)

    if handler.has_namespace(nshandling.NS_MODULE):
        rest = handler.strip_magic(text, ("invoke",))
        if rest is not None:
            return _Transclusion(site.namespaces[nshandling.NS_MODULE], rest, False)

    if handler.is_magic(text):
        return None
    return _Transclusion(site.namespaces.get(nshandling.NS_TEMPLATE), text)


class Resolver:
    """Resolves candidates against *default_site*.

    *provider* supplies other wikis' descriptors (``get_site``) and the
    wiki-side spelling of titles (``get_normalized_title``).
    """

    def __init__(self, provider, default_site: SiteDescriptor):
        self.provider = provider
        self.default_site = default_site

    def resolve(self, candidate) -> Optional[ResolvedTitle]:
        opening = candidate.opening.strip()
        closing = candidate.closing.strip()
        is_transclusion = opening.startswith("{")
        if is_transclusion:
            if not closing.startswith("}"):
                return None
            if opening.startswith("{{{") and closing.startswith("}}}"):
                return None
        elif not closing.startswith("]"):
            return None

        text = candidate.text.strip()
        if not text or titles.is_invalid(text, check_length=False):
            return None
        if not is_transclusion and text.startswith("#"):
            return None
        if is_transclusion and text.startswith("/"):
            return None

        site = self.default_site
        handler = NsHandler(site)
        link_format = site.url_pattern
        namespace = None
        namespace_name = None
        interwikis = []
        is_mediawiki = True
        follow_prefixes = True

        if is_transclusion:
            transclusion = classify_transclusion(handler, text)
            if transclusion is None:
                return None
            namespace = transclusion.namespace
            text = transclusion.text
            follow_prefixes = transclusion.follow_prefixes

        for _ in range(text.count(":") if follow_prefixes else 0):
            match = prefix_rx.match(text)
            if match is None:
                break
            prefix, rest = match.groups()

            found = handler.find_namespace(prefix)
            if found is not None:
                namespace, namespace_name, text = found, found.name, rest
                if found.id == nshandling.NS_MEDIA and handler.has_namespace(nshandling.NS_FILE):
                    namespace = site.namespaces[nshandling.NS_FILE]
                    namespace_name = namespace.name
                elif handler.is_gendered(found) and titles.decode(rest):
                    normalized = self.provider.get_normalized_title(
                        f"{found.name}:{titles.decode(rest)}", site
                    )
                    if ":" in normalized:
                        namespace_name, text = normalized.split(":", 1)
                break

            interwiki = None if is_transclusion else handler.find_interwiki(prefix)
            if interwiki is None:
                break
            interwikis.append(interwiki.prefix)
            text = rest
            if interwiki.url == link_format:
                continue
            link_format = interwiki.url
            target = self.provider.get_site(interwiki.url, api_url=interwiki.api or None)
            if target is None:
                site = None
                is_mediawiki = False
                break
            site = target
            handler = NsHandler(site)

        if namespace is not None and not titles.decode(text):
            return None

        if site is None:
            capitalize = False
        else:
            capitalize = handler.capitalize(namespace.id if namespace else nshandling.NS_MAIN)

        is_different_wiki = link_format != self.default_site.url_pattern
        if is_different_wiki and site is not None and not titles.decode(text):
            text = site.main_page

        title = titles.decode(text)
        if not title and not is_different_wiki:
            return None
        if titles.is_invalid(
            title,
            check_length=True,
            is_mediawiki=is_mediawiki,
            check_protocol=not is_different_wiki,
            nsid=namespace.id if namespace else None,
        ):
            return None

        return ResolvedTitle(
            site=site,
            namespace=namespace,
            namespace_name=namespace_name,
            title=titles.capitalise(title, capitalize),
            interwikis=tuple(interwikis),
            link_format=link_format,
            is_transclusion=is_transclusion,
            is_mediawiki=is_mediawiki,
            capitalize=capitalize,
        )
