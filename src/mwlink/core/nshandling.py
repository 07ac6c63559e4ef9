# Copyright (c) 2007-2009 PediaPress GmbH
# See README.md for additional licensing information.

"""
namespace, interwiki and magic word lookups based on a site descriptor
"""

from mwlink.core.site import MagicWord, normalize_key

NS_MEDIA = -2
NS_SPECIAL = -1
NS_MAIN = 0
NS_TALK = 1
NS_USER = 2
NS_USER_TALK = 3
NS_PROJECT = 4
NS_PROJECT_TALK = 5
NS_FILE = 6
NS_FILE_TALK = 7
NS_MEDIAWIKI = 8
NS_MEDIAWIKI_TALK = 9
NS_TEMPLATE = 10
NS_TEMPLATE_TALK = 11
NS_HELP = 12
NS_HELP_TALK = 13
NS_CATEGORY = 14
NS_CATEGORY_TALK = 15
NS_MODULE = 828

# titles in these namespaces are always capitalized, whatever the wiki says
ALWAYS_CAPITALIZED = frozenset({NS_SPECIAL, NS_USER, NS_USER_TALK, NS_MEDIAWIKI, NS_MEDIAWIKI_TALK})
GENDERED = frozenset({NS_USER, NS_USER_TALK})

# magic words that select a namespace or only modify how a page is transcluded
SUBSTITUTION_WORDS = ("subst", "safesubst", "raw", "msg")
NAMESPACE_WORDS = ("int", "invoke")

DEFAULT_MAGICWORDS = [
    {"name": "subst", "aliases": ["SUBST:"]},
    {"name": "safesubst", "aliases": ["SAFESUBST:"]},
    {"name": "raw", "aliases": ["RAW:"]},
    {"name": "msg", "aliases": ["MSG:"]},
    {"name": "int", "aliases": ["INT:"]},
    {"name": "invoke", "aliases": ["invoke"]},
]


class NsHandler:
    def __init__(self, site):
        if site is None:
            raise ValueError("site is None")
        self.site = site

        self.magic_words = dict(site.magic_words)
        for data in DEFAULT_MAGICWORDS:
            self.magic_words.setdefault(data["name"], MagicWord(data["name"], tuple(data["aliases"])))

    def find_namespace(self, name):
        nsid = self.site.namespace_index.get(normalize_key(name))
        if nsid is None:
            return None
        return self.site.namespaces[nsid]

    def has_namespace(self, nsid):
        return nsid in self.site.namespaces

    def get_nsname_by_number(self, nsid):
        namespace = self.site.namespaces.get(nsid)
        return namespace.name if namespace is not None else ""

    def find_interwiki(self, prefix):
        return self.site.interwikis.get(normalize_key(prefix))

    def is_prefix(self, name):
        """Whether *name* is a namespace or interwiki prefix on this site."""
        return self.find_namespace(name) is not None or self.find_interwiki(name) is not None

    def capitalize(self, nsid=NS_MAIN):
        """Whether the first letter of a title in namespace *nsid* is forced to uppercase."""
        if nsid in ALWAYS_CAPITALIZED:
            return True
        namespace = self.site.namespaces.get(nsid)
        if namespace is None:
            return not self.site.case_sensitive
        return not namespace.case_sensitive

    def is_gendered(self, namespace):
        return namespace.id in GENDERED and bool(namespace.aliases)

    def strip_magic(self, text, names):
        """Strip a leading alias of one of the magic words *names*.

        Returns the remaining text, or None when *text* starts with none of them.
        """
        for name in names:
            word = self.magic_words.get(name)
            if word is None:
                continue
            subject = text[1:] if text.startswith("#") else text
            alias = word.match(subject)
            if alias is None:
                continue
            rest = subject[len(alias) :]
            if not alias.endswith(":"):
                rest = rest[1:]
            return rest
        return None

    def is_magic(self, text):
        """Whether *text* names a magic word other than a namespace cue."""
        subject = text[1:] if text.startswith("#") else text
        skip = SUBSTITUTION_WORDS + NAMESPACE_WORDS
        for word in self.magic_words.values():
            if word.name in skip:
                continue
            alias = word.match(subject)
            if alias is None:
                continue
            if alias.endswith(":") and self.find_namespace(alias[:-1]) is not None:
                continue
            return True
        return False
