"""Canned siteinfo for the wikis used by the linking tests."""

from mwlink.core.site import SiteDescriptor
from mwlink.network.siteinfo import SiteInfoCache

RUWIKI = "https://ru.wikipedia.org/wiki/$1"
ENWIKI = "https://en.wikipedia.org/wiki/$1"
JAWIKI = "https://ja.wikipedia.org/wiki/$1"
RUWIKT = "https://ru.wiktionary.org/wiki/$1"
ENWIKT = "https://en.wiktionary.org/wiki/$1"
META = "https://meta.wikimedia.org/wiki/$1"
GOOGLE = "https://www.google.com/search?q=$1"

CANONICAL = {
    -2: "Media", -1: "Special", 0: "", 1: "Talk", 2: "User", 3: "User talk",
    4: "Project", 5: "Project talk", 6: "File", 7: "File talk", 8: "MediaWiki",
    9: "MediaWiki talk", 10: "Template", 11: "Template talk", 12: "Help",
    13: "Help talk", 14: "Category", 15: "Category talk", 828: "Module",
    829: "Module talk",
}

MAGICWORDS_EN = [
    {"name": "subst", "aliases": ["SUBST:"], "case-sensitive": ""},
    {"name": "safesubst", "aliases": ["SAFESUBST:"], "case-sensitive": ""},
    {"name": "msg", "aliases": ["MSG:"]},
    {"name": "raw", "aliases": ["RAW:"]},
    {"name": "int", "aliases": ["INT:"]},
    {"name": "invoke", "aliases": ["invoke"]},
    {"name": "special", "aliases": ["special"]},
    {"name": "tag", "aliases": ["tag"]},
    {"name": "time", "aliases": ["time"]},
    {"name": "if", "aliases": ["if"]},
    {"name": "lc", "aliases": ["LC:"]},
    {"name": "notoc", "aliases": ["__NOTOC__"]},
    {"name": "currentyear", "aliases": ["CURRENTYEAR"], "case-sensitive": ""},
    {"name": "pagename", "aliases": ["PAGENAME"], "case-sensitive": ""},
]

MAGICWORDS_RU = [
    {"name": "subst", "aliases": ["ПОДСТ:", "ПОДСТАНОВКА:", "SUBST:"]},
    {"name": "safesubst", "aliases": ["ЗАЩПОДСТ:", "SAFESUBST:"]},
    {"name": "msg", "aliases": ["СООБЩ:", "MSG:"]},
    {"name": "raw", "aliases": ["НЕОБРАБ:", "RAW:"]},
    {"name": "int", "aliases": ["ВНУТР:", "INT:"]},
    {"name": "invoke", "aliases": ["вызвать", "invoke"]},
    {"name": "special", "aliases": ["служебная", "special"]},
    {"name": "tag", "aliases": ["тег", "tag"]},
    {"name": "time", "aliases": ["время", "time"]},
    {"name": "if", "aliases": ["если", "if"]},
    {"name": "notoc", "aliases": ["__БЕЗ_ОГЛ__", "__NOTOC__"]},
    {"name": "currentyear", "aliases": ["ТЕКУЩИЙ_ГОД", "CURRENTYEAR"], "case-sensitive": ""},
]


def make_siteinfo(server, mainpage, names, aliases=(), interwikis=(), magicwords=MAGICWORDS_EN,
                  case="first-letter"):
    namespaces = {}
    for nsid, name in names.items():
        data = {"id": nsid, "case": case, "*": name}
        if CANONICAL.get(nsid):
            data["canonical"] = CANONICAL[nsid]
        namespaces[str(nsid)] = data
    return {
        "general": {
            "mainpage": mainpage,
            "server": server,
            "articlepath": "/wiki/$1",
            "scriptpath": "/w",
            "case": case,
            "generator": "MediaWiki 1.43.0",
        },
        "namespaces": namespaces,
        "namespacealiases": [{"id": nsid, "*": alias} for alias, nsid in aliases],
        "interwikimap": [{"prefix": prefix, "url": url} for prefix, url in interwikis],
        "magicwords": list(magicwords),
    }


EN_NAMES = {nsid: name for nsid, name in CANONICAL.items()}
EN_NAMES[4] = "Wikipedia"
EN_NAMES[5] = "Wikipedia talk"

RU_NAMES = {
    -2: "Медиа", -1: "Служебная", 0: "", 1: "Обсуждение", 2: "Участник",
    3: "Обсуждение участника", 4: "Википедия", 5: "Обсуждение Википедии", 6: "Файл",
    7: "Обсуждение файла", 8: "MediaWiki", 9: "Обсуждение MediaWiki", 10: "Шаблон",
    11: "Обсуждение шаблона", 12: "Справка", 13: "Обсуждение справки", 14: "Категория",
    15: "Обсуждение категории", 828: "Модуль", 829: "Обсуждение модуля",
}

SITEINFO = {
    RUWIKI: make_siteinfo(
        "//ru.wikipedia.org",
        "Заглавная страница",
        RU_NAMES,
        aliases=[("ВП", 4), ("WP", 4), ("Участница", 2), ("Обсуждение участницы", 3),
                 ("Изображение", 6), ("Image", 6)],
        interwikis=[("wikt", RUWIKT), ("en", ENWIKI), ("ja", JAWIKI), ("meta", META),
                    ("google", GOOGLE), ("wikipedia", ENWIKI)],
        magicwords=MAGICWORDS_RU,
    ),
    ENWIKI: make_siteinfo(
        "//en.wikipedia.org",
        "Main Page",
        EN_NAMES,
        aliases=[("WP", 4), ("Image", 6)],
        interwikis=[("wikt", ENWIKT), ("ru", RUWIKI), ("wikipedia", ENWIKI), ("meta", META)],
    ),
    JAWIKI: make_siteinfo("//ja.wikipedia.org", "メインページ", EN_NAMES),
    RUWIKT: make_siteinfo(
        "//ru.wiktionary.org", "Заглавная страница", RU_NAMES,
        interwikis=[("w", RUWIKI)], magicwords=MAGICWORDS_RU, case="case-sensitive",
    ),
    ENWIKT: make_siteinfo(
        "//en.wiktionary.org", "Wiktionary:Main Page", CANONICAL,
        interwikis=[("w", ENWIKI)], case="case-sensitive",
    ),
    META: make_siteinfo("//meta.wikimedia.org", "Main Page", CANONICAL),
}

NORMALIZED = {
    "Участник:Udacha": "Участница:Udacha",
}


class StubProvider:
    """Serves canned siteinfo through the real single-flight cache."""

    def __init__(self, siteinfo=None, normalized=None):
        self.siteinfo = SITEINFO if siteinfo is None else siteinfo
        self.normalized = NORMALIZED if normalized is None else normalized
        self.fetched = []
        self.normalize_calls = []
        self.cache = SiteInfoCache(self._fetch)

    def _fetch(self, url_pattern):
        self.fetched.append(url_pattern)
        data = self.siteinfo.get(url_pattern)
        if data is None:
            return None
        api_url = url_pattern.replace("/wiki/$1", "/w/api.php")
        return SiteDescriptor.from_siteinfo(data, url_pattern, api_url)

    def get_site(self, url_pattern, api_url=None):
        return self.cache.get(url_pattern)

    def get_normalized_title(self, title, site):
        self.normalize_calls.append(title)
        return self.normalized.get(title, title)

