"""Localized messages for replies.

Catalogs are JSON files named ``i18n/<lang>.json`` next to this package,
in the format used by translatewiki.net. Messages use MediaWiki syntax:
``$1`` for parameters and ``{{PLURAL:$1|one|other}}`` for plural forms.
"""

import json
import logging
import re
from pathlib import Path

logger = logging.getLogger(__name__)

FALLBACK_LANG = "en"
FUZZY_MARK = "!!FUZZY!!"

WHITESPACE_FIXES = {
    "&#32;": " ",
    "&nbsp;": "\u00a0",
    "&#160;": "\u00a0",
    "&shy;": "\u00ad",
}

_cache = {}
_plural_rx = re.compile(r"\{\{PLURAL:\s*\$(\d+)\s*\|([^{}]*)\}\}", re.IGNORECASE)
_param_rx = re.compile(r"\$(\d+)")


def _get_path(lang):
    return Path(__file__).resolve().parent.parent / "i18n" / f"{lang}.json"


def get_catalog(lang):
    try:
        return _cache[lang]
    except KeyError:
        pass

    catalog = None
    path = _get_path(lang)
    if re.fullmatch(r"[a-z]{2,3}(?:-[a-z0-9]+)*", lang or "") and path.exists():
        with path.open("r", encoding="utf-8") as catalog_file:
            catalog = json.load(catalog_file)
        catalog.pop("@metadata", None)
        logger.debug("loaded %s locale", lang)

    _cache[lang] = catalog
    return catalog


def get_fallback_chain(lang):
    chain = [lang]
    while "-" in lang:
        lang = lang.rsplit("-", 1)[0]
        chain.append(lang)
    if FALLBACK_LANG not in chain:
        chain.append(FALLBACK_LANG)
    return chain


def _east_slavic(count):
    if count % 10 == 1 and count % 100 != 11:
        return 0
    if 2 <= count % 10 <= 4 and not 12 <= count % 100 <= 14:
        return 1
    return 2


def _polish(count):
    if count == 1:
        return 0
    if 2 <= count % 10 <= 4 and not 12 <= count % 100 <= 14:
        return 1
    return 2


PLURAL_RULES = {
    "ru": _east_slavic,
    "uk": _east_slavic,
    "be": _east_slavic,
    "pl": _polish,
    "fr": lambda count: 0 if count in (0, 1) else 1,
}


def plural_form(lang, count):
    rule = PLURAL_RULES.get(lang.split("-")[0])
    if rule is None:
        return 0 if count == 1 else 1
    return rule(count)


def format_message(text, lang, args):
    def plural(match):
        index = int(match.group(1)) - 1
        forms = match.group(2).split("|")
        try:
            count = int(args[index])
        except (IndexError, TypeError, ValueError):
            return forms[-1]
        form = plural_form(lang, count)
        return forms[min(form, len(forms) - 1)]

    def param(match):
        index = int(match.group(1)) - 1
        if 0 <= index < len(args):
            return str(args[index])
        return match.group(0)

    text = _plural_rx.sub(plural, text)
    text = _param_rx.sub(param, text)
    for entity, char in WHITESPACE_FIXES.items():
        text = text.replace(entity, char)
    return text


def get_message(key, lang, *args):
    for code in get_fallback_chain(lang or FALLBACK_LANG):
        catalog = get_catalog(code)
        if not catalog:
            continue
        text = catalog.get(key)
        if text is None or text.startswith(FUZZY_MARK):
            continue
        return format_message(text, code, args)

    logger.debug("no message %r for %s", key, lang)
    params = ", ".join(str(x) for x in args)
    return f"({key}: {params})" if params else f"({key})"
