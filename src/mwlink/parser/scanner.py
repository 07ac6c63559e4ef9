"""Spot wiki link syntax in chat messages.

Chat text is not wikitext: code spans, quotes and escapes must not produce
links, and users paste mobile article URLs that should be treated like
``[[links]]``. :func:`scan` removes what has to be ignored and returns the
candidate bracket spans in message order.
"""

import re
from dataclasses import dataclass
from typing import List, Optional
from urllib.parse import parse_qsl, urlsplit

# opening run, link text, optional |label, closing run
candidate_rx = re.compile(r"(\[\[|\{\{+)([^\[\]{}|\n]+)(?:\|[^\[\]{}\n]*)?(\]\]|\}\}+)")

_code_rxs = [
    re.compile(r"(?<!\\)```.*?(?<!\\)```", re.DOTALL),
    re.compile(r"(?<!\\)``.*?(?<!\\)``", re.DOTALL),
    re.compile(r"(?<!\\)`.*?(?<!\\)`", re.DOTALL),
]
_nowiki_rx = re.compile(r"<nowiki>.*?</nowiki>", re.DOTALL | re.IGNORECASE)
_multiquote_rx = re.compile(r"^>>> .*", re.DOTALL | re.MULTILINE)
_quote_rx = re.compile(r"^> .*$", re.MULTILINE)
_emoji_rx = re.compile(r"<a?:([A-Za-z0-9_-]+):\d+>")
_escape_rx = re.compile(r"\\([_*~`])")
_spoiler_rx = re.compile(r"\|\|.*?\|\|", re.DOTALL)

SHARE_PARAMETER = "wprov"


@dataclass(frozen=True)
class Candidate:
    opening: str
    text: str
    closing: str
    raw: str
    hidden: bool = False

    @property
    def is_transclusion(self):
        return self.opening.startswith("{")


@dataclass(frozen=True)
class ScanResult:
    visible_text: str
    candidates: List[Candidate]


def strip_ignored(content, is_prefix=None):
    """Remove code, nowiki and quote regions, then Discord escapes.

    A custom emoji becomes a plain ``name:`` prefix when *is_prefix* accepts
    its name; without *is_prefix* every custom emoji is rewritten.
    """

    def emoji(match):
        name = match.group(1)
        if is_prefix is None or is_prefix(name):
            return f"{name}:"
        return match.group(0)

    for rx in _code_rxs:
        content = rx.sub("", content)
    content = _nowiki_rx.sub("", content)
    content = _multiquote_rx.sub("", content)
    content = _quote_rx.sub("", content)
    content = _emoji_rx.sub(emoji, content)
    return _escape_rx.sub(r"\1", content)


def mobile_pattern(url_pattern):
    """Guess the mobile variant of a ``https://host/wiki/$1`` pattern.

    Returns None when the host has no subdomain to build it from.
    """
    parts = urlsplit(url_pattern)
    host = parts.hostname or ""
    labels = host.split(".")
    if len(labels) < 3:
        return None
    if labels[0] == "www":
        mobile_host = "m." + ".".join(labels[1:])
    elif labels[1] == "m":
        return url_pattern
    else:
        mobile_host = ".".join([labels[0], "m", *labels[1:]])
    return url_pattern.replace(host, mobile_host, 1)


def _mobile_link_rx(pattern):
    prefix, _, suffix = pattern.partition("$1")
    return re.compile(
        r"(?:\[[^\[\]\n]*\]\()?<?"
        + re.escape(prefix)
        + r"(?P<title>(?:[^\s<>()?\[\]|]|\([^\s<>()?]*\))+)"
        + re.escape(suffix)
        + r"(?P<query>\?[^\s<>()]*)?>?\)?"
    )


def convert_mobile_links(content, url_pattern):
    """Replace mobile article URLs of the default wiki with ``[[title]]``."""
    pattern = mobile_pattern(url_pattern)
    if pattern is None or "$1" not in pattern:
        return content

    def repl(match):
        query = match.group("query")
        if query:
            params = parse_qsl(query[1:], keep_blank_values=True)
            if len(params) != 1 or params[0][0] != SHARE_PARAMETER:
                return match.group(0)
        return f"[[{match.group('title')}]]"

    return _mobile_link_rx(pattern).sub(repl, content)


def scan(content: Optional[str], url_pattern: str = "", is_prefix=None) -> ScanResult:
    if not content:
        return ScanResult("", [])

    content = strip_ignored(content, is_prefix)
    if url_pattern:
        content = convert_mobile_links(content, url_pattern)
    if "[[" not in content and "{{" not in content:
        return ScanResult(content, [])

    visible_text = _spoiler_rx.sub("", content)
    candidates = []
    for match in candidate_rx.finditer(content):
        raw = match.group(0)
        candidates.append(
            Candidate(
                opening=match.group(1),
                text=match.group(2),
                closing=match.group(3),
                raw=raw,
                hidden=raw not in visible_text,
            )
        )
    return ScanResult(visible_text, candidates)
