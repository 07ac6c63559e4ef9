"""MediaWiki page title validation and normalization.

Validation follows https://www.mediawiki.org/wiki/Manual:Page_title, encoding
follows the {{PAGENAMEE}} rules plus the characters that break chat Markdown.
"""

import html
import re
from urllib.parse import unquote

from mwlink.core.nshandling import NS_SPECIAL

# url schemes MediaWiki turns into external links ($wgUrlProtocols)
PROTOCOLS = (
    "bitcoin:", "ftp://", "ftps://", "geo:", "git://", "gopher://", "http://",
    "https://", "irc://", "ircs://", "magnet:", "mailto:", "matrix:", "mms://",
    "news:", "nntp://", "redis://", "sftp://", "sip:", "sips:", "sms:", "ssh://",
    "svn://", "tel:", "telnet://", "urn:", "worldwind://", "xmpp:", "//",
)

MAX_TITLE_BYTES = 255
MAX_SPECIAL_TITLE_BYTES = 512

# "%" goes first so the escapes added after it are left alone
ENCODED_CHARS = "%&+=?\\^`~<>()"

_illegal_rx = re.compile(r"[<>\[\]{}|]|~{3,}|&(?:[a-z]+|#x?[0-9a-f]+);", re.IGNORECASE)
_anchor_rx = re.compile(r"(?<!&)#")
_relative_rx = re.compile(r"^\.{1,2}$|^\.{1,2}/|/\.{1,2}/|/\.{1,2}$")
_invisible_rx = re.compile("[\u00ad\u200e\u200f]")
_georgian_rx = re.compile("[\u10a0-\u10ff\u1c90-\u1cbf\u2d00-\u2d2f]")


def is_invalid(title, check_length=True, is_mediawiki=True, check_protocol=True, nsid=None):
    """Return True if *title* cannot be a page title.

    Only the part before an ``#anchor`` is checked; the ``#`` of a numeric
    entity such as ``&#160;`` belongs to the title. Pages on non-MediaWiki
    sites are only checked for characters that cannot survive link syntax.
    """
    title = _anchor_rx.split(title, maxsplit=1)[0]

    if _illegal_rx.search(title) and (is_mediawiki or re.search(r"[<>\[\]{}|]", title)):
        return True
    if not is_mediawiki:
        return False

    if check_length:
        limit = MAX_SPECIAL_TITLE_BYTES if nsid == NS_SPECIAL else MAX_TITLE_BYTES
        if len(title.encode("utf-8")) > limit:
            return True

    if _relative_rx.search(title):
        return True
    if check_protocol and title.lower().startswith(PROTOCOLS):
        return True
    if title.startswith("::"):
        return True
    return False


def decode(title):
    """Turn a title as typed in chat into its display form.

    Entities and percent escapes are decoded until nothing is left to
    decode, so decoding a decoded title changes nothing.
    """
    previous = None
    while title != previous:
        previous = title
        if "&" in title:
            title = html.unescape(title)
        if "%" in title:
            title = unquote(title)
        title = _invisible_rx.sub("", title.replace("\\\\", ""))
    title = re.sub(r"[\s_]+", " ", title)
    return title.lstrip(": ").rstrip()


def encode(title, space_char="_"):
    title = decode(title)
    for char in ENCODED_CHARS:
        title = title.replace(char, "%{:02X}".format(ord(char)))
    return title.replace(" ", space_char)


def capitalise(title, should_capitalise=True):
    if not should_capitalise or not title:
        return title
    first = title[0]
    # Georgian has no case distinction in titles (Mtavruli is not used)
    if _georgian_rx.match(first):
        return title
    return first.upper() + title[1:]


def get_link(title, url_pattern, space_char="_"):
    return url_pattern.replace("$1", encode(title, space_char))


def code_span(text):
    """Wrap *text* in a Markdown code span that survives backticks inside it."""
    if "`" not in text:
        return f"`{text}`"
    longest = max(len(run) for run in re.findall(r"`+", text))
    fence = "`" * (longest + 1)
    if text.startswith("`") or text.endswith("`"):
        text = f" {text} "
    return f"{fence}{text}{fence}"
