"""Answer chat messages with links to the wiki pages they mention.

For the server wiki https://en.wikipedia.org/wiki/$1, the message
``[[test link]]`` is answered with ``Link: <https://en.wikipedia.org/wiki/Test_link>``.
"""

import logging
from dataclasses import dataclass
from typing import List, Optional

from mwlink.core import l10n
from mwlink.core.nshandling import NsHandler
from mwlink.core.resolver import Resolver
from mwlink.network.siteinfo import get_provider
from mwlink.parser import scanner
from mwlink.utils import conf

logger = logging.getLogger(__name__)


class ReplyTooLong(str):
    """Returned instead of a reply over the length limit.

    Its value is the message key of the notice to send instead.
    """


TOO_LONG = ReplyTooLong("linking-toolong")


@dataclass(frozen=True)
class LinkResult:
    key: str
    markdown: str
    hidden: bool = False

    def render(self):
        return f"||{self.markdown}||" if self.hidden else self.markdown


def collect_links(scan_result, resolver, style="url", space_char="_") -> List[LinkResult]:
    """Resolve candidates in message order, keeping the first link for each page."""
    links = {}
    for candidate in scan_result.candidates:
        resolved = resolver.resolve(candidate)
        if resolved is None:
            continue
        markdown = resolved.markdown(style, space_char)
        if not markdown or resolved.key in links:
            continue
        links[resolved.key] = LinkResult(resolved.key, markdown, candidate.hidden)
    return list(links.values())


def compose(links, lang, max_length=None) -> str:
    if not links:
        return ""
    if max_length is None:
        max_length = conf.get("linking", "max_length", 2000, int)

    separator = l10n.get_message("linking-separator", lang)
    header = l10n.get_message("linking-links", lang, len(links))
    body = separator.join(link.render() for link in links)
    reply = f"{header} {body}" if len(links) == 1 else f"{header}{separator}{body}"
    if len(reply) > max_length:
        return TOO_LONG
    return reply


def prepare_message(content: Optional[str], lang: str, url_pattern: str, provider=None) -> str:
    """Build the reply to *content* for a server whose wiki is *url_pattern*.

    Returns an empty string when there is nothing to link, or TOO_LONG.
    """
    if not content:
        return ""

    if not scanner.scan(content, url_pattern).candidates:
        return ""

    provider = provider or get_provider()
    default_site = provider.get_site(url_pattern)
    if default_site is None:
        logger.warning("cannot resolve links: no site information for %s", url_pattern)
        return ""

    # custom emoji only stand for prefixes the wiki knows
    scan_result = scanner.scan(content, url_pattern, NsHandler(default_site).is_prefix)

    links = collect_links(
        scan_result,
        Resolver(provider, default_site),
        style=conf.get("linking", "style", "url"),
        space_char=conf.get("linking", "space_char", "_"),
    )
    return compose(links, lang)
