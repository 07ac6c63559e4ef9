# Copyright (c) 2007-2009 PediaPress GmbH
# See README.md for additional licensing information.

"""Site metadata for wikis referenced by URL pattern.

Descriptors are fetched from api.php on first use and kept for the life of
the process. Concurrent greenlets asking for the same uncached wiki share a
single fetch.
"""

import logging

import gevent.event
import httpx

from mwlink.core.site import SiteDescriptor
from mwlink.exceptions.mwlink_exceptions import ApiError, SiteInfoError
from mwlink.network.http_client import HttpClientManager
from mwlink.network.sapi import MwApi, guess_api_urls

logger = logging.getLogger(__name__)

FETCH_ERRORS = (httpx.HTTPError, ApiError, SiteInfoError, ValueError, KeyError)


class SiteInfoCache:
    """Descriptors keyed by URL pattern, with at most one fetch in flight per key.

    *fetch* is called with the key and returns a descriptor or None. Entries
    are only ever replaced whole; a failed fetch is not cached, and a failed
    refresh leaves the cached descriptor in place.
    """

    def __init__(self, fetch):
        self._fetch = fetch
        self._sites = {}
        self._pending = {}

    def __contains__(self, key):
        return key in self._sites

    def get(self, key, refresh=False):
        if not refresh:
            site = self._sites.get(key)
            if site is not None:
                return site

        # no greenlet switch happens between this check and the insert below
        pending = self._pending.get(key)
        if pending is not None:
            return pending.get()

        pending = self._pending[key] = gevent.event.AsyncResult()
        site = None
        try:
            site = self._fetch(key)
            if site is not None:
                self._sites[key] = site
            else:
                site = self._sites.get(key)
        finally:
            del self._pending[key]
            pending.set(site)
        return site

    def forget(self, key):
        self._sites.pop(key, None)


def create_api(apiurl, use_http2=None):
    """Create an api.php client bounded by the ``fetch.api_request_limit`` setting."""
    mwapi = MwApi(apiurl, use_http2=use_http2)
    mwapi.set_limit()
    return mwapi


class SiteInfoProvider:
    def __init__(self, api_factory=create_api):
        self.api_factory = api_factory
        self._apis = {}
        self._api_hints = {}
        self.cache = SiteInfoCache(self._fetch_site)

    def get_api(self, api_url):
        api = self._apis.get(api_url)
        if api is None:
            api = self._apis[api_url] = self.api_factory(api_url)
        return api

    def get_site(self, url_pattern, api_url=None):
        """Return the descriptor for *url_pattern*, or None for non-MediaWiki sites."""
        if not url_pattern:
            return None
        if api_url:
            self._api_hints.setdefault(url_pattern, api_url)
        return self.cache.get(url_pattern)

    def refresh(self, url_pattern):
        return self.cache.get(url_pattern, refresh=True)

    def forget(self, url_pattern):
        self.cache.forget(url_pattern)

    def close(self):
        """Drop the api clients and close their HTTP connections."""
        self._apis.clear()
        HttpClientManager.get_instance().close_all()

    def _fetch_site(self, url_pattern):
        api_urls = guess_api_urls(url_pattern)
        hint = self._api_hints.get(url_pattern)
        if hint and hint not in api_urls:
            api_urls.insert(0, hint)
        if not api_urls:
            logger.debug("%s does not look like a MediaWiki site", url_pattern)
            return None

        for api_url in api_urls:
            try:
                siteinfo = self.get_api(api_url).get_siteinfo()
                if "namespaces" not in siteinfo or "general" not in siteinfo:
                    raise SiteInfoError(f"incomplete siteinfo from {api_url}")
                try:
                    site = SiteDescriptor.from_siteinfo(siteinfo, url_pattern, api_url)
                except (AttributeError, TypeError, ValueError) as exc:
                    raise SiteInfoError(f"malformed siteinfo from {api_url}: {exc}") from exc
            except FETCH_ERRORS as exc:
                logger.warning("fetching siteinfo from %s failed: %s", api_url, exc)
                continue
            logger.info("fetched siteinfo for %s from %s", url_pattern, api_url)
            return site

        logger.warning("no MediaWiki API found for %s", url_pattern)
        return None

    def get_normalized_title(self, title, site):
        """Return *title* as the wiki spells it, or unchanged if the wiki cannot tell."""
        page, sep, anchor = title.partition("#")
        try:
            normalized = self.get_api(site.api_url).get_normalized_title(page)
        except FETCH_ERRORS as exc:
            logger.warning("normalizing %r on %s failed: %s", title, site.api_url, exc)
            return title
        return f"{normalized}{sep}{anchor}"


_provider = None


def get_provider():
    global _provider
    if _provider is None:
        _provider = SiteInfoProvider()
    return _provider
