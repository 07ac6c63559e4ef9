# Copyright (c) PediaPress GmbH

"""api.php client."""

import json
import logging
import random
from urllib import parse

import gevent
import httpx
from gevent.lock import Semaphore

from mwlink.exceptions.mwlink_exceptions import ApiError, SiteInfoError
from mwlink.network import api
from mwlink.network.http_client import HttpClientManager
from mwlink.utils import conf

logger = logging.getLogger(__name__)

SITEINFO_PROPS = ("general", "namespaces", "namespacealiases", "interwikimap", "magicwords")


def loads(input_string):
    """Potentially remove UTF-8 BOM and call json.loads()."""
    if isinstance(input_string, bytes):
        input_string = input_string.decode("utf-8")
    if input_string and input_string[:1] == "\ufeff":
        input_string = input_string[1:]
    return json.loads(input_string)


class MwApi:
    def __init__(self, apiurl, use_oauth2=None, use_http2=None):
        self.apiurl = apiurl
        self.http_client = HttpClientManager.get_instance().get_client(
            apiurl, use_oauth2=use_oauth2, use_http2=use_http2
        )
        self.retry_policy = api.FetchRetryPolicy(
            max_retries=conf.get("fetch", "max_retry_count", 2, int)
        )
        self.api_request_limit = conf.get("fetch", "api_request_limit", 15, int)
        self.limit_fetch_semaphore = None

    def __repr__(self):
        return f"<MwApi {self.apiurl} at {hex(id(self))}>"

    def set_limit(self, limit=None):
        if self.limit_fetch_semaphore is not None:
            raise ValueError("limit already set")

        if limit is None:
            limit = self.api_request_limit

        self.limit_fetch_semaphore = Semaphore(limit)

    def _fetch(self, url):
        """GET *url*, retrying rate limits, server errors and transport failures.

        Raises:
            httpx.HTTPStatusError: non-transient HTTP errors or exhausted retries
            httpx.RequestError: transport errors after exhausted retries
        """
        logger.debug("fetching url: %r", url)
        retry_state = api.FetchRetryState()
        while True:
            try:
                response = self.http_client.get(url)
                response.raise_for_status()
                return response.content
            except httpx.HTTPError as err:
                error = api.classify_retryable_fetch_error(url, err, logger=logger)
                retry_state = api.retry_or_raise(
                    url=url,
                    error=error,
                    retry_state=retry_state,
                    retry_policy=self.retry_policy,
                    logger=logger,
                    sleep_fn=gevent.sleep,
                    uniform_fn=random.uniform,
                )
                if retry_state is None:
                    raise

    def _build_url(self, **kwargs):
        args = {"format": "json"}
        args.update(kwargs)
        query = parse.urlencode(args)
        query = query.replace("%7C", "|")
        return f"{self.apiurl}?{query}"

    def do_request(self, **kwargs):
        sem = self.limit_fetch_semaphore
        if sem is not None:
            sem.acquire()
        try:
            url = self._build_url(**kwargs)
            data = loads(self._fetch(url))
        finally:
            if sem is not None:
                sem.release()

        if not isinstance(data, dict):
            raise ApiError(
                "badresponse", f"expected a JSON object, got {type(data).__name__}", url
            )
        error = data.get("error")
        if error:
            if not isinstance(error, dict):
                raise ApiError("unknown", str(error), url)
            raise ApiError(error.get("code", ""), error.get("info", ""), url)
        return data

    def get_siteinfo(self):
        data = self.do_request(action="query", meta="siteinfo", siprop="|".join(SITEINFO_PROPS))
        query = data.get("query")
        if not isinstance(query, dict):
            raise SiteInfoError(f"no siteinfo in answer from {self.apiurl}")
        return query

    def get_normalized_title(self, title):
        """Ask the wiki how it spells *title*, e.g. the gendered form of a user page."""
        data = self.do_request(action="query", titles=title)
        query = data.get("query")
        if not isinstance(query, dict):
            return title
        for entry in query.get("normalized") or []:
            if isinstance(entry, dict) and entry.get("from") == title:
                return entry.get("to") or title
        return title


def guess_api_urls(url):
    """Guess api.php URLs for an article URL pattern such as https://host/wiki/$1.

    Returns an empty list for patterns that do not look like a MediaWiki
    installation.
    """
    if url.endswith("api.php"):
        return [url]
    try:
        scheme, netloc, path, _, query, _ = parse.urlparse(url)
    except ValueError:
        return []
    if not (scheme and netloc) or query or "/wiki/$1" not in path:
        return []

    prefix = f"{scheme}://{netloc}{path[: path.find('/wiki/$1')]}"
    return [f"{prefix}/w/api.php", f"{prefix}/api.php"]
