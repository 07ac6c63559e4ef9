"""Shared HTTP clients for api.php requests.

One client is kept per (base URL, auth, protocol) combination so that the
connection pools are reused across all site metadata fetches. OAuth2
client-credentials authentication and HTTP/2 are both optional and driven by
the ``oauth2`` and ``http2`` configuration sections.
"""

import logging
from typing import Dict, Optional, Union

import httpx
from authlib.integrations.httpx_client import OAuth2Client
from httpx import Client as StandardClient

from mwlink.utils import conf

logger = logging.getLogger(__name__)

DEFAULT_TOKEN_URL = "https://meta.wikimedia.org/w/rest.php/oauth2/access_token"


class HttpClientManager:
    """Process-wide registry of httpx clients."""

    _instance = None
    _clients: Dict[str, Union[StandardClient, OAuth2Client]] = {}

    @classmethod
    def get_instance(cls) -> "HttpClientManager":
        if cls._instance is None:
            cls._instance = cls()
        return cls._instance

    def get_client(
        self,
        base_url: str,
        use_oauth2: Optional[bool] = None,
        use_http2: Optional[bool] = None,
    ) -> Union[StandardClient, OAuth2Client]:
        """Return the client for *base_url*, creating it on first use.

        Args:
            base_url: The URL the client talks to. Also probed for HTTP/2.
            use_oauth2: Authenticate with OAuth2. None means: ask the configuration.
            use_http2: Negotiate HTTP/2. None means: ask the configuration.
        """
        if use_oauth2 is None:
            use_oauth2 = conf.get("oauth2", "enabled", False, bool)

        if use_http2 is None:
            use_http2 = conf.get("http2", "enabled", True, bool)
            if use_http2 and conf.get("http2", "auto_detect", True, bool):
                use_http2 = self.detect_http2_support(base_url)

        cache_key = f"{base_url}|oauth2={use_oauth2}|http2={use_http2}"
        if cache_key in self._clients:
            return self._clients[cache_key]

        if use_oauth2:
            client = self.create_oauth2_client(base_url, use_http2)
        else:
            client = self.create_standard_client(base_url, use_http2)

        logger.info(
            "Created %s client for %s using %s",
            "standard" if isinstance(client, StandardClient) else "OAuth2",
            base_url,
            "HTTP/2" if use_http2 else "HTTP/1.1",
        )
        self._clients[cache_key] = client
        return client

    @staticmethod
    def _timeout() -> httpx.Timeout:
        return httpx.Timeout(conf.get("fetch", "timeout", 30.0, float))

    def create_oauth2_client(
        self, base_url: str, use_http2: bool = True
    ) -> Union[OAuth2Client, StandardClient]:
        client_id = conf.get("oauth2", "client_id", "")
        client_secret = conf.get("oauth2", "client_secret", "")
        token_url = conf.get("oauth2", "token_url", DEFAULT_TOKEN_URL)

        if not client_id or not client_secret:
            logger.warning(
                "OAuth2 is enabled but client_id or client_secret is not set. "
                "Using standard client instead."
            )
            return self.create_standard_client(base_url, use_http2)

        client = OAuth2Client(
            client_id=client_id,
            client_secret=client_secret,
            token_endpoint=token_url,
            grant_type="client_credentials",
            http2=use_http2,
            timeout=self._timeout(),
            follow_redirects=True,
        )
        client.headers["User-Agent"] = conf.user_agent
        return client

    def create_standard_client(self, base_url: str, use_http2: bool = True) -> StandardClient:
        client = StandardClient(
            http2=use_http2,
            timeout=self._timeout(),
            follow_redirects=True,
        )
        client.headers["User-Agent"] = conf.user_agent
        return client

    def detect_http2_support(self, url: str) -> bool:
        try:
            with StandardClient(http2=True, timeout=self._timeout()) as client:
                response = client.head(url)
                return response.http_version == "HTTP/2"
        except Exception as exc:
            logger.warning(f"Error detecting HTTP/2 support for {url}: {exc}")
            return False

    def close_all(self):
        for client in self._clients.values():
            client.close()
        self._clients.clear()
