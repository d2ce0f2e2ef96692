"""Bucket handle: addressing, signing and HTTP access to one RGW bucket."""

from __future__ import annotations

import logging

import httpx

from cephmeta.auth import Signer, SigV2Signer, http_date
from cephmeta.config import BucketConfig, ClientConfig

logger = logging.getLogger(__name__)


class Bucket:
    """A source bucket on a Ceph RGW endpoint.

    Addressing is path-style (``{endpoint}/{bucket}/{key}``) unless
    ``bucket_endpoint`` is configured, in which case keys hang directly off
    that URL with ``${bucket}`` substituted.

    Attributes:
        name: The bucket name.
        endpoint: Base URL of the store.
        bucket_endpoint: Optional per-bucket base URL template.
        signer: Capability that adds the Authorization header.
        http_client: The httpx client used for both the object GET and the
            raw ACL request.
    """

    def __init__(
        self,
        name: str,
        endpoint: str,
        signer: Signer,
        http_client: httpx.Client | None = None,
        bucket_endpoint: str = "",
    ) -> None:
        self.name = name
        self.endpoint = endpoint.rstrip("/")
        self.bucket_endpoint = bucket_endpoint.rstrip("/")
        self.signer = signer
        self._owns_client = http_client is None
        self.http_client = http_client if http_client is not None else httpx.Client()

    @classmethod
    def from_config(
        cls,
        config: BucketConfig,
        client_config: ClientConfig | None = None,
        http_client: httpx.Client | None = None,
    ) -> Bucket:
        """Build a Bucket from configuration.

        Args:
            config: Bucket name, endpoint and credentials.
            client_config: Timeout and TLS settings for a client created here.
            http_client: Use this client instead of creating one.
        """
        owns_client = http_client is None
        if http_client is None:
            client_config = client_config or ClientConfig()
            http_client = httpx.Client(
                timeout=client_config.timeout,
                verify=client_config.verify_tls,
            )
        signer = SigV2Signer(config.access_key, config.secret_key, config.security_token)
        bucket = cls(
            name=config.name,
            endpoint=config.endpoint,
            signer=signer,
            http_client=http_client,
            bucket_endpoint=config.bucket_endpoint,
        )
        bucket._owns_client = owns_client
        return bucket

    @property
    def base_url(self) -> str:
        """URL that object keys are appended to."""
        if self.bucket_endpoint:
            return self.bucket_endpoint.replace("${bucket}", self.name)
        return f"{self.endpoint}/{self.name}"

    @property
    def host(self) -> str:
        """Host header value for the store (host plus non-default port)."""
        return httpx.URL(self.base_url).netloc.decode("ascii")

    def url(self, key: str) -> str:
        """Return the object URL for ``key`` (already in URL path form)."""
        return f"{self.base_url}/{key.lstrip('/')}"

    def canonical_path(self, key: str) -> str:
        """Return "/bucket/key" as signed, with exactly one separator."""
        if not key.startswith("/"):
            key = "/" + key
        return "/" + self.name + key

    def get_response(self, key: str) -> httpx.Response:
        """Issue a signed GET for ``key`` and return the unread response.

        The body is streamed; the caller owns the response and must close it.

        Raises:
            httpx.HTTPError: On transport failures.
        """
        headers: dict[str, list[str]] = {
            "Host": [self.host],
            "Date": [http_date()],
        }
        self.signer.sign("GET", self.canonical_path(key), {}, headers)
        request = self.http_client.build_request(
            "GET", self.url(key), headers=flatten_headers(headers)
        )
        logger.debug("GET %s", request.url)
        return self.http_client.send(request, stream=True)

    def close(self) -> None:
        """Close the HTTP client if this bucket created it."""
        if self._owns_client:
            self.http_client.close()

    def __enter__(self) -> Bucket:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()


def flatten_headers(headers: dict[str, list[str]]) -> list[tuple[str, str]]:
    """Turn a multi-value header map into httpx header pairs."""
    return [(name, value) for name, values in headers.items() for value in values]
