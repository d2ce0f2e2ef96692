"""Object metadata lookup against a Ceph RGW bucket.

``lookup()`` resolves the key from the object URL, GETs the object, checks
its size and content type, then fetches and maps the object's ACL.  The
object response is returned unread inside ``FileMeta``; from then on it
belongs to the caller.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Iterator
from dataclasses import dataclass

import httpx

from cephmeta import metrics
from cephmeta.acl import AccessLevel, parse_acl_xml, resolve_access_level
from cephmeta.auth import http_date
from cephmeta.bucket import Bucket, flatten_headers
from cephmeta.errors import (
    CephMetaError,
    FileInvalidSize,
    MimeTypeNotRecognized,
    NotSuccessHttpStatus,
)
from cephmeta.keys import prepare_key

logger = logging.getLogger(__name__)


@dataclass
class FileMeta:
    """Metadata of one source object plus its open body stream.

    The caller must close ``reader`` (directly, via ``close()``, or by using
    the FileMeta as a context manager) once the body is consumed or no longer
    needed.

    Attributes:
        reader: The unread object response.
        filesize: Size in bytes, always > 0.
        mimetype: Content type reported by the store.
        acl: Access level mapped from the object's ACL.
        key: The store key the object was fetched under.
    """

    reader: httpx.Response
    filesize: int
    mimetype: str
    acl: AccessLevel
    key: str = ""

    def iter_bytes(self, chunk_size: int | None = None) -> Iterator[bytes]:
        """Stream the object body."""
        return self.reader.iter_bytes(chunk_size)

    def close(self) -> None:
        self.reader.close()

    def __enter__(self) -> FileMeta:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()


def _parse_size(raw: str | None) -> int:
    try:
        size = int(raw) if raw is not None else 0
    except ValueError:
        raise FileInvalidSize(raw)
    if size <= 0:
        raise FileInvalidSize(raw)
    return size


def try_from_url(url: str | httpx.URL, bucket: Bucket) -> FileMeta:
    """Fetch metadata, body stream and access level of the object at ``url``.

    Args:
        url: The fully qualified object URL.
        bucket: The source bucket the URL points into.

    Returns:
        A FileMeta whose reader is open and unread.

    Raises:
        httpx.HTTPError: On transport failures of either request.
        NotSuccessHttpStatus: If the object or ACL request is not answered 200.
        FileInvalidSize: If content-length is missing or not positive.
        MimeTypeNotRecognized: If content-type is missing.
        NotImplementedAclMapping: If the ACL cannot be mapped.
        xml.etree.ElementTree.ParseError: If the ACL document is malformed.
    """
    key = prepare_key(url, bucket.name)

    resp = bucket.get_response(key)
    try:
        if resp.status_code != httpx.codes.OK:
            raise NotSuccessHttpStatus(resp.status_code, str(resp.url))

        filesize = _parse_size(resp.headers.get("content-length"))

        content_type = resp.headers.get("content-type", "")
        if not content_type:
            raise MimeTypeNotRecognized()

        acl = get_acl(bucket, key, url)
    except BaseException:
        resp.close()
        raise

    return FileMeta(reader=resp, filesize=filesize, mimetype=content_type, acl=acl, key=key)


def get_acl(bucket: Bucket, key: str, url: str | httpx.URL | None = None) -> AccessLevel:
    """Fetch the object's ACL with a manually signed request and map it.

    The request is a one-off ``GET /{bucket}/{key}?acl`` with Host, Date and
    Authorization headers, sent with ``Connection: close``.

    Args:
        bucket: The source bucket.
        key: The object key as resolved from the URL.
        url: The original object URL, used only for log context.

    Returns:
        The mapped access level.

    Raises:
        httpx.HTTPError: On transport failures.
        NotSuccessHttpStatus: If the store does not answer 200.
        xml.etree.ElementTree.ParseError: If the ACL document is malformed.
        NotImplementedAclMapping: If the grants cannot be mapped.
    """
    headers: dict[str, list[str]] = {
        "Host": [bucket.host],
        "Date": [http_date()],
    }
    bucket.signer.sign("GET", bucket.canonical_path(key), {"acl": [""]}, headers)
    headers["Connection"] = ["close"]

    # The query is the bare sub-resource name, never "acl=".
    acl_url = httpx.URL(bucket.url(key)).copy_with(query=b"acl")
    request = bucket.http_client.build_request("GET", acl_url, headers=flatten_headers(headers))
    logger.debug("GET %s", request.url, extra={"bucket": bucket.name, "key": key})

    resp = bucket.http_client.send(request)
    try:
        if resp.status_code != httpx.codes.OK:
            raise NotSuccessHttpStatus(resp.status_code, str(acl_url))
        policy = parse_acl_xml(resp.content)
    finally:
        resp.close()

    level = resolve_access_level(policy.grants)
    logger.debug(
        "ACL of %s resolved to %s",
        url if url is not None else key,
        level.value,
        extra={"bucket": bucket.name, "key": key, "access_level": level.value},
    )
    return level


def lookup(url: str | httpx.URL, bucket: Bucket) -> FileMeta:
    """Look up an object by URL, recording metrics when enabled.

    See ``try_from_url`` for the contract; this adds timing, outcome
    counting and debug logging around it.
    """
    start = time.monotonic()
    outcome = "ok"
    try:
        return try_from_url(url, bucket)
    except CephMetaError as exc:
        outcome = exc.code
        raise
    except httpx.HTTPError:
        outcome = "TransportError"
        raise
    except Exception:
        outcome = "Error"
        raise
    finally:
        duration = time.monotonic() - start
        metrics.record_lookup(outcome, duration)
        logger.debug(
            "Lookup of %s finished: %s",
            url,
            outcome,
            extra={
                "bucket": bucket.name,
                "status": outcome,
                "duration_ms": round(duration * 1000, 2),
            },
        )
