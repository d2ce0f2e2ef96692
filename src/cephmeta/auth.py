"""AWS Signature Version 2 request signing for cephmeta.

Ceph RGW accepts the legacy V2 scheme, which is what the ACL fetch and the
object GET are signed with.  The signer only ever adds headers; it never
sends anything itself.

References:
    - https://docs.aws.amazon.com/AmazonS3/latest/userguide/RESTAuthentication.html
"""

import base64
import hashlib
import hmac
import logging
from datetime import datetime, timezone
from typing import Protocol

logger = logging.getLogger(__name__)

# Constants
AUTH_PREFIX = "AWS"
SECURITY_TOKEN_HEADER = "x-amz-security-token"
AMZ_HEADER_PREFIX = "x-amz-"

# RFC1123 with an explicit UTC zone name, e.g. "Mon, 02 Jan 2006 15:04:05 UTC"
_WEEKDAYS = ("Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun")
_MONTHS = ("Jan", "Feb", "Mar", "Apr", "May", "Jun",
           "Jul", "Aug", "Sep", "Oct", "Nov", "Dec")

# Query parameters that belong to the CanonicalizedResource.
SIGNED_SUBRESOURCES = frozenset(
    {
        "acl",
        "cors",
        "delete",
        "lifecycle",
        "location",
        "logging",
        "notification",
        "object-lock",
        "partNumber",
        "policy",
        "requestPayment",
        "response-cache-control",
        "response-content-disposition",
        "response-content-encoding",
        "response-content-language",
        "response-content-type",
        "response-expires",
        "restore",
        "tagging",
        "torrent",
        "uploadId",
        "uploads",
        "versionId",
        "versioning",
        "versions",
        "website",
    }
)

Headers = dict[str, list[str]]
Params = dict[str, list[str]]


class Signer(Protocol):
    """Signs a request by adding an Authorization header in place."""

    def sign(self, method: str, canonical_path: str, params: Params, headers: Headers) -> None:
        ...


class SigV2Signer:
    """Signs requests with AWS Signature Version 2 (HMAC-SHA1).

    Attributes:
        access_key: The access key ID placed in the Authorization header.
        security_token: Optional session token, sent as x-amz-security-token.
    """

    def __init__(self, access_key: str, secret_key: str, security_token: str = "") -> None:
        self.access_key = access_key
        self._secret_key = secret_key
        self.security_token = security_token

    def sign(self, method: str, canonical_path: str, params: Params, headers: Headers) -> None:
        """Compute the V2 signature and store it in ``headers["Authorization"]``.

        Args:
            method: HTTP method (uppercase).
            canonical_path: "/" + bucket + key, not yet carrying sub-resources.
            params: Query parameters; only signable sub-resources are used.
            headers: Request headers, mutated to add Authorization (and the
                security token header when configured).
        """
        if self.security_token:
            headers[SECURITY_TOKEN_HEADER] = [self.security_token]

        string_to_sign = build_string_to_sign(method, canonical_path, params, headers)
        signature = compute_signature(self._secret_key, string_to_sign)
        headers["Authorization"] = [f"{AUTH_PREFIX} {self.access_key}:{signature}"]
        logger.debug("Signed %s %s", method, canonical_path)


def build_string_to_sign(method: str, canonical_path: str, params: Params, headers: Headers) -> str:
    """Build the V2 StringToSign.

    Args:
        method: HTTP method (uppercase).
        canonical_path: The resource path ("/bucket/key").
        params: Query parameters.
        headers: Request headers, names in any case.

    Returns:
        METHOD, Content-MD5, Content-Type and Date lines followed by the
        canonicalized x-amz headers and resource.
    """
    md5 = ""
    content_type = ""
    date = ""
    has_amz_date = False
    amz_lines: list[str] = []

    for name, values in headers.items():
        lower_name = name.lower()
        if lower_name == "content-md5":
            md5 = values[0]
        elif lower_name == "content-type":
            content_type = values[0]
        elif lower_name == "date":
            if not has_amz_date:
                date = values[0]
        elif lower_name.startswith(AMZ_HEADER_PREFIX):
            amz_lines.append(f"{lower_name}:{','.join(values)}")
            if lower_name == "x-amz-date":
                # x-amz-date replaces Date in the signature
                has_amz_date = True
                date = ""

    amz_headers = ""
    if amz_lines:
        amz_headers = "\n".join(sorted(amz_lines)) + "\n"

    resource = canonical_path + _canonical_subresources(params)
    return f"{method}\n{md5}\n{content_type}\n{date}\n{amz_headers}{resource}"


def compute_signature(secret_key: str, string_to_sign: str) -> str:
    """Return base64(HMAC-SHA1(secret_key, string_to_sign))."""
    digest = hmac.new(
        secret_key.encode("utf-8"), string_to_sign.encode("utf-8"), hashlib.sha1
    ).digest()
    return base64.b64encode(digest).decode("ascii")


def http_date(now: datetime | None = None) -> str:
    """Format the current (or given) time as RFC1123 in UTC.

    Always generated fresh: the store rejects requests whose Date is stale.
    Day and month names are spelled out here so the result does not depend
    on the process locale.
    """
    if now is None:
        now = datetime.now(timezone.utc)
    else:
        now = now.astimezone(timezone.utc)
    return (
        f"{_WEEKDAYS[now.weekday()]}, {now.day:02d} {_MONTHS[now.month - 1]} "
        f"{now.year:04d} {now.hour:02d}:{now.minute:02d}:{now.second:02d} UTC"
    )


def _canonical_subresources(params: Params) -> str:
    """Render signable query parameters as "?a&b=c", sorted; "" if none."""
    parts: list[str] = []
    for name, values in params.items():
        if name not in SIGNED_SUBRESOURCES:
            continue
        for value in values:
            parts.append(name if value == "" else f"{name}={value}")
    if not parts:
        return ""
    return "?" + "&".join(sorted(parts))
