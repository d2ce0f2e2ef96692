"""Error definitions for cephmeta lookups.

Every failure of a lookup is raised as one of these.  Transport errors from
httpx and XML parse errors are deliberately not wrapped and reach the caller
unchanged.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from cephmeta.acl import Grant


class CephMetaError(Exception):
    """A lookup error with a stable code and a human-readable message.

    Attributes:
        code: The error code string (e.g. "NotSuccessHttpStatus").
        message: Human-readable error description.
    """

    def __init__(self, code: str, message: str) -> None:
        super().__init__(message)
        self.code = code
        self.message = message


class NotSuccessHttpStatus(CephMetaError):
    """The object store answered with something other than 200."""

    def __init__(self, status_code: int = 0, url: str = "") -> None:
        message = "url returned not 200"
        if status_code:
            message = f"{message} (got {status_code})"
        if url:
            message = f"{message}: {url}"
        super().__init__(code="NotSuccessHttpStatus", message=message)
        self.status_code = status_code
        self.url = url


class FileInvalidSize(CephMetaError):
    """The object has no usable content-length."""

    def __init__(self, raw_value: str | None = None) -> None:
        super().__init__(
            code="FileInvalidSize",
            message=f"Invalid file size in content-length header: {raw_value!r}",
        )
        self.raw_value = raw_value


class MimeTypeNotRecognized(CephMetaError):
    """The object has no content-type."""

    def __init__(self, message: str = "Response carries no content-type header.") -> None:
        super().__init__(code="MimeTypeNotRecognized", message=message)


class NotImplementedAclMapping(CephMetaError):
    """The grant list uses semantics that cannot be mapped to an access level.

    Callers must treat this as "access level unknown", never as "private".

    Attributes:
        grants: The grants that could not be mapped, in document order.
    """

    def __init__(self, grants: list[Grant] | None = None) -> None:
        super().__init__(code="NotImplementedAclMapping", message="mapping not implemented")
        self.grants = list(grants or [])
