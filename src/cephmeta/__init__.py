"""cephmeta - object metadata and ACL lookup for Ceph RGW buckets."""

from cephmeta.acl import AccessLevel
from cephmeta.bucket import Bucket
from cephmeta.errors import (
    CephMetaError,
    FileInvalidSize,
    MimeTypeNotRecognized,
    NotImplementedAclMapping,
    NotSuccessHttpStatus,
)
from cephmeta.keys import prepare_key
from cephmeta.logging_config import install_null_handler
from cephmeta.meta import FileMeta, get_acl, lookup, try_from_url

__all__ = [
    "AccessLevel",
    "Bucket",
    "CephMetaError",
    "FileInvalidSize",
    "FileMeta",
    "MimeTypeNotRecognized",
    "NotImplementedAclMapping",
    "NotSuccessHttpStatus",
    "get_acl",
    "lookup",
    "prepare_key",
    "try_from_url",
]

__version__ = "0.1.0"

install_null_handler()
