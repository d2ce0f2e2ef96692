"""ACL parsing and access-level mapping for cephmeta.

The store returns an S3 ``AccessControlPolicy`` XML document.  Only a small
part of S3 ACL semantics can be expressed as a canned access level, so the
mapping refuses grant sets it cannot represent instead of guessing.
"""

from __future__ import annotations

import logging
import xml.etree.ElementTree as ET
from dataclasses import dataclass, field
from enum import Enum

from cephmeta.errors import NotImplementedAclMapping

logger = logging.getLogger(__name__)

# S3 predefined group URIs
ALL_USERS_URI = "http://acs.amazonaws.com/groups/global/AllUsers"
AUTHENTICATED_USERS_URI = "http://acs.amazonaws.com/groups/global/AuthenticatedUsers"
LOG_DELIVERY_URI = "http://acs.amazonaws.com/groups/s3/LogDelivery"

PERMISSION_READ = "READ"
PERMISSION_WRITE = "WRITE"
PERMISSION_FULL_CONTROL = "FULL_CONTROL"


class AccessLevel(str, Enum):
    """Caller-facing access level, named after the matching S3 canned ACL."""

    PRIVATE = "private"
    PUBLIC_READ = "public-read"
    PUBLIC_READ_WRITE = "public-read-write"


@dataclass
class Grant:
    """One (grantee, permission) pair of an ACL.

    Attributes:
        grantee_uri: Group URI of the grantee; empty for canonical users.
        permission: READ, WRITE, FULL_CONTROL, READ_ACP, WRITE_ACP, ...
        grantee_id: Canonical user ID, when the grantee is a user.
    """

    grantee_uri: str
    permission: str
    grantee_id: str = ""


@dataclass
class AccessControlPolicy:
    """An object's ACL document: owner plus an ordered grant list."""

    owner_id: str = ""
    grants: list[Grant] = field(default_factory=list)


def _local_name(tag: str) -> str:
    """Strip an ``{namespace}`` prefix from an ElementTree tag."""
    return tag.rsplit("}", 1)[-1]


def _child(elem: ET.Element, name: str) -> ET.Element | None:
    for child in elem:
        if _local_name(child.tag) == name:
            return child
    return None


def _child_text(elem: ET.Element | None, name: str) -> str:
    if elem is None:
        return ""
    child = _child(elem, name)
    if child is None or child.text is None:
        return ""
    return child.text.strip()


def parse_acl_xml(body: bytes | str) -> AccessControlPolicy:
    """Parse an AccessControlPolicy XML document.

    Element matching ignores namespaces, since RGW emits the S3 2006-03-01
    namespace but not every deployment does.

    Args:
        body: The raw XML response body.

    Returns:
        The parsed policy with grants in document order.

    Raises:
        xml.etree.ElementTree.ParseError: If the body is not well-formed XML.
    """
    root = ET.fromstring(body)

    policy = AccessControlPolicy(owner_id=_child_text(_child(root, "Owner"), "ID"))

    acl_elem = _child(root, "AccessControlList")
    if acl_elem is None:
        return policy

    for grant_elem in acl_elem:
        if _local_name(grant_elem.tag) != "Grant":
            continue
        grantee = _child(grant_elem, "Grantee")
        policy.grants.append(
            Grant(
                grantee_uri=_child_text(grantee, "URI"),
                permission=_child_text(grant_elem, "Permission"),
                grantee_id=_child_text(grantee, "ID"),
            )
        )

    return policy


def _is_unmappable(grant: Grant) -> bool:
    if grant.grantee_uri in (AUTHENTICATED_USERS_URI, LOG_DELIVERY_URI):
        return True
    # Full delegation of control to anyone named by URI cannot be expressed.
    return grant.permission == PERMISSION_FULL_CONTROL and grant.grantee_uri != ""


def resolve_access_level(grants: list[Grant]) -> AccessLevel:
    """Map an ordered grant list to an access level.

    Only the first all-users grant is considered: READ makes the object
    public-read, WRITE makes it public-read-write, and any other permission
    leaves it private.  Later all-users grants are ignored.  Every grant is
    still inspected, and a single unmappable grant fails the whole mapping.

    Args:
        grants: The grants of an AccessControlPolicy, in document order.

    Returns:
        PRIVATE when no all-users grant applies.

    Raises:
        NotImplementedAclMapping: If any grant targets authenticated users or
            log delivery, or hands FULL_CONTROL to a grantee URI.
    """
    level = AccessLevel.PRIVATE
    all_users_seen = False
    unmappable: list[Grant] = []

    for grant in grants:
        if grant.grantee_uri == ALL_USERS_URI and not all_users_seen:
            all_users_seen = True
            if grant.permission == PERMISSION_READ:
                level = AccessLevel.PUBLIC_READ
            elif grant.permission == PERMISSION_WRITE:
                level = AccessLevel.PUBLIC_READ_WRITE

        if _is_unmappable(grant):
            unmappable.append(grant)

    if unmappable:
        logger.debug(
            "Unmappable ACL grants: %s",
            ", ".join(f"{g.grantee_uri}={g.permission}" for g in unmappable),
        )
        raise NotImplementedAclMapping(unmappable)

    return level
