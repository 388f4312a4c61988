"""Ownership checks for user-owned resources."""
from __future__ import annotations

import logging
from typing import Protocol, TypeVar

from travel_story.core.context import Identity

logger = logging.getLogger(__name__)


class Owned(Protocol):
    id: str
    user_id: str


OwnedT = TypeVar("OwnedT", bound=Owned)


class ResourceNotFound(LookupError):
    """The resource does not exist or does not belong to the caller."""


def ensure_owner(resource: OwnedT | None, identity: Identity, kind: str = "resource") -> OwnedT:
    """Return ``resource`` if ``identity`` owns it, else raise ResourceNotFound.

    Missing and foreign resources raise the same error so callers cannot learn
    whether other users' data exists.
    """

    if resource is None:
        raise ResourceNotFound(f"{kind} not found")
    if not identity.owns(resource.user_id):
        logger.info("Refused %s %s access for user %s", kind, resource.id, identity.user_id)
        raise ResourceNotFound(f"{kind} not found")
    return resource
