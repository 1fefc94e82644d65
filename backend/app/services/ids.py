"""Identifier parsing shared by the services."""

import uuid
from typing import Union

from app.exceptions import NotFoundError


def parse_id(raw: Union[str, uuid.UUID], resource: str) -> uuid.UUID:
    """
    Convert a path or body id into a UUID.

    A string that is not a UUID cannot name an existing row, so it is
    reported as NotFoundError for `resource` rather than as a 4xx of its own.
    """
    if isinstance(raw, uuid.UUID):
        return raw
    try:
        return uuid.UUID(str(raw))
    except ValueError:
        raise NotFoundError(resource=resource, resource_id=str(raw))
