"""Typed client for The Metropolitan Museum of Art Collection API."""

from .client import (
    DEFAULT_ROOT_URL,
    ClientConfig,
    MetClient,
    default_client,
    departments,
    get_object,
    objects,
    search,
)
from .errors import DecodeError, MetAPIError, StatusError, TransportError, ValidationError
from .models import (
    Constituent,
    Department,
    DepartmentsResult,
    Measurement,
    ObjectResult,
    ObjectsResult,
    Tag,
)
from .options import ObjectOptions, ObjectsOptions, SearchOptions, encode_query

__all__ = [
    "DEFAULT_ROOT_URL",
    "ClientConfig",
    "MetClient",
    "default_client",
    "departments",
    "get_object",
    "objects",
    "search",
    "DecodeError",
    "MetAPIError",
    "StatusError",
    "TransportError",
    "ValidationError",
    "Constituent",
    "Department",
    "DepartmentsResult",
    "Measurement",
    "ObjectResult",
    "ObjectsResult",
    "Tag",
    "ObjectOptions",
    "ObjectsOptions",
    "SearchOptions",
    "encode_query",
]
