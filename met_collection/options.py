"""Request options for the Met collection endpoints.

Each options class knows how to turn itself into the query parameters the
API expects. Optional filters use ``None`` for "not set"; ``False`` and ``0``
are real values and are always sent.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from urllib.parse import urlencode

from .errors import ValidationError

# The API separates list values with a pipe, e.g. departmentIds=1|6
LIST_SEPARATOR = "|"
DATE_FORMAT = "%Y-%m-%d"


def format_bool(value: bool) -> str:
    return "true" if value else "false"


def format_list(values: list) -> str:
    return LIST_SEPARATOR.join(str(v) for v in values)


def encode_query(params: dict[str, str]) -> str:
    """Render query parameters, leaving the list separator unescaped."""
    return urlencode(params, safe=LIST_SEPARATOR)


@dataclass(frozen=True)
class ObjectsOptions:
    """Filters for the object listing endpoint."""

    # Only objects whose metadata changed on or after this day
    metadata_date: date | None = None
    # See MetClient.departments() for valid IDs
    department_ids: list[int] | None = None

    def to_params(self) -> dict[str, str]:
        params: dict[str, str] = {}
        if self.metadata_date is not None:
            params["metadataDate"] = self.metadata_date.strftime(DATE_FORMAT)
        if self.department_ids:
            params["departmentIds"] = format_list(self.department_ids)
        return params


@dataclass(frozen=True)
class ObjectOptions:
    """Selects a single object by its Met object ID."""

    object_id: int

    @property
    def path(self) -> str:
        return f"objects/{self.object_id}"


@dataclass(frozen=True)
class SearchOptions:
    """
    Filters for the search endpoint.

    ``q`` is always sent, even when empty. ``date_begin`` and ``date_end``
    form a year range and must be given together; call ``validate()``
    before issuing the request.
    """

    q: str = ""
    is_highlight: bool | None = None
    department_id: int | None = None
    is_on_view: bool | None = None
    # Restrict matches to the artist name and culture fields
    artist_or_culture: bool | None = None
    # Sent as "medium", e.g. ["Ceramics", "Paintings"]
    media: list[str] | None = None
    has_images: bool | None = None
    # e.g. ["France", "Paris"]
    geo_locations: list[str] | None = None
    date_begin: int | None = None
    date_end: int | None = None

    def validate(self) -> None:
        """Raise ValidationError if only one side of the year range is set."""
        if self.date_begin is not None and self.date_end is None:
            raise ValidationError("date_begin is set, but date_end is not")
        if self.date_begin is None and self.date_end is not None:
            raise ValidationError("date_end is set, but date_begin is not")

    def to_params(self) -> dict[str, str]:
        params: dict[str, str] = {"q": self.q}

        if self.is_highlight is not None:
            params["isHighlight"] = format_bool(self.is_highlight)
        if self.department_id is not None:
            params["departmentId"] = str(self.department_id)
        if self.is_on_view is not None:
            params["isOnView"] = format_bool(self.is_on_view)
        if self.artist_or_culture is not None:
            params["artistOrCulture"] = format_bool(self.artist_or_culture)
        if self.media:
            params["medium"] = format_list(self.media)
        if self.has_images is not None:
            params["hasImages"] = format_bool(self.has_images)
        if self.geo_locations:
            params["geoLocations"] = format_list(self.geo_locations)

        # Never send half a range
        if self.date_begin is not None and self.date_end is not None:
            params["dateBegin"] = str(self.date_begin)
            params["dateEnd"] = str(self.date_end)

        return params
