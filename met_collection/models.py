"""Typed results for the Met collection endpoints."""

from __future__ import annotations

from dataclasses import dataclass, field, fields
from typing import Any

from .errors import DecodeError


def _expect_object(data: Any, what: str) -> dict[str, Any]:
    if not isinstance(data, dict):
        raise DecodeError(f"expected a JSON object for {what}, got {type(data).__name__}")
    return data


def _expect_list(data: dict[str, Any], key: str) -> list[Any]:
    """Return data[key] as a list; missing or null becomes empty."""
    value = data.get(key)
    if value is None:
        return []
    if not isinstance(value, list):
        raise DecodeError(f"expected a JSON array for '{key}', got {type(value).__name__}")
    return value


def _is_a(value: Any, kind: type) -> bool:
    # bool is an int subclass, but true/false is never a valid number here
    if isinstance(value, bool) and kind is not bool:
        return False
    return isinstance(value, kind)


def _typed(data: dict[str, Any], key: str, kind: type, default: Any) -> Any:
    """Return data[key] checked against kind; missing or null gives default."""
    value = data.get(key)
    if value is None:
        return default
    if not _is_a(value, kind):
        raise DecodeError(f"expected {kind.__name__} for '{key}', got {type(value).__name__}")
    return value


# Annotations are strings under postponed evaluation
_SCALAR_TYPES = {"int": int, "bool": bool, "str": str}


def _scalars(cls: type, keys: dict[str, str], data: dict[str, Any]) -> dict[str, Any]:
    """Pick the scalar fields of cls out of data, falling back to field defaults."""
    values: dict[str, Any] = {}
    for f in fields(cls):
        key = keys.get(f.name)
        if key is None:
            continue
        values[f.name] = _typed(data, key, _SCALAR_TYPES[f.type], f.default)
    return values


@dataclass(frozen=True)
class ObjectsResult:
    """A listing of object IDs, returned by the objects and search endpoints."""

    total: int = 0
    object_ids: list[int] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Any) -> ObjectsResult:
        data = _expect_object(data, "object listing")
        object_ids = _expect_list(data, "objectIDs")
        if not all(_is_a(i, int) for i in object_ids):
            raise DecodeError("objectIDs must contain only integers")
        return cls(total=_typed(data, "total", int, 0), object_ids=object_ids)

    def to_dict(self) -> dict[str, Any]:
        return {"total": self.total, "objectIDs": list(self.object_ids)}


@dataclass(frozen=True)
class Department:
    """One curatorial department."""

    department_id: int = 0
    display_name: str = ""

    @classmethod
    def from_dict(cls, data: Any) -> Department:
        data = _expect_object(data, "department")
        return cls(
            department_id=_typed(data, "departmentId", int, 0),
            display_name=_typed(data, "displayName", str, ""),
        )

    def to_dict(self) -> dict[str, Any]:
        return {"departmentId": self.department_id, "displayName": self.display_name}


@dataclass(frozen=True)
class DepartmentsResult:
    """All departments, in the order the API lists them."""

    departments: list[Department] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Any) -> DepartmentsResult:
        data = _expect_object(data, "department listing")
        return cls(departments=[Department.from_dict(d) for d in _expect_list(data, "departments")])

    def to_dict(self) -> dict[str, Any]:
        return {"departments": [d.to_dict() for d in self.departments]}

    def by_id(self) -> dict[int, Department]:
        """Map department ID -> Department."""
        return {d.department_id: d for d in self.departments}


_CONSTITUENT_KEYS = {
    "constituent_id": "constituentID",
    "name": "name",
    "role": "role",
    "ulan_url": "constituentULAN_URL",
    "wikidata_url": "constituentWikidata_URL",
    "gender": "gender",
}


@dataclass(frozen=True)
class Constituent:
    """A person or body associated with an object (artist, maker, publisher...)."""

    constituent_id: int = 0
    name: str = ""
    role: str = ""
    ulan_url: str = ""  # Union List of Artist Names
    wikidata_url: str = ""
    gender: str = ""  # Currently only "Female" is ever set

    @classmethod
    def from_dict(cls, data: Any) -> Constituent:
        return cls(**_scalars(cls, _CONSTITUENT_KEYS, _expect_object(data, "constituent")))

    def to_dict(self) -> dict[str, Any]:
        return {key: getattr(self, attr) for attr, key in _CONSTITUENT_KEYS.items()}


@dataclass(frozen=True)
class Measurement:
    """
    Measurements of one element of an object.

    Lengths are in centimeters and weights in kilograms.
    """

    element_name: str = ""
    element_description: str = ""
    element_measurements: dict[str, float] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Any) -> Measurement:
        data = _expect_object(data, "measurement")
        raw = _typed(data, "elementMeasurements", dict, {})
        measures: dict[str, float] = {}
        for name, value in raw.items():
            if not (_is_a(value, int) or _is_a(value, float)):
                raise DecodeError(f"non-numeric measurement '{name}': {value!r}")
            measures[name] = float(value)
        return cls(
            element_name=_typed(data, "elementName", str, ""),
            element_description=_typed(data, "elementDescription", str, ""),
            element_measurements=measures,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "elementName": self.element_name,
            "elementDescription": self.element_description,
            "elementMeasurements": dict(self.element_measurements),
        }


@dataclass(frozen=True)
class Tag:
    """A subject keyword attached to an object."""

    term: str = ""
    aat_url: str = ""  # Getty Art & Architecture Thesaurus
    wikidata_url: str = ""

    @classmethod
    def from_dict(cls, data: Any) -> Tag:
        data = _expect_object(data, "tag")
        return cls(
            term=_typed(data, "term", str, ""),
            aat_url=_typed(data, "AAT_URL", str, ""),
            wikidata_url=_typed(data, "Wikidata_URL", str, ""),
        )

    def to_dict(self) -> dict[str, Any]:
        return {"term": self.term, "AAT_URL": self.aat_url, "Wikidata_URL": self.wikidata_url}


def _image_list(data: dict[str, Any]) -> list[str]:
    """additionalImages with null entries dropped."""
    urls = [u for u in _expect_list(data, "additionalImages") if u is not None]
    if not all(isinstance(u, str) for u in urls):
        raise DecodeError("additionalImages must contain only strings")
    return urls


# Scalar ObjectResult attributes -> API keys. Nested lists are handled separately.
_OBJECT_KEYS = {
    "object_id": "objectID",
    "is_highlight": "isHighlight",
    "accession_number": "accessionNumber",
    "accession_year": "accessionYear",
    "is_public_domain": "isPublicDomain",
    "primary_image": "primaryImage",
    "primary_image_small": "primaryImageSmall",
    "department": "department",
    "object_name": "objectName",
    "title": "title",
    "culture": "culture",
    "period": "period",
    "dynasty": "dynasty",
    "reign": "reign",
    "portfolio": "portfolio",
    "artist_role": "artistRole",
    "artist_prefix": "artistPrefix",
    "artist_display_name": "artistDisplayName",
    "artist_display_bio": "artistDisplayBio",
    "artist_suffix": "artistSuffix",
    "artist_alpha_sort": "artistAlphaSort",
    "artist_nationality": "artistNationality",
    "artist_begin_date": "artistBeginDate",
    "artist_end_date": "artistEndDate",
    "artist_gender": "artistGender",
    "artist_wikidata_url": "artistWikidata_URL",
    "artist_ulan_url": "artistULAN_URL",
    "object_date": "objectDate",
    "object_begin_date": "objectBeginDate",
    "object_end_date": "objectEndDate",
    "medium": "medium",
    "dimensions": "dimensions",
    "credit_line": "creditLine",
    "geography_type": "geographyType",
    "city": "city",
    "state": "state",
    "county": "county",
    "country": "country",
    "region": "region",
    "subregion": "subregion",
    "locale": "locale",
    "locus": "locus",
    "excavation": "excavation",
    "river": "river",
    "classification": "classification",
    "rights_and_reproduction": "rightsAndReproduction",
    "link_resource": "linkResource",
    "metadata_date": "metadataDate",
    "repository": "repository",
    "object_url": "objectURL",
    "object_wikidata_url": "objectWikidata_URL",
    "is_timeline_work": "isTimelineWork",
    "gallery_number": "GalleryNumber",
}


@dataclass(frozen=True)
class ObjectResult:
    """
    The full open access record for one object.

    Fields the API leaves out (or sends as null) keep their empty default, so
    a sparse record still decodes.
    """

    object_id: int = 0
    is_highlight: bool = False
    accession_number: str = ""  # Not always unique
    accession_year: str = ""
    is_public_domain: bool = False
    primary_image: str = ""
    primary_image_small: str = ""
    additional_images: list[str] = field(default_factory=list)
    constituents: list[Constituent] = field(default_factory=list)
    department: str = ""  # Department name, not its ID
    object_name: str = ""
    title: str = ""
    culture: str = ""
    period: str = ""
    dynasty: str = ""
    reign: str = ""
    portfolio: str = ""
    artist_role: str = ""
    artist_prefix: str = ""
    artist_display_name: str = ""
    artist_display_bio: str = ""
    artist_suffix: str = ""
    artist_alpha_sort: str = ""  # e.g. "Gogh, Vincent van"
    artist_nationality: str = ""
    artist_begin_date: str = ""
    artist_end_date: str = ""
    artist_gender: str = ""
    artist_wikidata_url: str = ""
    artist_ulan_url: str = ""
    object_date: str = ""  # Free text, e.g. "ca. 1850-60"
    object_begin_date: int = 0
    object_end_date: int = 0
    medium: str = ""
    dimensions: str = ""
    measurements: list[Measurement] = field(default_factory=list)
    credit_line: str = ""
    geography_type: str = ""
    city: str = ""
    state: str = ""
    county: str = ""
    country: str = ""
    region: str = ""
    subregion: str = ""
    locale: str = ""
    locus: str = ""
    excavation: str = ""
    river: str = ""
    classification: str = ""
    rights_and_reproduction: str = ""
    link_resource: str = ""
    metadata_date: str = ""
    repository: str = ""
    object_url: str = ""
    tags: list[Tag] = field(default_factory=list)
    object_wikidata_url: str = ""
    is_timeline_work: bool = False
    gallery_number: str = ""

    @classmethod
    def from_dict(cls, data: Any) -> ObjectResult:
        data = _expect_object(data, "object")
        return cls(
            **_scalars(cls, _OBJECT_KEYS, data),
            additional_images=_image_list(data),
            constituents=[Constituent.from_dict(c) for c in _expect_list(data, "constituents")],
            measurements=[Measurement.from_dict(m) for m in _expect_list(data, "measurements")],
            tags=[Tag.from_dict(t) for t in _expect_list(data, "tags")],
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert to the API's own JSON layout, e.g. for session state storage."""
        out = {key: getattr(self, attr) for attr, key in _OBJECT_KEYS.items()}
        out["additionalImages"] = list(self.additional_images)
        out["constituents"] = [c.to_dict() for c in self.constituents]
        out["measurements"] = [m.to_dict() for m in self.measurements]
        out["tags"] = [t.to_dict() for t in self.tags]
        return out

    @property
    def image_urls(self) -> list[str]:
        """Primary image first, then any additional images."""
        urls = [self.primary_image, *self.additional_images]
        return [u for u in urls if u]
