"""Data classes for family tree entities."""

from dataclasses import dataclass, field, fields

THEMES = ("classic", "modern", "colorful")
DEFAULT_THEME = "modern"


@dataclass
class TimelineEvent:
    year: str
    event: str


@dataclass
class Document:
    name: str
    type: str
    url: str


@dataclass
class Education:
    level: str
    institution: str
    year: str
    status: str


@dataclass
class Career:
    title: str
    company: str
    period: str
    achievements: str | None = None


@dataclass
class Contact:
    phone: str | None = None
    email: str | None = None
    address: str | None = None
    city: str | None = None
    state: str | None = None
    country: str | None = None


@dataclass
class Person:
    id: str
    name: str
    relation: str = ""
    gender: str = "other"  # male, female, other
    generation: int = 0  # 0 = self, negative = ancestors, positive = descendants
    parent_id: str | None = None
    spouse_id: str | None = None

    # Profile fields, never used for layout
    birth_year: str | None = None
    death_year: str | None = None
    photo: str | None = None
    notes: str | None = None
    biography: str | None = None
    date_of_birth: str | None = None
    birth_place: str | None = None
    marriage_date: str | None = None
    timeline: list[TimelineEvent] = field(default_factory=list)
    gallery: list[str] = field(default_factory=list)
    documents: list[Document] = field(default_factory=list)
    education: list[Education] = field(default_factory=list)
    career: list[Career] = field(default_factory=list)
    contact: Contact | None = None
    extra: dict = field(default_factory=dict)


@dataclass
class FamilyTree:
    id: str
    name: str
    slug: str
    theme: str = DEFAULT_THEME
    created_at: str | None = None
    updated_at: str | None = None
    member_count: int = 0


@dataclass
class Share:
    share_id: str
    tree_id: str
    is_active: bool = True
    created_at: str | None = None
    expires_at: str | None = None  # ISO timestamp, None = never expires


# camelCase key used by the web client -> Person attribute
_SCALAR_KEYS = {
    "id": "id",
    "name": "name",
    "relation": "relation",
    "gender": "gender",
    "parentId": "parent_id",
    "spouseId": "spouse_id",
    "birthYear": "birth_year",
    "deathYear": "death_year",
    "photo": "photo",
    "notes": "notes",
    "biography": "biography",
    "dateOfBirth": "date_of_birth",
    "birthPlace": "birth_place",
    "marriageDate": "marriage_date",
}

_LIST_KEYS = {
    "timeline": TimelineEvent,
    "documents": Document,
    "education": Education,
    "career": Career,
}


def _optional_ref(value) -> str | None:
    """Normalize a relationship reference; empty values mean no relationship."""
    if value is None:
        return None
    value = str(value).strip()
    return value or None


def _build_record(cls, data: dict):
    if not isinstance(data, dict):
        raise ValueError(f"Invalid {cls.__name__} record {data!r}: expected an object")
    names = {f.name for f in fields(cls)}
    try:
        return cls(**{k: v for k, v in data.items() if k in names})
    except TypeError as e:
        raise ValueError(f"Invalid {cls.__name__} record {data!r}: {e}") from None


def _require_list(data: dict, key: str):
    if not isinstance(data[key], list):
        raise ValueError(f"Person {data['id']!r} field {key!r} must be a list")


def person_from_dict(data: dict) -> Person:
    """
    Build a Person from a camelCase record as produced by the web client.

    Keys that are not part of the known profile are kept in `extra`.
    """
    if not isinstance(data, dict):
        raise ValueError(f"Person record must be an object, got {data!r}")
    if not data.get("id"):
        raise ValueError(f"Person record has no id: {data!r}")
    if not data.get("name"):
        raise ValueError(f"Person {data['id']!r} has no name")

    generation = data.get("generation", 0)
    try:
        generation = int(generation)
    except (TypeError, ValueError):
        raise ValueError(
            f"Person {data['id']!r} has a non-integer generation: {generation!r}"
        ) from None

    kwargs = {}
    for key, attr in _SCALAR_KEYS.items():
        if key in data and data[key] is not None:
            kwargs[attr] = str(data[key])
    kwargs["parent_id"] = _optional_ref(data.get("parentId"))
    kwargs["spouse_id"] = _optional_ref(data.get("spouseId"))
    kwargs["generation"] = generation

    for key, cls in _LIST_KEYS.items():
        if data.get(key):
            _require_list(data, key)
            kwargs[key] = [_build_record(cls, item) for item in data[key]]
    if data.get("gallery"):
        _require_list(data, "gallery")
        kwargs["gallery"] = [str(url) for url in data["gallery"]]
    if data.get("contact"):
        kwargs["contact"] = _build_record(Contact, data["contact"])

    known = set(_SCALAR_KEYS) | set(_LIST_KEYS) | {"generation", "gallery", "contact"}
    kwargs["extra"] = {k: v for k, v in data.items() if k not in known}

    return Person(**kwargs)


def person_to_dict(person: Person) -> dict:
    """Inverse of person_from_dict; unset optional fields are omitted."""
    data = dict(person.extra)
    for key, attr in _SCALAR_KEYS.items():
        value = getattr(person, attr)
        if value is not None:
            data[key] = value
    data["generation"] = person.generation

    for key in _LIST_KEYS:
        items = getattr(person, key)
        if items:
            data[key] = [vars(item).copy() for item in items]
    if person.gallery:
        data["gallery"] = list(person.gallery)
    if person.contact is not None:
        data["contact"] = {k: v for k, v in vars(person.contact).items() if v is not None}
    return data
