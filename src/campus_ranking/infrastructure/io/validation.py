"""Pydantic-based validation helpers for inbound IO payloads."""

from __future__ import annotations

from typing import TypeVar

from pydantic import StrictInt, TypeAdapter, ValidationError
from typing_extensions import TypedDict

from ...domain.search_types import DocumentRecord, PersonRecord, SkillRecord

SchemaT = TypeVar("SchemaT")


class IncomingDataError(ValueError):
    """Raised when inbound data fails validation."""


class SkillInput(TypedDict, total=False):
    name: str | None
    category: str | None


class DocumentInput(TypedDict, total=False):
    id: str | int | None
    title: str | None
    description: str | None
    file_type: str | None
    uploaded_at: str | None
    owner_id: str | int | None


class PersonInput(TypedDict, total=False):
    id: str | int | None
    full_name: str | None
    bio: str | None
    department: str | None
    institution: str | None
    year_of_study: int | None
    skills: list[SkillInput | str] | None
    documents: list[DocumentInput] | None


class SearchRecordsInput(TypedDict, total=False):
    people: list[PersonInput]
    documents: list[DocumentInput]


class ActivityMatrixInput(TypedDict):
    entities: dict[str, list[StrictInt]]


def validate_as(schema: type[SchemaT], payload: object) -> SchemaT:
    try:
        return TypeAdapter(schema).validate_python(payload)
    except ValidationError as exc:
        message = f"Invalid payload for {schema}."
        raise IncomingDataError(message) from exc


def validate_json_as(schema: type[SchemaT], payload: str | bytes | bytearray) -> SchemaT:
    try:
        return TypeAdapter(schema).validate_json(payload)
    except ValidationError as exc:
        message = f"Invalid JSON payload for {schema}."
        raise IncomingDataError(message) from exc


def _as_str(value: object) -> str:
    if value is None:
        return ""
    if isinstance(value, int) and not isinstance(value, bool):
        return str(value)
    return value.strip() if isinstance(value, str) else ""


def _parse_skill(raw: SkillInput | str) -> SkillRecord | None:
    if isinstance(raw, str):
        name = raw.strip()
        return SkillRecord(name=name) if name else None
    name = _as_str(raw.get("name"))
    if not name:
        return None
    return SkillRecord(name=name, category=_as_str(raw.get("category")))


def _parse_document(raw: DocumentInput, *, owner_id: str = "") -> DocumentRecord:
    return DocumentRecord(
        document_id=_as_str(raw.get("id")),
        title=_as_str(raw.get("title")),
        description=_as_str(raw.get("description")),
        file_type=_as_str(raw.get("file_type")),
        uploaded_at=_as_str(raw.get("uploaded_at")),
        owner_id=_as_str(raw.get("owner_id")) or owner_id,
    )


def parse_person(payload: object) -> PersonRecord:
    person = validate_as(PersonInput, payload)
    person_id = _as_str(person.get("id"))
    skills = tuple(
        skill
        for skill in (_parse_skill(raw) for raw in person.get("skills") or [])
        if skill is not None
    )
    documents = tuple(
        _parse_document(raw, owner_id=person_id) for raw in person.get("documents") or []
    )
    return PersonRecord(
        person_id=person_id,
        full_name=_as_str(person.get("full_name")),
        bio=_as_str(person.get("bio")),
        department=_as_str(person.get("department")),
        institution=_as_str(person.get("institution")),
        year_of_study=person.get("year_of_study"),
        skills=skills,
        documents=documents,
    )


def parse_search_records(payload: object) -> tuple[list[PersonRecord], list[DocumentRecord]]:
    """Validate a ``{"people": [...], "documents": [...]}`` payload into records."""
    records = validate_as(SearchRecordsInput, payload)
    people = [parse_person(raw) for raw in records.get("people", [])]
    documents = [_parse_document(raw) for raw in records.get("documents", [])]
    return people, documents


def parse_activity_matrix(payload: object) -> dict[str, list[int]]:
    """Validate a ``{"entities": {id: [counts...]}}`` payload, preserving entity order."""
    matrix = validate_as(ActivityMatrixInput, payload)
    return {entity_id: list(counts) for entity_id, counts in matrix["entities"].items()}
