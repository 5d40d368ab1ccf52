"""Score people and documents against one query and merge them into a ranked list."""

from __future__ import annotations

from collections.abc import Iterable
from datetime import datetime

from ..protocols import Embedder
from .relevance import score_document, score_person
from .search_types import (
    DocumentRecord,
    PersonRecord,
    ResultKind,
    ResultMetadata,
    SearchQuery,
    SearchResult,
)

# Results must score strictly above this to be kept.
RELEVANCE_THRESHOLD = 0.1


def is_relevant(score: float) -> bool:
    return score > RELEVANCE_THRESHOLD


def _upload_date(uploaded_at: str) -> str:
    if not uploaded_at:
        return "an unknown date"
    try:
        return datetime.fromisoformat(uploaded_at.replace("Z", "+00:00")).date().isoformat()
    except ValueError:
        return uploaded_at


def person_result(
    query: SearchQuery,
    person: PersonRecord,
    embedder: Embedder | None = None,
) -> SearchResult:
    """Build the search result for one person, relevance included."""
    return SearchResult(
        result_id=person.person_id,
        kind=ResultKind.PERSON,
        title=person.full_name,
        description=person.bio or f"Student in {person.department or 'Unknown Department'}",
        relevance_score=score_person(query.text, person, query.role, embedder),
        metadata=ResultMetadata(
            department=person.department or None,
            institution=person.institution or None,
            skills=person.skill_names,
            year_of_study=person.year_of_study,
            owner_id=person.person_id,
        ),
    )


def document_result(
    query: SearchQuery,
    document: DocumentRecord,
    embedder: Embedder | None = None,
) -> SearchResult:
    """Build the search result for one document, relevance included."""
    return SearchResult(
        result_id=document.document_id,
        kind=ResultKind.DOCUMENT,
        title=document.title,
        description=document.description
        or f"Document uploaded on {_upload_date(document.uploaded_at)}",
        relevance_score=score_document(query.text, document, query.role, embedder),
        metadata=ResultMetadata(
            owner_id=document.owner_id or None,
            file_type=document.file_type or None,
            uploaded_at=document.uploaded_at or None,
        ),
    )


def search_and_rank(
    query: SearchQuery,
    people: Iterable[PersonRecord],
    documents: Iterable[DocumentRecord],
    *,
    embedder: Embedder | None = None,
) -> list[SearchResult]:
    """Return relevant people and documents, most relevant first.

    People precede documents among exact ties.
    """
    results: list[SearchResult] = []
    for person in people:
        result = person_result(query, person, embedder)
        if is_relevant(result.relevance_score):
            results.append(result)
    for document in documents:
        result = document_result(query, document, embedder)
        if is_relevant(result.relevance_score):
            results.append(result)

    results.sort(key=lambda result: result.relevance_score, reverse=True)
    return results
