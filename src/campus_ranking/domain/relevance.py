"""Hybrid lexical + vector relevance scoring with role-specific keyword boosts.

Usage example:
    from campus_ranking.domain.relevance import relevance_score, score_person
    from campus_ranking.domain.search_types import PersonRecord, SearchRole

    relevance_score("machine learning", "deep learning research")
    score_person("robotics", PersonRecord("p1", "Ada", bio="robotics research"), SearchRole.FACULTY)
"""

from __future__ import annotations

from dataclasses import dataclass

from ..protocols import Embedder
from .embedding import PseudoEmbedder, cosine_similarity, tokenize, utf16_length
from .search_types import DocumentRecord, PersonRecord, SearchRole

VECTOR_WEIGHT = 0.7
LEXICAL_WEIGHT = 0.3
MIN_QUERY_TOKEN_LENGTH = 3


@dataclass(frozen=True)
class KeywordBoost:
    """Multiply a score when ``keyword`` appears anywhere in the content."""

    keyword: str
    multiplier: float


PERSON_BOOSTS: dict[SearchRole, tuple[KeywordBoost, ...]] = {
    SearchRole.FACULTY: (
        KeywordBoost("research", 1.2),
        KeywordBoost("publication", 1.3),
        KeywordBoost("paper", 1.1),
    ),
    SearchRole.PLACEMENT: (
        KeywordBoost("internship", 1.3),
        KeywordBoost("project", 1.2),
        KeywordBoost("certification", 1.25),
    ),
    SearchRole.GENERIC: (),
}

DOCUMENT_BOOSTS: dict[SearchRole, tuple[KeywordBoost, ...]] = {
    SearchRole.FACULTY: (
        KeywordBoost("research", 1.3),
        KeywordBoost("paper", 1.2),
    ),
    SearchRole.PLACEMENT: (
        KeywordBoost("project", 1.3),
        KeywordBoost("internship", 1.2),
    ),
    SearchRole.GENERIC: (),
}

_DEFAULT_EMBEDDER = PseudoEmbedder()


def lexical_score(query: str, content: str) -> float:
    """Share of meaningful query tokens that appear verbatim in the content."""
    query_tokens = [
        token for token in tokenize(query) if utf16_length(token) >= MIN_QUERY_TOKEN_LENGTH
    ]
    if not query_tokens:
        return 0.0
    content_tokens = set(tokenize(content))
    matches = sum(1 for token in query_tokens if token in content_tokens)
    return matches / len(query_tokens)


def vector_score(query: str, content: str, embedder: Embedder | None = None) -> float:
    embedder = embedder or _DEFAULT_EMBEDDER
    return cosine_similarity(embedder.embed(query), embedder.embed(content))


def relevance_score(query: str, content: str, embedder: Embedder | None = None) -> float:
    """Blend vector similarity and lexical overlap, before any boosts."""
    return VECTOR_WEIGHT * vector_score(query, content, embedder) + LEXICAL_WEIGHT * lexical_score(
        query, content
    )


def apply_boosts(score: float, content: str, boosts: tuple[KeywordBoost, ...]) -> float:
    """Apply every matching boost; matches are case-insensitive substrings."""
    lowered = content.lower()
    for boost in boosts:
        if boost.keyword in lowered:
            score *= boost.multiplier
    return score


def _join(parts: list[str]) -> str:
    return " ".join(parts)


def _pdf_text(person: PersonRecord) -> str:
    return _join([doc.summary_text for doc in person.pdf_documents])


def person_base_content(person: PersonRecord) -> str:
    """Name, bio, department, institution and "skill category" pairs."""
    return _join(
        [
            person.full_name,
            person.bio,
            person.department,
            person.institution,
            _join([f"{skill.name} {skill.category}" for skill in person.skills]),
        ]
    )


def faculty_content(person: PersonRecord) -> str:
    return _join(
        [
            person.bio,
            person.department,
            person.institution,
            _join(list(person.skill_names)),
            _pdf_text(person),
        ]
    )


def placement_content(person: PersonRecord) -> str:
    return _join(
        [
            person.bio,
            _join(list(person.skill_names)),
            _join([skill.category for skill in person.skills]),
            _pdf_text(person),
        ]
    )


def document_content(document: DocumentRecord) -> str:
    return _join([document.title, document.description])


def rank_for_faculty(query: str, person: PersonRecord, embedder: Embedder | None = None) -> float:
    """Relevance of a person to a faculty member; favours research output."""
    content = faculty_content(person)
    score = relevance_score(query, content, embedder)
    return apply_boosts(score, content, PERSON_BOOSTS[SearchRole.FACULTY])


def rank_for_placement(query: str, person: PersonRecord, embedder: Embedder | None = None) -> float:
    """Relevance of a person to a placement officer; favours industry experience."""
    content = placement_content(person)
    score = relevance_score(query, content, embedder)
    return apply_boosts(score, content, PERSON_BOOSTS[SearchRole.PLACEMENT])


def score_person(
    query: str,
    person: PersonRecord,
    role: SearchRole,
    embedder: Embedder | None = None,
) -> float:
    if role == SearchRole.FACULTY:
        return rank_for_faculty(query, person, embedder)
    if role == SearchRole.PLACEMENT:
        return rank_for_placement(query, person, embedder)
    return relevance_score(query, person_base_content(person), embedder)


def score_document(
    query: str,
    document: DocumentRecord,
    role: SearchRole,
    embedder: Embedder | None = None,
) -> float:
    content = document_content(document)
    score = relevance_score(query, content, embedder)
    return apply_boosts(score, content, DOCUMENT_BOOSTS[role])
