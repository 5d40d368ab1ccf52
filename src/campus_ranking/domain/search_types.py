"""Typed records, queries and results for free-text search."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum

PDF_FILE_TYPE = "application/pdf"


class SearchRole(StrEnum):
    """Who is searching; selects the boost table."""

    FACULTY = "faculty"
    PLACEMENT = "placement"
    GENERIC = "generic"


class ResultKind(StrEnum):
    PERSON = "person"
    DOCUMENT = "document"


@dataclass(frozen=True)
class SkillRecord:
    """A named skill and the category it belongs to."""

    name: str
    category: str = ""


@dataclass(frozen=True)
class DocumentRecord:
    """A document as supplied by the host application."""

    document_id: str
    title: str
    description: str = ""
    file_type: str = ""
    uploaded_at: str = ""
    owner_id: str = ""

    @property
    def summary_text(self) -> str:
        """Description, falling back to the title when there is none."""
        return self.description or self.title


@dataclass(frozen=True)
class PersonRecord:
    """A person profile as supplied by the host application."""

    person_id: str
    full_name: str
    bio: str = ""
    department: str = ""
    institution: str = ""
    year_of_study: int | None = None
    skills: tuple[SkillRecord, ...] = ()
    documents: tuple[DocumentRecord, ...] = ()

    @property
    def skill_names(self) -> tuple[str, ...]:
        return tuple(skill.name for skill in self.skills)

    @property
    def pdf_documents(self) -> tuple[DocumentRecord, ...]:
        return tuple(doc for doc in self.documents if doc.file_type == PDF_FILE_TYPE)


@dataclass(frozen=True)
class SearchFilters:
    """Exact-match constraints applied after ranking.

    ``department`` is the category filter and ``year_of_study`` the numeric one.
    Unset fields impose no constraint.
    """

    department: str | None = None
    institution: str | None = None
    skills: frozenset[str] = frozenset()
    year_of_study: int | None = None


@dataclass(frozen=True)
class SearchQuery:
    """Free text plus the searcher's role and optional filters."""

    text: str
    role: SearchRole = SearchRole.GENERIC
    filters: SearchFilters = field(default_factory=SearchFilters)


@dataclass(frozen=True)
class ResultMetadata:
    """Kind-specific attributes used by filters and display."""

    department: str | None = None
    institution: str | None = None
    skills: tuple[str, ...] = ()
    year_of_study: int | None = None
    owner_id: str | None = None
    file_type: str | None = None
    uploaded_at: str | None = None


@dataclass(frozen=True)
class SearchResult:
    """One ranked hit, either a person or a document."""

    result_id: str
    kind: ResultKind
    title: str
    description: str
    relevance_score: float
    metadata: ResultMetadata = field(default_factory=ResultMetadata)
