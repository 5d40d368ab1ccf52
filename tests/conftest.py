"""Pytest fixtures shared across the test suite.

All tests are network-isolated - socket connections are blocked by default.
"""

from __future__ import annotations

import socket
from collections.abc import Iterator

import pytest

from campus_ranking.domain.search_types import (
    PDF_FILE_TYPE,
    DocumentRecord,
    PersonRecord,
    SkillRecord,
)
from tests.fakes import InMemoryFileSystem
from tests.support.errors import NetworkIsolationError


def _blocked_socket_connect(self: socket.socket, *args: object, **kwargs: object) -> None:
    """Raise an error if any test tries to make a real network connection."""
    _ = (self, kwargs)
    raise NetworkIsolationError(str(args))


@pytest.fixture(autouse=True)
def block_network_access(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    """Block all network access in tests."""
    monkeypatch.setattr(socket.socket, "connect", _blocked_socket_connect)
    yield


@pytest.fixture(autouse=True)
def isolate_ranking_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep developer environment variables out of config-dependent tests."""
    for name in (
        "WEIGHTS_PROFILE_PATH",
        "WEIGHTS_PROFILE_NAME",
        "SEARCH_ROLE",
        "RESULT_LIMIT",
        "OUTPUT_DIR",
        "LOG_LEVEL",
    ):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def in_memory_fs() -> InMemoryFileSystem:
    """Provide an in-memory filesystem for tests."""
    return InMemoryFileSystem()


@pytest.fixture
def alice_vector() -> list[int]:
    """Activity counts for the worked scoring example (189 points)."""
    return [3, 2, 1, 0, 2, 1, 0, 0, 1, 1, 1, 2, 1, 3, 2, 1, 1]


@pytest.fixture
def sample_people() -> list[PersonRecord]:
    """Three profiles covering research, industry and sparse records."""
    return [
        PersonRecord(
            person_id="p-ada",
            full_name="Ada Lovelace",
            bio="machine learning research on graph neural networks",
            department="Computer Science",
            institution="North Campus",
            year_of_study=3,
            skills=(
                SkillRecord("python", "programming"),
                SkillRecord("pytorch", "machine learning"),
            ),
            documents=(
                DocumentRecord(
                    document_id="d-ada-paper",
                    title="GNN survey",
                    description="research paper on graph learning",
                    file_type=PDF_FILE_TYPE,
                    uploaded_at="2024-03-01T10:00:00Z",
                    owner_id="p-ada",
                ),
            ),
        ),
        PersonRecord(
            person_id="p-grace",
            full_name="Grace Hopper",
            bio="internship at a compiler company and a robotics project",
            department="Electrical Engineering",
            institution="South Campus",
            year_of_study=4,
            skills=(
                SkillRecord("cobol", "programming"),
                SkillRecord("aws", "certification"),
            ),
        ),
        PersonRecord(
            person_id="p-alan",
            full_name="Alan Turing",
            department="Mathematics",
            institution="North Campus",
            year_of_study=2,
        ),
    ]


@pytest.fixture
def sample_documents() -> list[DocumentRecord]:
    """Stand-alone documents, one with no description."""
    return [
        DocumentRecord(
            document_id="d-robotics",
            title="Robotics project report",
            description="final year robotics project with industry partner",
            file_type=PDF_FILE_TYPE,
            uploaded_at="2024-05-20T08:30:00Z",
            owner_id="p-grace",
        ),
        DocumentRecord(
            document_id="d-slides",
            title="machine learning research slides",
            uploaded_at="2024-06-01T12:00:00Z",
        ),
    ]
