"""Custom exceptions for the campus ranking engine.

These exceptions provide clear error handling and enable testing of error paths.
"""

from __future__ import annotations


class RankingError(Exception):
    """Base exception for all ranking engine errors."""

    pass


class InvalidInputError(RankingError):
    """Raised when an activity vector holds a negative or non-integer count.

    Counts are rejected rather than coerced; callers must clean their data first.
    """

    def __init__(self, entity_id: str | None, position: int, value: object) -> None:
        self.entity_id = entity_id
        self.position = position
        self.value = value
        owner = f" for {entity_id!r}" if entity_id is not None else ""
        super().__init__(
            f"Invalid activity count{owner} at position {position}: {value!r}. "
            "Counts must be non-negative integers."
        )


class WeightSchemaError(RankingError):
    """Raised when a weight schema is internally inconsistent."""

    def __init__(self, detail: str) -> None:
        super().__init__(f"Invalid weight schema: {detail}")


class WeightProfileFileNotFoundError(RankingError):
    """Raised when a weight profile catalogue file is missing."""

    def __init__(self, path: str) -> None:
        super().__init__(
            f"Weight profile file not found: {path}\n"
            "Set WEIGHTS_PROFILE_PATH to a valid file or leave it empty to use the defaults."
        )


class WeightProfileValidationError(RankingError):
    """Raised when a weight profile catalogue fails validation."""

    def __init__(self, path: str, detail: str) -> None:
        super().__init__(f"Invalid weight profile file {path}: {detail}")


class WeightProfileSelectionError(RankingError):
    """Raised when a requested weight profile is not in the catalogue."""

    def __init__(self, name: str, available: tuple[str, ...]) -> None:
        self.name = name
        self.available = available
        super().__init__(
            f"Unknown weight profile {name!r}. Available profiles: {', '.join(available)}"
        )


class ActivityMatrixError(RankingError):
    """Raised when an activity matrix file cannot be interpreted."""

    def __init__(self, path: str, detail: str) -> None:
        super().__init__(f"Invalid activity matrix {path}: {detail}")


class RecordsFileNotFoundError(RankingError):
    """Raised when an input file for ranking or search is missing."""

    def __init__(self, path: str) -> None:
        super().__init__(f"Input file not found: {path}")


class ConfigFileNotFoundError(RankingError):
    """Raised when a TOML config file is missing."""

    def __init__(self, path: str) -> None:
        super().__init__(f"Config file not found: {path}")


class ConfigFileParseError(RankingError):
    """Raised when a TOML config file is not valid TOML."""

    def __init__(self, path: str, detail: str) -> None:
        super().__init__(f"Could not parse config file {path}: {detail}")


class ConfigFileValidationError(RankingError):
    """Raised when a TOML config file has invalid values."""

    def __init__(self, path: str, detail: str) -> None:
        super().__init__(f"Invalid config file {path}: {detail}")


class DependencyMissingError(RankingError):
    """Raised when a required collaborator was not injected."""

    def __init__(self, dependency: str, *, reason: str = "") -> None:
        message = f"{dependency} is required."
        if reason:
            message = f"{message} {reason}"
        super().__init__(message)
