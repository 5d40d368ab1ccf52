"""Loading and strict validation for activity weight profile catalogues."""

from __future__ import annotations

from pathlib import Path
from types import MappingProxyType

from pydantic import BaseModel, ConfigDict, ValidationError, field_validator, model_validator

from ..domain.weight_schema import (
    DEFAULT_WEIGHT_PROFILE,
    ActivityWeight,
    WeightProfile,
    WeightProfileCatalog,
    WeightSchema,
)
from ..exceptions import (
    WeightProfileFileNotFoundError,
    WeightProfileSelectionError,
    WeightProfileValidationError,
)
from ..observability import get_logger
from ..protocols import FileSystem

_SCHEMA_VERSION = 1


class _ActivityWeightModel(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    category: str
    weight: int
    label: str = ""

    @field_validator("category")
    @classmethod
    def _validate_category(cls, value: str) -> str:
        text = value.strip()
        if not text:
            raise ValueError
        return text

    @field_validator("weight")
    @classmethod
    def _validate_weight(cls, value: int) -> int:
        if value <= 0:
            raise ValueError
        return value

    @field_validator("label")
    @classmethod
    def _strip_label(cls, value: str) -> str:
        return value.strip()


class _WeightProfileModel(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    name: str
    activities: tuple[_ActivityWeightModel, ...]
    tie_break_priority: dict[str, int]

    @field_validator("name")
    @classmethod
    def _validate_name(cls, value: str) -> str:
        text = value.strip()
        if not text:
            raise ValueError
        return text

    @field_validator("tie_break_priority")
    @classmethod
    def _validate_priority(cls, value: dict[str, int]) -> dict[str, int]:
        cleaned: dict[str, int] = {}
        for category, priority in value.items():
            key = category.strip()
            if not key or priority < 0:
                raise ValueError
            cleaned[key] = priority
        return cleaned

    @model_validator(mode="after")
    def _validate_activities(self) -> _WeightProfileModel:
        if not self.activities:
            raise ValueError
        categories = [activity.category for activity in self.activities]
        if len(set(categories)) != len(categories):
            raise ValueError
        return self


class _WeightProfileCatalogModel(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    schema_version: int
    default_profile: str
    profiles: tuple[_WeightProfileModel, ...]

    @field_validator("schema_version")
    @classmethod
    def _validate_schema_version(cls, value: int) -> int:
        if value != _SCHEMA_VERSION:
            raise ValueError
        return value

    @field_validator("default_profile")
    @classmethod
    def _validate_default_profile(cls, value: str) -> str:
        text = value.strip()
        if not text:
            raise ValueError
        return text

    @model_validator(mode="after")
    def _validate_profiles(self) -> _WeightProfileCatalogModel:
        if not self.profiles:
            raise ValueError
        names = [profile.name for profile in self.profiles]
        if len(set(names)) != len(names):
            raise ValueError
        if self.default_profile not in set(names):
            raise ValueError
        return self


def _format_validation_error(exc: ValidationError) -> str:
    first = exc.errors()[0]
    location = ".".join(str(part) for part in first.get("loc", ("<root>",)))
    message = str(first.get("msg", "invalid value"))
    return f"{location}: {message}"


def _to_domain_profile(model: _WeightProfileModel) -> WeightProfile:
    return WeightProfile(
        name=model.name,
        schema=WeightSchema(
            tuple(
                ActivityWeight(
                    category=activity.category,
                    weight=activity.weight,
                    label=activity.label,
                )
                for activity in model.activities
            )
        ),
        tie_break_priority=MappingProxyType(dict(model.tie_break_priority)),
    )


def load_weight_profile_catalog(*, path: Path, fs: FileSystem) -> WeightProfileCatalog:
    """Load and validate a weight profile catalogue from JSON."""
    if not fs.exists(path):
        raise WeightProfileFileNotFoundError(str(path))

    payload = fs.read_text(path)
    try:
        model = _WeightProfileCatalogModel.model_validate_json(payload)
    except ValidationError as exc:
        raise WeightProfileValidationError(str(path), _format_validation_error(exc)) from exc

    return WeightProfileCatalog(
        schema_version=model.schema_version,
        default_profile=model.default_profile,
        profiles=tuple(_to_domain_profile(profile) for profile in model.profiles),
    )


def resolve_weight_profile(
    catalog: WeightProfileCatalog,
    profile_name: str | None = None,
) -> WeightProfile:
    """Resolve one profile by name, defaulting to the catalogue default profile."""
    target = (profile_name or catalog.default_profile).strip()
    if not target:
        target = catalog.default_profile

    for profile in catalog.profiles:
        if profile.name == target:
            return profile

    available = tuple(sorted(profile.name for profile in catalog.profiles))
    raise WeightProfileSelectionError(target, available)


def load_weight_profile(
    *,
    path: str,
    profile_name: str,
    fs: FileSystem,
) -> WeightProfile:
    """Return the configured profile, or the built-in defaults when no path is set."""
    if not path:
        return DEFAULT_WEIGHT_PROFILE
    catalog = load_weight_profile_catalog(path=Path(path), fs=fs)
    profile = resolve_weight_profile(catalog, profile_name or None)
    get_logger("weight_profiles").info(
        "Weight profile %s: %s categories", profile.name, len(profile.schema)
    )
    return profile
