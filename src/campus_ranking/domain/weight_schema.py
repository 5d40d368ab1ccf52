"""Ordered activity weight schema shared by scoring, tie-breaking and filtering.

Usage example:
    from campus_ranking.domain.weight_schema import DEFAULT_WEIGHT_SCHEMA

    DEFAULT_WEIGHT_SCHEMA.categories()[:2]  # ("courseCompletion", "highCourseScore")
    DEFAULT_WEIGHT_SCHEMA.index_of("patents")  # 3
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from dataclasses import dataclass
from types import MappingProxyType

from ..exceptions import WeightSchemaError


@dataclass(frozen=True)
class ActivityWeight:
    """One scored activity category and its point value."""

    category: str
    weight: int
    label: str = ""

    @property
    def display_name(self) -> str:
        return self.label or self.category


@dataclass(frozen=True)
class WeightSchema:
    """Ordered catalogue of activity categories.

    Position ``i`` of every activity vector refers to ``activities[i]``. This is the only
    place the ordering is defined; everything else looks categories up by index here.
    """

    activities: tuple[ActivityWeight, ...]

    def __post_init__(self) -> None:
        if not self.activities:
            raise WeightSchemaError("at least one activity is required")
        seen: set[str] = set()
        for activity in self.activities:
            if not activity.category.strip():
                raise WeightSchemaError("category names must be non-empty")
            if activity.category in seen:
                raise WeightSchemaError(f"duplicate category {activity.category!r}")
            if isinstance(activity.weight, bool) or not isinstance(activity.weight, int):
                raise WeightSchemaError(f"weight for {activity.category!r} must be an integer")
            if activity.weight <= 0:
                raise WeightSchemaError(f"weight for {activity.category!r} must be positive")
            seen.add(activity.category)

    def __len__(self) -> int:
        return len(self.activities)

    def __iter__(self) -> Iterator[ActivityWeight]:
        return iter(self.activities)

    def categories(self) -> tuple[str, ...]:
        """Return category names in vector order."""
        return tuple(activity.category for activity in self.activities)

    def weights(self) -> tuple[int, ...]:
        """Return point values in vector order."""
        return tuple(activity.weight for activity in self.activities)

    def labels(self) -> tuple[str, ...]:
        """Return display labels in vector order."""
        return tuple(activity.display_name for activity in self.activities)

    def index_of(self, category: str) -> int | None:
        """Return the vector position of ``category``, or None when it is not scored."""
        for index, activity in enumerate(self.activities):
            if activity.category == category:
                return index
        return None

    def weight_at(self, index: int) -> int:
        """Return the weight at ``index``; positions past the schema weigh nothing."""
        if 0 <= index < len(self.activities):
            return self.activities[index].weight
        return 0

    def label_at(self, index: int) -> str:
        if 0 <= index < len(self.activities):
            return self.activities[index].display_name
        return f"Activity {index + 1}"


DEFAULT_ACTIVITY_WEIGHTS: tuple[ActivityWeight, ...] = (
    # Academic achievements
    ActivityWeight("courseCompletion", 7, "Course completion"),
    ActivityWeight("highCourseScore", 12, "High course score"),
    ActivityWeight("researchPaper", 20, "Research paper"),
    ActivityWeight("patents", 25, "Patents"),
    # Hackathons and competitions
    ActivityWeight("hackathonParticipation", 5, "Hackathon participation"),
    ActivityWeight("hackathonWin", 10, "Hackathon win"),
    ActivityWeight("nationalCompetition", 15, "National competition"),
    ActivityWeight("internationalCompetition", 20, "International competition"),
    # Faculty and institutional recognition
    ActivityWeight("deanApproval", 15, "Dean approval"),
    ActivityWeight("professorApproval", 10, "Professor approval"),
    ActivityWeight("externalAward", 12, "External award"),
    # Community and leadership
    ActivityWeight("mentoring", 8, "Mentoring"),
    ActivityWeight("organizingEvents", 6, "Organizing events"),
    ActivityWeight("volunteering", 5, "Volunteering"),
    # Online engagement and skill growth
    ActivityWeight("moocs", 6, "MOOCs"),
    ActivityWeight("certifications", 10, "Certifications"),
    ActivityWeight("openSource", 8, "Open source"),
)

DEFAULT_WEIGHT_SCHEMA = WeightSchema(DEFAULT_ACTIVITY_WEIGHTS)

# Higher value is consulted first; independent of the point values above.
DEFAULT_TIE_BREAK_PRIORITY: Mapping[str, int] = MappingProxyType(
    {
        "patents": 15,
        "researchPaper": 14,
        "internationalCompetition": 13,
        "deanApproval": 12,
        "nationalCompetition": 11,
        "professorApproval": 10,
        "hackathonWin": 9,
        "highCourseScore": 8,
        "certifications": 7,
        "mentoring": 6,
        "openSource": 6,
        "courseCompletion": 5,
        "externalAward": 4,
        "organizingEvents": 3,
        "moocs": 2,
        "hackathonParticipation": 1,
        "volunteering": 0,
    }
)


@dataclass(frozen=True)
class WeightProfile:
    """A named weight schema paired with its tie-break priority table."""

    name: str
    schema: WeightSchema
    tie_break_priority: Mapping[str, int]


@dataclass(frozen=True)
class WeightProfileCatalog:
    """Named weight profiles bundled in a single schema version."""

    schema_version: int
    default_profile: str
    profiles: tuple[WeightProfile, ...]


DEFAULT_WEIGHT_PROFILE = WeightProfile(
    name="default",
    schema=DEFAULT_WEIGHT_SCHEMA,
    tie_break_priority=DEFAULT_TIE_BREAK_PRIORITY,
)
