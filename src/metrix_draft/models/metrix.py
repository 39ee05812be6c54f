"""
Disc Golf Metrix payload models.

Metrix returns PascalCase keys; fields are aliased to snake_case.
"""

from pydantic import BaseModel, ConfigDict, Field, field_validator


class CompetitionResult(BaseModel):
    """A single player's line in a competition result list."""

    model_config = ConfigDict(populate_by_name=True)

    user_id: str | None = Field(
        default=None, alias="UserID", description="Missing for unregistered guests"
    )
    name: str = Field(alias="Name")
    score: float | None = Field(default=None, alias="Sum", description="Total strokes")

    @field_validator("user_id", mode="before")
    @classmethod
    def _coerce_user_id(cls, value):
        if value is None or value == "":
            return None
        return str(value)

    @field_validator("score", mode="before")
    @classmethod
    def _blank_score_is_dnf(cls, value):
        if value == "":
            return None
        return value

    @property
    def finished(self) -> bool:
        """False for DNF lines (no total score)."""
        return self.score is not None


class Competition(BaseModel):
    """Competition (game) information from Metrix."""

    model_config = ConfigDict(populate_by_name=True)

    competition_id: str | None = Field(default=None, alias="ID")
    name: str | None = Field(default=None, alias="Name")
    date: str | None = Field(default=None, alias="Date")
    course_id: str | None = Field(default=None, alias="CourseID")
    course_name: str | None = Field(default=None, alias="CourseName")
    results: list[CompetitionResult] = Field(default_factory=list, alias="Results")

    @field_validator("competition_id", "course_id", mode="before")
    @classmethod
    def _coerce_id(cls, value):
        if value is None or value == "":
            return None
        return str(value)

    @property
    def finished_results(self) -> list[CompetitionResult]:
        """Results excluding DNFs, in the order Metrix lists them."""
        return [r for r in self.results if r.finished]


class BagTagEntry(BaseModel):
    """A player on a Metrix bag-tag list, carrying their current rating."""

    model_config = ConfigDict(populate_by_name=True)

    name: str = Field(alias="Name")
    rating: float | None = Field(default=None, alias="Rating")

    @field_validator("rating", mode="before")
    @classmethod
    def _blank_rating_is_unknown(cls, value):
        if value == "":
            return None
        return value
