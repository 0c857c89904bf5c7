"""
Typed journey shapes.
What it defines:
- The request value objects for generation, revision and reflection
- Day / Week / Devotional documents as returned by the model
- JourneyFormat, the tag telling the flat-days layout from the legacy weeks layout

And, the main purpose:
Normalize the loosely-typed model output once, at the parsing boundary.
"""


import copy
from enum import Enum
from typing import Any, Mapping, NamedTuple

from pydantic import BaseModel, ConfigDict, Field, PrivateAttr, ValidationError, field_validator

from sophrosyne.llm.errors import InvalidResponse


def _str_or_none(v: Any) -> str | None:
    return v if isinstance(v, str) else None


class JourneyRequest(BaseModel):
    model_config = ConfigDict(frozen=True)

    goal: str = Field(..., description="Free-text struggle or healing goal")
    maturity_level: str = Field("Intermediate", description="Beginner, Advanced, or a user-entered faith word")

    @field_validator("goal")
    @classmethod
    def _goal_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("goal must not be empty")
        return v


class Devotional(BaseModel):
    model_config = ConfigDict(extra="allow")

    context: str | None = None
    meaning: str | None = None
    qaPrompt: str | None = None

    @field_validator("context", "meaning", "qaPrompt", mode="before")
    @classmethod
    def _text_only(cls, v: Any) -> str | None:
        return _str_or_none(v)


class Day(BaseModel):
    """
    One day of a journey. Only `verse` is required; optional fields of the
    wrong type read as missing instead of rejecting the day.
    """

    model_config = ConfigDict(extra="allow")

    title: str | None = None
    verse: str
    devotional: Devotional | None = None
    reflection: str | None = None  # legacy week-based days

    @field_validator("title", "reflection", mode="before")
    @classmethod
    def _text_only(cls, v: Any) -> str | None:
        return _str_or_none(v)

    @field_validator("devotional", mode="before")
    @classmethod
    def _mapping_only(cls, v: Any) -> Any:
        return v if isinstance(v, (Mapping, Devotional)) else None

    @field_validator("verse")
    @classmethod
    def _verse_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("verse must not be empty")
        return v

    @property
    def reflection_text(self) -> str | None:
        if self.reflection is not None:
            return self.reflection
        if self.devotional is not None:
            return self.devotional.meaning
        return None


class Week(BaseModel):
    model_config = ConfigDict(extra="allow")

    title: str = ""
    days: list[Day | None]

    # source document, written back verbatim by to_content
    _source: dict | None = PrivateAttr(default=None)
    _raw_days: list | None = PrivateAttr(default=None)
    _position: int | None = PrivateAttr(default=None)

    def dump_days(self) -> list:
        if self._raw_days is not None:
            return list(self._raw_days)
        return [d.model_dump(exclude_unset=True) if d is not None else None for d in self.days]

    def to_content(self) -> dict:
        if self._source is not None:
            return {**self._source, "days": self.dump_days()}
        return {**self.model_dump(exclude_unset=True, exclude={"days"}), "days": self.dump_days()}


class JourneyFormat(str, Enum):
    DAYS = "days"
    WEEKS = "weeks"


def decode_day(raw: Any) -> Day | None:
    if not isinstance(raw, Mapping):
        return None
    try:
        return Day.model_validate(dict(raw))
    except ValidationError:
        return None


def _decode_week(raw: Any) -> Week | None:
    if not isinstance(raw, Mapping):
        return None
    days = raw.get("days")
    if not isinstance(days, list) or not days:
        return None
    extra = {k: v for k, v in raw.items() if k not in ("title", "days")}
    title = raw.get("title")
    week = Week(
        title=title if isinstance(title, str) else "",
        days=[decode_day(d) for d in days],
        **extra,
    )
    week._source = dict(raw)
    week._raw_days = days
    return week


class Journey(BaseModel):
    """
    A generated journey in either layout.

    Undecodable days are kept as None so positions stay stable;
    undecodable weeks are skipped by the walk (their days are not counted).
    Both are still written back by to_content, as are explicit nulls.
    """

    format: JourneyFormat
    weeks: list[Week]
    extra: dict = Field(default_factory=dict)

    _path_rest: dict = PrivateAttr(default_factory=dict)
    _raw_weeks: list | None = PrivateAttr(default=None)

    @classmethod
    def from_content(cls, content: Any) -> "Journey":
        if not isinstance(content, Mapping):
            raise InvalidResponse("Journey content is not an object")
        path = content.get("path")
        if not isinstance(path, Mapping):
            raise InvalidResponse("Journey is missing its path object")
        path = copy.deepcopy(dict(path))
        extra = {k: v for k, v in content.items() if k != "path"}

        days = path.get("days")
        if isinstance(days, list) and days:
            week = Week(days=[decode_day(d) for d in days])
            week._raw_days = days
            journey = cls(format=JourneyFormat.DAYS, weeks=[week], extra=extra)
            journey._path_rest = {k: v for k, v in path.items() if k != "days"}
            return journey

        weeks = path.get("weeks")
        if isinstance(weeks, list) and weeks:
            decoded = []
            for position, raw in enumerate(weeks):
                week = _decode_week(raw)
                if week is not None:
                    week._position = position
                    decoded.append(week)
            journey = cls(format=JourneyFormat.WEEKS, weeks=decoded, extra=extra)
            journey._path_rest = {k: v for k, v in path.items() if k != "weeks"}
            journey._raw_weeks = weeks
            return journey

        raise InvalidResponse("Journey path has no days or weeks")

    @property
    def days(self) -> list[Day | None]:
        return [d for w in self.weeks for d in w.days]

    @property
    def day_count(self) -> int:
        return sum(len(w.days) for w in self.weeks)

    def to_content(self) -> dict:
        if self.format is JourneyFormat.DAYS:
            path = {"days": [d for w in self.weeks for d in w.dump_days()]}
        else:
            weeks = [w.to_content() for w in self.weeks]
            if self._raw_weeks is not None:
                weeks = list(self._raw_weeks)
                for w in self.weeks:
                    if w._position is not None:
                        weeks[w._position] = w.to_content()
            path = {"weeks": weeks}
        return {**self.extra, "path": {**self._path_rest, **path}}


class RevisionRequest(BaseModel):
    current_day: dict
    feedback_reason: str


class QAExchange(BaseModel):
    question: str
    answer: str


class ReflectionQuery(BaseModel):
    prior_exchanges: list[QAExchange] = []
    current_question: str


class DailyVerse(NamedTuple):
    verse: str
    reflection: str
