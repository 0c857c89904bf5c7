"""
Daily verse lookup over a generated journey.
What it does:
- Normalizes the stored content once (flat days or legacy weeks)
- Walks weeks in order to find the requested day
- Substitutes a fixed verse/reflection pair on any structural anomaly

And, the main purpose:
Never block the user's daily verse because of a malformed journey.
The fallback masks data problems, so every substitution is logged.
"""


from typing import Any, Iterator, Mapping

from sophrosyne.core.logging import get_logger
from sophrosyne.journey.models import DailyVerse, Journey, JourneyFormat
from sophrosyne.llm.errors import JourneyClientError

log = get_logger("journey.selection")

FALLBACK_VERSE = DailyVerse(
    verse="Psalm 23:1 - The Lord is my shepherd; I shall not want.",
    reflection="Even when the path is unclear, trust in His guidance and provision.",
)

JourneyLike = Journey | Mapping[str, Any]


def _normalize(journey: JourneyLike) -> Journey:
    if isinstance(journey, Journey):
        return journey
    return Journey.from_content(journey)


def select_daily_verse(journey: JourneyLike, day_index: int) -> DailyVerse:
    try:
        normalized = _normalize(journey)
    except JourneyClientError as e:
        log.warning(f"Invalid journey structure ({e}); using fallback verse")
        return FALLBACK_VERSE

    if day_index < 0:
        log.warning(f"Negative day index {day_index}; using fallback verse")
        return FALLBACK_VERSE

    remaining = day_index
    for week in normalized.weeks:
        if remaining < len(week.days):
            day = week.days[remaining]
            if day is None:
                log.warning(f"Invalid day structure at index {day_index}; using fallback verse")
                return FALLBACK_VERSE
            verse = day.verse
            reflection = day.reflection_text
            if not verse.strip() or not reflection or not reflection.strip():
                log.warning(f"Empty verse or reflection at day {day_index}; using fallback verse")
                return FALLBACK_VERSE
            return DailyVerse(verse=verse, reflection=reflection)
        remaining -= len(week.days)

    log.warning(f"Day index {day_index} exceeds available days ({normalized.day_count})")
    return FALLBACK_VERSE


def iter_days(journey: JourneyLike) -> Iterator[tuple[int, Mapping[str, Any]]]:
    """
    Yield (day_number, raw day) pairs, 1-based.
    Legacy journeys number days as week_index * 7 + day_index + 1.
    """
    if isinstance(journey, Journey):
        journey = journey.to_content()
    path = journey.get("path") if isinstance(journey, Mapping) else None
    if not isinstance(path, Mapping):
        return
    days = path.get("days")
    if isinstance(days, list):
        for i, day in enumerate(days):
            if isinstance(day, Mapping):
                yield i + 1, day
        return
    weeks = path.get("weeks")
    if isinstance(weeks, list):
        for wi, week in enumerate(weeks):
            if not isinstance(week, Mapping) or not isinstance(week.get("days"), list):
                continue
            for di, day in enumerate(week["days"]):
                if isinstance(day, Mapping):
                    yield wi * 7 + di + 1, day


def upcoming_verses(journey: JourneyLike, limit: int = 7) -> list[dict]:
    out = []
    try:
        normalized = _normalize(journey)
    except JourneyClientError:
        return out
    legacy = normalized.format is JourneyFormat.WEEKS
    for wi, week in enumerate(normalized.weeks):
        for di, day in enumerate(week.days):
            if len(out) >= limit:
                return out
            if day is None or not isinstance(day.reflection_text, str):
                continue
            out.append({
                "id": f"{wi}-{di}",
                "verse": day.verse,
                "reflection": day.reflection_text,
                "week_number": wi + 1 if legacy else None,
                "day_number": di + 1,
            })
    return out
