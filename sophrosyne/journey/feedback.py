"""
Star-rating feedback loop.
What it does:
- Records a rating (and optional text) under feedback.<day_id>
- On a low rating, asks the model to revise that single day
- Writes the revised day back into the journey document
- Tracks completed days under completedDays.<n> with the sealed verse and reflection

And, the main purpose:
Let negative feedback regenerate weak content without blocking the user.
"""


import re
from datetime import datetime

from sqlalchemy.ext.asyncio import AsyncSession

from sophrosyne.core.logging import get_logger
from sophrosyne.db.models import JourneyRecord
from sophrosyne.db.repo import dump_json, load_json, update_journey
from sophrosyne.journey.models import RevisionRequest, decode_day
from sophrosyne.journey.selection import iter_days
from sophrosyne.llm.errors import JourneyClientError

log = get_logger("journey.feedback")

_DAY_ID = re.compile(r"^day_(\d+)$")


def parse_day_id(day_id: str) -> int | None:
    m = _DAY_ID.match(day_id or "")
    return int(m.group(1)) if m else None


async def submit_feedback(
    db: AsyncSession,
    client,
    rec: JourneyRecord,
    *,
    user_id: str,
    day_id: str,
    rating: int,
    text: str | None = None,
    low_rating_threshold: int = 3,
) -> dict:
    feedback = load_json(rec.feedback)
    feedback[day_id] = {
        "rating": rating,
        "text": text or "",
        "submittedAt": datetime.utcnow().isoformat(),
        "userId": user_id,
    }
    rec.feedback = dump_json(feedback)
    await update_journey(db, rec)
    log.info(f"Submitted feedback for {day_id} - Rating: {rating}")

    outcome = {"day_id": day_id, "rating": rating, "revision": "not_needed"}
    if rating >= low_rating_threshold:
        return outcome

    log.warning(f"Low rating detected for {day_id}, requesting revision")
    try:
        revised = await revise_from_feedback(db, client, rec, day_id=day_id, rating=rating, text=text)
    except (JourneyClientError, LookupError) as e:
        log.error(f"Error during revision of {day_id}: {e}")
        outcome["revision"] = "failed"
        outcome["error"] = str(e)
        return outcome

    outcome["revision"] = "revised"
    outcome["revised_day"] = revised
    return outcome


async def revise_from_feedback(
    db: AsyncSession,
    client,
    rec: JourneyRecord,
    *,
    day_id: str,
    rating: int,
    text: str | None = None,
) -> dict:
    content = load_json(rec.content)
    path = content.get("path")
    days = path.get("days") if isinstance(path, dict) else None
    if not isinstance(days, list):
        raise LookupError("Could not parse journey data: no path.days")

    day_number = parse_day_id(day_id)
    if day_number is None or not 0 < day_number <= len(days):
        raise LookupError(f"Invalid day number: {day_id}")

    req = RevisionRequest(
        current_day=days[day_number - 1] if isinstance(days[day_number - 1], dict) else {},
        feedback_reason=text or f"Low rating ({rating} stars)",
    )
    revised = await client.revise_day(req.current_day, req.feedback_reason)

    days[day_number - 1] = revised
    rec.content = dump_json(content)
    rec.last_revised = datetime.utcnow()
    rec.revision_reason = req.feedback_reason
    await update_journey(db, rec)
    log.info(f"Successfully revised {day_id}; new title: {revised.get('title', 'N/A')}")
    return revised


async def mark_day_complete(
    db: AsyncSession,
    rec: JourneyRecord,
    day_number: int,
    *,
    user_id: str | None = None,
) -> list[int]:
    raw = dict(iter_days(load_json(rec.content))).get(day_number)
    if raw is None:
        raise LookupError(f"Journey has no day {day_number}")
    day = decode_day(raw)

    completed = load_json(rec.completed_days)
    completed[str(day_number)] = True
    rec.completed_days = dump_json(completed)

    notes = load_json(rec.reflection_notes)
    notes[f"day_{day_number}"] = {
        "verse": day.verse if day else raw.get("verse"),
        "reflection": day.reflection_text if day else None,
        "completedAt": datetime.utcnow().isoformat(),
        "userId": user_id or rec.user_id,
        "dayNumber": day_number,
    }
    rec.reflection_notes = dump_json(notes)
    await update_journey(db, rec)
    log.info(f"Day {day_number} marked complete for journey {rec.id}")
    return completed_day_numbers(rec)


def completed_day_numbers(rec: JourneyRecord) -> list[int]:
    completed = load_json(rec.completed_days)
    return sorted(int(k) for k, v in completed.items() if v is True and k.isdigit())
