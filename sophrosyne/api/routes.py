from datetime import datetime

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from sophrosyne.api.types import FeedbackRequest, ReflectionRequest, StartJourneyRequest, UserRequest
from sophrosyne.core.config import client_config_from_settings, settings
from sophrosyne.core.ids import new_id
from sophrosyne.db.models import JourneyRecord, QAEntry
from sophrosyne.db.repo import add_qa, create_journey, dump_json, get_journey, list_journeys, list_qa, load_json
from sophrosyne.db.session import get_db
from sophrosyne.journey.feedback import completed_day_numbers, mark_day_complete, submit_feedback
from sophrosyne.journey.mock import generate_journey_or_mock
from sophrosyne.journey.models import Journey, JourneyRequest, QAExchange, ReflectionQuery
from sophrosyne.journey.reminders import daily_reminders, next_day_reminder
from sophrosyne.journey.selection import FALLBACK_VERSE, select_daily_verse
from sophrosyne.llm.errors import JourneyClientError
from sophrosyne.llm.router import JourneyClient


"""
FastAPI routes for the journey service.
What it provides:
- Generate + store a journey (sample journey on upstream failure)
- Fetch journeys, daily verse, reminders
- Day completion and star-rating feedback
- Reflection Q&A

And, the main purpose:
Expose journey functionality over HTTP.
"""

router = APIRouter()


def get_journey_client() -> JourneyClient:
    return JourneyClient(client_config_from_settings(settings))


async def _owned_journey(db: AsyncSession, journey_id: str, user_id: str) -> JourneyRecord:
    rec = await get_journey(db, journey_id)
    if not rec:
        raise HTTPException(404, "journey not found")
    if rec.user_id != user_id:
        raise HTTPException(403, "user mismatch")
    return rec


def _journey_view(rec: JourneyRecord) -> dict:
    content = load_json(rec.content)
    try:
        normalized = Journey.from_content(content)
        fmt, day_count = normalized.format.value, normalized.day_count
    except JourneyClientError:
        fmt, day_count = None, 0
    return {
        "journey_id": rec.id,
        "goal": rec.goal,
        "maturity": rec.maturity,
        "format": fmt,
        "day_count": day_count,
        "content": content,
        "used_fallback": rec.used_fallback,
        "feedback": load_json(rec.feedback),
        "completed_days": completed_day_numbers(rec),
        "reflection_notes": load_json(rec.reflection_notes),
        "last_revised": rec.last_revised.isoformat() if rec.last_revised else None,
        "revision_reason": rec.revision_reason,
        "created_at": rec.created_at.isoformat() if rec.created_at else None,
    }


@router.post("/journeys")
async def api_start_journey(
    req: StartJourneyRequest,
    db: AsyncSession = Depends(get_db),
    client: JourneyClient = Depends(get_journey_client),
):
    maturity = req.maturity_level.strip() or "Intermediate"
    try:
        jr = JourneyRequest(goal=req.goal, maturity_level=maturity)
    except ValueError:
        raise HTTPException(400, "goal must not be empty")

    content, used_fallback = await generate_journey_or_mock(
        client, jr.goal, jr.maturity_level, provider=settings.LLM_PROVIDER
    )
    rec = JourneyRecord(
        id=new_id("journey"),
        user_id=req.user_id,
        goal=jr.goal,
        maturity=jr.maturity_level,
        content=dump_json(content),
        used_fallback=used_fallback,
    )
    await create_journey(db, rec)
    return {"journey_id": rec.id, "goal": rec.goal, "content": content, "used_fallback": used_fallback}


@router.get("/journeys")
async def api_list_journeys(user_id: str, db: AsyncSession = Depends(get_db)):
    return [_journey_view(rec) for rec in await list_journeys(db, user_id)]


@router.get("/journeys/{journey_id}")
async def api_get_journey(journey_id: str, user_id: str, db: AsyncSession = Depends(get_db)):
    rec = await _owned_journey(db, journey_id, user_id)
    return _journey_view(rec)


@router.get("/journeys/{journey_id}/verse")
async def api_daily_verse(journey_id: str, user_id: str, day_index: int = 0, db: AsyncSession = Depends(get_db)):
    rec = await _owned_journey(db, journey_id, user_id)
    verse = select_daily_verse(load_json(rec.content), day_index)
    return {
        "day_index": day_index,
        "verse": verse.verse,
        "reflection": verse.reflection,
        "fallback": verse == FALLBACK_VERSE,
    }


@router.get("/journeys/{journey_id}/reminders")
async def api_reminders(journey_id: str, user_id: str, db: AsyncSession = Depends(get_db)):
    rec = await _owned_journey(db, journey_id, user_id)
    return daily_reminders(
        load_json(rec.content), hour=settings.REMINDER_HOUR, limit=settings.UPCOMING_VERSE_LIMIT
    )


@router.post("/journeys/{journey_id}/days/{day_number}/complete")
async def api_complete_day(journey_id: str, day_number: int, req: UserRequest, db: AsyncSession = Depends(get_db)):
    if day_number < 1:
        raise HTTPException(400, "day_number must be >= 1")
    rec = await _owned_journey(db, journey_id, req.user_id)
    try:
        completed = await mark_day_complete(db, rec, day_number, user_id=req.user_id)
    except LookupError as e:
        raise HTTPException(400, str(e))
    return {
        "journey_id": journey_id,
        "completed_days": completed,
        "next_reminder": next_day_reminder(day_number, datetime.now(), hour=settings.REMINDER_HOUR),
    }


@router.post("/journeys/{journey_id}/feedback")
async def api_feedback(
    journey_id: str,
    req: FeedbackRequest,
    db: AsyncSession = Depends(get_db),
    client: JourneyClient = Depends(get_journey_client),
):
    rec = await _owned_journey(db, journey_id, req.user_id)
    outcome = await submit_feedback(
        db,
        client,
        rec,
        user_id=req.user_id,
        day_id=req.day_id,
        rating=req.rating,
        text=req.text,
        low_rating_threshold=settings.LOW_RATING_THRESHOLD,
    )
    return {"ok": True, **outcome}


@router.post("/reflections")
async def api_reflection(
    req: ReflectionRequest,
    db: AsyncSession = Depends(get_db),
    client: JourneyClient = Depends(get_journey_client),
):
    if not req.question.strip():
        raise HTTPException(400, "question required")

    chain = await list_qa(db, req.user_id, req.day_number)
    query = ReflectionQuery(
        prior_exchanges=[QAExchange(question=e.question, answer=e.answer) for e in chain],
        current_question=req.question,
    )
    try:
        answer = await client.ask_reflection(
            [e.model_dump() for e in query.prior_exchanges], query.current_question
        )
    except JourneyClientError as e:
        raise HTTPException(502, str(e))

    await add_qa(db, QAEntry(
        id=new_id("qa"),
        user_id=req.user_id,
        day_number=req.day_number,
        question=query.current_question,
        answer=answer,
    ))
    return {"answer": answer, "exchanges": len(chain) + 1}
