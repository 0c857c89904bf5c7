# sophrosyne/db/repo.py

import json
from typing import Any

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from sophrosyne.db.models import JourneyRecord, QAEntry


def dump_json(value: Any) -> str:
    """
    SQLite cannot bind dict/list directly into TEXT parameters.
    Journey documents are stored as JSON strings.
    """
    return json.dumps(value if value is not None else {}, ensure_ascii=False)


def load_json(text: str | None) -> dict:
    if not text:
        return {}
    value = json.loads(text)
    return value if isinstance(value, dict) else {}


async def create_journey(db: AsyncSession, rec: JourneyRecord) -> JourneyRecord:
    db.add(rec)
    await db.commit()
    await db.refresh(rec)
    return rec


async def get_journey(db: AsyncSession, journey_id: str) -> JourneyRecord | None:
    res = await db.execute(select(JourneyRecord).where(JourneyRecord.id == journey_id))
    return res.scalar_one_or_none()


async def list_journeys(db: AsyncSession, user_id: str) -> list[JourneyRecord]:
    res = await db.execute(
        select(JourneyRecord)
        .where(JourneyRecord.user_id == user_id)
        .order_by(JourneyRecord.created_at.desc())
    )
    return list(res.scalars().all())


async def update_journey(db: AsyncSession, rec: JourneyRecord) -> JourneyRecord:
    db.add(rec)
    await db.commit()
    await db.refresh(rec)
    return rec


async def add_qa(db: AsyncSession, entry: QAEntry) -> QAEntry:
    db.add(entry)
    await db.commit()
    await db.refresh(entry)
    return entry


async def list_qa(db: AsyncSession, user_id: str, day_number: int) -> list[QAEntry]:
    res = await db.execute(
        select(QAEntry)
        .where(QAEntry.user_id == user_id, QAEntry.day_number == day_number)
        .order_by(QAEntry.created_at)
    )
    return list(res.scalars().all())
