"""
Reminder payloads for the push/local notification collaborator.
Only the payloads are built here; delivery belongs to the device.
"""

from datetime import datetime, timedelta

from sophrosyne.journey.selection import JourneyLike, upcoming_verses

REMINDER_TITLE = "Daily Grace"
NEXT_DAY_BODY = "Your next reflection awaits. Return when you're ready."


def daily_reminders(journey: JourneyLike, hour: int = 8, limit: int = 7) -> list[dict]:
    return [
        {
            "identifier": f"daily-verse-{i + 1}",
            "title": REMINDER_TITLE,
            "body": v["verse"],
            "userInfo": {"reflection": v["reflection"]},
            "hour": hour,
            "minute": 0,
            "repeats": True,
        }
        for i, v in enumerate(upcoming_verses(journey, limit=limit))
    ]


def next_day_reminder(day_number: int, now: datetime, hour: int = 8) -> dict:
    fire_at = (now + timedelta(days=1)).replace(hour=hour, minute=0, second=0, microsecond=0)
    return {
        "identifier": f"next_reflection_day_{day_number + 1}",
        "title": REMINDER_TITLE,
        "body": NEXT_DAY_BODY,
        "fire_at": fire_at.isoformat(),
        "repeats": False,
    }
