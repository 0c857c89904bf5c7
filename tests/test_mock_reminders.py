"""Tests for the sample-journey fallback and reminder payloads."""
import asyncio
from datetime import datetime

import httpx

from conftest import FLAT_JOURNEY, FakeUpstream, envelope, legacy_journey
from sophrosyne.journey.mock import generate_journey_or_mock, generate_mock_journey
from sophrosyne.journey.models import Journey, JourneyFormat
from sophrosyne.journey.reminders import daily_reminders, next_day_reminder
from sophrosyne.journey.selection import FALLBACK_VERSE, select_daily_verse


def test_mock_journey_is_a_valid_seven_day_journey():
    mock = generate_mock_journey("anxiety", "Beginner")
    j = Journey.from_content(mock)
    assert j.format is JourneyFormat.DAYS
    assert j.day_count == 7
    assert all(d is not None for d in j.days)
    assert "anxiety" in mock["path"]["days"][0]["devotional"]["meaning"]
    assert "Beginner" in mock["path"]["days"][6]["devotional"]["meaning"]
    assert select_daily_verse(mock, 6) != FALLBACK_VERSE


def test_live_result_used_when_generation_succeeds(make_client):
    client = make_client(FakeUpstream(envelope(FLAT_JOURNEY)))
    content, used_fallback = asyncio.run(generate_journey_or_mock(client, "Anxiety", "Beginner"))
    assert content == FLAT_JOURNEY
    assert used_fallback is False


def test_falls_back_when_generation_fails(make_client):
    upstream = FakeUpstream(httpx.Response(401, text="bad key"))
    content, used_fallback = asyncio.run(generate_journey_or_mock(make_client(upstream), "Grief", "hope"))
    assert used_fallback is True
    assert content == generate_mock_journey("Grief", "hope")


def test_mock_provider_skips_upstream(make_client):
    upstream = FakeUpstream(envelope(FLAT_JOURNEY))
    content, used_fallback = asyncio.run(
        generate_journey_or_mock(make_client(upstream), "Grief", "hope", provider="mock")
    )
    assert used_fallback is True
    assert upstream.requests == []


def test_daily_reminders():
    reminders = daily_reminders(legacy_journey([7, 7]), hour=8, limit=7)
    assert len(reminders) == 7
    first = reminders[0]
    assert first["identifier"] == "daily-verse-1"
    assert first["title"] == "Daily Grace"
    assert first["body"] == "Verse w1d1"
    assert first["userInfo"] == {"reflection": "Reflection w1d1"}
    assert (first["hour"], first["minute"], first["repeats"]) == (8, 0, True)


def test_next_day_reminder_fires_tomorrow_morning():
    r = next_day_reminder(3, datetime(2025, 12, 31, 21, 45), hour=8)
    assert r["identifier"] == "next_reflection_day_4"
    assert r["fire_at"] == "2026-01-01T08:00:00"
    assert r["repeats"] is False
