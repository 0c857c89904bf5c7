"""
Shared fixtures for the test suite.

The chat API is faked with httpx.MockTransport; retry pauses are recorded
instead of slept so the suite stays fast.
"""
import json

import httpx
import pytest

from sophrosyne.core.config import ClientConfig, RetryPolicy
from sophrosyne.llm.router import JourneyClient


def envelope(content) -> dict:
    if not isinstance(content, str):
        content = json.dumps(content)
    return {"choices": [{"message": {"role": "assistant", "content": content}}]}


def rate_limit_envelope(message="Rate limit reached") -> dict:
    return {"error": {"code": 429, "message": message}}


class FakeUpstream:
    """Replays queued responses in order; the last one repeats."""

    def __init__(self, *responses):
        self.responses = list(responses)
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        item = self.responses.pop(0) if len(self.responses) > 1 else self.responses[0]
        if isinstance(item, Exception):
            raise item
        if isinstance(item, httpx.Response):
            return item
        return httpx.Response(200, json=item)

    def bodies(self) -> list[dict]:
        return [json.loads(r.content) for r in self.requests]


class SleepRecorder:
    def __init__(self):
        self.calls: list[float] = []

    async def __call__(self, delay: float):
        self.calls.append(delay)


FLAT_JOURNEY = {
    "path": {
        "days": [
            {
                "title": "Day 1: Peace",
                "verse": "John 14:27 (ESV) - Peace I leave with you; my peace I give to you.",
                "devotional": {
                    "context": "Jesus speaks to his disciples on the night before the cross.",
                    "meaning": "His peace is a gift, not a wage.",
                    "qaPrompt": "Where do you need His peace today?",
                },
            },
            {
                "title": "Day 2: Rest",
                "verse": "Psalm 62:1 (ESV) - For God alone my soul waits in silence.",
                "devotional": {
                    "context": "A psalm of David.",
                    "meaning": "Waiting on God is itself a form of rest.",
                    "qaPrompt": "What would silence before God look like?",
                },
            },
        ]
    }
}


def legacy_journey(week_sizes) -> dict:
    weeks = []
    for w, size in enumerate(week_sizes):
        weeks.append({
            "title": f"Week {w + 1}",
            "days": [
                {"verse": f"Verse w{w + 1}d{d + 1}", "reflection": f"Reflection w{w + 1}d{d + 1}"}
                for d in range(size)
            ],
        })
    return {"path": {"weeks": weeks}}


@pytest.fixture
def sleeper():
    return SleepRecorder()


@pytest.fixture
def make_client(sleeper):
    def _make(upstream: FakeUpstream, max_attempts: int = 3, delay: float = 1.0) -> JourneyClient:
        config = ClientConfig(
            api_key="xai-test-key-1234",
            base_url="https://api.x.ai/v1",
            retry=RetryPolicy(max_attempts=max_attempts, delay_seconds=delay),
        )
        return JourneyClient(config, transport=httpx.MockTransport(upstream), sleep=sleeper)
    return _make


@pytest.fixture
def db_runner(tmp_path):
    """Run `fn(db)` against a fresh SQLite database inside one event loop."""
    import asyncio

    from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine
    from sqlalchemy.pool import NullPool

    from sophrosyne.db.session import init_db

    def _run(fn):
        async def _go():
            engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}", poolclass=NullPool)
            await init_db(engine)
            session_factory = async_sessionmaker(engine, expire_on_commit=False)
            try:
                async with session_factory() as db:
                    return await fn(db)
            finally:
                await engine.dispose()
        return asyncio.run(_go())
    return _run
