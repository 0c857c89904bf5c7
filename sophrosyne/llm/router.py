"""
LLM call wrapper and it does:
- Sends journey, revision and reflection prompts to the chat API
- Asks the API for JSON-object output
- Retries journey generation on rate limits (fixed pause, bounded attempts)
- Validates and parses the nested response

Main purpose:
Central interface for all model calls. Holds no state between calls.
"""


import asyncio
import json
from typing import Any, Awaitable, Callable, Mapping, Sequence

import httpx

from sophrosyne.core.config import ClientConfig, mask_api_key
from sophrosyne.core.logging import get_logger
from sophrosyne.journey.models import DailyVerse, JourneyRequest
from sophrosyne.journey.selection import JourneyLike, select_daily_verse
from sophrosyne.llm.errors import (
    ApiError,
    InvalidResponse,
    JsonSerializationFailed,
    MaxRetriesExceeded,
    NetworkError,
    RateLimitExceeded,
)
from sophrosyne.llm.json_parse import (
    RATE_LIMIT_CODE,
    envelope_error,
    extract_content,
    parse_envelope,
    parse_json_object,
    require_journey_shape,
)
from sophrosyne.llm.prompts import journey_prompt, reflection_prompt, revision_prompt

log = get_logger("llm.router")

Sleep = Callable[[float], Awaitable[Any]]


def _safe_snippet(text: str, n: int = 400) -> str:
    return (text or "")[:n].replace("\n", "\\n").replace("\r", "\\r")


class JourneyClient:
    def __init__(
        self,
        config: ClientConfig,
        transport: httpx.AsyncBaseTransport | None = None,
        sleep: Sleep = asyncio.sleep,
    ):
        self.config = config
        self._transport = transport
        self._sleep = sleep

    def _encode(self, prompt: str) -> bytes:
        payload = {
            "model": self.config.model,
            "messages": [{"role": "user", "content": prompt}],
            "response_format": {"type": "json_object"},
        }
        try:
            return json.dumps(payload, ensure_ascii=False).encode("utf-8")
        except (TypeError, ValueError) as e:
            raise JsonSerializationFailed() from e

    async def _post(self, prompt: str, api_key: str | None = None) -> dict:
        """One HTTP exchange. Returns the decoded envelope (pipeline step 1)."""
        key = api_key or self.config.api_key
        body = self._encode(prompt)
        headers = {
            "Authorization": f"Bearer {key}",
            "Content-Type": "application/json",
        }
        timeout = httpx.Timeout(self.config.timeout_seconds, connect=self.config.connect_timeout_seconds)
        log.debug(f"POST {self.config.chat_url} key={mask_api_key(key)}")

        try:
            async with httpx.AsyncClient(timeout=timeout, transport=self._transport) as client:
                r = await client.post(self.config.chat_url, headers=headers, content=body)
        except httpx.HTTPError as e:
            raise NetworkError(e) from e

        if r.status_code == 429:
            raise RateLimitExceeded(f"Grok rate limited (HTTP 429): {_safe_snippet(r.text)}")
        if r.status_code >= 400:
            cause = httpx.HTTPStatusError(
                f"Grok error {r.status_code}: {_safe_snippet(r.text)}", request=r.request, response=r
            )
            raise NetworkError(cause, status_code=r.status_code)

        envelope = parse_envelope(r.content)
        return envelope

    async def _pause(self, attempt: int, reason: str):
        delay = self.config.retry.delay_seconds
        log.warning(f"{reason}. retrying in {delay:.1f}s (attempt {attempt}/{self.config.retry.max_attempts})")
        await self._sleep(delay)

    async def generate_journey(self, goal: str, maturity_level: str, api_key: str | None = None) -> dict:
        """
        Generate a journey and return the parsed content object unchanged.

        Attempts run 1..max_attempts. HTTP 429 or an error envelope with
        code 429 moves to the next attempt after a fixed pause; any other
        failure ends the loop immediately.
        """
        request = JourneyRequest(goal=goal, maturity_level=maturity_level)
        prompt = journey_prompt(request.goal, request.maturity_level, self.config.translation)
        max_attempts = self.config.retry.max_attempts

        attempt = 1
        while True:
            log.info(f"Journey generation attempt {attempt}/{max_attempts}")
            try:
                envelope = await self._post(prompt, api_key)
            except RateLimitExceeded as e:
                if attempt >= max_attempts:
                    log.error(f"Max retries ({max_attempts}) exceeded: {e}")
                    raise MaxRetriesExceeded(attempt, e) from e
                await self._pause(attempt, "HTTP 429 rate limit")
                attempt += 1
                continue

            err = envelope_error(envelope)
            if err is not None:
                code, message = err
                if code == RATE_LIMIT_CODE and attempt < max_attempts:
                    await self._pause(attempt, f"Rate limit error ({code})")
                    attempt += 1
                    continue
                log.error(f"Grok API error {code} on attempt {attempt}: {message}")
                raise ApiError(message, code=code)

            content = extract_content(envelope)
            log.info(f"Content extracted: {_safe_snippet(content, 200)}")
            return require_journey_shape(parse_json_object(content))

    @staticmethod
    def select_daily_verse(journey: JourneyLike, day_index: int) -> DailyVerse:
        return select_daily_verse(journey, day_index)

    async def revise_day(self, current_day: Mapping[str, Any], feedback_reason: str) -> dict:
        """Single attempt; the revised day must carry a title and a verse."""
        log.info(f"Revising day based on feedback: {_safe_snippet(feedback_reason, 200)}")
        envelope = await self._post(revision_prompt(current_day, feedback_reason, self.config.translation))
        err = envelope_error(envelope)
        if err is not None:
            log.warning(f"Revision returned API error {err[0]}: {err[1]}")

        revised = parse_json_object(extract_content(envelope))
        title, verse = revised.get("title"), revised.get("verse")
        if not isinstance(title, str) or not title.strip() or not isinstance(verse, str) or not verse.strip():
            log.error(f"Invalid revised day structure: keys={sorted(revised)}")
            raise InvalidResponse("Revised day must have a non-empty title and verse")

        log.info(f"Day successfully revised - Title: {title}")
        return revised

    async def ask_reflection(self, prior_exchanges: Sequence[Mapping[str, Any]], question: str) -> str:
        """Single attempt; returns the raw answer text."""
        log.info(f"Processing Q&A reflection request ({len(prior_exchanges)} prior)")
        envelope = await self._post(reflection_prompt(prior_exchanges, question))
        return extract_content(envelope)
