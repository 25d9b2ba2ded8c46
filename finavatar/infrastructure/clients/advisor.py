"""Generative AI advisor client with exponential backoff retry logic"""

import asyncio
import logging
from typing import List, Optional
import httpx
from finavatar.config import settings
from finavatar.domain.analytics import calculate_financial_analytics
from finavatar.domain.exceptions import AdvisorAPIError
from finavatar.domain.models import Habit
from finavatar.domain.prompts import (
    build_coaching_prompt,
    build_question_prompt,
    build_recommendation_prompt,
    build_voice_prompt,
)
from finavatar.domain.recommendations import (
    Recommendation,
    VoiceAnalysis,
    parse_recommendations,
    parse_voice_analysis,
)
from finavatar.infrastructure.observability.metrics import advisor_latency_histogram, advisor_failure_counter

logger = logging.getLogger(__name__)

RETRYABLE_STATUS = {429, 500, 502, 503, 504}


class AdvisorClient:
    """Client for the Gemini generateContent API"""

    def __init__(
        self,
        base_url: str | None = None,
        api_key: str | None = None,
        model: str | None = None,
        timeout: float | None = None,
        max_retries: int | None = None,
        backoff_base: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.base_url = (base_url or settings.advisor_api_base).rstrip("/")
        self.api_key = api_key if api_key is not None else settings.advisor_api_key
        self.model = model or settings.advisor_model
        self.timeout = timeout or settings.http_timeout_seconds
        self.max_retries = max_retries if max_retries is not None else settings.advisor_max_retries
        self.backoff_base = backoff_base if backoff_base is not None else settings.advisor_backoff_base
        self._transport = transport

    async def generate_text(self, prompt: str) -> str:
        """
        Send a single-turn prompt and return the reply text.

        Retry strategy:
        - Exponential backoff: base, 2*base, 4*base ... (base * 2^(attempt-1))
        - Retries on 429/5xx responses and network failures
        - Other 4xx responses fail immediately

        Raises:
            AdvisorAPIError: Missing API key, exhausted retries, or a reply without text
        """
        if not self.api_key:
            raise AdvisorAPIError("Advisor API key is not configured")

        url = f"{self.base_url}/v1beta/models/{self.model}:generateContent"
        body = {"contents": [{"role": "user", "parts": [{"text": prompt}]}]}
        headers = {"x-goog-api-key": self.api_key}

        attempt = 0
        async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
            while True:
                try:
                    with advisor_latency_histogram.time():
                        response = await client.post(url, json=body, headers=headers)
                        response.raise_for_status()
                    return self._extract_text(response.json())

                except httpx.HTTPStatusError as e:
                    status = e.response.status_code
                    if status not in RETRYABLE_STATUS:
                        advisor_failure_counter.inc()
                        raise AdvisorAPIError(f"Advisor API error: {status}") from e
                    failure = e
                except httpx.RequestError as e:
                    failure = e
                except ValueError as e:
                    advisor_failure_counter.inc()
                    raise AdvisorAPIError("Advisor API returned a non-JSON body") from e

                attempt += 1
                advisor_failure_counter.inc()
                if attempt >= self.max_retries:
                    raise AdvisorAPIError(f"Advisor API unavailable after {attempt} attempts: {failure}") from failure

                backoff = self.backoff_base * (2 ** (attempt - 1))
                logger.warning("Advisor request failed (%s), retrying in %.1fs", failure, backoff)
                await asyncio.sleep(backoff)

    @staticmethod
    def _extract_text(payload: dict) -> str:
        try:
            parts = payload["candidates"][0]["content"]["parts"]
            return "".join(part.get("text", "") for part in parts)
        except (KeyError, IndexError, TypeError) as e:
            raise AdvisorAPIError("Advisor reply had no candidates") from e

    async def generate_recommendations(
        self,
        habits: List[Habit],
        monthly_income: float,
        monthly_expenses: float,
        financial_goals: Optional[str] = None,
    ) -> List[Recommendation]:
        """Ask for recommendations; an unusable reply gives an empty list"""
        analytics = calculate_financial_analytics(habits, monthly_income, monthly_expenses)
        prompt = build_recommendation_prompt(habits, monthly_income, monthly_expenses, analytics, financial_goals)
        return parse_recommendations(await self.generate_text(prompt))

    async def analyze_voice_transcript(
        self,
        transcript: str,
        monthly_income: Optional[float] = None,
        monthly_expenses: Optional[float] = None,
        recent_habits: Optional[List[Habit]] = None,
    ) -> VoiceAnalysis:
        prompt = build_voice_prompt(transcript, monthly_income, monthly_expenses, recent_habits)
        return parse_voice_analysis(await self.generate_text(prompt))

    async def answer_question(
        self,
        question: str,
        monthly_income: Optional[float] = None,
        monthly_expenses: Optional[float] = None,
        habit_count: Optional[int] = None,
    ) -> str:
        prompt = build_question_prompt(question, monthly_income, monthly_expenses, habit_count)
        return (await self.generate_text(prompt)).strip()

    async def coaching_tip(self, habits: List[Habit]) -> str:
        return (await self.generate_text(build_coaching_prompt(habits))).strip()
