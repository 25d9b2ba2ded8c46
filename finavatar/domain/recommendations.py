"""Tolerant parsing of generative AI replies into typed records"""

import json
import logging
import re
import uuid
from typing import Any, Dict, List, Literal, Optional
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator
from pydantic.alias_generators import to_camel

logger = logging.getLogger(__name__)

NEUTRAL_SCORE = 5.0
FALLBACK_RESPONSE = "I didn't understand that. Could you please rephrase?"

Priority = Literal["low", "medium", "high"]
Intent = Literal["expense", "income", "question", "budget", "savings", "unknown"]

_JSON_OBJECT = re.compile(r"\{.*\}", re.DOTALL)


class _ReplyModel(BaseModel):
    """Accepts camelCase keys from the AI reply and snake_case from our own code"""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


def _optional_float(value: Any) -> Optional[float]:
    if value is None or isinstance(value, bool):
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


class Recommendation(_ReplyModel):
    """One budgeting recommendation; enhanced fields default to neutral values"""

    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    title: str
    description: str = ""
    category: str = "budgeting"
    priority: Priority = "medium"
    estimated_savings: Optional[float] = None
    timeframe: str = "1 month"
    impact_score: float = NEUTRAL_SCORE
    feasibility_score: float = NEUTRAL_SCORE
    urgency_score: float = NEUTRAL_SCORE
    related_habits: List[str] = Field(default_factory=list)
    implementation_steps: List[str] = Field(default_factory=list)
    monthly_impact: Optional[float] = None

    @field_validator("id", mode="before")
    @classmethod
    def _id_as_string(cls, value: Any) -> Any:
        if value is None or value == "":
            return str(uuid.uuid4())
        return str(value)

    @field_validator("priority", mode="before")
    @classmethod
    def _known_priority(cls, value: Any) -> str:
        value = str(value).lower() if value is not None else ""
        return value if value in ("low", "medium", "high") else "medium"

    @field_validator("description", "category", "timeframe", mode="before")
    @classmethod
    def _text_or_default(cls, value: Any, info) -> Any:
        if value is None:
            return cls.model_fields[info.field_name].default
        return value

    @field_validator("estimated_savings", "monthly_impact", mode="before")
    @classmethod
    def _lenient_amount(cls, value: Any) -> Optional[float]:
        return _optional_float(value)

    @field_validator("impact_score", "feasibility_score", "urgency_score", mode="before")
    @classmethod
    def _score_in_range(cls, value: Any) -> float:
        number = _optional_float(value)
        if number is None:
            return NEUTRAL_SCORE
        return max(1.0, min(10.0, number))

    @field_validator("related_habits", "implementation_steps", mode="before")
    @classmethod
    def _list_or_empty(cls, value: Any) -> Any:
        if value is None:
            return []
        if isinstance(value, str):
            return [value]
        return value


class ExtractedData(_ReplyModel):
    """Financial details pulled out of a voice transcript"""

    amount: Optional[float] = None
    category: Optional[str] = None
    description: Optional[str] = None
    date: Optional[str] = None
    merchant: Optional[str] = None
    payment_method: Optional[str] = None

    @field_validator("amount", mode="before")
    @classmethod
    def _lenient_amount(cls, value: Any) -> Optional[float]:
        return _optional_float(value)


class VoiceAnalysis(_ReplyModel):
    """Intent and data extracted from a spoken request"""

    intent: Intent = "unknown"
    confidence: float = 0.5
    extracted_data: ExtractedData = Field(default_factory=ExtractedData)
    response: str = FALLBACK_RESPONSE
    follow_up_questions: List[str] = Field(default_factory=list)
    suggested_actions: List[str] = Field(default_factory=list)

    @field_validator("intent", mode="before")
    @classmethod
    def _known_intent(cls, value: Any) -> str:
        value = str(value).lower() if value is not None else ""
        return value if value in ("expense", "income", "question", "budget", "savings") else "unknown"

    @field_validator("confidence", mode="before")
    @classmethod
    def _confidence_in_range(cls, value: Any) -> float:
        number = _optional_float(value)
        if number is None:
            return 0.5
        return max(0.0, min(1.0, number))

    @field_validator("extracted_data", mode="before")
    @classmethod
    def _data_or_empty(cls, value: Any) -> Any:
        return value if isinstance(value, dict) else {}

    @field_validator("response", mode="before")
    @classmethod
    def _response_or_fallback(cls, value: Any) -> Any:
        return value if value else FALLBACK_RESPONSE

    @field_validator("follow_up_questions", "suggested_actions", mode="before")
    @classmethod
    def _list_or_empty(cls, value: Any) -> Any:
        return value if isinstance(value, list) else []


def unrecognized_voice_analysis(response: str = FALLBACK_RESPONSE) -> VoiceAnalysis:
    """Fallback used when a transcript could not be analyzed at all"""
    return VoiceAnalysis(intent="unknown", confidence=0.0, response=response)


def extract_json_object(text: str) -> Optional[Dict[str, Any]]:
    """
    Pull the outermost {...} block out of free text and parse it.

    Returns None when no block is found, the JSON is malformed, or the
    parsed value is not an object.
    """
    if not text:
        return None

    match = _JSON_OBJECT.search(text)
    if not match:
        return None

    try:
        parsed = json.loads(match.group(0))
    except ValueError:
        logger.warning("AI reply contained malformed JSON")
        return None

    return parsed if isinstance(parsed, dict) else None


def parse_recommendations(text: str) -> List[Recommendation]:
    """
    Read the `recommendations` array from an AI reply.

    Never raises: missing JSON, malformed JSON and a missing or empty
    array all give an empty list. Items that fail validation are skipped.
    """
    payload = extract_json_object(text)
    if payload is None:
        return []

    items = payload.get("recommendations")
    if not isinstance(items, list):
        return []

    recommendations = []
    for item in items:
        if not isinstance(item, dict):
            continue
        try:
            recommendations.append(Recommendation.model_validate(item))
        except ValidationError as e:
            logger.warning("Skipping invalid recommendation: %s", e.errors()[0].get("msg"))

    return recommendations


def parse_voice_analysis(text: str) -> VoiceAnalysis:
    """Read a voice analysis object from an AI reply, falling back to 'unknown'"""
    payload = extract_json_object(text)
    if payload is None:
        return unrecognized_voice_analysis()

    try:
        return VoiceAnalysis.model_validate(payload)
    except ValidationError:
        logger.warning("AI voice analysis did not match the expected shape")
        return unrecognized_voice_analysis()


def habit_from_voice(analysis: VoiceAnalysis, transcript: str) -> Optional[Dict[str, Any]]:
    """
    Fields for a habit recorded from a spoken expense.

    Only expense intents with an extracted positive amount produce a habit;
    voice-recorded habits are one-off daily entries.
    """
    data = analysis.extracted_data
    if analysis.intent != "expense" or not data.amount or data.amount <= 0:
        return None

    return {
        "category": data.category or "General",
        "amount": data.amount,
        "frequency": "daily",
        "description": data.description or transcript,
        "is_recurring": False,
    }
