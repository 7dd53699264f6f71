from __future__ import annotations
import json
from typing import Any, Dict
from pydantic import ValidationError
from ..shared.errors import IncompleteAIResponse, MalformedAIResponse
from ..shared.models import AnalysisResult

PROMPT_VERSION = "2024-11-dream-analyst-v1"

SYSTEM_PROMPT = r"""
ROLE
You are an empathetic and insightful dream analyst utilizing Jungian psychology and modern symbolism.

INPUT
The user's dream description.

OUTPUT FORMAT (STRICT)
Return ONE JSON object with EXACT keys:
{
  "title": "A short, creative title for the dream",
  "interpretation": "A 3-4 sentence psychological analysis of what the dream might mean regarding the user's waking life.",
  "mood": "One word describing the emotional tone (e.g., Anxious, Peaceful, Confusing)",
  "keywords": ["tag1", "tag2", "tag3"]
}

JSON ONLY
- Do not include markdown formatting like ```json. Return only the raw JSON.
"""

_JSON_SCHEMA: Dict[str, Any] = {
    "type": "object",
    "properties": {
        "title": {"type": "string"},
        "interpretation": {"type": "string"},
        "mood": {"type": "string"},
        "keywords": {"type": "array", "items": {"type": "string"}},
    },
    "required": ["title", "interpretation", "mood", "keywords"],
}

def json_only_system_prompt() -> str:
    """System prompt for providers without a JSON response mode."""
    return (
        SYSTEM_PROMPT
        + "\nReturn ONLY a single valid JSON object, with no additional text."
        + "\nSchema: " + json.dumps(_JSON_SCHEMA, ensure_ascii=False)
    )

def normalize_analysis(raw: Any) -> AnalysisResult:
    """Parses completion text into an AnalysisResult, never trusting the instructed shape."""
    try:
        data = json.loads(raw)
    except (TypeError, ValueError, RecursionError) as e:
        raise MalformedAIResponse() from e
    if not isinstance(data, dict):
        raise MalformedAIResponse()

    try:
        return AnalysisResult.model_validate(data)
    except ValidationError as e:
        fields = sorted({str(err["loc"][0]) for err in e.errors() if err.get("loc")})
        raise IncompleteAIResponse(
            f"AI response missing required fields: {', '.join(fields)}" if fields else None
        ) from e
