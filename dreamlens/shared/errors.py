from __future__ import annotations
from typing import Dict, Optional


class AnalysisError(Exception):
    """Base for every failure the analysis boundary turns into a JSON error envelope."""

    status_code: int = 500
    default_message: str = "Internal server error"

    def __init__(self, message: Optional[str] = None):
        self.message = message or self.default_message
        super().__init__(self.message)

    @property
    def kind(self) -> str:
        return type(self).__name__

    def to_body(self) -> Dict[str, str]:
        return {"error": self.message}


class InvalidInput(AnalysisError):
    status_code = 400
    default_message = "dreamContent is required and must be a string"


class MissingCredential(AnalysisError):
    status_code = 401
    default_message = "Missing authorization header"


class Unauthorized(AnalysisError):
    status_code = 401
    default_message = "Unauthorized - Invalid token"


class UpstreamUnavailable(AnalysisError):
    default_message = "AI provider unavailable"


class MalformedAIResponse(AnalysisError):
    default_message = "Invalid JSON response from AI"


class IncompleteAIResponse(AnalysisError):
    default_message = "AI response missing required fields"
