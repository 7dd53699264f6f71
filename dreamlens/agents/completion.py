from __future__ import annotations
from typing import Any, Optional, Protocol
import openai
from botocore.exceptions import BotoCoreError, ClientError
from ..shared.errors import UpstreamUnavailable
from ..shared.logging import get_logger
from .dream_analyze import SYSTEM_PROMPT, json_only_system_prompt

log = get_logger(__name__)


class CompletionClient(Protocol):
    model_id: str

    def complete(self, dream_content: str) -> str: ...


class BedrockCompletionClient:
    """One Converse call per dream, JSON constrained through the system prompt."""

    def __init__(self, client: Any, model_id: str, *, temperature: float = 0.7, max_tokens: int = 500):
        self._client = client
        self.model_id = model_id
        self._temperature = temperature
        self._max_tokens = max_tokens
        self._system = json_only_system_prompt()

    def complete(self, dream_content: str) -> str:
        try:
            resp = self._client.converse(
                modelId=self.model_id,
                system=[{"text": self._system}],
                messages=[{"role": "user", "content": [{"text": dream_content}]}],
                inferenceConfig={"maxTokens": self._max_tokens, "temperature": self._temperature},
            )
        except ClientError as e:
            err = e.response.get("Error", {})
            log.error("Bedrock API error", code=err.get("Code"), model=self.model_id)
            raise UpstreamUnavailable(f"Bedrock API error: {err.get('Message') or 'Unknown error'}") from e
        except BotoCoreError as e:
            log.error("Bedrock call failed", error=str(e), model=self.model_id)
            raise UpstreamUnavailable(f"Bedrock API error: {e}") from e

        if resp.get("stopReason") == "max_tokens":
            log.warning("Bedrock completion truncated", model=self.model_id)
        blocks = ((resp.get("output") or {}).get("message") or {}).get("content") or []
        return "".join(b.get("text", "") for b in blocks)


class OpenAICompletionClient:
    """One Chat Completions call per dream with the JSON object response format."""

    def __init__(self, client: openai.OpenAI, model_id: str, *, temperature: float = 0.7, max_tokens: int = 500):
        self._client = client
        self.model_id = model_id
        self._temperature = temperature
        self._max_tokens = max_tokens

    def complete(self, dream_content: str) -> str:
        try:
            resp = self._client.chat.completions.create(
                model=self.model_id,
                messages=[
                    {"role": "system", "content": SYSTEM_PROMPT},
                    {"role": "user", "content": dream_content},
                ],
                response_format={"type": "json_object"},
                temperature=self._temperature,
                max_tokens=self._max_tokens,
            )
        except openai.APIStatusError as e:
            log.error("OpenAI API error", status=e.status_code, model=self.model_id)
            raise UpstreamUnavailable(f"OpenAI API error: {_error_detail(e) or 'Unknown error'}") from e
        except openai.APIError as e:
            log.error("OpenAI call failed", error=str(e), model=self.model_id)
            raise UpstreamUnavailable(f"OpenAI API error: {e.message}") from e

        if not resp.choices:
            return ""
        return resp.choices[0].message.content or ""


def _error_detail(e: openai.APIStatusError) -> Optional[str]:
    body = e.body
    if isinstance(body, dict):
        inner = body.get("error", body)
        if isinstance(inner, dict) and inner.get("message"):
            return str(inner["message"])
    return None
