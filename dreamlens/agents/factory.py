from __future__ import annotations
from dataclasses import dataclass
from typing import Optional
import httpx
import openai
from ..shared.aws import bedrock_runtime
from ..shared.config import Settings
from .completion import BedrockCompletionClient, CompletionClient, OpenAICompletionClient

@dataclass
class CompletionOptions:
    temperature: float = 0.7
    max_tokens: int = 500
    timeout_s: float = 25.0
    connect_timeout_s: float = 5.0

def _options(settings: Settings) -> CompletionOptions:
    return CompletionOptions(
        temperature=settings.llm_temperature,
        max_tokens=settings.llm_max_tokens,
        timeout_s=settings.llm_timeout_seconds,
        connect_timeout_s=settings.llm_connect_timeout_seconds,
    )

def _mk_openai(settings: Settings, opts: CompletionOptions) -> openai.OpenAI:
    if not settings.openai_api_key:
        raise ValueError("OPENAI_API_KEY not configured")
    return openai.OpenAI(
        api_key=settings.openai_api_key,
        base_url=settings.openai_base_url,
        timeout=httpx.Timeout(opts.timeout_s, connect=opts.connect_timeout_s),
        max_retries=0,
    )

def make_completion_client(settings: Settings, *, opts: Optional[CompletionOptions] = None) -> CompletionClient:
    opts = opts or _options(settings)
    provider = settings.llm_provider.lower()

    if provider == "bedrock":
        return BedrockCompletionClient(
            bedrock_runtime(
                settings.aws_region,
                connect_timeout=opts.connect_timeout_s,
                read_timeout=opts.timeout_s,
            ),
            settings.bedrock_text_model_id,
            temperature=opts.temperature,
            max_tokens=opts.max_tokens,
        )
    if provider == "openai":
        return OpenAICompletionClient(
            _mk_openai(settings, opts),
            settings.openai_model,
            temperature=opts.temperature,
            max_tokens=opts.max_tokens,
        )
    raise ValueError(f"Unknown LLM provider: {settings.llm_provider}")
