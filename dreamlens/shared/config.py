from __future__ import annotations
import os
from dataclasses import dataclass
from typing import Optional
from dotenv import load_dotenv

load_dotenv()

def _flag(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() == "true"

@dataclass(frozen=True)
class Settings:
    aws_region: str = os.getenv("AWS_REGION", "us-west-2")
    stage: str = os.getenv("STAGE", "dev")

    # LLM
    llm_provider: str = os.getenv("LLM_PROVIDER", "bedrock")
    bedrock_text_model_id: str = os.getenv("BEDROCK_TEXT_MODEL_ID", "us.anthropic.claude-sonnet-4-20250514-v1:0")
    openai_api_key: Optional[str] = os.getenv("OPENAI_API_KEY")
    openai_model: str = os.getenv("OPENAI_MODEL", "gpt-4o-mini")
    openai_base_url: Optional[str] = os.getenv("OPENAI_API_BASE")
    llm_temperature: float = float(os.getenv("LLM_TEMPERATURE", "0.7"))
    llm_max_tokens: int = int(os.getenv("LLM_MAX_TOKENS", "500"))
    llm_timeout_seconds: float = float(os.getenv("LLM_TIMEOUT_SECONDS", "25"))
    llm_connect_timeout_seconds: float = float(os.getenv("LLM_CONNECT_TIMEOUT_SECONDS", "5"))

    # Auth
    identity_provider: str = os.getenv("IDENTITY_PROVIDER", "cognito")
    supabase_url: Optional[str] = os.getenv("SUPABASE_URL")
    supabase_service_role_key: Optional[str] = os.getenv("SUPABASE_SERVICE_ROLE_KEY")
    identity_timeout_seconds: float = float(os.getenv("IDENTITY_TIMEOUT_SECONDS", "10"))
    identity_connect_timeout_seconds: float = float(os.getenv("IDENTITY_CONNECT_TIMEOUT_SECONDS", "5"))

    # HTTP
    max_request_bytes: int = int(os.getenv("MAX_REQUEST_BYTES", "32768"))

    # Logging
    log_level: str = os.getenv("LOG_LEVEL", "INFO")
    log_json: bool = _flag("LOG_JSON", "false")

    @property
    def llm_model(self) -> str:
        return self.openai_model if self.llm_provider == "openai" else self.bedrock_text_model_id

settings = Settings()
