"""
Transport-independent core of the dream analysis endpoint.

Per request: Received -> Validated -> Authenticated -> Invoked -> Normalized -> Returned,
with Failed(kind) reachable from any state. Nothing is kept between requests.
"""
from __future__ import annotations
import hashlib
import json
from typing import Any, Dict, Optional, Tuple, Union
from pydantic import ValidationError
from ..agents.completion import CompletionClient
from ..agents.dream_analyze import PROMPT_VERSION, normalize_analysis
from ..agents.factory import make_completion_client
from ..shared.config import Settings
from ..shared.errors import AnalysisError, InvalidInput
from ..shared.identity import IdentityVerifier, make_identity_verifier
from ..shared.logging import get_logger
from ..shared.models import AnalysisRequest, AnalysisResult

Body = Union[bytes, str, None]


def parse_request(body: Body, max_request_bytes: int) -> AnalysisRequest:
    raw = body.encode("utf-8") if isinstance(body, str) else (body or b"")
    if len(raw) > max_request_bytes:
        raise InvalidInput(f"Request body exceeds {max_request_bytes} bytes")
    try:
        payload = json.loads(raw) if raw else None
    except (ValueError, RecursionError) as e:
        raise InvalidInput() from e
    try:
        return AnalysisRequest.model_validate(payload)
    except ValidationError as e:
        raise InvalidInput() from e


class DreamAnalysisService:
    def __init__(
        self,
        identity: IdentityVerifier,
        completion: CompletionClient,
        *,
        max_request_bytes: int = 32768,
        log: Any = None,
    ):
        self._identity = identity
        self._completion = completion
        self._max_request_bytes = max_request_bytes
        self._log = log or get_logger(__name__)

    def analyze(self, body: Body, authorization: Optional[str]) -> AnalysisResult:
        self._log.debug("state=Received")
        request = parse_request(body, self._max_request_bytes)
        self._log.debug("state=Validated")
        principal = self._identity.verify(authorization)
        self._log.debug("state=Authenticated", user_id=principal.id)
        raw = self._completion.complete(request.dream_content)
        self._log.debug("state=Invoked", user_id=principal.id)
        result = normalize_analysis(raw)
        self._log.debug("state=Normalized", user_id=principal.id)

        self._log.info(
            "Dream analyzed",
            user_id=principal.id,
            model=getattr(self._completion, "model_id", None),
            prompt_version=PROMPT_VERSION,
            mood=result.mood,
            keyword_count=len(result.keywords),
            text_sha256=hashlib.sha256(request.dream_content.encode("utf-8")).hexdigest(),
        )
        return result

    def handle(self, body: Body, authorization: Optional[str]) -> Tuple[int, Dict[str, Any]]:
        """Runs one analysis and renders it as (status, JSON body); never raises."""
        try:
            result = self.analyze(body, authorization)
        except AnalysisError as e:
            level = "WARNING" if e.status_code < 500 else "ERROR"
            self._log.log(level, "state=Failed", kind=e.kind, status=e.status_code, reason=e.message)
            return e.status_code, e.to_body()
        except Exception as e:
            self._log.exception("Unhandled error during dream analysis")
            return 500, {"error": str(e) or "Internal server error"}
        self._log.debug("state=Returned")
        return 200, result.to_body()


def build_service(settings: Settings) -> DreamAnalysisService:
    return DreamAnalysisService(
        make_identity_verifier(settings),
        make_completion_client(settings),
        max_request_bytes=settings.max_request_bytes,
    )
