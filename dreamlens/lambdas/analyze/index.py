from __future__ import annotations
import base64
import json
from typing import Any, Callable, Dict, Optional
from dreamlens.api.service import DreamAnalysisService, build_service
from dreamlens.shared.config import settings
from dreamlens.shared.logging import setup_logging

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Headers": "authorization, x-client-info, apikey, content-type",
}

def _ok(body, code=200):
    return {"statusCode": code, "headers": {**CORS_HEADERS, "Content-Type": "application/json"},
            "body": json.dumps(body, ensure_ascii=False)}

def _method(event: Dict[str, Any]) -> str:
    m = event.get("httpMethod") or ((event.get("requestContext") or {}).get("http") or {}).get("method")
    return (m or "").upper()

def _header(event: Dict[str, Any], name: str) -> Optional[str]:
    for k, v in (event.get("headers") or {}).items():
        if k.lower() == name:
            return v
    return None

def _body(event: Dict[str, Any]):
    body = event.get("body")
    if body and event.get("isBase64Encoded"):
        try:
            return base64.b64decode(body, validate=True)
        except ValueError:
            return None
    return body

def make_handler(service: DreamAnalysisService) -> Callable[[Dict[str, Any], Any], Dict[str, Any]]:
    def handler(event, _ctx):
        method = _method(event)
        if method == "OPTIONS":
            return {"statusCode": 200, "headers": dict(CORS_HEADERS), "body": "ok"}
        if method != "POST":
            return _ok({"error": "Method not allowed"}, 405)
        status, payload = service.handle(_body(event), _header(event, "authorization"))
        return _ok(payload, status)
    return handler

setup_logging(settings.log_level, serialize=settings.log_json)
handler = make_handler(build_service(settings))
