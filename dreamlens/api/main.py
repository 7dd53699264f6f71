from __future__ import annotations
from typing import Optional
from fastapi import FastAPI, Request
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import JSONResponse, PlainTextResponse
from ..agents.dream_analyze import PROMPT_VERSION
from ..shared.config import Settings, settings as default_settings
from ..shared.logging import setup_logging
from .service import DreamAnalysisService, build_service

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Headers": "authorization, x-client-info, apikey, content-type",
}

def create_app(
    service: Optional[DreamAnalysisService] = None,
    settings: Optional[Settings] = None,
) -> FastAPI:
    settings = settings or default_settings
    if service is None:
        setup_logging(settings.log_level, serialize=settings.log_json)
        service = build_service(settings)

    app = FastAPI(title="DreamLens Analysis API", version="1.0.0")
    app.state.service = service

    @app.get("/ping")
    def ping():
        return {
            "ok": True,
            "stage": settings.stage,
            "region": settings.aws_region,
            "llm_provider": settings.llm_provider,
            "model": settings.llm_model,
            "prompt_version": PROMPT_VERSION,
        }

    @app.options("/analyze-dream")
    def analyze_dream_preflight():
        return PlainTextResponse("ok", headers=CORS_HEADERS)

    @app.post("/analyze-dream")
    async def analyze_dream(request: Request):
        """
        Body: {"dreamContent": "<string>"}, header Authorization: Bearer <token>.
        Returns {title, interpretation, mood, keywords} or {"error": "..."}.
        """
        body = await request.body()
        status, payload = await run_in_threadpool(
            app.state.service.handle, body, request.headers.get("authorization")
        )
        return JSONResponse(payload, status_code=status, headers=CORS_HEADERS)

    return app

app = create_app()

if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=8000)
