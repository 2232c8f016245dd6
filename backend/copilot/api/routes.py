"""
routes.py
=========
All API endpoint definitions.

Rule-based endpoints call the analyzers directly. The /api/ai/*
endpoints go through the orchestrators and return a provenance envelope.
Every failure is answered with {error, message}.
"""

from typing import Optional

from fastapi import APIRouter, Depends
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import JSONResponse
from loguru import logger

from copilot.analyzers.auth_validator import validate_auth
from copilot.analyzers.controller_analyzer import analyze_controller
from copilot.analyzers.openapi_inferrer import infer_openapi
from copilot.core.config import Settings, get_settings
from copilot.core.errors import CopilotError
from copilot.core.security import verify_api_key
from copilot.models.schemas import (
    AnalysisReport, AuthValidationReport, AuthValidationRequest, CodeRequest,
    ErrorResponse, HealthResponse, OpenAPIFragment,
)
from copilot.services.llm_service import LLMService, get_llm_service
from copilot.services.orchestrator import (
    AnalysisOrchestrator, AuthFlowOrchestrator, OpenAPIOrchestrator, Orchestrator,
)

router = APIRouter()

FEATURES = [
    "openapi-generator",
    "controller-analyzer",
    "auth-validator",
    "ai-analysis",
]

ERROR_RESPONSES = {
    400: {"model": ErrorResponse, "description": "Code rejected by the syntax check"},
    413: {"model": ErrorResponse, "description": "Code too long"},
    500: {"model": ErrorResponse, "description": "Analyzer failure"},
}


def _failure(label: str, exc: Exception) -> JSONResponse:
    status_code = exc.status_code if isinstance(exc, CopilotError) else 500
    if status_code >= 500:
        logger.error(f"{label}: {exc}")
    else:
        logger.info(f"{label}: {exc}")
    return JSONResponse(
        status_code=status_code,
        content=ErrorResponse(error=label, message=str(exc) or "Unknown error").model_dump(),
    )


def _too_long(code: str, settings: Settings) -> Optional[JSONResponse]:
    if len(code) <= settings.MAX_CODE_LENGTH:
        return None
    return JSONResponse(
        status_code=413,
        content=ErrorResponse(
            error="Payload too large",
            message=f"Code too long. Max {settings.MAX_CODE_LENGTH} characters.",
        ).model_dump(),
    )


async def _orchestrate(label: str, orchestrator: Orchestrator, code: str):
    logger.info(f"AI request | capability={orchestrator.capability} | size={len(code)}")
    try:
        # The model call blocks; keep it off the event loop
        envelope = await run_in_threadpool(orchestrator.run, code)
    except Exception as e:
        return _failure(label, e)
    return envelope.to_dict()


# ─────────────────────────────────────────────
# HEALTH CHECK
# ─────────────────────────────────────────────

@router.get("/health", response_model=HealthResponse, tags=["Health"])
async def health_check(
    service: LLMService = Depends(get_llm_service),
    settings: Settings = Depends(get_settings),
):
    """Liveness and feature listing."""
    return HealthResponse(
        status="ok",
        service="backend-copilot-ai",
        version=settings.APP_VERSION,
        features=FEATURES,
        ai_enabled=service.enabled,
        model_backend=service.backend_name,
        documentation="/docs",
    )


# ─────────────────────────────────────────────
# RULE-BASED ENDPOINTS
# ─────────────────────────────────────────────

@router.post(
    "/api/generate/openapi",
    response_model=OpenAPIFragment,
    response_model_exclude_none=True,
    responses=ERROR_RESPONSES,
    dependencies=[Depends(verify_api_key)],
    tags=["Analysis"],
)
async def generate_openapi(request: CodeRequest, settings: Settings = Depends(get_settings)):
    """Infer an OpenAPI operation from a route snippet."""
    rejected = _too_long(request.code, settings)
    if rejected is not None:
        return rejected
    try:
        return infer_openapi(request.code)
    except Exception as e:
        return _failure("Generation failed", e)


@router.post(
    "/api/analyze/controller",
    response_model=AnalysisReport,
    response_model_exclude_none=True,
    responses=ERROR_RESPONSES,
    dependencies=[Depends(verify_api_key)],
    tags=["Analysis"],
)
async def analyze_controller_code(request: CodeRequest, settings: Settings = Depends(get_settings)):
    """Rule-based code-quality report."""
    rejected = _too_long(request.code, settings)
    if rejected is not None:
        return rejected
    try:
        return analyze_controller(request.code)
    except Exception as e:
        return _failure("Analysis failed", e)


@router.post(
    "/api/validate/auth",
    response_model=AuthValidationReport,
    responses={500: ERROR_RESPONSES[500]},
    dependencies=[Depends(verify_api_key)],
    tags=["Analysis"],
)
async def validate_auth_config(request: AuthValidationRequest):
    """Find unprotected routes and role mismatches in a route/middleware map."""
    try:
        return validate_auth(request.config)
    except Exception as e:
        return _failure("Auth validation failed", e)


# ─────────────────────────────────────────────
# AI ENDPOINTS (with rule-based fallback)
# ─────────────────────────────────────────────

@router.post(
    "/api/ai/analyze",
    responses=ERROR_RESPONSES,
    dependencies=[Depends(verify_api_key)],
    tags=["AI"],
)
async def ai_analyze(
    request: CodeRequest,
    service: LLMService = Depends(get_llm_service),
    settings: Settings = Depends(get_settings),
):
    """AI code analysis, falling back to the rule-based report."""
    rejected = _too_long(request.code, settings)
    if rejected is not None:
        return rejected
    return await _orchestrate("Analysis failed", AnalysisOrchestrator(service), request.code)


@router.post(
    "/api/ai/openapi",
    responses=ERROR_RESPONSES,
    dependencies=[Depends(verify_api_key)],
    tags=["AI"],
)
async def ai_openapi(
    request: CodeRequest,
    service: LLMService = Depends(get_llm_service),
    settings: Settings = Depends(get_settings),
):
    """AI OpenAPI generation, falling back to the rule-based inferrer."""
    rejected = _too_long(request.code, settings)
    if rejected is not None:
        return rejected
    return await _orchestrate("OpenAPI generation failed", OpenAPIOrchestrator(service), request.code)


@router.post(
    "/api/ai/auth",
    responses=ERROR_RESPONSES,
    dependencies=[Depends(verify_api_key)],
    tags=["AI"],
)
async def ai_auth(
    request: CodeRequest,
    service: LLMService = Depends(get_llm_service),
    settings: Settings = Depends(get_settings),
):
    """AI auth-flow review. Without the model, answers with a rule-based-only notice."""
    rejected = _too_long(request.code, settings)
    if rejected is not None:
        return rejected
    return await _orchestrate("Auth validation failed", AuthFlowOrchestrator(service), request.code)
