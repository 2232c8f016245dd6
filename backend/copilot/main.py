import uvicorn
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from loguru import logger

from copilot.api.routes import router
from copilot.core.config import settings
from copilot.core.logging import configure_logging
from copilot.models.schemas import ErrorResponse
from copilot.services.json_guard import describe_violation
from copilot.services.llm_service import get_llm_service


# ===============================
# 🚀 APP SETUP
# ===============================

configure_logging(settings)

app = FastAPI(
    title=settings.APP_NAME,
    description="AI-powered backend analysis and code review tool",
    version=settings.APP_VERSION,
    openapi_tags=[
        {"name": "Analysis", "description": "Code analysis endpoints"},
        {"name": "AI", "description": "AI-powered analysis"},
        {"name": "Health", "description": "Health checks"},
    ],
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(router)


@app.exception_handler(RequestValidationError)
async def invalid_request(request: Request, exc: RequestValidationError):
    message = describe_violation(exc)
    logger.info(f"Invalid request to {request.url.path}: {message}")
    return JSONResponse(
        status_code=422,
        content=ErrorResponse(error="Invalid request", message=message).model_dump(),
    )


@app.on_event("startup")
async def startup():
    logger.info(f"Starting {settings.APP_NAME} v{settings.APP_VERSION}")
    service = get_llm_service()
    logger.info(f"🤖 AI status: {'ENABLED' if service.enabled else 'DISABLED (set OPENAI_API_KEY and AI_ENABLED=true)'}")


# ===============================
# 🌍 PUBLIC ROUTES
# ===============================

@app.get("/", tags=["Health"])
async def root():
    return {
        "message": f"{settings.APP_NAME} API",
        "version": settings.APP_VERSION,
        "docs": "/docs"
    }


def run():
    uvicorn.run("copilot.main:app", host=settings.HOST, port=settings.PORT)


if __name__ == "__main__":
    run()
