"""Main FastAPI application."""

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from toolcall_sanitizer import __version__
from toolcall_sanitizer.api.endpoints import router
from toolcall_sanitizer.models.config import default_config
from toolcall_sanitizer.utils.logging import LogConfig, setup_logging

setup_logging(LogConfig.from_env(debug_mode=default_config.debug_mode))

app = FastAPI(
    title="Tool Call Sanitizer",
    description=(
        "Normalizes tool-calling conversations for inference backends that accept "
        "at most one pending tool call per assistant turn."
    ),
    version=__version__,
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_tags=[
        {
            "name": "Sanitizer",
            "description": (
                "Validate, deduplicate and summarize conversations. Completed tool calls "
                "become natural-language summaries; only the latest pending call survives."
            ),
        },
        {
            "name": "Health",
            "description": "Service health monitoring and status checks.",
        },
    ],
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(router)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("toolcall_sanitizer.main:app", host="0.0.0.0", port=9001, reload=True, log_level="info")
