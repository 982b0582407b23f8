from uuid import uuid4

from fastapi import FastAPI, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from journey_api.api.flows import generation_backend_status, pipeline_for_path
from journey_api.api.flows import router as flows_router
from journey_api.core.config import get_settings
from journey_api.core.log import configure_logging
from journey_api.services.generation.error_policy import (
    build_http_error_payload,
    build_unexpected_error_payload,
    http_exception_for,
    input_error_from_request_errors,
)


settings = get_settings()
configure_logging(settings.log_level)

app = FastAPI(
    title="Javanese Journey Content API",
    version="0.1.0",
    description="Structured content generation for the Javanese Journey learning app",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/health")
def health_check() -> dict[str, str]:
    return {"status": "ok", "env": settings.env, "generation": generation_backend_status()}


def _trace_id(request: Request) -> str:
    return request.headers.get("x-trace-id") or uuid4().hex


@app.exception_handler(HTTPException)
async def handle_http_exception(request: Request, exc: HTTPException) -> JSONResponse:
    payload = build_http_error_payload(exc, _trace_id(request))
    return JSONResponse(status_code=exc.status_code, content=payload)


@app.exception_handler(RequestValidationError)
async def handle_request_validation(request: Request, exc: RequestValidationError) -> JSONResponse:
    http_exc = http_exception_for(
        input_error_from_request_errors(exc.errors()),
        pipeline=pipeline_for_path(request.url.path),
    )
    payload = build_http_error_payload(http_exc, _trace_id(request))
    return JSONResponse(status_code=http_exc.status_code, content=payload)


@app.exception_handler(Exception)
async def handle_unexpected_exception(request: Request, _exc: Exception) -> JSONResponse:
    payload = build_unexpected_error_payload(_trace_id(request))
    return JSONResponse(status_code=500, content=payload)


app.include_router(flows_router)
