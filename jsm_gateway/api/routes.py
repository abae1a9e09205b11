from __future__ import annotations
import json
import logging
from typing import Any, Callable
from fastapi import APIRouter, Depends, Request, Response
from fastapi.responses import JSONResponse
from starlette.concurrency import run_in_threadpool
from jsm_gateway.api.dependencies import (
    TicketServiceFactory,
    get_app_config,
    get_ticket_service_factory,
)
from jsm_gateway.api.responses import CORS_HEADERS, envelope, utc_timestamp
from jsm_gateway.application.errors import (
    DownstreamError,
    MalformedRequestError,
    SubmissionValidationError,
)
from jsm_gateway.application.ticket_service import TicketService
from jsm_gateway.application.validation import validate_security_incident, validate_ticket_submission
from jsm_gateway.config import AppConfig
from jsm_gateway.domain.tickets import TicketResult, TicketSubmission
from jsm_gateway.infrastructure.openapi_document import render_openapi_document


logger = logging.getLogger(__name__)

router = APIRouter()

ENDPOINTS = {
    "tickets": {
        "path": "/tickets",
        "methods": ["POST"],
        "description": "Create support tickets with ProForma integration",
    },
    "security-incidents": {
        "path": "/security-incidents",
        "methods": ["POST"],
        "description": "Create security incident reports for cybersecurity team",
    },
    "health": {
        "path": "/health",
        "methods": ["GET"],
        "description": "API health check and discovery",
    },
    "docs": {
        "path": "/docs",
        "methods": ["GET"],
        "description": "OpenAPI documentation",
    },
}

@router.get("/health")
def health(config: AppConfig = Depends(get_app_config)) -> JSONResponse:
    return JSONResponse(
        content={
            "status": "healthy",
            "version": config.api_version,
            "timestamp": utc_timestamp(),
            "environment": config.environment,
            "endpoints": ENDPOINTS,
            "links": {"documentation": "/docs", "health": "/health"},
        },
        headers=CORS_HEADERS,
    )

@router.get("/docs")
def docs(request: Request, config: AppConfig = Depends(get_app_config)) -> JSONResponse:
    document = render_openapi_document(
        request.app.state.openapi_document,
        public_url=config.public_url,
        version=config.api_version,
    )
    return JSONResponse(content=document, headers=CORS_HEADERS)

@router.post("/tickets")
async def create_ticket(
    request: Request,
    config: AppConfig = Depends(get_app_config),
    service_factory: TicketServiceFactory = Depends(get_ticket_service_factory),
) -> JSONResponse:
    return await _handle_submission(
        request,
        config,
        validate=validate_ticket_submission,
        create=lambda service, submission: service.create_ticket(submission),
        service_factory=service_factory,
        failure_message="Failed to create ticket",
    )

@router.post("/security-incidents")
async def create_security_incident(
    request: Request,
    config: AppConfig = Depends(get_app_config),
    service_factory: TicketServiceFactory = Depends(get_ticket_service_factory),
) -> JSONResponse:
    return await _handle_submission(
        request,
        config,
        validate=validate_security_incident,
        create=lambda service, submission: service.create_security_incident(submission),
        service_factory=service_factory,
        failure_message="Failed to create security incident",
    )

def preflight() -> Response:
    return Response(status_code=200, headers=CORS_HEADERS)

for _path in ("/health", "/docs", "/tickets", "/security-incidents"):
    router.add_api_route(_path, preflight, methods=["OPTIONS"], include_in_schema=False)

async def _handle_submission(
    request: Request,
    config: AppConfig,
    *,
    validate: Callable[[Any], TicketSubmission],
    create: Callable[[TicketService, TicketSubmission], TicketResult],
    service_factory: TicketServiceFactory,
    failure_message: str,
) -> JSONResponse:
    try:
        body = _parse_json(await request.body())
        submission = validate(body)
        logger.info(
            "Received %s: service desk %s, request type %s, %d attachment(s)",
            request.url.path,
            submission.service_desk_id,
            submission.request_type_id,
            len(submission.attachments),
        )
        result = await run_in_threadpool(lambda: create(service_factory(), submission))
    except MalformedRequestError as exc:
        return envelope(400, config.api_version, error="Malformed JSON body", details={"message": str(exc)})
    except SubmissionValidationError as exc:
        details = {"missingFields": exc.missing_fields} if exc.missing_fields else None
        return envelope(400, config.api_version, error=exc.message, details=details)
    except DownstreamError as exc:
        logger.error("%s: %s", failure_message, exc)
        return envelope(500, config.api_version, error=failure_message, details={"message": str(exc)})
    except Exception:
        logger.exception("Unexpected error handling %s", request.url.path)
        return envelope(500, config.api_version, error="Internal server error")

    return envelope(200, config.api_version, data=result.to_payload())

def _parse_json(raw: bytes) -> Any:
    if not raw.strip():
        return {}
    try:
        return json.loads(raw)
    except ValueError as exc:
        raise MalformedRequestError(f"Request body is not valid JSON: {exc}") from exc
