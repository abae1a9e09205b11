from __future__ import annotations
import logging
from typing import Any
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from jsm_gateway.api.responses import envelope
from jsm_gateway.api.routes import router
from jsm_gateway.config import AppConfig, load_app_config
from jsm_gateway.domain.mapping_tables import MappingTables
from jsm_gateway.infrastructure.mapping_tables_loader import load_mapping_tables
from jsm_gateway.infrastructure.openapi_document import load_openapi_document


logger = logging.getLogger(__name__)

def create_app(
    app_config: AppConfig | None = None,
    mapping_tables: MappingTables | None = None,
    openapi_document: dict[str, Any] | None = None,
) -> FastAPI:
    """Build the FastAPI app; mapping tables and the OpenAPI document are loaded once here."""
    config = app_config or load_app_config()

    # /docs serves our own document instead of Swagger UI
    app = FastAPI(
        title="ACCESS Support Ticket API",
        version=config.api_version,
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
    )
    app.state.app_config = config
    app.state.mapping_tables = mapping_tables or load_mapping_tables()
    app.state.openapi_document = openapi_document or load_openapi_document()

    app.include_router(router)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization", "X-API-Key"],
    )

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
        if exc.status_code == 405:
            error = f"Method not allowed for {request.url.path}"
        else:
            error = str(exc.detail)
        return envelope(exc.status_code, config.api_version, error=error)

    logger.info(
        "App created: environment=%s strict_mapping=%s",
        config.environment,
        config.strict_mapping,
    )
    return app
