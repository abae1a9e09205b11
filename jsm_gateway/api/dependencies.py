from __future__ import annotations
from typing import Callable
from fastapi import Request
from jsm_gateway.application.field_mapper import FieldMapper
from jsm_gateway.application.ticket_service import TicketService
from jsm_gateway.config import AppConfig, load_jsm_config
from jsm_gateway.domain.mapping_tables import MappingTables
from jsm_gateway.infrastructure.jsm_client import JSMClient


TicketServiceFactory = Callable[[], TicketService]

def get_app_config(request: Request) -> AppConfig:
    return request.app.state.app_config

def get_ticket_service_factory(request: Request) -> TicketServiceFactory:
    """Factory building a TicketService with JSM credentials read at call time."""
    tables: MappingTables = request.app.state.mapping_tables
    app_config: AppConfig = request.app.state.app_config

    def factory() -> TicketService:
        client = JSMClient(load_jsm_config())
        return TicketService(
            client,
            tables,
            field_mapper=FieldMapper(tables, strict=app_config.strict_mapping),
        )

    return factory
