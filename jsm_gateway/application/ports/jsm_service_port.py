from __future__ import annotations
from typing import Any, Protocol, Mapping
from jsm_gateway.domain.tickets import Attachment


class AttachmentUploader(Protocol):
    def upload_temporary_attachment(self, service_desk_id: int, attachment: Attachment) -> str:
        ...


class RequestCreator(Protocol):
    def create_request(self, payload: Mapping[str, Any]) -> Mapping[str, Any]:
        ...

    def ticket_url(self, service_desk_id: int, issue_key: str) -> str:
        ...


class JSMServicePort(AttachmentUploader, RequestCreator, Protocol):
    ...
