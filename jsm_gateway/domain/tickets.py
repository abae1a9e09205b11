from __future__ import annotations
from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any, Mapping


class RequestType(IntEnum):
    GENERAL_SUPPORT = 17
    SECURITY_INCIDENT = 26
    ACCESS_LOGIN = 30
    PROVIDER_LOGIN = 31


# public ticketType discriminator -> JSM request type
TICKET_TYPES: Mapping[str, RequestType] = {
    "general_help": RequestType.GENERAL_SUPPORT,
    "feedback": RequestType.GENERAL_SUPPORT,
    "access_login": RequestType.ACCESS_LOGIN,
    "provider_login": RequestType.PROVIDER_LOGIN,
    "security_incident": RequestType.SECURITY_INCIDENT,
}

SECURITY_SERVICE_DESK_ID = 3


@dataclass(frozen=True, slots=True)
class Attachment:
    file_name: Any
    content_type: Any
    file_data: Any
    size: Any

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> "Attachment":
        return cls(
            file_name=payload.get("fileName"),
            content_type=payload.get("contentType"),
            file_data=payload.get("fileData"),
            size=payload.get("size"),
        )


@dataclass(frozen=True, slots=True)
class TicketSubmission:
    service_desk_id: int
    request_type_id: int
    field_values: Mapping[str, Any]
    attachments: list[Attachment] = field(default_factory=list)

    @property
    def email(self) -> Any:
        return self.field_values.get("email")


@dataclass(slots=True)
class DownstreamRequest:
    service_desk_id: int
    request_type_id: int
    request_field_values: dict[str, Any]
    raise_on_behalf_of: str | None = None
    template_form_id: int | None = None
    form_answers: dict[str, Any] | None = None

    def to_payload(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "serviceDeskId": self.service_desk_id,
            "requestTypeId": self.request_type_id,
            "requestFieldValues": self.request_field_values,
        }
        if self.raise_on_behalf_of:
            payload["raiseOnBehalfOf"] = self.raise_on_behalf_of
        if self.template_form_id is not None and self.form_answers is not None:
            payload["form"] = {
                "templateFormId": self.template_form_id,
                "answers": self.form_answers,
            }
        return payload


@dataclass(frozen=True, slots=True)
class TicketResult:
    ticket_key: str
    ticket_url: str

    def to_payload(self) -> dict[str, str]:
        return {"ticketKey": self.ticket_key, "ticketUrl": self.ticket_url}
