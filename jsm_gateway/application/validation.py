from __future__ import annotations
import logging
from typing import Any, Mapping
from jsm_gateway.application.errors import MalformedRequestError, SubmissionValidationError
from jsm_gateway.domain.tickets import (
    SECURITY_SERVICE_DESK_ID,
    TICKET_TYPES,
    Attachment,
    RequestType,
    TicketSubmission,
)
from jsm_gateway.shared.normalization import is_blank, normalize_str_or_none


logger = logging.getLogger(__name__)

REQUIRED_TOP_LEVEL = ("serviceDeskId", "requestTypeId", "requestFieldValues")

# fields required inside requestFieldValues, in addition to email
TICKET_REQUIRED_FIELDS: Mapping[int, tuple[str, ...]] = {
    RequestType.GENERAL_SUPPORT: ("summary", "description"),
    RequestType.ACCESS_LOGIN: ("description",),
    RequestType.PROVIDER_LOGIN: ("description",),
}

SECURITY_INCIDENT_REQUIRED_FIELDS = ("summary", "priority", "description", "name", "email", "accessId")


def validate_ticket_submission(body: Any) -> TicketSubmission:
    """Validate a ticket creation body and return the submission.
        Raises:
            MalformedRequestError: body is not a JSON object.
            SubmissionValidationError: required fields are missing or malformed.
        """

    body = _require_object(body)
    request_type_id = _resolve_request_type_id(body)

    missing = _missing_top_level(body, request_type_id)
    field_values = body.get("requestFieldValues")
    if isinstance(field_values, Mapping):
        required = ("email",) + TICKET_REQUIRED_FIELDS.get(request_type_id, ())
        missing.extend(_missing_field_values(field_values, required))

    _raise_if_missing(missing)
    return _build_submission(body, request_type_id)

def validate_security_incident(body: Any) -> TicketSubmission:
    """Validate a security incident body; the desk and request type are fixed."""

    body = _require_object(body)
    request_type_id = _resolve_request_type_id(body)

    missing = _missing_top_level(body, request_type_id)
    field_values = body.get("requestFieldValues")
    if isinstance(field_values, Mapping):
        missing.extend(_missing_field_values(field_values, SECURITY_INCIDENT_REQUIRED_FIELDS))

    _raise_if_missing(missing)

    service_desk_id = _as_int(body["serviceDeskId"], "serviceDeskId")
    if service_desk_id != SECURITY_SERVICE_DESK_ID:
        raise SubmissionValidationError(
            "Invalid service desk ID. Security incidents must use "
            f"serviceDeskId: {SECURITY_SERVICE_DESK_ID}"
        )
    if request_type_id != RequestType.SECURITY_INCIDENT:
        raise SubmissionValidationError(
            "Invalid request type ID. Security incidents must use "
            f"requestTypeId: {int(RequestType.SECURITY_INCIDENT)}"
        )

    return _build_submission(body, request_type_id)

def _require_object(body: Any) -> Mapping[str, Any]:
    if not isinstance(body, Mapping):
        raise MalformedRequestError("Request body must be a JSON object")
    return body

def _resolve_request_type_id(body: Mapping[str, Any]) -> int | None:
    raw = body.get("requestTypeId")
    if not is_blank(raw):
        return _as_int(raw, "requestTypeId")

    ticket_type = normalize_str_or_none(body.get("ticketType"))
    if ticket_type is None:
        return None

    request_type = TICKET_TYPES.get(ticket_type.lower())
    if request_type is None:
        raise SubmissionValidationError(
            f"Unknown ticketType {ticket_type!r}; expected one of: {', '.join(TICKET_TYPES)}"
        )
    return int(request_type)

def _missing_top_level(body: Mapping[str, Any], request_type_id: int | None) -> list[str]:
    missing: list[str] = []
    for name in REQUIRED_TOP_LEVEL:
        if name == "requestTypeId":
            if request_type_id is None:
                missing.append(name)
        elif is_blank(body.get(name)):
            missing.append(name)

    field_values = body.get("requestFieldValues")
    if not is_blank(field_values) and not isinstance(field_values, Mapping):
        raise SubmissionValidationError("requestFieldValues must be a JSON object")
    return missing

def _missing_field_values(field_values: Mapping[str, Any], required: tuple[str, ...]) -> list[str]:
    return [
        f"requestFieldValues.{name}"
        for name in required
        if is_blank(field_values.get(name))
    ]

def _raise_if_missing(missing: list[str]) -> None:
    if missing:
        logger.info("Rejecting submission, missing fields: %s", ", ".join(missing))
        raise SubmissionValidationError("Missing required fields", missing_fields=missing)

def _build_submission(body: Mapping[str, Any], request_type_id: int | None) -> TicketSubmission:
    assert request_type_id is not None

    raw_attachments = body.get("attachments") or []
    if not isinstance(raw_attachments, list):
        raise SubmissionValidationError("attachments must be an array")

    attachments = [
        Attachment.from_payload(item if isinstance(item, Mapping) else {})
        for item in raw_attachments
    ]

    return TicketSubmission(
        service_desk_id=_as_int(body["serviceDeskId"], "serviceDeskId"),
        request_type_id=request_type_id,
        field_values=dict(body["requestFieldValues"]),
        attachments=attachments,
    )

def _as_int(value: Any, name: str) -> int:
    if isinstance(value, bool):
        raise SubmissionValidationError(f"{name} must be an integer")
    try:
        if isinstance(value, float):
            if not value.is_integer():
                raise ValueError(value)
            return int(value)
        return int(str(value).strip())
    except (TypeError, ValueError) as exc:
        raise SubmissionValidationError(f"{name} must be an integer") from exc
