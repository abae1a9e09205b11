from __future__ import annotations
import logging
from jsm_gateway.application.attachments import upload_attachments
from jsm_gateway.application.errors import DownstreamError
from jsm_gateway.application.field_mapper import FieldMapper
from jsm_gateway.application.ports.jsm_service_port import JSMServicePort
from jsm_gateway.application.proforma_mapper import ProformaMapper
from jsm_gateway.domain.mapping_tables import MappingTables
from jsm_gateway.domain.tickets import DownstreamRequest, TicketResult, TicketSubmission


logger = logging.getLogger(__name__)

# requestFieldValues key carrying temporary attachment ids
ATTACHMENT_FIELD = "attachment"

class TicketService:
    """Shape submissions into JSM requests and submit them.

        Support tickets get mapped fields, ProForma answers for request types
        with a form template, and uploaded attachments. Security incidents get
        mapped fields and attachments only.
        """

    def __init__(
        self,
        jsm: JSMServicePort,
        tables: MappingTables,
        field_mapper: FieldMapper | None = None,
        proforma_mapper: ProformaMapper | None = None,
    ) -> None:
        self._jsm = jsm
        self._tables = tables
        self._field_mapper = field_mapper or FieldMapper(tables)
        self._proforma_mapper = proforma_mapper or ProformaMapper(tables)

    def build_ticket_request(self, submission: TicketSubmission) -> DownstreamRequest:
        request = self._build_base(submission)

        template_form_id = self._tables.form.templates.get(submission.request_type_id)
        if template_form_id is not None:
            answers = self._proforma_mapper.map_proforma_values(
                submission.request_type_id,
                submission.field_values,
            )
            if answers is not None:
                request.template_form_id = template_form_id
                request.form_answers = answers

        return request

    def build_security_incident_request(self, submission: TicketSubmission) -> DownstreamRequest:
        # security incidents never carry a form
        return self._build_base(submission)

    def create_ticket(self, submission: TicketSubmission) -> TicketResult:
        return self._submit(self.build_ticket_request(submission), "ticket")

    def create_security_incident(self, submission: TicketSubmission) -> TicketResult:
        return self._submit(self.build_security_incident_request(submission), "security incident")

    def _build_base(self, submission: TicketSubmission) -> DownstreamRequest:
        field_values = self._field_mapper.map_field_values(
            submission.request_type_id,
            submission.field_values,
        )

        handles = upload_attachments(self._jsm, submission.service_desk_id, submission.attachments)
        if handles:
            field_values[ATTACHMENT_FIELD] = handles

        email = submission.email
        return DownstreamRequest(
            service_desk_id=submission.service_desk_id,
            request_type_id=submission.request_type_id,
            request_field_values=field_values,
            raise_on_behalf_of=str(email) if email else None,
        )

    def _submit(self, request: DownstreamRequest, kind: str) -> TicketResult:
        response = self._jsm.create_request(request.to_payload())

        issue_key = response.get("issueKey")
        if not issue_key:
            msg = f"JSM response for {kind} has no issueKey"
            logger.error("%s: %r", msg, response)
            raise DownstreamError(msg)

        result = TicketResult(
            ticket_key=str(issue_key),
            ticket_url=self._jsm.ticket_url(request.service_desk_id, str(issue_key)),
        )
        logger.info(
            "Created %s %s (request type %s, form=%s, attachments=%d)",
            kind,
            result.ticket_key,
            request.request_type_id,
            request.form_answers is not None,
            len(request.request_field_values.get(ATTACHMENT_FIELD, [])),
        )
        return result
