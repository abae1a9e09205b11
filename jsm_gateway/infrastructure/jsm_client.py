from __future__ import annotations
import base64
import binascii
import logging
from typing import Any, Mapping
import requests
from requests import HTTPError, RequestException
from requests.auth import HTTPBasicAuth
from jsm_gateway.application.errors import DownstreamError, UploadError
from jsm_gateway.config import JSMConfig
from jsm_gateway.domain.tickets import Attachment


logger = logging.getLogger(__name__)

class JSMClient:
    """HTTP client for the Jira Service Management service desk API.

        Uploads temporary attachments and creates customer requests using
        HTTP Basic auth built from the configured email and API key. No retries:
        a failed call is final for the request being served.
        """

    def __init__(self, config: JSMConfig) -> None:
        self._config = config
        self._session = requests.Session()
        self._auth = HTTPBasicAuth(config.api_email, config.api_key)

    def upload_temporary_attachment(self, service_desk_id: int, attachment: Attachment) -> str:
        """Upload one file and return its temporary attachment id.
            Raises:
                UploadError: on undecodable data, HTTP/network failure, or a response without an id.
            """

        try:
            file_bytes = base64.b64decode(attachment.file_data, validate=False)
        except (binascii.Error, ValueError) as exc:
            raise UploadError(f"fileData of {attachment.file_name!r} is not valid base64") from exc

        if len(file_bytes) != attachment.size:
            logger.debug(
                "Attachment %r decoded to %d bytes, caller reported %s",
                attachment.file_name,
                len(file_bytes),
                attachment.size,
            )

        url = f"{self._config.base_url}/rest/servicedeskapi/servicedesk/{service_desk_id}/attachTemporaryFile"
        try:
            response = self._session.post(
                url,
                auth=self._auth,
                headers={"X-Atlassian-Token": "no-check"},
                files={"file": (attachment.file_name, file_bytes, attachment.content_type)},
                timeout=self._config.timeout_seconds,
            )
            response.raise_for_status()
        except HTTPError as exc:
            msg = f"JSM attachment upload failed: {_status(exc)} {_body(exc)}"
            raise UploadError(msg) from exc
        except RequestException as exc:
            raise UploadError(f"Error calling JSM attachment endpoint: {exc}") from exc

        try:
            data = response.json()
        except ValueError as exc:
            raise UploadError("Failed to parse JSM attachment response as JSON") from exc

        handle = _extract_temporary_attachment_id(data)
        if handle is None:
            logger.error("Upload succeeded but no attachment id found in response: %r", data)
            raise UploadError("JSM attachment response has no temporaryAttachmentId")
        return handle

    def create_request(self, payload: Mapping[str, Any]) -> Mapping[str, Any]:
        """Create a customer request and return the parsed JSON response.
            Raises:
                DownstreamError: on HTTP/network failure or invalid JSON.
            """

        url = f"{self._config.base_url}/rest/servicedeskapi/request"
        logger.debug(
            "Submitting request to JSM: service desk %s, request type %s",
            payload.get("serviceDeskId"),
            payload.get("requestTypeId"),
        )

        try:
            response = self._session.post(
                url,
                auth=self._auth,
                headers={"Accept": "application/json"},
                json=payload,
                timeout=self._config.timeout_seconds,
            )
            response.raise_for_status()
        except HTTPError as exc:
            status = _status(exc)
            body = _body(exc)
            msg = f"JSM API error: {status} {body}"
            logger.error(msg)
            raise DownstreamError(msg, status_code=status, body=body) from exc
        except RequestException as exc:
            msg = f"Error calling JSM API: {exc}"
            logger.error(msg)
            raise DownstreamError(msg) from exc

        try:
            data = response.json()
        except ValueError as exc:
            msg = "Failed to parse JSM API response as JSON"
            logger.error(msg)
            raise DownstreamError(msg, status_code=response.status_code) from exc

        if not isinstance(data, dict):
            raise DownstreamError(
                f"Unexpected response format from JSM API: {type(data).__name__}",
                status_code=response.status_code,
            )
        return data

    def ticket_url(self, service_desk_id: int, issue_key: str) -> str:
        return f"{self._config.base_url}/servicedesk/customer/portal/{service_desk_id}/{issue_key}"

def _extract_temporary_attachment_id(data: Any) -> str | None:
    if not isinstance(data, dict):
        return None
    items = data.get("temporaryAttachments")
    if not isinstance(items, list) or not items or not isinstance(items[0], dict):
        return None
    handle = items[0].get("temporaryAttachmentId")
    return str(handle) if handle else None

def _status(exc: HTTPError) -> int | None:
    return exc.response.status_code if exc.response is not None else None

def _body(exc: HTTPError) -> str:
    return exc.response.text if exc.response is not None else str(exc)
