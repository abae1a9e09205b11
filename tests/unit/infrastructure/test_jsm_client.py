from typing import Any
from unittest.mock import Mock
import pytest
from requests import ConnectionError, HTTPError
from jsm_gateway.application.errors import DownstreamError, UploadError
from jsm_gateway.config import JSMConfig
from jsm_gateway.domain.tickets import Attachment
from jsm_gateway.infrastructure.jsm_client import JSMClient


CONFIG = JSMConfig(
    base_url="https://jsm.example.com",
    api_email="bot@example.com",
    api_key="dummy-key",
    timeout_seconds=5.0,
)

ATTACHMENT = Attachment(file_name="hello.txt", content_type="text/plain", file_data="aGVsbG8=", size=5)

def _make_client_with_mock_session(json_payload: Any) -> tuple[JSMClient, Mock]:
    client = JSMClient(CONFIG)

    mock_session = Mock()
    mock_response = Mock()
    mock_response.status_code = 200
    mock_response.raise_for_status = Mock()
    mock_response.json = Mock(return_value=json_payload)

    mock_session.post = Mock(return_value=mock_response)

    client._session = mock_session                                                  # type: ignore[attr-defined]
    return client, mock_session

def _make_client_with_failing_session(status_code: int, text: str) -> JSMClient:
    client = JSMClient(CONFIG)

    error_response = Mock()
    error_response.status_code = status_code
    error_response.text = text

    mock_session = Mock()
    mock_response = Mock()
    mock_response.raise_for_status.side_effect = HTTPError(f"{status_code}", response=error_response)
    mock_session.post.return_value = mock_response

    client._session = mock_session                                                  # type: ignore[attr-defined]
    return client

def test_upload_returns_temporary_attachment_id() -> None:
    client, session = _make_client_with_mock_session(
        {"temporaryAttachments": [{"temporaryAttachmentId": "temp-abc", "fileName": "hello.txt"}]}
    )

    handle = client.upload_temporary_attachment(2, ATTACHMENT)

    assert handle == "temp-abc"
    args, kwargs = session.post.call_args
    assert args[0] == "https://jsm.example.com/rest/servicedeskapi/servicedesk/2/attachTemporaryFile"
    assert kwargs["files"] == {"file": ("hello.txt", b"hello", "text/plain")}
    assert kwargs["headers"]["X-Atlassian-Token"] == "no-check"
    assert kwargs["auth"].username == "bot@example.com"
    assert kwargs["timeout"] == 5.0

def test_upload_without_attachment_id_raises() -> None:
    client, _ = _make_client_with_mock_session({"temporaryAttachments": []})

    with pytest.raises(UploadError):
        client.upload_temporary_attachment(2, ATTACHMENT)

def test_upload_http_error_is_wrapped_in_upload_error() -> None:
    client = _make_client_with_failing_session(413, "file too large")

    with pytest.raises(UploadError, match="413 file too large"):
        client.upload_temporary_attachment(2, ATTACHMENT)

def test_upload_network_error_is_wrapped_in_upload_error() -> None:
    client = JSMClient(CONFIG)
    mock_session = Mock()
    mock_session.post.side_effect = ConnectionError("connection refused")
    client._session = mock_session                                                  # type: ignore[attr-defined]

    with pytest.raises(UploadError):
        client.upload_temporary_attachment(2, ATTACHMENT)

def test_upload_invalid_base64_raises_before_calling_out() -> None:
    client, session = _make_client_with_mock_session({})
    bad = Attachment(file_name="x.bin", content_type="application/octet-stream", file_data="abc", size=3)

    with pytest.raises(UploadError):
        client.upload_temporary_attachment(2, bad)

    session.post.assert_not_called()

def test_create_request_returns_json() -> None:
    client, session = _make_client_with_mock_session({"issueKey": "SUPP-42", "issueId": "10001"})
    payload = {"serviceDeskId": 2, "requestTypeId": 17, "requestFieldValues": {"summary": "S"}}

    result = client.create_request(payload)

    assert result["issueKey"] == "SUPP-42"
    args, kwargs = session.post.call_args
    assert args[0] == "https://jsm.example.com/rest/servicedeskapi/request"
    assert kwargs["json"] == payload

def test_create_request_http_error_carries_status_and_body() -> None:
    client = _make_client_with_failing_session(400, '{"errorMessage": "Field summary is required"}')

    with pytest.raises(DownstreamError) as exc_info:
        client.create_request({"serviceDeskId": 2})

    assert exc_info.value.status_code == 400
    assert "Field summary is required" in (exc_info.value.body or "")

def test_create_request_invalid_json_raises() -> None:
    client, session = _make_client_with_mock_session(None)
    session.post.return_value.json.side_effect = ValueError("invalid json")

    with pytest.raises(DownstreamError):
        client.create_request({"serviceDeskId": 2})

def test_ticket_url() -> None:
    client = JSMClient(CONFIG)

    assert client.ticket_url(2, "SUPP-7") == "https://jsm.example.com/servicedesk/customer/portal/2/SUPP-7"
