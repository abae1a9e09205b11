from __future__ import annotations
import logging
from collections.abc import Sequence
from jsm_gateway.application.errors import UploadError
from jsm_gateway.application.ports.jsm_service_port import AttachmentUploader
from jsm_gateway.domain.tickets import Attachment


logger = logging.getLogger(__name__)

def attachment_problem(attachment: Attachment) -> str | None:
    """Return why an attachment cannot be uploaded, or None when it looks valid."""
    if not isinstance(attachment.file_name, str) or not attachment.file_name:
        return "missing or invalid fileName"
    if not isinstance(attachment.content_type, str) or not attachment.content_type:
        return "missing or invalid contentType"
    if not isinstance(attachment.file_data, str) or not attachment.file_data:
        return "missing or invalid fileData"
    size = attachment.size
    if isinstance(size, bool) or not isinstance(size, (int, float)) or size <= 0:
        return "missing or invalid size"
    return None

def upload_attachments(
    uploader: AttachmentUploader,
    service_desk_id: int,
    attachments: Sequence[Attachment],
) -> list[str]:
    """Upload attachments one at a time, in order, and return the handles that succeeded.

        Invalid attachments and failed uploads are logged and skipped; they never
        stop the remaining uploads or the ticket itself.
        """

    if not attachments:
        return []

    handles: list[str] = []
    for index, attachment in enumerate(attachments):
        problem = attachment_problem(attachment)
        if problem is not None:
            logger.error("Skipping attachment #%d: %s", index, problem)
            continue

        try:
            handle = uploader.upload_temporary_attachment(service_desk_id, attachment)
        except UploadError as exc:
            logger.error("Failed to upload attachment %r: %s", attachment.file_name, exc)
            continue

        logger.debug("Uploaded %r as temporary attachment %s", attachment.file_name, handle)
        handles.append(handle)

    logger.info(
        "Attachment processing complete: requested=%d uploaded=%d",
        len(attachments),
        len(handles),
    )
    return handles
