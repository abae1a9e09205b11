from __future__ import annotations
import copy
import logging
from pathlib import Path
from typing import Any
import yaml


logger = logging.getLogger(__name__)

DEFAULT_OPENAPI_PATH = Path(__file__).resolve().parent.parent / "data" / "openapi.yaml"

class OpenAPIDocumentError(RuntimeError):
    """Raised when the bundled OpenAPI document cannot be loaded."""

def load_openapi_document(path: Path = DEFAULT_OPENAPI_PATH) -> dict[str, Any]:
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8"))
    except (OSError, yaml.YAMLError) as exc:
        msg = f"Failed to load OpenAPI document from {path}"
        logger.error("%s: %s", msg, exc)
        raise OpenAPIDocumentError(msg) from exc

    if not isinstance(data, dict) or "paths" not in data:
        raise OpenAPIDocumentError("OpenAPI document has no 'paths'")
    return data

def render_openapi_document(document: dict[str, Any], public_url: str | None, version: str) -> dict[str, Any]:
    """Copy of the document with the server URL and API version filled in."""
    rendered = copy.deepcopy(document)
    rendered.setdefault("info", {})["version"] = version
    if public_url:
        rendered["servers"] = [{"url": public_url, "description": "Production server"}]
    return rendered
