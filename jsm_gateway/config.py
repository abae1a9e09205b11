from dataclasses import dataclass
import os
from dotenv import load_dotenv


load_dotenv()

TRUTHY = {"1", "true", "yes", "on"}

@dataclass(frozen=True)
class JSMConfig:
    base_url: str
    api_email: str
    api_key: str
    timeout_seconds: float = 30.0

@dataclass(frozen=True)
class AppConfig:
    api_version: str = "1.0.0"
    environment: str = "development"
    public_url: str | None = None
    strict_mapping: bool = False

def _get_required_env(name: str) -> str:
    value = os.getenv(name)
    if not value:
        raise RuntimeError(f"Environment variable {name} is required but not set")
    return value

def _get_float_env(name: str, default: float) -> float:
    raw = os.getenv(name)
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError as exc:
        raise RuntimeError(f"Environment variable {name} must be a number, got {raw!r}") from exc

def load_jsm_config() -> JSMConfig:
    base_url = _get_required_env("JSM_BASE_URL")
    api_email = _get_required_env("JIRA_API_EMAIL")
    api_key = _get_required_env("JIRA_API_KEY")

    return JSMConfig(
        base_url=base_url.rstrip("/"),
        api_email=api_email,
        api_key=api_key,
        timeout_seconds=_get_float_env("JSM_TIMEOUT_SECONDS", 30.0),
    )

def load_app_config() -> AppConfig:
    return AppConfig(
        environment=os.getenv("APP_ENV") or "development",
        public_url=os.getenv("PUBLIC_URL") or None,
        strict_mapping=(os.getenv("STRICT_FIELD_MAPPING") or "").strip().lower() in TRUTHY,
    )
