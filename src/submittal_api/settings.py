from __future__ import annotations

from dataclasses import dataclass, field
import logging
import os
import re

from submittal_api.branding import BrandProfile


DEFAULT_CONTENT_ORIGIN = (
    "https://raw.githubusercontent.com/karthikeyanasha24/pdf-packet-4/main/public"
)
DEFAULT_FETCH_USER_AGENT = "PDF-Packet-Generator/1.0"
_HARDENED_ENVIRONMENT_PATTERN = re.compile(r"^(production|prod|ci)(?:[-_].+)?$")
_LOG_LEVELS = frozenset({"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"})


@dataclass(frozen=True)
class Settings:
    app_name: str = "Submittal Packet API"
    environment: str = "development"
    content_origin: str = DEFAULT_CONTENT_ORIGIN
    fetch_user_agent: str = DEFAULT_FETCH_USER_AGENT
    fetch_timeout_seconds: float = 30.0
    fetch_max_bytes: int = 50 * 1024 * 1024
    packet_max_documents: int = 100
    cors_allowed_origins: tuple[str, ...] = ("*",)
    log_level: str = "INFO"
    brand: BrandProfile = field(default_factory=BrandProfile)


def parse_str_env(name: str, default: str | None = None) -> str | None:
    raw = os.getenv(name)
    if raw is None:
        return default
    normalized = raw.strip()
    if not normalized:
        return default
    return normalized


def parse_float_env(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return float(raw)
    except ValueError as exc:
        raise ValueError(f"{name} must be a numeric value, got {raw!r}") from exc


def parse_int_env(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError as exc:
        raise ValueError(f"{name} must be an integer value, got {raw!r}") from exc


def parse_csv_env(name: str, default: tuple[str, ...]) -> tuple[str, ...]:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    values = tuple(item.strip() for item in raw.split(",") if item.strip())
    if not values:
        return default
    return values


def is_hardened_environment(environment: str) -> bool:
    normalized = environment.strip().lower()
    if not normalized:
        return False
    return _HARDENED_ENVIRONMENT_PATTERN.fullmatch(normalized) is not None


def load_settings() -> Settings:
    environment = parse_str_env("ENVIRONMENT", "development") or "development"

    content_origin = (
        parse_str_env("PACKET_CONTENT_ORIGIN", DEFAULT_CONTENT_ORIGIN)
        or DEFAULT_CONTENT_ORIGIN
    )
    if not content_origin.lower().startswith(("http://", "https://")):
        raise ValueError("PACKET_CONTENT_ORIGIN must be an http(s) URL")

    fetch_timeout_seconds = parse_float_env("PACKET_FETCH_TIMEOUT_SECONDS", 30.0)
    if fetch_timeout_seconds <= 0:
        raise ValueError("PACKET_FETCH_TIMEOUT_SECONDS must be > 0")
    fetch_max_bytes = parse_int_env("PACKET_FETCH_MAX_BYTES", 50 * 1024 * 1024)
    if fetch_max_bytes < 1:
        raise ValueError("PACKET_FETCH_MAX_BYTES must be >= 1")
    packet_max_documents = parse_int_env("PACKET_MAX_DOCUMENTS", 100)
    if packet_max_documents < 1:
        raise ValueError("PACKET_MAX_DOCUMENTS must be >= 1")

    log_level = (parse_str_env("LOG_LEVEL", "INFO") or "INFO").upper()
    if log_level not in _LOG_LEVELS:
        raise ValueError(f"LOG_LEVEL must be one of: {', '.join(sorted(_LOG_LEVELS))}")

    return Settings(
        app_name=parse_str_env("API_APP_NAME", "Submittal Packet API")
        or "Submittal Packet API",
        environment=environment,
        content_origin=content_origin.rstrip("/"),
        fetch_user_agent=parse_str_env("PACKET_FETCH_USER_AGENT", DEFAULT_FETCH_USER_AGENT)
        or DEFAULT_FETCH_USER_AGENT,
        fetch_timeout_seconds=fetch_timeout_seconds,
        fetch_max_bytes=fetch_max_bytes,
        packet_max_documents=packet_max_documents,
        cors_allowed_origins=parse_csv_env("CORS_ALLOWED_ORIGINS", ("*",)),
        log_level=log_level,
    )


def configure_package_logging(settings: Settings) -> None:
    logging.getLogger("submittal_api").setLevel(settings.log_level)
