"""Logging setup for the API and CLI, with credential masking."""

from __future__ import annotations

import json
import logging
import re
from datetime import datetime, timezone
from typing import Iterable, List, Sequence, Tuple

REDACTED = "[redacted]"

# (pattern, replacement) pairs; group 1 is the prefix kept in the output.
_MASKS: Tuple[Tuple[re.Pattern[str], str], ...] = (
    (re.compile(r"(Bearer\s+)([A-Za-z0-9\-._~+/=]+)", re.IGNORECASE), r"\1" + REDACTED),
    (re.compile(r"(apiKey=)([^&\s]+)", re.IGNORECASE), r"\1" + REDACTED),
    (
        re.compile(r"""(["'](?:password|token)["']\s*:\s*["'])([^"']*)""", re.IGNORECASE),
        r"\1" + REDACTED,
    ),
)

# Structured fields the access middleware attaches through ``extra``.
ACCESS_FIELDS = ("request_id", "method", "path", "status", "duration_ms")


def redact(message: str, secrets: Sequence[str] = ()) -> str:
    """Return ``message`` with auth headers, provider keys, passwords and ``secrets`` masked."""

    for pattern, replacement in _MASKS:
        message = pattern.sub(replacement, message)
    for secret in secrets:
        message = message.replace(secret, REDACTED)
    return message


class SensitiveDataFilter(logging.Filter):
    """Mask credentials in the rendered message and in string attributes of a record."""

    def __init__(self, secrets: Iterable[str]):
        super().__init__()
        self._secrets: List[str] = sorted(
            {secret.strip() for secret in secrets if secret and secret.strip()},
            key=len,
            reverse=True,
        )

    def filter(self, record: logging.LogRecord) -> bool:  # noqa: D401 - standard interface
        rendered = record.getMessage()
        masked = redact(rendered, self._secrets)
        if masked != rendered:
            record.msg = masked
            record.args = ()

        for key, value in list(vars(record).items()):
            if key != "msg" and isinstance(value, str):
                setattr(record, key, redact(value, self._secrets))
        return True


class JsonFormatter(logging.Formatter):
    """One JSON object per line; access-log fields are lifted to the top level."""

    def format(self, record: logging.LogRecord) -> str:  # noqa: D401 - override
        payload = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        for field in ACCESS_FIELDS:
            value = getattr(record, field, None)
            if value is not None:
                payload[field] = value
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=True, default=str)


def configure_logging(level_name: str, fmt: str, secrets: Iterable[str]) -> None:
    """Install a single redacting stream handler on the root logger."""

    level = getattr(logging, (level_name or "INFO").upper(), logging.INFO)

    handler = logging.StreamHandler()
    if (fmt or "plain").lower() == "json":
        handler.setFormatter(JsonFormatter())
    else:
        handler.setFormatter(
            logging.Formatter(
                "%(asctime)s | %(levelname)s | %(name)s | %(message)s",
                datefmt="%Y-%m-%dT%H:%M:%S%z",
            )
        )
    redactor = SensitiveDataFilter(secrets)
    handler.addFilter(redactor)

    root = logging.getLogger()
    root.handlers = [handler]
    root.setLevel(level)
    logging.captureWarnings(True)

    # httpx logs full request URLs, including the Spoonacular apiKey parameter.
    for name in ("uvicorn", "uvicorn.error", "uvicorn.access", "httpx"):
        library_logger = logging.getLogger(name)
        library_logger.handlers = []
        library_logger.setLevel(level)
        library_logger.propagate = True
        library_logger.addFilter(redactor)


__all__ = ["REDACTED", "JsonFormatter", "SensitiveDataFilter", "configure_logging", "redact"]
