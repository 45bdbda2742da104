"""
Logging setup for hasura-deploy.

Provides a text or JSON formatter for the package logger and a filter that
masks registered secrets so they never reach CI logs.
"""

import json
import logging
from datetime import datetime, timezone
from typing import Optional

UTC = timezone.utc

PACKAGE_LOGGER = "hasura_deploy"
MASK = "***"

# Attributes every LogRecord has; anything else was passed via ``extra``
_RESERVED_ATTRS = frozenset(vars(logging.makeLogRecord({}))) | {"message", "asctime"}


class SecretMaskingFilter(logging.Filter):
    """Replace registered secret values in log records with a mask."""

    def __init__(self):
        super().__init__()
        self._secrets: set[str] = set()

    def register(self, secret: Optional[str]) -> None:
        if secret:
            self._secrets.add(secret)

    def clear(self) -> None:
        self._secrets.clear()

    def mask(self, text: str) -> str:
        # Longest first so a secret containing another is fully hidden
        for secret in sorted(self._secrets, key=len, reverse=True):
            text = text.replace(secret, MASK)
        return text

    def filter(self, record: logging.LogRecord) -> bool:
        if self._secrets:
            record.msg = self.mask(record.getMessage())
            record.args = None
        return True


secret_filter = SecretMaskingFilter()


def register_secret(secret: Optional[str]) -> None:
    """Mask ``secret`` in every subsequent log line."""
    secret_filter.register(secret)


class JsonFormatter(logging.Formatter):
    """Format records as single-line JSON objects."""

    def format(self, record: logging.LogRecord) -> str:
        log_data = {
            'level': record.levelname,
            'message': record.getMessage(),
            'logger': record.name,
            'timestamp': datetime.now(UTC).isoformat(),
        }

        for key, value in vars(record).items():
            if key not in _RESERVED_ATTRS and key not in log_data:
                log_data[key] = value

        if record.exc_info:
            log_data['exception'] = self.formatException(record.exc_info)

        return secret_filter.mask(json.dumps(log_data, default=str))


class MaskingFormatter(logging.Formatter):
    """Text formatter that also masks secrets in tracebacks."""

    def format(self, record: logging.LogRecord) -> str:
        return secret_filter.mask(super().format(record))


def _create_text_formatter() -> logging.Formatter:
    return MaskingFormatter(' - '.join([
        '%(asctime)s',
        '[%(levelname)s]',
        '%(name)s',
        '%(message)s',
    ]))


def configure_logging(verbose: bool = False, json_format: bool = False) -> logging.Logger:
    """
    Configure the package logger.

    Args:
        verbose: Emit DEBUG records
        json_format: Use JSON output instead of plain text

    Returns:
        The configured package logger
    """
    level = logging.DEBUG if verbose else logging.INFO
    logger = logging.getLogger(PACKAGE_LOGGER)
    logger.setLevel(level)

    # Remove existing handlers to avoid duplicates
    logger.handlers = []

    handler = logging.StreamHandler()
    handler.setLevel(level)
    handler.setFormatter(JsonFormatter() if json_format else _create_text_formatter())
    handler.addFilter(secret_filter)

    logger.addHandler(handler)
    logger.propagate = False
    return logger
