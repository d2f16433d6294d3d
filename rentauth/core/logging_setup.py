"""Root logger setup (JSON lines in production, plain text elsewhere)."""

from __future__ import annotations

import logging

from pythonjsonlogger import jsonlogger

from .config import Settings

_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"


def configure_logging(settings: Settings) -> None:
    handler = logging.StreamHandler()
    if settings.log_json:
        formatter: logging.Formatter = jsonlogger.JsonFormatter(
            _FORMAT,
            rename_fields={"levelname": "level", "asctime": "timestamp"},
        )
    else:
        formatter = logging.Formatter(_FORMAT)
    handler.setFormatter(formatter)
    root = logging.getLogger()
    for existing in list(root.handlers):
        if getattr(existing, "_rentauth", False):
            root.removeHandler(existing)
    handler._rentauth = True  # type: ignore[attr-defined]
    root.addHandler(handler)
    root.setLevel(settings.log_level)
