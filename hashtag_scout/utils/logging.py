from __future__ import annotations

import logging
from typing import Union

_RESERVED = set(logging.LogRecord("", 0, "", 0, "", (), None).__dict__) | {"message", "asctime"}
_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


class ExtraFormatter(logging.Formatter):
    """Append fields passed through ``extra=`` as ``key=value`` pairs."""

    def format(self, record: logging.LogRecord) -> str:
        base = super().format(record)
        extras = {key: value for key, value in record.__dict__.items() if key not in _RESERVED}
        if not extras:
            return base
        fields = " ".join(f"{key}={value}" for key, value in sorted(extras.items()))
        return f"{base} [{fields}]"


def configure_logging(level: Union[str, int] = "INFO") -> None:
    if isinstance(level, str):
        level = level.upper()
    handler = logging.StreamHandler()
    handler.setFormatter(ExtraFormatter(_FORMAT))
    root = logging.getLogger()
    for existing in list(root.handlers):
        if isinstance(existing.formatter, ExtraFormatter):
            root.removeHandler(existing)
    root.addHandler(handler)
    root.setLevel(level)


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)
