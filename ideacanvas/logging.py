"""loguru configuration and request correlation helpers."""

from __future__ import annotations

import sys
import uuid
from contextvars import ContextVar
from typing import Optional

from loguru import logger

from ideacanvas.config import settings

correlation_id_var: ContextVar[Optional[str]] = ContextVar("correlation_id", default=None)

_LOG_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> | "
    "{extra[correlation_id]} | {message}"
)


def _inject_correlation_id(record) -> None:
    record["extra"].setdefault("correlation_id", get_correlation_id() or "-")


def configure_logging(level: Optional[str] = None) -> None:
    """Replace loguru's default sink with a stderr sink at *level*.

    Safe to call repeatedly; every call resets the handlers.
    """
    logger.remove()
    logger.configure(patcher=_inject_correlation_id)
    logger.add(sys.stderr, level=level or settings.log_level, format=_LOG_FORMAT)


def get_correlation_id() -> Optional[str]:
    return correlation_id_var.get()


def set_correlation_id(cid: Optional[str] = None) -> str:
    """Set the correlation id for the current context, generating one if needed."""
    if cid is None:
        cid = str(uuid.uuid4())
    correlation_id_var.set(cid)
    return cid
