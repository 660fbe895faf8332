"""Centralized logging configuration."""

from __future__ import annotations

import logging
import sys
from pathlib import Path

from .config import settings


def setup_logging(log_dir: Path | None = None) -> logging.Logger:
    """Configure the root logger and return the application logger.

    ``settings.log_output`` selects the handlers:
    - 'stdout': write to console (default)
    - 'file': write to <data_root>/logs/app.log
    - 'both': write to both
    """
    output = settings.log_output
    handlers: list[logging.Handler] = []

    if output in ("stdout", "both"):
        handlers.append(logging.StreamHandler(sys.stdout))

    if output in ("file", "both"):
        target_dir = log_dir or settings.data_root / "logs"
        try:
            target_dir.mkdir(parents=True, exist_ok=True)
            handlers.append(logging.FileHandler(target_dir / "app.log", encoding="utf-8"))
        except (OSError, PermissionError):
            # If file logging fails, ensure we at least have stdout
            if not any(isinstance(h, logging.StreamHandler) for h in handlers):
                handlers.append(logging.StreamHandler(sys.stdout))

    if not handlers:
        handlers.append(logging.StreamHandler(sys.stdout))

    logging.basicConfig(
        level=getattr(logging, settings.log_level.upper(), logging.INFO),
        format="%(asctime)s - %(levelname)s - %(message)s",
        handlers=handlers,
    )

    return logging.getLogger("opr_builder")
