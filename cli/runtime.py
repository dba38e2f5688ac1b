"""Runtime boot helpers for Prompt Organizer CLI.

Updates:
  v0.1.1 - 2026-10-03 - Report unreadable logging configuration before falling back.
  v0.1.0 - 2026-09-22 - Logging configuration and LiteLLM logging toggle.
"""

from __future__ import annotations

import configparser
import logging
import logging.config
import sys
from pathlib import Path

DEFAULT_LOGGING_CONFIG = Path("config/logging.conf")
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def setup_logging(logging_conf_path: Path | None) -> None:
    """Configure logging using *logging_conf_path* when available."""
    path = logging_conf_path or DEFAULT_LOGGING_CONFIG
    if path.exists():
        try:
            logging.config.fileConfig(path, disable_existing_loggers=False)
            return
        except (OSError, KeyError, ValueError, configparser.Error) as exc:
            print(f"Ignoring logging configuration {path}: {exc}", file=sys.stderr)
    logging.basicConfig(level=logging.INFO, format=LOG_FORMAT)


def configure_litellm_logging(enabled: bool) -> None:
    """Enable or disable upstream LiteLLM library logs."""
    litellm_loggers = (
        logging.getLogger("LiteLLM"),
        logging.getLogger("litellm"),
        logging.getLogger("LiteLLM Router"),
    )
    for litellm_logger in litellm_loggers:
        litellm_logger.propagate = True
        if enabled:
            litellm_logger.disabled = False
            litellm_logger.setLevel(logging.NOTSET)
        else:
            litellm_logger.disabled = True
            litellm_logger.setLevel(logging.CRITICAL)


__all__ = ["configure_litellm_logging", "setup_logging"]
