"""Application entry point for Prompt Organizer.

Updates:
  v0.2.0 - 2026-10-04 - Confirm destructive commands interactively unless --yes is given.
  v0.1.1 - 2026-09-30 - Apply LiteLLM logging toggle from settings.
  v0.1.0 - 2026-09-22 - Wire settings, organizer and CLI command dispatch.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import TYPE_CHECKING

from cli.commands import COMMAND_SPECS
from cli.parser import parse_args
from cli.runtime import configure_litellm_logging, setup_logging
from cli.settings_summary import print_settings_summary
from cli.utils import make_interactive_confirm
from config import SettingsError, load_settings
from core import PromptOrganizerError, build_organizer

if TYPE_CHECKING:
    from config import OrganizerSettings
    from core import ConfirmCallback, PromptOrganizer


def _initialise_organizer(
    settings: OrganizerSettings,
    confirm: ConfirmCallback,
    logger: logging.Logger,
) -> PromptOrganizer | None:
    try:
        return build_organizer(settings, confirm=confirm)
    except (PromptOrganizerError, OSError) as exc:
        logger.error("Failed to initialise services: %s", exc)
        return None


def main(argv: Sequence[str] | None = None) -> int:
    """Entrypoint that wires settings, services, and CLI commands."""
    args = parse_args(argv)
    setup_logging(args.logging_config)

    logger = logging.getLogger("prompt_organizer.main")
    try:
        settings = load_settings()
    except SettingsError as exc:
        logger.error("Failed to load settings: %s", exc)
        return 2

    configure_litellm_logging(settings.litellm_logging_enabled)
    if args.print_settings:
        print_settings_summary(settings)
        return 0

    spec = COMMAND_SPECS[getattr(args, "command", None)]
    confirm = make_interactive_confirm(assume_yes=bool(getattr(args, "assume_yes", False)))
    organizer = _initialise_organizer(settings, confirm, logger)
    if organizer is None:
        return 3
    return spec.handler(organizer, settings, args, logger)


if __name__ == "__main__":
    raise SystemExit(main())
