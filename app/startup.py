"""Application startup.

Parses configuration, sets up logging, creates the transcriber and runs the
console front-end until the user quits.
"""
from __future__ import annotations

import sys
from typing import Optional

from loguru import logger

from app.application import Application
from config.service import ConfigurationService, ConfigurationServiceFactory
from core.exceptions import GradingException
from speech import BaseTranscriber
from speech.factory import create_transcriber


def configure_logging(level: str) -> None:
    logger.remove()
    logger.add(sys.stderr, level=level)


def run_application(argv: Optional[list[str]] = None) -> int:
    """Entry point; returns the process exit code."""
    config_service, unknown_args = ConfigurationServiceFactory.create_from_args(
        sys.argv[1:] if argv is None else argv
    )
    configure_logging(config_service.log_level)
    if unknown_args:
        logger.warning(f"Ignoring unknown arguments: {' '.join(unknown_args)}")

    transcriber = _create_transcriber_or_none(config_service)
    try:
        app_instance = Application(config_service, transcriber=transcriber)
    except GradingException as e:
        logger.error(str(e))
        return 2

    app_instance.log_session_info()
    front_end = app_instance.create_front_end()
    app_instance.signal_handler.install()
    try:
        front_end.run()
    finally:
        app_instance.cleanup()
    return 0


def _create_transcriber_or_none(config: ConfigurationService) -> Optional[BaseTranscriber]:
    """Create the configured engine; without one the session takes typed input only."""
    try:
        return create_transcriber(
            config.engine,
            model_path=config.model_path,
            executable=config.executable,
            language=config.language,
            grammar_path=config.grammar_path,
            grammar_penalty=config.grammar_penalty,
        )
    except Exception:
        logger.exception("Failed to create transcriber for engine {}", config.engine)
        return None
