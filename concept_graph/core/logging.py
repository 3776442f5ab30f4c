import logging
import sys
from functools import lru_cache
from logging.handlers import TimedRotatingFileHandler
from pathlib import Path
from typing import Literal

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]

_LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# logs/ next to the package
_LOG_DIR = Path(__file__).parent.parent.parent / "logs"

# Symbols for visualising the build flow
FLOW_SYMBOLS = {
    "start": "╔",
    "node": "║",
    "arrow": "→",
    "end": "╚",
    "stage": "◆",
}


def _configure_root_logger(level: LogLevel) -> None:
    """Configure the root logger with console and file handlers."""
    root = logging.getLogger()
    if root.handlers:
        return

    # Silence noisy third-party loggers
    noisy_loggers = [
        "httpx",
        "httpcore",
        "httpcore.http11",
        "httpcore.connection",
        "groq",
        "aiosqlite",
        "sqlalchemy.engine",
        "urllib3",
    ]
    for logger_name in noisy_loggers:
        logging.getLogger(logger_name).setLevel(logging.WARNING)

    formatter = logging.Formatter(_LOG_FORMAT, _DATE_FORMAT)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(formatter)
    root.addHandler(console_handler)

    # Daily rotating file handler, keeps 7 days
    try:
        _LOG_DIR.mkdir(exist_ok=True)
        file_handler = TimedRotatingFileHandler(
            _LOG_DIR / "concept_graph.log",
            when="midnight",
            interval=1,
            backupCount=7,
            encoding="utf-8",
        )
        file_handler.setFormatter(formatter)
        root.addHandler(file_handler)
    except OSError:
        # Read-only filesystem: console only
        pass

    root.setLevel(level)


@lru_cache(maxsize=128)
def get_logger(name: str) -> logging.Logger:
    """
    Return a configured logger for the given module.

    Usage:
        from concept_graph.core.logging import get_logger
        logger = get_logger(__name__)
        logger.info("Message")
    """
    from concept_graph.core.config import settings

    _configure_root_logger(settings.log_level)
    return logging.getLogger(name)


class GraphLogger:
    """Logger specialised for tracing knowledge graph builds."""

    def __init__(self, component: str):
        self._logger = get_logger(f"graph.{component}")
        self.component = component

    def build_start(self, project_id: str, concept_count: int) -> None:
        """Log the start of a graph build."""
        self._logger.info("=" * 70)
        self._logger.info(f"{FLOW_SYMBOLS['start']}══ GRAPH BUILD START ══════════════════════════════════════════════")
        self._logger.info(f"{FLOW_SYMBOLS['node']} Project: {project_id} | Concepts: {concept_count}")
        self._logger.info(f"{FLOW_SYMBOLS['node']} Flow: extract → validate → resolve → persist")
        self._logger.info("=" * 70)

    def build_end(self, project_id: str, summary: dict) -> None:
        """Log the end of a graph build with per-stage counts."""
        self._logger.info("=" * 70)
        self._logger.info(f"{FLOW_SYMBOLS['end']}══ GRAPH BUILD COMPLETE ═══════════════════════════════════════════")
        self._logger.info(f"   {FLOW_SYMBOLS['stage']} Project: {project_id}")
        self._logger.info(f"   {FLOW_SYMBOLS['stage']} Candidates: {summary.get('extracted', 0)} extracted → {summary.get('valid', 0)} valid")
        self._logger.info(f"   {FLOW_SYMBOLS['stage']} Resolved: {summary.get('resolved', 0)} | Persisted: {summary.get('persisted', 0)}")
        self._logger.info("=" * 70)

    def stage(self, stage: str, message: str) -> None:
        self._logger.debug(f"{FLOW_SYMBOLS['node']} [{stage.upper()}] {FLOW_SYMBOLS['arrow']} {message}")

    def dropped(self, stage: str, reason: str) -> None:
        """Log a candidate excluded from the build."""
        self._logger.warning(f"{FLOW_SYMBOLS['node']} [{stage.upper()}] dropped candidate: {reason}")

    def error(self, stage: str, error: Exception) -> None:
        self._logger.error(f"{FLOW_SYMBOLS['node']} [{stage.upper()}] ERROR: {type(error).__name__}: {error}", exc_info=True)
