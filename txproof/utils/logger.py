"""
Logging for txproof.

Library modules only ask for named children of the "txproof" logger
(txproof.merkle, txproof.commitment, txproof.cli) and never install
handlers. Whoever runs the code, normally the CLI, calls setup_logging()
once: records then go to stderr in color, and to logs/txproof.log when
file logging is enabled in ProofConfig.

stdout is left alone so commands can print JSON that pipes cleanly.
"""

import logging
import sys
from pathlib import Path
from typing import Optional

import colorlog

ROOT_LOGGER = "txproof"
LOG_FILE = "txproof.log"

RECORD_FORMAT = "%(asctime)s [%(name)s] %(levelname)-8s %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

LEVEL_COLORS = {
    "DEBUG": "cyan",
    "INFO": "green",
    "WARNING": "yellow",
    "ERROR": "red",
    "CRITICAL": "red,bg_white",
}


def _console_handler(level: int) -> logging.Handler:
    handler = colorlog.StreamHandler(sys.stderr)
    handler.setLevel(level)
    handler.setFormatter(colorlog.ColoredFormatter(
        "%(log_color)s" + RECORD_FORMAT.replace(" %(message)s", "%(reset)s %(message)s"),
        datefmt=DATE_FORMAT,
        log_colors=LEVEL_COLORS,
    ))
    return handler


def _file_handler(log_dir: Path, level: int) -> logging.Handler:
    log_dir.mkdir(parents=True, exist_ok=True)
    handler = logging.FileHandler(log_dir / LOG_FILE)
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(RECORD_FORMAT, datefmt=DATE_FORMAT))
    return handler


class TxProofLogger:
    """Owns the handlers attached to the txproof logger tree"""

    _initialized = False
    _log_dir: Optional[Path] = None

    @classmethod
    def setup(
        cls,
        level: int = logging.INFO,
        log_dir: Optional[str] = None,
        log_to_file: bool = False,
    ):
        """
        Attach console (and optionally file) handlers.

        Repeated calls are ignored until reset() runs, so a CLI invocation
        configures logging exactly once.

        Args:
            level: Threshold for both handlers
            log_dir: Where txproof.log goes (default ./logs)
            log_to_file: Also write records to log_dir/txproof.log
        """
        if cls._initialized:
            return

        root_logger = logging.getLogger(ROOT_LOGGER)
        root_logger.setLevel(level)
        root_logger.handlers.clear()
        root_logger.addHandler(_console_handler(level))

        if log_to_file:
            cls._log_dir = Path(log_dir) if log_dir else Path("logs")
            root_logger.addHandler(_file_handler(cls._log_dir, level))

        cls._initialized = True

    @classmethod
    def reset(cls):
        """Close and detach handlers so setup() can run again."""
        root_logger = logging.getLogger(ROOT_LOGGER)
        for handler in list(root_logger.handlers):
            handler.close()
            root_logger.removeHandler(handler)
        cls._initialized = False
        cls._log_dir = None

    @classmethod
    def get_logger(cls, name: str) -> logging.Logger:
        """Child logger for one module, e.g. 'merkle' -> txproof.merkle."""
        return logging.getLogger(f"{ROOT_LOGGER}.{name}")


def get_logger(name: str) -> logging.Logger:
    return TxProofLogger.get_logger(name)


def setup_logging(
    level: int = logging.INFO,
    log_dir: Optional[str] = None,
    log_to_file: bool = False,
):
    """Configure txproof logging from CLI or config values"""
    TxProofLogger.setup(level=level, log_dir=log_dir, log_to_file=log_to_file)
