"""
Logging helper module for terminal-first logging.

Every line is printed to stdout with a bracketed prefix and appended to a
timestamped file under logs/ (CALBOT_LOG_DIR overrides the directory). The
file is opened on first use so importing the core has no side effects.
"""

import os
from datetime import datetime
from pathlib import Path
from typing import Optional, TextIO

_DEFAULT_LOG_DIR = Path(__file__).parent.parent / "logs"

_log_file_path: Optional[Path] = None
_log_file: Optional[TextIO] = None


def configure(log_dir: Optional[Path] = None) -> Path:
    """
    Start a new log file in log_dir (default: CALBOT_LOG_DIR or <project>/logs).

    Returns:
        Path of the new log file
    """
    global _log_file_path, _log_file

    if log_dir is None:
        log_dir = Path(os.getenv("CALBOT_LOG_DIR", str(_DEFAULT_LOG_DIR)))
    log_dir.mkdir(parents=True, exist_ok=True)

    if _log_file is not None:
        _log_file.close()
    _log_file_path = log_dir / f"calbot_{datetime.now().strftime('%Y%m%d_%H%M%S')}.log"
    _log_file = open(_log_file_path, 'a', encoding='utf-8')
    return _log_file_path


def _log(message: str):
    """Write message to both stdout and log file."""
    if _log_file is None:
        configure()
    print(message)
    _log_file.write(message + '\n')
    _log_file.flush()


class Log:
    """Prefix-formatted output shared by every stage of the pipeline."""

    @staticmethod
    def section(title: str):
        """Print a section header: blank line + '===== TITLE ====='"""
        _log("")
        _log(f"===== {title} =====")

    @staticmethod
    def info(message: str):
        _log(f"[INFO] {message}")

    @staticmethod
    def warn(message: str):
        _log(f"[WARN] {message}")

    @staticmethod
    def error(message: str):
        _log(f"[ERROR] {message}")

    @staticmethod
    def kv(pairs: dict):
        """
        Print a stage record: '[KV] stage=decode | result=success'

        Args:
            pairs: Dictionary of key-value pairs; None values are skipped
        """
        kv_string = " | ".join(f"{k}={v}" for k, v in pairs.items() if v is not None)
        _log(f"[KV] {kv_string}")

    @staticmethod
    def get_log_path() -> str:
        """Get the path to the current log file."""
        if _log_file_path is None:
            configure()
        return str(_log_file_path)
