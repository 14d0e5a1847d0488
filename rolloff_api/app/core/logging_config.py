"""
Logging configuration for the API and the uvicorn server.

``setup_logging`` installs a console handler, and optionally a file
handler, on the root logger.  The uvicorn loggers are stripped of their
own handlers and propagate to the root, so request logs and container
events share one format and one log file.  ``run.py`` starts uvicorn
with ``log_config=None`` so it does not reinstall its defaults.
"""

import logging
from pathlib import Path
from typing import Optional


LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
SERVER_LOGGERS = ("uvicorn", "uvicorn.error", "uvicorn.access")

# Marks handlers installed here, so handlers added by other tools
# (pytest, an embedding application) are left alone.
_HANDLER_FLAG = "_rolloff_handler"


def _installed_handlers(logger: logging.Logger) -> list[logging.Handler]:
    return [h for h in logger.handlers if getattr(h, _HANDLER_FLAG, False)]


def setup_logging(level: str = "INFO", logfile: Optional[str] = None, force: bool = False) -> None:
    """Configure root and server loggers.

    Parameters
    ----------
    level : str
        Logging level name (e.g. ``"DEBUG"``, ``"INFO"``).  Case
        insensitive; unknown names fall back to ``INFO``.
    logfile : Optional[str]
        Path to a file to log messages to.  If omitted or empty, no
        file handler is added.
    force : bool
        Replace handlers from an earlier call instead of keeping them.
        Without it, only the first call in a process has any effect.
    """
    root = logging.getLogger()
    previous = _installed_handlers(root)
    if previous and not force:
        return
    for handler in previous:
        root.removeHandler(handler)
        handler.close()

    numeric_level = getattr(logging, level.upper(), logging.INFO)
    root.setLevel(numeric_level)

    formatter = logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT)
    handlers: list[logging.Handler] = [logging.StreamHandler()]
    if logfile:
        handlers.append(logging.FileHandler(Path(logfile).resolve(), encoding="utf-8"))
    for handler in handlers:
        setattr(handler, _HANDLER_FLAG, True)
        handler.setFormatter(formatter)
        root.addHandler(handler)

    for name in SERVER_LOGGERS:
        server_logger = logging.getLogger(name)
        server_logger.handlers.clear()
        server_logger.propagate = True
        server_logger.setLevel(numeric_level)
