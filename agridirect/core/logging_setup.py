import logging
import logging.handlers
from pathlib import Path
from typing import Optional

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s - %(message)s"
LOG_FILENAME = "agridirect.log"


def _has_handler(logger: logging.Logger, marker: str) -> bool:
    return any(getattr(h, "_agridirect", None) == marker for h in logger.handlers)


def setup_logging(settings) -> Optional[Path]:
    """Configure the root logger and wire uvicorn/fastapi loggers to it.

    Logs go to stderr, and also to a rotating file under LOG_DIR when set.
    Returns the log file path, if any. Safe to call more than once.
    """
    level = getattr(logging, str(settings.LOG_LEVEL).upper(), logging.INFO)
    fmt = logging.Formatter(LOG_FORMAT)

    handlers = []
    stream = logging.StreamHandler()
    stream.setFormatter(fmt)
    stream._agridirect = "stream"
    handlers.append(stream)

    log_path = None
    if settings.LOG_DIR:
        log_dir = Path(settings.LOG_DIR).expanduser()
        log_dir.mkdir(parents=True, exist_ok=True)
        log_path = log_dir / LOG_FILENAME
        rotating = logging.handlers.RotatingFileHandler(
            log_path, maxBytes=5_000_000, backupCount=3, encoding="utf-8"
        )
        rotating.setFormatter(fmt)
        rotating._agridirect = "file"
        handlers.append(rotating)

    root = logging.getLogger()
    root.setLevel(level)
    for handler in handlers:
        if not _has_handler(root, handler._agridirect):
            root.addHandler(handler)

    # uvicorn installs its own stream handlers; only share the file one
    for name in ("uvicorn", "uvicorn.error", "uvicorn.access", "fastapi"):
        lg = logging.getLogger(name)
        lg.setLevel(level)
        for handler in handlers:
            if handler._agridirect == "file" and not _has_handler(lg, "file"):
                lg.addHandler(handler)

    return log_path
