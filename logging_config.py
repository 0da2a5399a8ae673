import logging
import sys
from typing import Optional

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

_configured = False


def setup_logging(log_level: str = "INFO", log_file: Optional[str] = None):
    """Configure the root logger once for the whole process.

    Subsequent calls only adjust the level, so modules that call this at
    import time (app.py, entrypoint.py) do not stack handlers.
    """
    global _configured
    root = logging.getLogger()
    level = getattr(logging, str(log_level).upper(), logging.INFO)
    root.setLevel(level)

    if _configured:
        return

    formatter = logging.Formatter(LOG_FORMAT)

    stream_handler = logging.StreamHandler(sys.stdout)
    stream_handler.setFormatter(formatter)
    root.addHandler(stream_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file)
        file_handler.setFormatter(formatter)
        root.addHandler(file_handler)

    # uvicorn's access log is noisy with websocket upgrades
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    _configured = True


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)
