# movment/core/logging.py
import logging

from movment.core.config import settings

_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def setup_logging(level: str | None = None) -> None:
    lvl = getattr(logging, (level or settings.LOG_LEVEL).upper(), logging.INFO)
    root = logging.getLogger()
    if not root.handlers:
        logging.basicConfig(level=lvl, format=_FORMAT)
    root.setLevel(lvl)
    # uvicorn access logs are noisy next to the request logs we already emit
    logging.getLogger("uvicorn.access").setLevel(max(lvl, logging.WARNING))
