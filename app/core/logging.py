import logging
from typing import Optional

from .config import LOG_LEVEL

logging.basicConfig(
    level=LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s %(message)s",
)

logger = logging.getLogger("rsvp")

_LEVELS = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warning": logging.WARNING,
    "error": logging.ERROR,
}


def log_evt(level: str, action: str, ip: Optional[str] = None, exc_info: bool = False, **fields):
    """Log one RSVP-pipeline event as `action=... ip=... key=value` on the rsvp logger.

    Fields set to None are left out. Pass exc_info=True from an except block
    to attach the traceback.
    """
    parts = [f"action={action}"]
    if ip is not None:
        parts.append(f"ip={ip}")
    parts.extend(f"{k}={v}" for k, v in fields.items() if v is not None)

    logger.log(_LEVELS.get(level.lower(), logging.INFO), " ".join(parts), exc_info=exc_info)
