"""Run the RSVP API with uvicorn: `python main.py`.

uvicorn handles SIGINT/SIGTERM by running the app's shutdown hooks, which
close the database engine before the process exits.
"""

import uvicorn

from app.core.config import FORWARDED_ALLOW_IPS, HOST, LOG_LEVEL, PORT
from app.core.logging import logger


def main() -> None:
    logger.info("Backend listening on port %s", PORT)
    uvicorn.run(
        "app.main:app",
        host=HOST,
        port=PORT,
        # Resolve the client IP from X-Forwarded-For behind a reverse proxy
        proxy_headers=True,
        forwarded_allow_ips=FORWARDED_ALLOW_IPS,
        log_level=LOG_LEVEL.lower(),
    )


if __name__ == "__main__":
    main()
