import os
from dotenv import load_dotenv

load_dotenv()

DATABASE_URL = os.getenv("DATABASE_URL", "").strip()

# Server (used by the root main.py runner)
HOST = os.getenv("HOST", "0.0.0.0").strip()
PORT = int((os.getenv("PORT", "8080").strip() or "8080"))

# Proxies whose X-Forwarded-For is believed. Only a local reverse proxy by
# default; set to the load balancer address(es) when deployed behind one.
# "*" lets any client pick its own IP and dodge the rate limit.
FORWARDED_ALLOW_IPS = os.getenv("FORWARDED_ALLOW_IPS", "127.0.0.1").strip()

# CORS: unset -> localhost dev origin, "*" -> any origin, "a,b" -> allow-list
CORS_ORIGIN = os.getenv("CORS_ORIGIN")
DEFAULT_CORS_ORIGIN = "http://localhost:3000"

# Rate limiting (per client IP)
RATE_LIMIT_ENABLED = os.getenv("RATE_LIMIT_ENABLED", "1").lower() in ("1", "true", "yes", "on")
RATE_LIMIT_PER_MINUTE = int(os.getenv("RATE_LIMIT_PER_MINUTE", "30"))
RATE_LIMIT_STORAGE_URI = os.getenv("RATE_LIMIT_STORAGE_URI", "memory://").strip()

# Request body cap in bytes (1 MB)
MAX_BODY_BYTES = int(os.getenv("MAX_BODY_BYTES", str(1024 * 1024)))

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
