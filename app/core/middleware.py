from fastapi import Request, Response
from fastapi.responses import JSONResponse

from .config import MAX_BODY_BYTES
from .logging import log_evt

PAYLOAD_TOO_LARGE_MESSAGE = "Payload too large"


class PayloadTooLarge(Exception):
    """Request body grew past MAX_BODY_BYTES while being read."""

    def __init__(self, size: int, limit: int):
        super().__init__(f"body of at least {size} bytes exceeds {limit}")
        self.size = size
        self.limit = limit


async def read_body_capped(request: Request, limit: int = MAX_BODY_BYTES) -> bytes:
    """Read the request body, counting actual bytes so chunked uploads are capped too."""
    body = bytearray()
    async for chunk in request.stream():
        body += chunk
        if len(body) > limit:
            raise PayloadTooLarge(len(body), limit)
    return bytes(body)


async def body_size_middleware(request: Request, call_next) -> Response:
    """Reject requests whose declared Content-Length exceeds MAX_BODY_BYTES."""
    raw = request.headers.get("content-length")
    if raw is not None:
        try:
            size = int(raw)
        except ValueError:
            return JSONResponse(status_code=400, content={"ok": False, "error": "Invalid Content-Length"})
        if size > MAX_BODY_BYTES:
            log_evt("warning", "payload_too_large", path=request.url.path, size=size, limit=MAX_BODY_BYTES)
            return JSONResponse(status_code=413, content={"ok": False, "error": PAYLOAD_TOO_LARGE_MESSAGE})

    return await call_next(request)
