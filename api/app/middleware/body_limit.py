"""Request body size limit middleware."""

import logging

from starlette.datastructures import Headers
from starlette.exceptions import HTTPException
from starlette.responses import JSONResponse

logger = logging.getLogger(__name__)

# Allowance for multipart boundaries and part headers
MULTIPART_ENVELOPE_BYTES = 1 << 20


class BodySizeLimitMiddleware:
    """Cap request bodies before the framework buffers them.

    Multipart forms are parsed, and every file part spooled to disk, before
    the endpoint or its auth dependency runs. This middleware counts the
    bytes as they are received and aborts with 413 as soon as the running
    total passes the route's limit:

    - ``.../thumbnail``: thumbnail ceiling plus the multipart allowance
    - ``.../video``: video ceiling plus the multipart allowance
    - anything else: the larger of the two

    A declared Content-Length over the limit is rejected before reading.
    """

    def __init__(
        self,
        app,
        max_thumbnail_bytes: int,
        max_video_bytes: int,
        envelope_bytes: int = MULTIPART_ENVELOPE_BYTES,
    ):
        self.app = app
        self.thumbnail_limit = max_thumbnail_bytes + envelope_bytes
        self.video_limit = max_video_bytes + envelope_bytes
        self.default_limit = max(self.thumbnail_limit, self.video_limit)

    def limit_for(self, path: str) -> int:
        """Get the body limit for a request path."""
        path = path.rstrip("/")
        if path.endswith("/thumbnail"):
            return self.thumbnail_limit
        if path.endswith("/video"):
            return self.video_limit
        return self.default_limit

    async def __call__(self, scope, receive, send):
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        path = scope.get("path", "")
        limit = self.limit_for(path)

        content_length = Headers(scope=scope).get("content-length")
        if content_length is not None:
            try:
                declared = int(content_length)
            except ValueError:
                response = JSONResponse(status_code=400, content={"detail": "Invalid Content-Length"})
                await response(scope, receive, send)
                return
            if declared > limit:
                logger.info(f"Rejected {scope.get('method')} {path}: declared {declared} bytes exceeds {limit}")
                response = JSONResponse(status_code=413, content={"detail": "Request body too large"})
                await response(scope, receive, send)
                return

        received = 0
        response_started = False

        async def limited_receive():
            nonlocal received
            message = await receive()
            if message["type"] == "http.request":
                received += len(message.get("body", b""))
                if received > limit:
                    logger.info(f"Aborted {scope.get('method')} {path}: body passed {limit} bytes")
                    raise HTTPException(status_code=413, detail="Request body too large")
            return message

        async def tracking_send(message):
            nonlocal response_started
            if message["type"] == "http.response.start":
                response_started = True
            await send(message)

        try:
            await self.app(scope, limited_receive, tracking_send)
        except HTTPException as e:
            # Raised from receive outside a route's exception handling
            if e.status_code != 413 or response_started:
                raise
            response = JSONResponse(status_code=413, content={"detail": e.detail})
            await response(scope, receive, send)
