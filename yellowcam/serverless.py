"""Entry point for function hosts that deliver requests as event dicts.

The event carries ``httpMethod``, ``headers``, ``body`` and
``isBase64Encoded``; the return value is ``{"statusCode", "headers", "body"}``
with a JSON string body (empty for preflight).
"""

from __future__ import annotations

import asyncio
import json
from functools import lru_cache
from typing import Any

from yellowcam.config import DriveSettings
from yellowcam.handler import HandlerResponse, UploadHandler


@lru_cache(maxsize=1)
def default_handler() -> UploadHandler:
    return UploadHandler(DriveSettings.from_env())


def to_event_response(result: HandlerResponse) -> dict[str, Any]:
    body = "" if result.payload is None else json.dumps(result.payload)
    return {"statusCode": result.status_code, "headers": dict(result.headers), "body": body}


async def handle_event(event: dict[str, Any], upload_handler: UploadHandler | None = None) -> dict[str, Any]:
    upload_handler = upload_handler or default_handler()
    result = await upload_handler.handle(
        event.get("httpMethod") or "",
        event.get("headers") or {},
        event.get("body"),
        bool(event.get("isBase64Encoded")),
    )
    return to_event_response(result)


def handler(event: dict[str, Any], context: Any = None) -> dict[str, Any]:
    return asyncio.run(handle_event(event))
