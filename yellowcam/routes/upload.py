from __future__ import annotations

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse, Response

from yellowcam.handler import HandlerResponse, UploadHandler

router = APIRouter()

# Every method is routed to the handler so it can answer preflight and 405 itself.
ALL_METHODS = ["GET", "HEAD", "POST", "PUT", "PATCH", "DELETE", "OPTIONS", "TRACE", "CONNECT"]


def to_starlette_response(result: HandlerResponse) -> Response:
    if result.payload is None:
        return Response(status_code=result.status_code, headers=result.headers)
    return JSONResponse(content=result.payload, status_code=result.status_code, headers=result.headers)


@router.get("/api/health")
async def health() -> dict[str, str]:
    return {"status": "ok"}


@router.api_route("/api/upload", methods=ALL_METHODS)
async def upload(request: Request) -> Response:
    handler: UploadHandler = request.app.state.upload_handler
    body = await request.body()
    result = await handler.handle(request.method, request.headers, body)
    return to_starlette_response(result)
