from __future__ import annotations

from fastapi import FastAPI

from yellowcam.config import DriveSettings
from yellowcam.handler import UploadHandler
from yellowcam.routes.upload import router as upload_router


def create_app(
    settings: DriveSettings | None = None,
    *,
    handler: UploadHandler | None = None,
) -> FastAPI:
    if settings is None:
        settings = DriveSettings.from_env()

    app = FastAPI(title="yellowcam")
    app.state.settings = settings
    app.state.upload_handler = handler if handler is not None else UploadHandler(settings)

    # No CORSMiddleware: it would answer preflight requests before the upload
    # handler can, and the handler already sets the CORS headers it needs.
    app.include_router(upload_router)
    return app
