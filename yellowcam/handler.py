from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any

from starlette.concurrency import run_in_threadpool

from yellowcam.config import DriveSettings
from yellowcam.errors import GENERIC_UPLOAD_ERROR, NoFilesProvided
from yellowcam.filenames import (
    is_known_device_filename,
    isoformat_utc,
    remote_filename,
    timestamp_slug,
)
from yellowcam.formdata import decode_multipart
from yellowcam.models import UploadedFilePart, UploadFailure, UploadResult, UploadSuccess
from yellowcam.storage import DriveDestination, build_client

DEFAULT_FILENAME = "clip.mp4"
DEFAULT_MIME_TYPE = "video/mp4"
PROJECT_LABEL = "Yellow Camera Project raw clip"

JSON_HEADERS = {"Content-Type": "application/json"}
ALLOW_ORIGIN = {"Access-Control-Allow-Origin": "*"}
PREFLIGHT_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "POST, OPTIONS",
    "Access-Control-Allow-Headers": "Content-Type",
}

logger = logging.getLogger(__name__)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class HandlerResponse:
    status_code: int
    headers: dict[str, str] = field(default_factory=dict)
    payload: dict[str, Any] | None = None


def build_description(
    fields: Mapping[str, str],
    *,
    original_name: str,
    uploaded_at: str,
    verified: bool,
) -> str:
    lines = [
        PROJECT_LABEL,
        f"Original filename: {original_name}",
        f"Camera ID: {fields.get('camera_id') or 'unknown-camera'}",
        f"Camera code: {fields.get('camera_code') or 'no-code'}",
        f"Location: {fields.get('location') or 'unknown-location'}",
        f"Date filmed: {fields['date_filmed']}" if fields.get("date_filmed") else "",
        f"Person: {fields['name']}" if fields.get("name") else "",
        f"Contact: {fields['email']}" if fields.get("email") else "",
        f"Share link: {fields['share_link']}" if fields.get("share_link") else "",
        f"Upload time: {uploaded_at}",
        f"Verified Yellow Camera filename pattern: {'yes' if verified else 'no'}",
    ]
    return "\n".join(line for line in lines if line)


def _error_response(status_code: int, message: str) -> HandlerResponse:
    return HandlerResponse(
        status_code=status_code,
        headers={**JSON_HEADERS, **ALLOW_ORIGIN},
        payload=UploadFailure(error=message).to_json_dict(),
    )


class UploadHandler:
    """Turns one upload request into a JSON acknowledgement.

    Files are stored one at a time in input order. The first failure ends the
    request with a 500; files stored before it stay in Drive.
    """

    def __init__(
        self,
        settings: DriveSettings,
        *,
        client_factory: Callable[[DriveSettings], DriveDestination] = build_client,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self._settings = settings
        self._client_factory = client_factory
        self._clock = clock

    async def handle(
        self,
        method: str,
        headers: Mapping[str, str],
        body: bytes | str | None,
        is_base64: bool = False,
    ) -> HandlerResponse:
        if method == "OPTIONS":
            return HandlerResponse(status_code=204, headers=dict(PREFLIGHT_HEADERS))
        if method != "POST":
            return HandlerResponse(
                status_code=405,
                headers=dict(JSON_HEADERS),
                payload=UploadFailure(error="Method Not Allowed").to_json_dict(),
            )

        try:
            uploads = await self._store_all(headers, body, is_base64)
        except NoFilesProvided as error:
            return HandlerResponse(
                status_code=400,
                headers=dict(JSON_HEADERS),
                payload=UploadFailure(error=str(error)).to_json_dict(),
            )
        except Exception as error:
            logger.exception("Upload error")
            return _error_response(500, str(error) or GENERIC_UPLOAD_ERROR)

        return HandlerResponse(
            status_code=200,
            headers={**JSON_HEADERS, **ALLOW_ORIGIN},
            payload=UploadSuccess(uploaded_count=len(uploads), uploads=uploads).to_json_dict(),
        )

    async def _store_all(
        self,
        headers: Mapping[str, str],
        body: bytes | str | None,
        is_base64: bool,
    ) -> list[UploadResult]:
        form = await decode_multipart(headers, body, is_base64)
        if not form.files:
            raise NoFilesProvided()

        destination = self._client_factory(self._settings)
        now = self._clock()
        uploaded_at = isoformat_utc(now)
        slug = timestamp_slug(now)

        uploads = []
        for part in form.files:
            uploads.append(await self._store_one(destination, form.fields, part, uploaded_at, slug))
        return uploads

    async def _store_one(
        self,
        destination: DriveDestination,
        fields: Mapping[str, str],
        part: UploadedFilePart,
        uploaded_at: str,
        slug: str,
    ) -> UploadResult:
        original = part.filename or DEFAULT_FILENAME
        verified = is_known_device_filename(original)
        name = remote_filename(fields.get("camera_code"), slug, original)
        description = build_description(
            fields,
            original_name=original,
            uploaded_at=uploaded_at,
            verified=verified,
        )

        created = await run_in_threadpool(
            destination.create_file,
            name=name,
            description=description,
            content=part.content,
            mime_type=part.mime_type or DEFAULT_MIME_TYPE,
        )
        result = UploadResult(
            id=created["id"],
            name=created.get("name", name),
            original_name=original,
            verified=verified,
            size_bytes=part.size,
        )
        logger.info(
            "Stored clip id=%s name=%s bytes=%d verified=%s",
            result.id,
            result.name,
            result.size_bytes,
            result.verified,
        )
        return result
