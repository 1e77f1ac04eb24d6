from __future__ import annotations

import io
import logging
from dataclasses import dataclass
from typing import Any

from google.auth.exceptions import GoogleAuthError
from google.oauth2 import service_account
from googleapiclient.discovery import build
from googleapiclient.errors import HttpError
from googleapiclient.http import MediaIoBaseUpload

from yellowcam.config import DriveSettings
from yellowcam.errors import MissingConfiguration, RemoteUploadFailure

# Only files this service account created are visible to it.
DRIVE_FILE_SCOPE = "https://www.googleapis.com/auth/drive.file"
GOOGLE_TOKEN_URI = "https://oauth2.googleapis.com/token"
CREATED_FILE_FIELDS = "id, name"

logger = logging.getLogger(__name__)


def normalize_private_key(raw: str) -> str:
    return raw.replace("\\n", "\n")


@dataclass(frozen=True)
class DriveDestination:
    service: Any
    folder_id: str

    def create_file(self, *, name: str, description: str, content: bytes, mime_type: str) -> dict[str, Any]:
        media = MediaIoBaseUpload(io.BytesIO(content), mimetype=mime_type, resumable=False)
        metadata = {
            "name": name,
            "parents": [self.folder_id],
            "description": description,
        }
        try:
            return (
                self.service.files()
                .create(body=metadata, media_body=media, fields=CREATED_FILE_FIELDS)
                .execute()
            )
        except HttpError as error:
            detail = f"Drive returned HTTP {error.resp.status}: {error.reason or 'no reason given'}"
            raise RemoteUploadFailure(filename=name, detail=detail) from error
        except GoogleAuthError as error:
            raise RemoteUploadFailure(filename=name, detail=f"authentication failed: {error}") from error


def build_credentials(settings: DriveSettings) -> service_account.Credentials:
    info = {
        "type": "service_account",
        "client_email": settings.client_email,
        "private_key": normalize_private_key(settings.private_key or ""),
        "token_uri": GOOGLE_TOKEN_URI,
    }
    return service_account.Credentials.from_service_account_info(info, scopes=[DRIVE_FILE_SCOPE])


def build_client(settings: DriveSettings) -> DriveDestination:
    """Authenticate against Drive v3 with the configured service account.

    Raises ``MissingConfiguration`` when any setting is absent. Token exchange
    is deferred to the first API call, so nothing here touches the network.
    """
    missing = settings.missing()
    if missing:
        raise MissingConfiguration(missing)

    credentials = build_credentials(settings)
    service = build("drive", "v3", credentials=credentials, cache_discovery=False)
    logger.debug("Built Drive client for %s", settings.client_email)
    return DriveDestination(service=service, folder_id=settings.folder_id)
