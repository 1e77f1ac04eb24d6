from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass

CLIENT_EMAIL_ENV = "GDRIVE_CLIENT_EMAIL"
PRIVATE_KEY_ENV = "GDRIVE_PRIVATE_KEY"
FOLDER_ID_ENV = "GDRIVE_FOLDER_ID"


@dataclass(frozen=True)
class DriveSettings:
    """Service-account credentials and the Drive folder clips are written to.

    Read once at process start. Missing values are not an error here; they
    surface when a storage client is built for a request.
    """

    client_email: str | None = None
    private_key: str | None = None
    folder_id: str | None = None

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> DriveSettings:
        env = os.environ if environ is None else environ
        return cls(
            client_email=env.get(CLIENT_EMAIL_ENV),
            private_key=env.get(PRIVATE_KEY_ENV),
            folder_id=env.get(FOLDER_ID_ENV),
        )

    def missing(self) -> list[str]:
        names = []
        if not self.client_email:
            names.append(CLIENT_EMAIL_ENV)
        if not self.private_key:
            names.append(PRIVATE_KEY_ENV)
        if not self.folder_id:
            names.append(FOLDER_ID_ENV)
        return names
