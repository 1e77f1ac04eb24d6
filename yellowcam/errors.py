from __future__ import annotations

GENERIC_UPLOAD_ERROR = "Unexpected error during upload."
NO_FILES_MESSAGE = "No video files found in upload."


class UploadError(Exception):
    """Base class for failures while handling an upload request."""


class UnsupportedContentType(UploadError):
    def __init__(self, message: str = "Unsupported content type. Expected multipart/form-data.") -> None:
        super().__init__(message)


class MultipartParseError(UploadError):
    pass


class MissingConfiguration(UploadError):
    def __init__(self, missing: list[str]) -> None:
        self.missing = list(missing)
        super().__init__(f"Missing one or more env vars: {', '.join(self.missing)}")


class NoFilesProvided(UploadError):
    def __init__(self, message: str = NO_FILES_MESSAGE) -> None:
        super().__init__(message)


class RemoteUploadFailure(UploadError):
    def __init__(self, *, filename: str, detail: str) -> None:
        self.filename = filename
        self.detail = detail
        super().__init__(f"Upload of {filename} failed: {detail}")
