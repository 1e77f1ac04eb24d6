from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

UPLOAD_COMPLETE_MESSAGE = (
    "Upload complete. Your Yellow Camera clip has been saved. You can now pass the camera on."
)


class CamelCaseModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_json_dict(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True)


class UploadedFilePart(BaseModel):
    model_config = ConfigDict(frozen=True)

    field_name: str
    filename: str | None = None
    mime_type: str | None = None
    content: bytes = b""

    @property
    def size(self) -> int:
        return len(self.content)


class UploadResult(CamelCaseModel):
    id: str
    name: str
    original_name: str
    verified: bool
    size_bytes: int


class UploadSuccess(CamelCaseModel):
    ok: bool = True
    message: str = UPLOAD_COMPLETE_MESSAGE
    uploaded_count: int
    uploads: list[UploadResult] = Field(default_factory=list)


class UploadFailure(CamelCaseModel):
    ok: bool = False
    error: str
