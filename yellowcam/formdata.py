from __future__ import annotations

import base64
import binascii
import logging
from collections.abc import AsyncGenerator, Mapping
from dataclasses import dataclass, field
from typing import Any

from python_multipart.exceptions import FormParserError
from starlette.datastructures import Headers, UploadFile
from starlette.formparsers import MultiPartException, MultiPartParser

from yellowcam.errors import MultipartParseError, UnsupportedContentType
from yellowcam.models import UploadedFilePart

MULTIPART_FORM_DATA = "multipart/form-data"

logger = logging.getLogger(__name__)


@dataclass
class DecodedForm:
    fields: dict[str, str] = field(default_factory=dict)
    files: list[UploadedFilePart] = field(default_factory=list)


def raw_body_bytes(body: bytes | str | None, is_base64: bool) -> bytes:
    if body is None:
        return b""
    if is_base64:
        try:
            return base64.b64decode(body)
        except (binascii.Error, ValueError) as error:
            raise MultipartParseError(f"Request body is not valid base64: {error}") from error
    if isinstance(body, bytes):
        return body
    return body.encode("utf-8")


class _ClosingDelimiterParser(MultiPartParser):
    """Remembers whether the closing ``--boundary--`` delimiter was parsed."""

    def __init__(self, *args: Any, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self.reached_end = False

    def on_end(self) -> None:
        super().on_end()
        self.reached_end = True

    def close_spooled_files(self) -> None:
        for spooled in self._files_to_close_on_error:
            spooled.close()


async def _single_chunk(payload: bytes) -> AsyncGenerator[bytes, None]:
    yield payload
    yield b""


async def _read_file_part(field_name: str, upload: UploadFile) -> UploadedFilePart:
    try:
        content = await upload.read()
    finally:
        await upload.close()
    return UploadedFilePart(
        field_name=field_name,
        filename=upload.filename,
        mime_type=upload.content_type,
        content=content,
    )


async def decode_multipart(
    headers: Mapping[str, str],
    body: bytes | str | None,
    is_base64: bool = False,
) -> DecodedForm:
    """Parse a ``multipart/form-data`` body into its text fields and file parts.

    ``headers`` are looked up case-insensitively. The coroutine resolves once
    with every field and file fully read, or raises ``UnsupportedContentType``
    / ``MultipartParseError``.
    """
    request_headers = Headers(headers=dict(headers))
    content_type = request_headers.get("content-type", "")
    if MULTIPART_FORM_DATA not in content_type.lower():
        raise UnsupportedContentType()

    payload = raw_body_bytes(body, is_base64)
    parser = _ClosingDelimiterParser(request_headers, _single_chunk(payload))
    try:
        form = await parser.parse()
    except (MultiPartException, FormParserError) as error:
        raise MultipartParseError(f"Malformed multipart body: {error}") from error
    if not parser.reached_end:
        # No closing delimiter: the body was truncated or empty.
        await form.close()
        parser.close_spooled_files()
        raise MultipartParseError("Malformed multipart body: unexpected end of form")

    decoded = DecodedForm()
    try:
        for name, value in form.multi_items():
            if isinstance(value, UploadFile):
                decoded.files.append(await _read_file_part(name, value))
            else:
                decoded.fields[name] = value
    finally:
        await form.close()

    logger.debug("Decoded multipart body: fields=%d files=%d", len(decoded.fields), len(decoded.files))
    return decoded
