from __future__ import annotations

import re
from datetime import datetime, timezone

# Hero 3 era cameras write GOPR0001.MP4; newer ones GH010001.MP4 / GO010001.MP4
# (two-digit chapter followed by a four-digit sequence).
_LEGACY_DEVICE_NAME = re.compile(r"GOPR[0-9]{4}\.MP4")
_CHAPTERED_DEVICE_NAME = re.compile(r"G[HO][0-9]{2}[0-9]{4}\.MP4")
_CAMERA_CODE_REJECT = re.compile(r"[^A-Za-z0-9_-]")

REMOTE_NAME_PREFIX = "YC"
UNKNOWN_CAMERA_CODE = "NA"


def is_known_device_filename(filename: str | None) -> bool:
    if not filename:
        return False
    upper = filename.upper()
    if _LEGACY_DEVICE_NAME.fullmatch(upper):
        return True
    return _CHAPTERED_DEVICE_NAME.fullmatch(upper) is not None


def sanitize_camera_code(raw: str | None) -> str:
    if raw is None:
        return UNKNOWN_CAMERA_CODE
    return _CAMERA_CODE_REJECT.sub("", raw) or UNKNOWN_CAMERA_CODE


def isoformat_utc(moment: datetime) -> str:
    """Render ``moment`` as ``YYYY-MM-DDTHH:MM:SS.mmmZ``.

    Naive datetimes are taken to already be in UTC.
    """
    if moment.tzinfo is not None:
        moment = moment.astimezone(timezone.utc)
    return moment.strftime("%Y-%m-%dT%H:%M:%S.") + f"{moment.microsecond // 1000:03d}Z"


def timestamp_slug(moment: datetime) -> str:
    return isoformat_utc(moment).replace(":", "-").replace(".", "-")


def remote_filename(camera_code: str | None, slug: str, original: str) -> str:
    return f"{REMOTE_NAME_PREFIX}-{sanitize_camera_code(camera_code)}_{slug}_{original}"
