from datetime import datetime, timezone
from typing import Optional


def ensure_utc(value: Optional[datetime]) -> Optional[datetime]:
    """タイムゾーン未指定の日時をUTCとして扱い、UTCに揃える"""
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def normalize_reference_time(reference_time: Optional[datetime]) -> datetime:
    if reference_time is None:
        return datetime.now(timezone.utc)
    return ensure_utc(reference_time)


def parse_iso_datetime(raw: Optional[str]) -> Optional[datetime]:
    """ISO8601文字列（末尾Z含む）をUTCのdatetimeに変換。解析できなければNone"""
    if not raw:
        return None
    try:
        dt = datetime.fromisoformat(raw.replace("Z", "+00:00"))
    except ValueError:
        return None
    return ensure_utc(dt)


def format_iso_datetime(value: datetime) -> str:
    return ensure_utc(value).isoformat()
