"""Notionページのプロパティ値の読み書きヘルパー"""
from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, List, Optional, Tuple

from collab_metrics.utils.time_utils import format_iso_datetime, parse_iso_datetime

_MAX_TEXT_LENGTH = 2000


def extract_title(prop: Optional[Dict[str, Any]]) -> Optional[str]:
    if not prop:
        return None
    return _join_rich_text(prop.get("title", []))


def extract_text(prop: Optional[Dict[str, Any]]) -> Optional[str]:
    if not prop:
        return None
    return _join_rich_text(prop.get("rich_text", []))


def extract_number(prop: Optional[Dict[str, Any]]) -> Optional[float]:
    if not prop:
        return None
    return prop.get("number")


def extract_url(prop: Optional[Dict[str, Any]]) -> Optional[str]:
    if not prop:
        return None
    return prop.get("url") or None


def extract_select(prop: Optional[Dict[str, Any]]) -> Optional[str]:
    """select / status どちらの型でも名前を返す"""
    if not prop:
        return None
    option = prop.get("select") or prop.get("status")
    if not option:
        return None
    return option.get("name")


def extract_date(prop: Optional[Dict[str, Any]]) -> Optional[datetime]:
    if not prop:
        return None
    payload = prop.get("date")
    if not payload:
        return None
    return parse_iso_datetime(payload.get("start"))


def extract_people(prop: Optional[Dict[str, Any]]) -> List[Tuple[str, str]]:
    """Peopleプロパティから (id, name) の一覧を取得"""
    if not prop:
        return []
    people = prop.get("people")
    if not isinstance(people, list):
        return []
    result: List[Tuple[str, str]] = []
    for person in people:
        person_id = person.get("id")
        if not person_id:
            continue
        result.append((person_id, person.get("name") or ""))
    return result


def _join_rich_text(items: List[Dict[str, Any]]) -> Optional[str]:
    parts = []
    for item in items:
        text = item.get("plain_text") or item.get("text", {}).get("content")
        if text:
            parts.append(text)
    return "".join(parts) if parts else None


def title_property(content: str) -> Dict[str, Any]:
    return {"title": [{"type": "text", "text": {"content": content[:_MAX_TEXT_LENGTH]}}]}


def text_property(content: Optional[str]) -> Dict[str, Any]:
    if not content:
        return {"rich_text": []}
    return {"rich_text": [{"type": "text", "text": {"content": content[:_MAX_TEXT_LENGTH]}}]}


def select_property(name: Optional[str]) -> Dict[str, Any]:
    return {"select": {"name": name} if name else None}


def number_property(value: Optional[float]) -> Dict[str, Any]:
    return {"number": value}


def url_property(value: Optional[str]) -> Dict[str, Any]:
    return {"url": value or None}


def date_property(value: Optional[datetime]) -> Dict[str, Any]:
    if value is None:
        return {"date": None}
    return {"date": {"start": format_iso_datetime(value)}}
