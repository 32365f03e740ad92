"""テスト用のNotionクライアント（databases.query / pages.* のみ）"""
import uuid
from typing import Any, Dict, List, Optional

import httpx
from notion_client import APIErrorCode, APIResponseError


def _matches(page: Dict[str, Any], filter: Optional[Dict[str, Any]]) -> bool:
    if not filter:
        return True
    prop = page.get("properties", {}).get(filter["property"], {})
    if "rich_text" in filter:
        text = "".join(item["text"]["content"] for item in prop.get("rich_text", []))
        return text == filter["rich_text"]["equals"]
    if "people" in filter:
        return any(person.get("id") == filter["people"]["contains"] for person in prop.get("people", []))
    raise AssertionError(f"unsupported filter: {filter}")


class _Databases:
    def __init__(self, notion: "FakeNotionClient"):
        self._notion = notion

    def query(self, database_id: str, page_size: int = 100, filter=None, start_cursor=None) -> Dict[str, Any]:
        self._notion.queries.append({"database_id": database_id, "filter": filter, "start_cursor": start_cursor})
        pages = [
            page
            for page in self._notion.pages_by_id.values()
            if page["parent"]["database_id"] == database_id and _matches(page, filter)
        ]
        page_size = min(page_size, self._notion.max_page_size)
        offset = int(start_cursor) if start_cursor else 0
        chunk = pages[offset : offset + page_size]
        has_more = offset + page_size < len(pages)
        return {
            "results": chunk,
            "has_more": has_more,
            "next_cursor": str(offset + page_size) if has_more else None,
        }


class _Pages:
    def __init__(self, notion: "FakeNotionClient"):
        self._notion = notion

    def retrieve(self, page_id: str) -> Dict[str, Any]:
        if self._notion.retrieve_error is not None:
            raise self._notion.retrieve_error
        if page_id not in self._notion.pages_by_id:
            raise api_error(APIErrorCode.ObjectNotFound, 404)
        return self._notion.pages_by_id[page_id]

    def create(self, parent: Dict[str, Any], properties: Dict[str, Any]) -> Dict[str, Any]:
        page = {
            "id": str(uuid.uuid4()),
            "parent": parent,
            "created_time": "2024-01-01T00:00:00.000Z",
            "last_edited_time": "2024-01-01T00:00:00.000Z",
            "properties": properties,
        }
        self._notion.pages_by_id[page["id"]] = page
        self._notion.created.append(page["id"])
        return page

    def update(self, page_id: str, properties: Dict[str, Any]) -> Dict[str, Any]:
        page = self._notion.pages_by_id[page_id]
        page["properties"].update(properties)
        self._notion.updated.append(page_id)
        return page


class FakeNotionClient:
    def __init__(self, max_page_size: int = 100):
        self.max_page_size = max_page_size
        self.pages_by_id: Dict[str, Dict[str, Any]] = {}
        self.queries: List[Dict[str, Any]] = []
        self.created: List[str] = []
        self.updated: List[str] = []
        self.retrieve_error: Optional[Exception] = None
        self.databases = _Databases(self)
        self.pages = _Pages(self)

    def add_page(
        self,
        database_id: str,
        page_id: str,
        properties: Dict[str, Any],
        created_time: Optional[str] = "2024-01-01T00:00:00.000Z",
        last_edited_time: Optional[str] = None,
    ) -> Dict[str, Any]:
        page = {
            "id": page_id,
            "parent": {"database_id": database_id},
            "created_time": created_time,
            "last_edited_time": last_edited_time,
            "properties": properties,
        }
        self.pages_by_id[page_id] = page
        return page


def rich_text(content: str) -> Dict[str, Any]:
    return {"rich_text": [{"type": "text", "text": {"content": content}, "plain_text": content}]}


def title(content: str) -> Dict[str, Any]:
    return {"title": [{"type": "text", "text": {"content": content}, "plain_text": content}]}


def select(name: str) -> Dict[str, Any]:
    return {"select": {"name": name}}


def status(name: str) -> Dict[str, Any]:
    return {"status": {"name": name}}


def people(*members) -> Dict[str, Any]:
    return {"people": [{"object": "user", "id": member_id, "name": name} for member_id, name in members]}


def date(start: str) -> Dict[str, Any]:
    return {"date": {"start": start}}


def api_error(code: APIErrorCode, status: int) -> APIResponseError:
    """Notion APIのエラーレスポンスを模したAPIResponseError"""
    response = httpx.Response(status, json={"object": "error", "status": status, "code": code.value, "message": code.value})
    return APIResponseError(response, code.value, code)
