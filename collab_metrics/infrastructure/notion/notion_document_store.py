from __future__ import annotations

import asyncio
import logging
from typing import Any, Dict, List, Optional

from notion_client import APIErrorCode, APIResponseError, Client

logger = logging.getLogger(__name__)

_PAGE_SIZE = 100


class NotionDocumentStore:
    """Notionデータベースをドキュメントストアとして扱うラッパー

    notion_client は同期クライアントのため、API呼び出しはスレッドに逃がして
    イベントループを塞がないようにする。
    """

    def __init__(self, notion_token: str = "", client: Optional[Client] = None) -> None:
        self.client = client or Client(auth=notion_token)

    @staticmethod
    def normalize_database_id(database_id: str) -> str:
        """データベースIDを正規化（ハイフンを削除）"""
        return database_id.replace("-", "")

    async def query_all(
        self,
        database_id: str,
        filter: Optional[Dict[str, Any]] = None,
    ) -> List[Dict[str, Any]]:
        """条件に一致する全ページを取得（has_more / next_cursor でページング）"""
        pages: List[Dict[str, Any]] = []
        has_more = True
        start_cursor: Optional[str] = None

        while has_more:
            payload: Dict[str, Any] = {
                "database_id": self.normalize_database_id(database_id),
                "page_size": _PAGE_SIZE,
            }
            if filter:
                payload["filter"] = filter
            if start_cursor:
                payload["start_cursor"] = start_cursor

            response = await asyncio.to_thread(self.client.databases.query, **payload)
            pages.extend(response.get("results", []))

            has_more = response.get("has_more", False)
            start_cursor = response.get("next_cursor")

        logger.info(f"📊 Notionから取得: {len(pages)}件 (db={database_id})")
        return pages

    async def query_first(self, database_id: str, filter: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        response = await asyncio.to_thread(
            self.client.databases.query,
            database_id=self.normalize_database_id(database_id),
            page_size=1,
            filter=filter,
        )
        results = response.get("results", [])
        return results[0] if results else None

    async def retrieve_page(self, page_id: str) -> Optional[Dict[str, Any]]:
        """ページを取得。存在しない（object_not_found）場合のみNone、それ以外のエラーは呼び出し元へ"""
        try:
            return await asyncio.to_thread(self.client.pages.retrieve, page_id=page_id)
        except APIResponseError as e:
            if e.code != APIErrorCode.ObjectNotFound:
                logger.error(f"❌ ページ取得エラー {page_id}: {e}")
                raise
            logger.warning(f"⚠️ ページが見つかりません: {page_id}")
            return None

    async def create_page(self, database_id: str, properties: Dict[str, Any]) -> Dict[str, Any]:
        page = await asyncio.to_thread(
            self.client.pages.create,
            parent={"database_id": self.normalize_database_id(database_id)},
            properties=properties,
        )
        logger.info(f"✅ ページ作成: {page.get('id')}")
        return page

    async def update_page(self, page_id: str, properties: Dict[str, Any]) -> Dict[str, Any]:
        page = await asyncio.to_thread(self.client.pages.update, page_id=page_id, properties=properties)
        logger.info(f"🔁 ページ更新: {page_id}")
        return page
