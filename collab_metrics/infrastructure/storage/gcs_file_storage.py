"""
Google Cloud Storageを使用した提出ファイルの保存
メディア用・ドキュメント用でバケットを分けて2インスタンス生成する
"""
import asyncio
import logging
import os
import uuid
from typing import Optional

from google.cloud import storage

from collab_metrics.domain.entities.submission import StorageTarget, StoredFile
from collab_metrics.domain.repositories.file_storage import FileStorageInterface

logger = logging.getLogger(__name__)


class GCSFileStorage(FileStorageInterface):
    """Google Cloud Storageへのファイルアップロード"""

    def __init__(
        self,
        bucket_name: str,
        target: StorageTarget,
        prefix: str = "submissions",
        client: Optional[storage.Client] = None,
    ):
        self.bucket_name = bucket_name
        self.target = target
        self.prefix = prefix.strip("/")
        self.client = client or storage.Client()
        self.bucket = self.client.bucket(bucket_name)

    def _build_object_name(self, filename: str) -> str:
        """衝突しないランダムなオブジェクト名（拡張子は元ファイルを引き継ぐ）"""
        _, ext = os.path.splitext(filename)
        name = f"{uuid.uuid4().hex}{ext.lower()}"
        return f"{self.prefix}/{name}" if self.prefix else name

    async def upload(self, data: bytes, filename: str, content_type: str) -> StoredFile:
        object_name = self._build_object_name(filename)
        blob = self.bucket.blob(object_name)
        try:
            await asyncio.to_thread(blob.upload_from_string, data, content_type=content_type)
        except Exception as e:
            logger.error(f"❌ GCSアップロードエラー ({self.bucket_name}/{object_name}): {e}")
            raise

        logger.info(f"✅ GCSにアップロード完了: {self.bucket_name}/{object_name} ({len(data)} bytes)")
        return StoredFile(
            name=filename,
            url=blob.public_url,
            content_type=content_type,
            size=len(data),
            storage_target=self.target,
            path=object_name,
        )
