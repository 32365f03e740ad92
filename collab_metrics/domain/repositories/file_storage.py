from abc import ABC, abstractmethod

from collab_metrics.domain.entities.submission import StorageTarget, StoredFile


class FileStorageInterface(ABC):
    """ファイルストレージのインターフェース（バイト列をアップロードして公開URLを返す）"""

    target: StorageTarget

    @abstractmethod
    async def upload(self, data: bytes, filename: str, content_type: str) -> StoredFile:
        """ファイルをアップロード"""
        pass
