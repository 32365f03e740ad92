from typing import Optional

from collab_metrics.domain.entities.submission import StorageTarget

_MEDIA_TYPES = {"image", "video", "audio"}


def classify_storage_target(content_type: Optional[str]) -> StorageTarget:
    """MIMEタイプの先頭（image/video/audio）ならメディア、それ以外はドキュメント"""
    if not content_type:
        return StorageTarget.DOCUMENT
    top_level = content_type.split("/", 1)[0].strip().lower()
    if top_level in _MEDIA_TYPES:
        return StorageTarget.MEDIA
    return StorageTarget.DOCUMENT


class FileRoutingDomainService:
    """MIMEタイプからアップロード先ストレージを判定"""

    def classify(self, content_type: Optional[str]) -> StorageTarget:
        return classify_storage_target(content_type)
