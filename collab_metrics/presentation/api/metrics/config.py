from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    env: str = "local"
    data_backend: str = Field("notion", description="notion または memory")
    notion_token: str = ""
    notion_projects_database_id: str = ""
    notion_tasks_database_id: str = ""
    notion_submissions_database_id: str = ""
    notion_collab_submissions_database_id: Optional[str] = None
    gcs_media_bucket_name: str = ""
    gcs_document_bucket_name: str = ""
    submission_upload_prefix: str = "submissions"
    max_concurrency: int = 8

    model_config = SettingsConfigDict(
        env_file=".env",
        populate_by_name=True,
        extra="ignore",
    )

    @property
    def app_name_suffix(self) -> str:
        """環境に応じてアプリ名の接尾辞を返す"""
        if self.env == "production":
            return ""
        else:
            return " (Dev)"

    @property
    def uses_notion(self) -> bool:
        return self.data_backend.strip().lower() == "notion"

    @property
    def submission_database_ids(self) -> list:
        """評価の取得元となる提出物DB（プロジェクト → コラボレーションの順）"""
        ids = [self.notion_submissions_database_id]
        if self.notion_collab_submissions_database_id:
            ids.append(self.notion_collab_submissions_database_id)
        return [database_id for database_id in ids if database_id]
