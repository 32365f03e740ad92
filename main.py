import logging
import os
from typing import Optional

import uvicorn
from dotenv import load_dotenv
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from collab_metrics.presentation.api.metrics.config import Settings
from collab_metrics.presentation.api.metrics_endpoints import router as metrics_router

# .env を環境変数へ展開（Settings も .env を読むが、LOG_LEVEL 等のために先に読む）
load_dotenv()

logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO"),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

APP_VERSION = "1.0.0"


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """アプリケーションファクトリー"""
    settings = settings or Settings()
    service_name = f"Collaboration Metrics Service{settings.app_name_suffix}"

    app = FastAPI(
        title=service_name,
        description="プロジェクト・タスク・提出物からダッシュボード用の指標を算出するAPI",
        version=APP_VERSION,
    )

    # フロントエンド（別オリジン）から直接呼ばれる
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(metrics_router)

    @app.get("/")
    async def root():
        return {
            "message": f"{service_name} is running",
            "environment": settings.env,
            "data_backend": settings.data_backend,
            "version": APP_VERSION,
        }

    @app.get("/health")
    async def health_check():
        return {"status": "healthy"}

    logger.info(f"🚀 {service_name} v{APP_VERSION} (env={settings.env}, backend={settings.data_backend})")
    return app


app = create_app()

if __name__ == "__main__":
    is_prod = Settings().env == "production"

    uvicorn.run(
        "main:app",
        host="0.0.0.0",
        port=int(os.getenv("PORT", "8000")),
        reload=not is_prod,
        workers=int(os.getenv("UVICORN_WORKERS", "1")),
    )
