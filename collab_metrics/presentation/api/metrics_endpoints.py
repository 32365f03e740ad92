import logging
from functools import lru_cache
from typing import Awaitable, List, Optional, TypeVar

from fastapi import APIRouter, Depends, File, Form, HTTPException, UploadFile

from collab_metrics.application.dto.metrics_dto import (
    DashboardResponseDto,
    ProgressTrackingResponseDto,
    ProjectAnalyticsResponseDto,
    ProjectSummaryDto,
)
from collab_metrics.application.dto.submission_dto import (
    ReviewSubmissionRequestDto,
    SubmissionResponseDto,
    SubmissionTypeDto,
    SubmitWorkRequestDto,
    UploadedFileDto,
)
from collab_metrics.application.errors import EntityNotFoundError
from collab_metrics.presentation.api.metrics.context import MetricsDependencies, build_metrics_dependencies

logger = logging.getLogger(__name__)

T = TypeVar("T")

router = APIRouter(prefix="/api", tags=["metrics"])


@lru_cache(maxsize=1)
def get_dependencies() -> MetricsDependencies:
    dependencies = build_metrics_dependencies()
    logger.info(f"🚀 Collaboration metrics initialized (env={dependencies.settings.env})")
    return dependencies


async def _handle(operation: str, awaitable: Awaitable[T]) -> T:
    """アプリケーション層の例外をHTTPエラーに変換"""
    try:
        return await awaitable
    except EntityNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        logger.error(f"❌ {operation} failed: {e}")
        raise HTTPException(status_code=502, detail=f"Failed to load {operation}")


@router.get("/projects/{project_id}/analytics", response_model=ProjectAnalyticsResponseDto)
async def get_project_analytics(project_id: str, deps: MetricsDependencies = Depends(get_dependencies)):
    """プロジェクト分析（進捗・分布・メンバー別生産性・期間）"""
    return await _handle("project analytics", deps.project_analytics_service.get_project_analytics(project_id))


@router.get("/members/{member_id}/projects", response_model=List[ProjectSummaryDto])
async def list_member_projects(member_id: str, deps: MetricsDependencies = Depends(get_dependencies)):
    return await _handle("projects", deps.project_analytics_service.list_member_projects(member_id))


@router.get("/members/{member_id}/progress", response_model=ProgressTrackingResponseDto)
async def get_member_progress(
    member_id: str,
    project_id: Optional[str] = None,
    deps: MetricsDependencies = Depends(get_dependencies),
):
    """個人の進捗トラッキング"""
    return await _handle("progress", deps.progress_tracking_service.get_progress(member_id, project_id))


@router.get("/members/{member_id}/dashboard", response_model=DashboardResponseDto)
async def get_member_dashboard(member_id: str, deps: MetricsDependencies = Depends(get_dependencies)):
    return await _handle("dashboard", deps.dashboard_service.get_dashboard(member_id))


@router.post("/submissions", response_model=SubmissionResponseDto, status_code=201)
async def submit_work(
    task_id: str = Form(...),
    user_id: str = Form(...),
    user_name: str = Form(""),
    submission_type: SubmissionTypeDto = Form(SubmissionTypeDto.FILE),
    notes: str = Form(""),
    link: Optional[str] = Form(None),
    file: Optional[UploadFile] = File(None),
    deps: MetricsDependencies = Depends(get_dependencies),
):
    """作業提出（ファイルはMIMEタイプに応じてメディア/ドキュメントストレージへ）"""
    uploaded: Optional[UploadedFileDto] = None
    if file is not None and file.filename:
        uploaded = UploadedFileDto(
            filename=file.filename,
            content_type=file.content_type or "",
            data=await file.read(),
        )

    dto = SubmitWorkRequestDto(
        task_id=task_id,
        user_id=user_id,
        user_name=user_name,
        submission_type=submission_type,
        notes=notes,
        link=link,
        file=uploaded,
    )
    return await _handle("submission", deps.submission_service.submit_work(dto))


@router.post("/submissions/{submission_id}/review", response_model=SubmissionResponseDto)
async def review_submission(
    submission_id: str,
    dto: ReviewSubmissionRequestDto,
    deps: MetricsDependencies = Depends(get_dependencies),
):
    return await _handle("review", deps.submission_service.review_submission(submission_id, dto))
