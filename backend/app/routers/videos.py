"""
Ad account video library routes.
"""
from fastapi import APIRouter, Depends, File, Form, Query, UploadFile
from sqlalchemy.orm import Session
from typing import List, Optional
import logging

from app.database import get_db
from app.dependencies import get_meta_ads_service, to_http_exception
from app.models import Video
from app.schemas import VideoResponse, VideoUploadResponse, VideoUploadResult
from app.services.meta_ads_service import MetaAdsService
from app.services.provisioning import NotFoundError, ProvisioningError

router = APIRouter(prefix="/api/videos", tags=["videos"])
logger = logging.getLogger(__name__)


@router.get("", response_model=List[VideoResponse])
async def list_videos(
    project_id: int = Query(...),
    search: Optional[str] = Query(None, description="Case-insensitive title filter"),
    service: MetaAdsService = Depends(get_meta_ads_service),
):
    """List videos in the project's ad account"""
    try:
        videos = await service.list_ad_videos(project_id)
    except ProvisioningError as e:
        raise to_http_exception(e)

    if search and search.strip():
        needle = search.strip().lower()
        videos = [v for v in videos if needle in (v.get("title") or "").lower()]
    return videos


@router.post("/upload", response_model=VideoUploadResponse)
async def upload_videos(
    project_id: int = Form(...),
    files: List[UploadFile] = File(...),
    db: Session = Depends(get_db),
    service: MetaAdsService = Depends(get_meta_ads_service),
):
    """
    Upload one or more videos to the ad account. Each file gets its own result
    row; successful uploads are also recorded locally.
    """
    response = VideoUploadResponse()

    for upload in files:
        file_name = upload.filename or "video.mp4"
        content = await upload.read()
        try:
            uploaded = await service.upload_video(
                project_id,
                file_name=file_name,
                content=content,
                content_type=upload.content_type or "video/mp4",
            )
        except NotFoundError as e:
            raise to_http_exception(e)
        except ProvisioningError as e:
            logger.warning(f"Video upload failed for {file_name}: {e.message}")
            response.items.append(VideoUploadResult(file_name=file_name, success=False, error=e.message))
            response.failed += 1
            continue

        db.add(Video(
            project_id=project_id,
            fb_video_id=uploaded["video_id"],
            file_name=file_name,
            thumbnail_url=uploaded["thumbnail_url"] or "",
        ))
        response.items.append(VideoUploadResult(
            file_name=file_name,
            success=True,
            video_id=uploaded["video_id"],
            thumbnail_url=uploaded["thumbnail_url"],
        ))
        response.uploaded += 1

    db.commit()
    logger.info(f"Video upload for project {project_id}: {response.uploaded} uploaded, {response.failed} failed")
    return response
