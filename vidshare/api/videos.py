from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from vidshare.db.database import get_db
from vidshare.models.users import Users
from vidshare.schemas.video import VideoCreate, VideoResponse, VideoUpdate
from vidshare.schemas.views import VideoListResponse, VideoPageResponse
from vidshare.services.video_service import VideoService
from vidshare.utils.security import get_current_user

video_router = APIRouter()


@video_router.get("/random", response_model=VideoListResponse)
async def get_random_videos(
    count: int = Query(10, ge=0, le=100),
    db: AsyncSession = Depends(get_db),
):
    return await VideoService(db).get_random_videos(count)


@video_router.get("/search", response_model=VideoListResponse)
async def search_videos(
    q: str = Query(..., min_length=1, max_length=200),
    db: AsyncSession = Depends(get_db),
):
    return await VideoService(db).search_videos(q)


@video_router.get("/by-user/{user_id}", response_model=VideoListResponse)
async def get_videos_by_user(user_id: str, db: AsyncSession = Depends(get_db)):
    return await VideoService(db).get_videos_by_user(user_id)


@video_router.get("/{video_id}", response_model=VideoPageResponse)
async def get_video_by_id(
    video_id: str,
    viewer_id: Optional[str] = None,
    db: AsyncSession = Depends(get_db),
):
    return await VideoService(db).get_video_page(video_id, viewer_id)


@video_router.post("", response_model=VideoResponse)
async def create_video(
    payload: VideoCreate,
    current_user: Users = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return await VideoService(db).create_video(current_user.id, payload)


@video_router.patch("/{video_id}", response_model=VideoResponse)
async def update_video(
    video_id: str,
    payload: VideoUpdate,
    current_user: Users = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return await VideoService(db).update_video(video_id, current_user.id, payload)


@video_router.post("/{video_id}/publish", response_model=VideoResponse)
async def publish_video(
    video_id: str,
    current_user: Users = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return await VideoService(db).publish_video(video_id, current_user.id)


@video_router.delete("/{video_id}", response_model=VideoResponse)
async def delete_video(
    video_id: str,
    current_user: Users = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return await VideoService(db).delete_video(video_id, current_user.id)
