from typing import List

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from vidshare.db.database import get_db
from vidshare.models.users import Users
from vidshare.schemas.engagement import ToggleResponse
from vidshare.schemas.playlist import (
    PlaylistCreate,
    PlaylistDetailResponse,
    PlaylistResponse,
    PlaylistSummary,
    SavePlaylistEntry,
)
from vidshare.services.playlist_service import PlaylistService
from vidshare.utils.security import get_current_user

playlist_router = APIRouter()


@playlist_router.get("/by-title", response_model=PlaylistDetailResponse)
async def get_playlist_by_title(
    user_id: str = Query(..., min_length=1),
    title: str = Query(..., min_length=1, max_length=100),
    db: AsyncSession = Depends(get_db),
):
    return await PlaylistService(db).get_playlist_by_title(user_id, title)


@playlist_router.get("/by-user/{user_id}", response_model=List[PlaylistSummary])
async def get_playlists_by_user(user_id: str, db: AsyncSession = Depends(get_db)):
    return await PlaylistService(db).get_playlists_by_user(user_id)


@playlist_router.get("/save-data", response_model=List[SavePlaylistEntry])
async def get_save_playlist_data(
    current_user: Users = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return await PlaylistService(db).get_save_playlist_data(current_user.id)


@playlist_router.get("/{playlist_id}", response_model=PlaylistDetailResponse)
async def get_playlist_by_id(playlist_id: str, db: AsyncSession = Depends(get_db)):
    return await PlaylistService(db).get_playlist_by_id(playlist_id)


@playlist_router.post("", response_model=PlaylistResponse)
async def add_playlist(
    payload: PlaylistCreate,
    current_user: Users = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return await PlaylistService(db).add_playlist(current_user.id, payload.title, payload.description)


@playlist_router.post("/{playlist_id}/videos/{video_id}", response_model=ToggleResponse)
async def toggle_video_in_playlist(
    playlist_id: str,
    video_id: str,
    current_user: Users = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    result = await PlaylistService(db).toggle_video_in_playlist(current_user.id, playlist_id, video_id)
    return ToggleResponse(active=result.active, conflict_ignored=result.conflict_ignored)
