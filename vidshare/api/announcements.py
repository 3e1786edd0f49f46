from typing import Optional

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from vidshare.db.database import get_db
from vidshare.models.users import Users
from vidshare.schemas.announcement import AnnouncementCreate, AnnouncementResponse, AnnouncementsResponse
from vidshare.services.announcement_service import AnnouncementService
from vidshare.utils.security import get_current_user

announcement_router = APIRouter()


@announcement_router.get("/by-user/{user_id}", response_model=AnnouncementsResponse)
async def get_announcements_by_user(
    user_id: str,
    viewer_id: Optional[str] = None,
    db: AsyncSession = Depends(get_db),
):
    return await AnnouncementService(db).get_announcements_by_user(user_id, viewer_id)


@announcement_router.post("", response_model=AnnouncementResponse)
async def add_announcement(
    payload: AnnouncementCreate,
    current_user: Users = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return await AnnouncementService(db).add_announcement(current_user.id, payload.message)
