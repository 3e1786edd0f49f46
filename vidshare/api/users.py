from typing import Optional

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from vidshare.db.database import get_db
from vidshare.models.users import Users
from vidshare.schemas.user import ChannelResponse, FollowingsResponse, UserResponse, UserUpdate
from vidshare.schemas.views import DashboardResponse
from vidshare.services.user_service import UserService
from vidshare.utils.security import get_current_user

user_router = APIRouter()


@user_router.get("/me/dashboard", response_model=DashboardResponse)
async def get_dashboard_data(
    current_user: Users = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return await UserService(db).get_dashboard(current_user.id)


@user_router.patch("/me", response_model=UserResponse)
async def update_user(
    payload: UserUpdate,
    current_user: Users = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return await UserService(db).update_user(current_user, payload)


@user_router.get("/{user_id}/channel", response_model=ChannelResponse)
async def get_channel_by_id(
    user_id: str,
    viewer_id: Optional[str] = None,
    db: AsyncSession = Depends(get_db),
):
    return await UserService(db).get_channel(user_id, viewer_id)


@user_router.get("/{user_id}/followings", response_model=FollowingsResponse)
async def get_user_followings(
    user_id: str,
    viewer_id: Optional[str] = None,
    db: AsyncSession = Depends(get_db),
):
    return await UserService(db).get_followings(user_id, viewer_id)
