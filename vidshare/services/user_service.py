from typing import Optional

from loguru import logger
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from vidshare.core.exceptions import ValidationError
from vidshare.models.engagements import EngagementEvent, EngagementType, SubjectType
from vidshare.models.users import Users
from vidshare.models.videos import Video
from vidshare.schemas.user import ChannelResponse, FollowingEntry, FollowingsResponse, UserResponse, UserUpdate
from vidshare.schemas.views import DashboardResponse
from vidshare.services.view_assembler import ViewAssembler


class UserService:
    def __init__(self, db: AsyncSession):
        self.db = db
        self.assembler = ViewAssembler(db)

    async def get_channel(self, user_id: str, viewer_id: Optional[str] = None) -> ChannelResponse:
        return await self.assembler.resolve_channel_view(user_id, viewer_id)

    async def get_followings(self, user_id: str, viewer_id: Optional[str] = None) -> FollowingsResponse:
        user = await self.assembler.get_user(user_id)

        result = await self.db.execute(
            select(Users)
            .join(EngagementEvent, EngagementEvent.subject_id == Users.id)
            .where(
                EngagementEvent.subject_type == SubjectType.USER,
                EngagementEvent.kind == EngagementType.FOLLOW,
                EngagementEvent.actor_id == user.id,
            )
            .order_by(EngagementEvent.created_at, EngagementEvent.id)
        )
        followings = result.scalars().all()

        following_views = await self.assembler.resolve_users_with_followers(followings)
        followed_by_viewer = await self.assembler.viewer_engagements(
            viewer_id,
            SubjectType.USER,
            [following.id for following in followings],
            (EngagementType.FOLLOW,),
        )

        return FollowingsResponse(
            user=UserResponse.model_validate(user),
            followings=[
                FollowingEntry(user=view, viewer_has_followed=bool(followed_by_viewer[view.id]))
                for view in following_views
            ],
        )

    async def get_dashboard(self, user_id: str) -> DashboardResponse:
        user = await self.assembler.get_user(user_id)

        result = await self.db.execute(
            select(Video)
            .where(Video.user_id == user.id)
            .order_by(Video.created_at.desc(), Video.id)
        )
        videos, _ = await self.assembler.resolve_collection_view(result.scalars().all())
        followers = (await self.assembler.resolve_users_with_followers([user]))[0].followers

        return DashboardResponse(
            user=UserResponse.model_validate(user),
            total_followers=followers,
            total_likes=sum(video.likes for video in videos),
            total_views=sum(video.views for video in videos),
            videos=videos,
        )

    async def update_user(self, user: Users, payload: UserUpdate) -> Users:
        for field, value in payload.model_dump(exclude_none=True).items():
            setattr(user, field, value)

        try:
            await self.db.commit()
        except IntegrityError:
            await self.db.rollback()
            raise ValidationError("Email is already in use", field="email")
        await self.db.refresh(user)

        logger.info(f"Updated user {user.id}")
        return user
