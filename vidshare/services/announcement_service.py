from typing import Optional

from loguru import logger
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from vidshare.models.announcements import Announcement
from vidshare.models.engagements import EngagementType, SubjectType
from vidshare.schemas.announcement import (
    AnnouncementEntry,
    AnnouncementsResponse,
    AnnouncementViewer,
    AnnouncementWithCounts,
)
from vidshare.schemas.user import UserResponse
from vidshare.services.view_assembler import VOTE_KINDS, ViewAssembler


class AnnouncementService:
    def __init__(self, db: AsyncSession):
        self.db = db
        self.assembler = ViewAssembler(db)

    async def add_announcement(self, user_id: str, message: str) -> Announcement:
        announcement = Announcement(user_id=user_id, message=message)
        self.db.add(announcement)
        await self.db.commit()
        await self.db.refresh(announcement)

        logger.info(f"User {user_id} posted announcement {announcement.id}")
        return announcement

    async def get_announcements_by_user(self, user_id: str, viewer_id: Optional[str] = None) -> AnnouncementsResponse:
        user = await self.assembler.get_user(user_id)

        result = await self.db.execute(
            select(Announcement)
            .where(Announcement.user_id == user.id)
            .order_by(Announcement.created_at.desc(), Announcement.id)
        )
        announcements = result.scalars().all()
        announcement_ids = [announcement.id for announcement in announcements]

        votes = await self.assembler.resolve_vote_counts(SubjectType.ANNOUNCEMENT, announcement_ids)
        engaged = await self.assembler.viewer_engagements(
            viewer_id, SubjectType.ANNOUNCEMENT, announcement_ids, VOTE_KINDS
        )

        return AnnouncementsResponse(
            user=UserResponse.model_validate(user),
            announcements=[
                AnnouncementEntry(
                    announcement=AnnouncementWithCounts.model_validate(announcement).model_copy(
                        update=votes[announcement.id]
                    ),
                    viewer=AnnouncementViewer(
                        has_liked=EngagementType.LIKE in engaged[announcement.id],
                        has_disliked=EngagementType.DISLIKE in engaged[announcement.id],
                    ),
                )
                for announcement in announcements
            ],
        )
