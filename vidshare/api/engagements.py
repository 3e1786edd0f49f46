from enum import Enum
from typing import Optional

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from vidshare.db.database import get_db
from vidshare.models.engagements import EngagementType, SubjectType
from vidshare.models.users import Users
from vidshare.schemas.engagement import ToggleResponse, ViewRecorded
from vidshare.services.engagement_service import EngagementService
from vidshare.utils.security import get_current_user, get_optional_user

engagement_router = APIRouter()


class VoteCollection(str, Enum):
    VIDEOS = "videos"
    COMMENTS = "comments"
    ANNOUNCEMENTS = "announcements"


class Vote(str, Enum):
    LIKE = "like"
    DISLIKE = "dislike"


VOTE_SUBJECTS = {
    VoteCollection.VIDEOS: SubjectType.VIDEO,
    VoteCollection.COMMENTS: SubjectType.COMMENT,
    VoteCollection.ANNOUNCEMENTS: SubjectType.ANNOUNCEMENT,
}

VOTE_KINDS = {
    Vote.LIKE: EngagementType.LIKE,
    Vote.DISLIKE: EngagementType.DISLIKE,
}


@engagement_router.post("/users/{user_id}/follow", response_model=ToggleResponse)
async def toggle_follow(
    user_id: str,
    current_user: Users = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    result = await EngagementService(db).toggle_follow(current_user.id, user_id)
    return ToggleResponse(active=result.active, conflict_ignored=result.conflict_ignored)


@engagement_router.post("/videos/{video_id}/view", response_model=ViewRecorded)
async def record_view(
    video_id: str,
    current_user: Optional[Users] = Depends(get_optional_user),
    db: AsyncSession = Depends(get_db),
):
    viewer_id = current_user.id if current_user else None
    views = await EngagementService(db).record_view(video_id, viewer_id)
    return ViewRecorded(video_id=video_id, views=views)


@engagement_router.post("/{collection}/{subject_id}/{vote}", response_model=ToggleResponse)
async def toggle_vote(
    collection: VoteCollection,
    subject_id: str,
    vote: Vote,
    current_user: Users = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    result = await EngagementService(db).toggle_vote(
        current_user.id, VOTE_SUBJECTS[collection], subject_id, VOTE_KINDS[vote]
    )
    return ToggleResponse(active=result.active, conflict_ignored=result.conflict_ignored)
