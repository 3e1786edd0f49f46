from datetime import datetime
from typing import List

from pydantic import BaseModel, Field, ConfigDict

from vidshare.schemas.user import UserResponse


class AnnouncementCreate(BaseModel):
    message: str = Field(..., min_length=1, max_length=2000)


class AnnouncementResponse(BaseModel):
    id: str
    user_id: str
    message: str
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class AnnouncementWithCounts(AnnouncementResponse):
    likes: int = 0
    dislikes: int = 0


class AnnouncementViewer(BaseModel):
    has_liked: bool = False
    has_disliked: bool = False


class AnnouncementEntry(BaseModel):
    announcement: AnnouncementWithCounts
    viewer: AnnouncementViewer


class AnnouncementsResponse(BaseModel):
    user: UserResponse
    announcements: List[AnnouncementEntry]
