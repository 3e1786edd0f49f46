from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field, ConfigDict

from vidshare.schemas.user import UserResponse, UserWithFollowers
from vidshare.schemas.video import VideoWithCounts


class PlaylistCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=100)
    description: Optional[str] = Field(default=None, min_length=5, max_length=50)


class PlaylistResponse(BaseModel):
    id: str
    user_id: str
    title: str
    description: Optional[str] = None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class PlaylistSummary(PlaylistResponse):
    video_count: int = 0
    playlist_thumbnail: Optional[str] = None


class PlaylistDetailResponse(BaseModel):
    playlist: PlaylistSummary
    videos: List[VideoWithCounts]
    authors: List[UserResponse]
    user: UserWithFollowers


class SavePlaylistEntry(PlaylistResponse):
    video_ids: List[str] = []
