from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field, ConfigDict


class VideoResponse(BaseModel):
    id: str
    user_id: str
    title: Optional[str] = None
    description: Optional[str] = None
    thumbnail_url: Optional[str] = None
    video_url: Optional[str] = None
    publish: bool
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class VideoWithCounts(VideoResponse):
    likes: int = 0
    dislikes: int = 0
    views: int = 0


class VideoViewer(BaseModel):
    has_liked: bool = False
    has_disliked: bool = False
    has_followed: bool = False


class VideoCreate(BaseModel):
    video_url: str = Field(..., min_length=1)
    title: Optional[str] = Field(default=None, max_length=200)
    description: Optional[str] = Field(default=None, max_length=5000)
    thumbnail_url: Optional[str] = None


class VideoUpdate(BaseModel):
    title: Optional[str] = Field(default=None, min_length=1, max_length=200)
    description: Optional[str] = Field(default=None, max_length=5000)
    thumbnail_url: Optional[str] = None
