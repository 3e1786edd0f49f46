from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field, ConfigDict


class UserResponse(BaseModel):
    id: str
    name: Optional[str] = None
    email: Optional[str] = None
    image: Optional[str] = None
    background_image: Optional[str] = None
    handle: Optional[str] = None
    description: Optional[str] = None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class UserWithFollowers(UserResponse):
    followers: int = 0


class ChannelUser(UserWithFollowers):
    followings: int = 0


class ChannelViewer(BaseModel):
    has_followed: bool = False


class ChannelResponse(BaseModel):
    user: ChannelUser
    viewer: ChannelViewer


class FollowingEntry(BaseModel):
    user: UserWithFollowers
    viewer_has_followed: bool = False


class FollowingsResponse(BaseModel):
    user: UserResponse
    followings: List[FollowingEntry]


class UserUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=100)
    email: Optional[str] = Field(default=None, max_length=255)
    image: Optional[str] = None
    background_image: Optional[str] = None
    handle: Optional[str] = Field(default=None, min_length=1, max_length=50)
    description: Optional[str] = Field(default=None, max_length=1000)
