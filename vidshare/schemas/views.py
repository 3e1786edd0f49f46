from typing import List

from pydantic import BaseModel

from vidshare.schemas.comment import CommentWithCounts
from vidshare.schemas.user import UserResponse, UserWithFollowers
from vidshare.schemas.video import VideoViewer, VideoWithCounts


class CommentEntry(BaseModel):
    user: UserResponse
    comment: CommentWithCounts


class VideoPageResponse(BaseModel):
    video: VideoWithCounts
    user: UserWithFollowers
    comments: List[CommentEntry]
    viewer: VideoViewer


class VideoListResponse(BaseModel):
    videos: List[VideoWithCounts]
    users: List[UserResponse]


class DashboardResponse(BaseModel):
    user: UserResponse
    total_followers: int
    total_likes: int
    total_views: int
    videos: List[VideoWithCounts]
