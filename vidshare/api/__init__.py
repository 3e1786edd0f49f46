from fastapi import APIRouter
from vidshare.api import announcements, comments, engagements, playlists, users, videos

api_router = APIRouter()

api_router.include_router(videos.video_router, prefix="/videos", tags=["videos"])
api_router.include_router(users.user_router, prefix="/users", tags=["users"])
api_router.include_router(playlists.playlist_router, prefix="/playlists", tags=["playlists"])
api_router.include_router(engagements.engagement_router, prefix="/engagements", tags=["engagements"])
api_router.include_router(comments.comment_router, prefix="/comments", tags=["comments"])
api_router.include_router(announcements.announcement_router, prefix="/announcements", tags=["announcements"])

__all__ = ["api_router"]
