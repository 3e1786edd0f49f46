from typing import List, Optional, Tuple

from loguru import logger
from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from vidshare.models.comments import Comment
from vidshare.models.engagements import EngagementEvent, SubjectType
from vidshare.models.playlists import PlaylistHasVideo
from vidshare.models.users import Users
from vidshare.models.videos import Video
from vidshare.schemas.comment import CommentWithCounts
from vidshare.schemas.user import UserResponse
from vidshare.schemas.video import VideoCreate, VideoUpdate
from vidshare.schemas.views import CommentEntry, VideoListResponse, VideoPageResponse
from vidshare.services.common import check_ownership
from vidshare.services.view_assembler import ViewAssembler, pick_random_subset

SEARCH_LIMIT = 10


class VideoService:
    def __init__(self, db: AsyncSession):
        self.db = db
        self.assembler = ViewAssembler(db)

    async def _published_with_authors(self, *criteria, limit: Optional[int] = None) -> Tuple[List[Video], List[Users]]:
        stmt = (
            select(Video, Users)
            .join(Users, Users.id == Video.user_id)
            .where(Video.publish.is_(True), *criteria)
            .order_by(Video.created_at.desc(), Video.id)
        )
        if limit is not None:
            stmt = stmt.limit(limit)

        result = await self.db.execute(stmt)
        rows = result.all()
        return [video for video, _ in rows], [user for _, user in rows]

    async def _list_response(self, videos: List[Video], users: List[Users]) -> VideoListResponse:
        video_views, _ = await self.assembler.resolve_collection_view(videos)
        return VideoListResponse(
            videos=video_views,
            users=[UserResponse.model_validate(user) for user in users],
        )

    async def get_video_page(self, video_id: str, viewer_id: Optional[str] = None) -> VideoPageResponse:
        video_view, viewer = await self.assembler.resolve_video_view(video_id, viewer_id)

        author = await self.assembler.get_user(video_view.user_id)
        author_view = (await self.assembler.resolve_users_with_followers([author]))[0]

        result = await self.db.execute(
            select(Comment, Users)
            .join(Users, Users.id == Comment.user_id)
            .where(Comment.video_id == video_id)
            .order_by(Comment.created_at, Comment.id)
        )
        rows = result.all()
        votes = await self.assembler.resolve_vote_counts(
            SubjectType.COMMENT, [comment.id for comment, _ in rows]
        )
        comments = [
            CommentEntry(
                user=UserResponse.model_validate(user),
                comment=CommentWithCounts.model_validate(comment).model_copy(update=votes[comment.id]),
            )
            for comment, user in rows
        ]

        return VideoPageResponse(video=video_view, user=author_view, comments=comments, viewer=viewer)

    async def get_videos_by_user(self, user_id: str) -> VideoListResponse:
        await self.assembler.get_user(user_id)
        videos, users = await self._published_with_authors(Video.user_id == user_id)
        return await self._list_response(videos, users)

    async def get_random_videos(self, count: int, rng=None) -> VideoListResponse:
        videos, users = await self._published_with_authors()
        videos, users = pick_random_subset(videos, count, users, rng=rng)
        return await self._list_response(videos, users)

    async def search_videos(self, query: str) -> VideoListResponse:
        videos, users = await self._published_with_authors(
            Video.title.contains(query, autoescape=True),
            limit=SEARCH_LIMIT,
        )
        logger.debug(f"Search '{query}' matched {len(videos)} videos")
        return await self._list_response(videos, users)

    async def create_video(self, user_id: str, payload: VideoCreate) -> Video:
        video = Video(
            user_id=user_id,
            video_url=payload.video_url,
            title=payload.title,
            description=payload.description,
            thumbnail_url=payload.thumbnail_url,
            publish=False,
        )
        self.db.add(video)
        await self.db.commit()
        await self.db.refresh(video)

        logger.info(f"Created video {video.id} for user {user_id}")
        return video

    async def update_video(self, video_id: str, caller_id: str, payload: VideoUpdate) -> Video:
        video = await check_ownership(self.db, Video, video_id, caller_id)

        for field, value in payload.model_dump(exclude_none=True).items():
            setattr(video, field, value)

        await self.db.commit()
        await self.db.refresh(video)

        logger.info(f"Updated video {video.id}")
        return video

    async def publish_video(self, video_id: str, caller_id: str) -> Video:
        video = await check_ownership(self.db, Video, video_id, caller_id)

        video.publish = not video.publish
        await self.db.commit()
        await self.db.refresh(video)

        logger.info(f"Video {video.id} publish set to {video.publish}")
        return video

    async def delete_video(self, video_id: str, caller_id: str) -> Video:
        video = await check_ownership(self.db, Video, video_id, caller_id)

        comment_ids = select(Comment.id).where(Comment.video_id == video.id)
        await self.db.execute(
            delete(EngagementEvent).where(
                EngagementEvent.subject_type == SubjectType.COMMENT,
                EngagementEvent.subject_id.in_(comment_ids),
            )
        )
        await self.db.execute(
            delete(EngagementEvent).where(
                EngagementEvent.subject_type == SubjectType.VIDEO,
                EngagementEvent.subject_id == video.id,
            )
        )
        await self.db.execute(delete(Comment).where(Comment.video_id == video.id))
        await self.db.execute(delete(PlaylistHasVideo).where(PlaylistHasVideo.video_id == video.id))
        await self.db.delete(video)
        await self.db.commit()

        logger.info(f"Deleted video {video.id} owned by {caller_id}")
        return video
