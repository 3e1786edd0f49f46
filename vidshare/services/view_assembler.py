import random
from typing import Dict, List, Optional, Sequence, Set, Tuple

from loguru import logger
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from vidshare.core.exceptions import NotFoundError
from vidshare.models.engagements import EngagementEvent, EngagementType, SubjectType
from vidshare.models.users import Users
from vidshare.models.videos import Video
from vidshare.schemas.user import ChannelResponse, ChannelUser, ChannelViewer, UserWithFollowers
from vidshare.schemas.video import VideoViewer, VideoWithCounts

VIDEO_COUNT_KINDS = (EngagementType.LIKE, EngagementType.DISLIKE, EngagementType.VIEW)
VOTE_KINDS = (EngagementType.LIKE, EngagementType.DISLIKE)

_COUNT_FIELDS = {
    EngagementType.LIKE: "likes",
    EngagementType.DISLIKE: "dislikes",
    EngagementType.VIEW: "views",
    EngagementType.FOLLOW: "followers",
}


def pick_random_subset(items: Sequence, n: int, parallel: Optional[Sequence] = None, rng=None) -> Tuple[list, list]:
    """Draw ``min(n, len(items))`` items uniformly without replacement.

    Shuffles an index list with Fisher-Yates and takes its prefix, then
    projects ``items`` and ``parallel`` through the same indices so that
    pairs (e.g. a video and its author) stay together.
    """
    if parallel is not None and len(parallel) != len(items):
        raise ValueError(
            f"parallel list has {len(parallel)} entries, expected {len(items)}"
        )
    rng = rng or random

    indices = list(range(len(items)))
    for i in range(len(indices) - 1, 0, -1):
        j = rng.randint(0, i)
        indices[i], indices[j] = indices[j], indices[i]

    picked = indices[:max(0, min(n, len(items)))]
    subset = [items[i] for i in picked]
    parallel_subset = [parallel[i] for i in picked] if parallel is not None else []
    return subset, parallel_subset


def counts_as_fields(counts: Dict[EngagementType, int]) -> Dict[str, int]:
    return {_COUNT_FIELDS[kind]: total for kind, total in counts.items()}


class ViewAssembler:
    """Builds denormalized view models from engagement rows.

    Every count is derived from ``engagement_events`` at call time and each
    query is its own round trip, so two fields of one response may reflect
    slightly different moments if the store changes mid-assembly.
    """

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_video(self, video_id: str) -> Video:
        video = await self.db.get(Video, video_id)
        if video is None:
            raise NotFoundError("Video", video_id)
        return video

    async def get_user(self, user_id: str) -> Users:
        user = await self.db.get(Users, user_id)
        if user is None:
            raise NotFoundError("User", user_id)
        return user

    async def count_by_subject(
        self,
        subject_type: SubjectType,
        subject_ids: Sequence[str],
        kinds: Sequence[EngagementType],
    ) -> Dict[str, Dict[EngagementType, int]]:
        counts = {subject_id: {kind: 0 for kind in kinds} for subject_id in subject_ids}
        if not subject_ids:
            return counts

        stmt = (
            select(EngagementEvent.subject_id, EngagementEvent.kind, func.count(EngagementEvent.id))
            .where(
                EngagementEvent.subject_type == subject_type,
                EngagementEvent.subject_id.in_(list(set(subject_ids))),
                EngagementEvent.kind.in_(kinds),
            )
            .group_by(EngagementEvent.subject_id, EngagementEvent.kind)
        )
        result = await self.db.execute(stmt)
        for subject_id, kind, total in result.all():
            counts[subject_id][EngagementType(kind)] = int(total)
        return counts

    async def count_by_actor(
        self,
        actor_ids: Sequence[str],
        kind: EngagementType,
        subject_type: SubjectType = SubjectType.USER,
    ) -> Dict[str, int]:
        counts = {actor_id: 0 for actor_id in actor_ids}
        if not actor_ids:
            return counts

        stmt = (
            select(EngagementEvent.actor_id, func.count(EngagementEvent.id))
            .where(
                EngagementEvent.subject_type == subject_type,
                EngagementEvent.actor_id.in_(list(set(actor_ids))),
                EngagementEvent.kind == kind,
            )
            .group_by(EngagementEvent.actor_id)
        )
        result = await self.db.execute(stmt)
        for actor_id, total in result.all():
            counts[actor_id] = int(total)
        return counts

    async def has_engaged(
        self,
        actor_id: str,
        subject_type: SubjectType,
        subject_id: str,
        kind: EngagementType,
    ) -> bool:
        stmt = (
            select(EngagementEvent.id)
            .where(
                EngagementEvent.actor_id == actor_id,
                EngagementEvent.subject_type == subject_type,
                EngagementEvent.subject_id == subject_id,
                EngagementEvent.kind == kind,
            )
            .limit(1)
        )
        result = await self.db.execute(stmt)
        return result.first() is not None

    async def viewer_engagements(
        self,
        viewer_id: Optional[str],
        subject_type: SubjectType,
        subject_ids: Sequence[str],
        kinds: Sequence[EngagementType],
    ) -> Dict[str, Set[EngagementType]]:
        engaged = {subject_id: set() for subject_id in subject_ids}
        if not viewer_id or not subject_ids:
            return engaged

        stmt = (
            select(EngagementEvent.subject_id, EngagementEvent.kind)
            .where(
                EngagementEvent.actor_id == viewer_id,
                EngagementEvent.subject_type == subject_type,
                EngagementEvent.subject_id.in_(list(set(subject_ids))),
                EngagementEvent.kind.in_(kinds),
            )
            .distinct()
        )
        result = await self.db.execute(stmt)
        for subject_id, kind in result.all():
            engaged[subject_id].add(EngagementType(kind))
        return engaged

    async def resolve_video_view(
        self, video_id: str, viewer_id: Optional[str] = None
    ) -> Tuple[VideoWithCounts, VideoViewer]:
        video = await self.get_video(video_id)
        counts = await self.count_by_subject(SubjectType.VIDEO, [video.id], VIDEO_COUNT_KINDS)
        view = VideoWithCounts.model_validate(video).model_copy(
            update=counts_as_fields(counts[video.id])
        )

        viewer = VideoViewer()
        if viewer_id:
            viewer = VideoViewer(
                has_liked=await self.has_engaged(viewer_id, SubjectType.VIDEO, video.id, EngagementType.LIKE),
                has_disliked=await self.has_engaged(viewer_id, SubjectType.VIDEO, video.id, EngagementType.DISLIKE),
                has_followed=await self.has_engaged(viewer_id, SubjectType.USER, video.user_id, EngagementType.FOLLOW),
            )
        return view, viewer

    async def resolve_channel_view(self, user_id: str, viewer_id: Optional[str] = None) -> ChannelResponse:
        user = await self.get_user(user_id)
        followers = await self.count_by_subject(SubjectType.USER, [user.id], (EngagementType.FOLLOW,))
        followings = await self.count_by_actor([user.id], EngagementType.FOLLOW)

        has_followed = False
        if viewer_id:
            has_followed = await self.has_engaged(viewer_id, SubjectType.USER, user.id, EngagementType.FOLLOW)

        channel = ChannelUser.model_validate(user).model_copy(
            update={
                "followers": followers[user.id][EngagementType.FOLLOW],
                "followings": followings[user.id],
            }
        )
        return ChannelResponse(user=channel, viewer=ChannelViewer(has_followed=has_followed))

    async def resolve_collection_view(
        self, videos: Sequence[Video], viewer_id: Optional[str] = None
    ) -> Tuple[List[VideoWithCounts], List[VideoViewer]]:
        video_ids = [video.id for video in videos]
        counts = await self.count_by_subject(SubjectType.VIDEO, video_ids, VIDEO_COUNT_KINDS)

        views = [
            VideoWithCounts.model_validate(video).model_copy(update=counts_as_fields(counts[video.id]))
            for video in videos
        ]
        if not viewer_id:
            return views, [VideoViewer() for _ in videos]

        engaged = await self.viewer_engagements(viewer_id, SubjectType.VIDEO, video_ids, VOTE_KINDS)
        followed = await self.viewer_engagements(
            viewer_id,
            SubjectType.USER,
            list({video.user_id for video in videos}),
            (EngagementType.FOLLOW,),
        )
        viewers = [
            VideoViewer(
                has_liked=EngagementType.LIKE in engaged[video.id],
                has_disliked=EngagementType.DISLIKE in engaged[video.id],
                has_followed=bool(followed[video.user_id]),
            )
            for video in videos
        ]
        logger.debug(f"Resolved {len(views)} videos for viewer {viewer_id}")
        return views, viewers

    async def resolve_users_with_followers(self, users: Sequence[Users]) -> List[UserWithFollowers]:
        followers = await self.count_by_subject(
            SubjectType.USER, [user.id for user in users], (EngagementType.FOLLOW,)
        )
        return [
            UserWithFollowers.model_validate(user).model_copy(
                update={"followers": followers[user.id][EngagementType.FOLLOW]}
            )
            for user in users
        ]

    async def resolve_vote_counts(
        self, subject_type: SubjectType, subject_ids: Sequence[str]
    ) -> Dict[str, Dict[str, int]]:
        counts = await self.count_by_subject(subject_type, subject_ids, VOTE_KINDS)
        return {subject_id: counts_as_fields(by_kind) for subject_id, by_kind in counts.items()}
