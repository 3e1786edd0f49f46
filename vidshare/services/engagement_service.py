from typing import Optional

from loguru import logger
from sqlalchemy import delete, func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from vidshare.core.exceptions import NotFoundError, ValidationError
from vidshare.models.announcements import Announcement
from vidshare.models.comments import Comment
from vidshare.models.engagements import TOGGLE_KINDS, EngagementEvent, EngagementType, SubjectType
from vidshare.models.playlists import HISTORY, LIKED_VIDEOS
from vidshare.models.users import Users
from vidshare.models.videos import Video
from vidshare.services.common import ToggleResult
from vidshare.services.playlist_service import PlaylistService
from vidshare.services.view_assembler import ViewAssembler

SUBJECT_MODELS = {
    SubjectType.VIDEO: Video,
    SubjectType.USER: Users,
    SubjectType.COMMENT: Comment,
    SubjectType.ANNOUNCEMENT: Announcement,
}

OPPOSITE_VOTE = {
    EngagementType.LIKE: EngagementType.DISLIKE,
    EngagementType.DISLIKE: EngagementType.LIKE,
}


class EngagementService:
    def __init__(self, db: AsyncSession):
        self.db = db
        self.assembler = ViewAssembler(db)
        self.playlists = PlaylistService(db)

    async def _get_subject(self, subject_type: SubjectType, subject_id: str):
        model = SUBJECT_MODELS[subject_type]
        subject = await self.db.get(model, subject_id)
        if subject is None:
            raise NotFoundError(subject_type.value.title(), subject_id)
        return subject

    async def toggle_engagement(
        self,
        actor_id: str,
        subject_type: SubjectType,
        subject_id: str,
        kind: EngagementType,
    ) -> ToggleResult:
        if kind not in TOGGLE_KINDS:
            raise ValidationError(f"{kind.value} engagements cannot be toggled", field="kind")

        match = (
            EngagementEvent.actor_id == actor_id,
            EngagementEvent.subject_type == subject_type,
            EngagementEvent.subject_id == subject_id,
            EngagementEvent.kind == kind,
        )
        result = await self.db.execute(select(func.count(EngagementEvent.id)).where(*match))
        existing = result.scalar_one()

        if existing:
            if existing > 1:
                logger.warning(
                    f"Found {existing} {kind.value} rows from {actor_id} on {subject_type.value} {subject_id}, removing all"
                )
            await self.db.execute(delete(EngagementEvent).where(*match))
            await self.db.commit()
            logger.info(f"Removed {kind.value} from {actor_id} on {subject_type.value} {subject_id}")
            return ToggleResult(active=False, conflict_ignored=existing > 1)

        self.db.add(
            EngagementEvent(
                actor_id=actor_id,
                subject_type=subject_type,
                subject_id=subject_id,
                kind=kind,
            )
        )
        try:
            await self.db.commit()
        except IntegrityError:
            await self.db.rollback()
            logger.warning(
                f"{kind.value} from {actor_id} on {subject_type.value} {subject_id} was created concurrently"
            )
            return ToggleResult(active=True, conflict_ignored=True)

        logger.info(f"Added {kind.value} from {actor_id} on {subject_type.value} {subject_id}")
        return ToggleResult(active=True)

    async def clear_engagement(
        self,
        actor_id: str,
        subject_type: SubjectType,
        subject_id: str,
        kind: EngagementType,
    ) -> int:
        result = await self.db.execute(
            delete(EngagementEvent).where(
                EngagementEvent.actor_id == actor_id,
                EngagementEvent.subject_type == subject_type,
                EngagementEvent.subject_id == subject_id,
                EngagementEvent.kind == kind,
            )
        )
        await self.db.commit()
        return result.rowcount or 0

    async def toggle_vote(
        self,
        actor_id: str,
        subject_type: SubjectType,
        subject_id: str,
        kind: EngagementType,
    ) -> ToggleResult:
        """Toggle a like or dislike; an active vote clears the opposite one.

        Video likes are mirrored in the actor's "Liked Videos" playlist.
        """
        if kind not in OPPOSITE_VOTE:
            raise ValidationError(f"{kind.value} is not a vote", field="kind")
        await self._get_subject(subject_type, subject_id)

        result = await self.toggle_engagement(actor_id, subject_type, subject_id, kind)
        if result.active:
            await self.clear_engagement(actor_id, subject_type, subject_id, OPPOSITE_VOTE[kind])

        # a removed dislike leaves the liked playlist untouched
        if subject_type == SubjectType.VIDEO and (kind == EngagementType.LIKE or result.active):
            liked = await self.playlists.upsert_named_playlist(actor_id, LIKED_VIDEOS)
            if kind == EngagementType.LIKE and result.active:
                await self.playlists.ensure_membership(liked.id, subject_id)
            else:
                await self.playlists.remove_membership(liked.id, subject_id)
        return result

    async def toggle_follow(self, follower_id: str, following_id: str) -> ToggleResult:
        await self._get_subject(SubjectType.USER, following_id)
        return await self.toggle_engagement(follower_id, SubjectType.USER, following_id, EngagementType.FOLLOW)

    async def record_view(self, video_id: str, viewer_id: Optional[str] = None) -> int:
        # a lost race below rolls back and expires loaded instances, so keep only the id
        video_id = (await self._get_subject(SubjectType.VIDEO, video_id)).id

        self.db.add(
            EngagementEvent(
                actor_id=viewer_id or None,
                subject_type=SubjectType.VIDEO,
                subject_id=video_id,
                kind=EngagementType.VIEW,
            )
        )
        await self.db.commit()

        if viewer_id:
            history = await self.playlists.upsert_named_playlist(viewer_id, HISTORY)
            await self.playlists.ensure_membership(history.id, video_id)

        counts = await self.assembler.count_by_subject(SubjectType.VIDEO, [video_id], (EngagementType.VIEW,))
        return counts[video_id][EngagementType.VIEW]
