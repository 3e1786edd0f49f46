from typing import Dict, List, Optional, Sequence, Tuple

from loguru import logger
from sqlalchemy import delete, func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from vidshare.core.exceptions import NotFoundError, ValidationError
from vidshare.models.playlists import RESERVED_PLAYLIST_TITLES, Playlist, PlaylistHasVideo
from vidshare.models.users import Users
from vidshare.models.videos import Video
from vidshare.schemas.playlist import PlaylistDetailResponse, PlaylistSummary, SavePlaylistEntry
from vidshare.schemas.user import UserResponse
from vidshare.services.common import ToggleResult, check_ownership
from vidshare.services.view_assembler import ViewAssembler


class PlaylistService:
    def __init__(self, db: AsyncSession):
        self.db = db
        self.assembler = ViewAssembler(db)

    async def _find_by_title(self, user_id: str, title: str) -> Optional[Playlist]:
        result = await self.db.execute(
            select(Playlist)
            .where(Playlist.user_id == user_id, Playlist.title == title)
            .order_by(Playlist.created_at, Playlist.id)
            .limit(1)
        )
        return result.scalars().first()

    async def upsert_named_playlist(self, user_id: str, title: str) -> Playlist:
        playlist = await self._find_by_title(user_id, title)
        if playlist:
            return playlist

        logger.info(f"Creating playlist '{title}' for user {user_id}")

        playlist = Playlist(user_id=user_id, title=title)
        self.db.add(playlist)
        try:
            await self.db.commit()
        except IntegrityError:
            # another request created it between our read and insert
            await self.db.rollback()
            logger.warning(f"Playlist '{title}' for user {user_id} created concurrently, re-fetching")
            playlist = await self._find_by_title(user_id, title)
            if playlist is None:
                raise
            return playlist

        await self.db.refresh(playlist)
        return playlist

    async def toggle_membership(self, playlist_id: str, video_id: str) -> ToggleResult:
        match = (
            PlaylistHasVideo.playlist_id == playlist_id,
            PlaylistHasVideo.video_id == video_id,
        )
        result = await self.db.execute(select(func.count(PlaylistHasVideo.id)).where(*match))
        existing = result.scalar_one()

        if existing:
            if existing > 1:
                logger.warning(
                    f"Found {existing} memberships of video {video_id} in playlist {playlist_id}, removing all"
                )
            await self.db.execute(delete(PlaylistHasVideo).where(*match))
            await self.db.commit()
            logger.info(f"Removed video {video_id} from playlist {playlist_id}")
            return ToggleResult(active=False, conflict_ignored=existing > 1)

        self.db.add(PlaylistHasVideo(playlist_id=playlist_id, video_id=video_id))
        try:
            await self.db.commit()
        except IntegrityError:
            await self.db.rollback()
            logger.warning(f"Video {video_id} was added to playlist {playlist_id} concurrently")
            return ToggleResult(active=True, conflict_ignored=True)

        logger.info(f"Added video {video_id} to playlist {playlist_id}")
        return ToggleResult(active=True)

    async def ensure_membership(self, playlist_id: str, video_id: str) -> bool:
        result = await self.db.execute(
            select(PlaylistHasVideo.id).where(
                PlaylistHasVideo.playlist_id == playlist_id,
                PlaylistHasVideo.video_id == video_id,
            ).limit(1)
        )
        if result.first() is not None:
            return False

        self.db.add(PlaylistHasVideo(playlist_id=playlist_id, video_id=video_id))
        try:
            await self.db.commit()
        except IntegrityError:
            await self.db.rollback()
            logger.warning(f"Video {video_id} was added to playlist {playlist_id} concurrently")
            return False
        return True

    async def remove_membership(self, playlist_id: str, video_id: str) -> int:
        result = await self.db.execute(
            delete(PlaylistHasVideo).where(
                PlaylistHasVideo.playlist_id == playlist_id,
                PlaylistHasVideo.video_id == video_id,
            )
        )
        await self.db.commit()
        return result.rowcount or 0

    async def toggle_video_in_playlist(self, caller_id: str, playlist_id: str, video_id: str) -> ToggleResult:
        playlist = await check_ownership(self.db, Playlist, playlist_id, caller_id)
        await self.assembler.get_video(video_id)
        return await self.toggle_membership(playlist.id, video_id)

    async def add_playlist(self, user_id: str, title: str, description: Optional[str] = None) -> Playlist:
        if title in RESERVED_PLAYLIST_TITLES:
            raise ValidationError(f"'{title}' is a reserved playlist title", field="title")

        playlist = Playlist(user_id=user_id, title=title, description=description)
        self.db.add(playlist)
        await self.db.commit()
        await self.db.refresh(playlist)

        logger.info(f"Created playlist {playlist.id} for user {user_id}")
        return playlist

    async def _summaries(self, playlist_ids: Sequence[str]) -> Dict[str, Tuple[int, Optional[str]]]:
        summaries = {playlist_id: (0, None) for playlist_id in playlist_ids}
        if not playlist_ids:
            return summaries

        counts = await self.db.execute(
            select(PlaylistHasVideo.playlist_id, func.count(PlaylistHasVideo.id))
            .where(PlaylistHasVideo.playlist_id.in_(playlist_ids))
            .group_by(PlaylistHasVideo.playlist_id)
        )
        thumbnails = await self.db.execute(
            select(PlaylistHasVideo.playlist_id, Video.thumbnail_url)
            .join(Video, Video.id == PlaylistHasVideo.video_id)
            .where(PlaylistHasVideo.playlist_id.in_(playlist_ids))
            .order_by(PlaylistHasVideo.playlist_id, PlaylistHasVideo.id)
        )

        first_thumbnail = {}
        for playlist_id, thumbnail_url in thumbnails.all():
            first_thumbnail.setdefault(playlist_id, thumbnail_url)
        for playlist_id, total in counts.all():
            summaries[playlist_id] = (int(total), first_thumbnail.get(playlist_id))
        return summaries

    async def _detail(self, playlist: Playlist) -> PlaylistDetailResponse:
        result = await self.db.execute(
            select(Video, Users)
            .join(PlaylistHasVideo, PlaylistHasVideo.video_id == Video.id)
            .join(Users, Users.id == Video.user_id)
            .where(PlaylistHasVideo.playlist_id == playlist.id)
            .order_by(PlaylistHasVideo.id)
        )
        rows = result.all()
        videos = [video for video, _ in rows]
        authors = [UserResponse.model_validate(author) for _, author in rows]

        video_views, _ = await self.assembler.resolve_collection_view(videos)
        owner = await self.assembler.get_user(playlist.user_id)
        owner_view = (await self.assembler.resolve_users_with_followers([owner]))[0]

        summary = PlaylistSummary.model_validate(playlist).model_copy(
            update={
                "video_count": len(videos),
                "playlist_thumbnail": videos[0].thumbnail_url if videos else None,
            }
        )
        return PlaylistDetailResponse(
            playlist=summary,
            videos=video_views,
            authors=authors,
            user=owner_view,
        )

    async def get_playlist_by_id(self, playlist_id: str) -> PlaylistDetailResponse:
        playlist = await self.db.get(Playlist, playlist_id)
        if playlist is None:
            raise NotFoundError("Playlist", playlist_id)
        return await self._detail(playlist)

    async def get_playlist_by_title(self, user_id: str, title: str) -> PlaylistDetailResponse:
        await self.assembler.get_user(user_id)
        playlist = await self.upsert_named_playlist(user_id, title)
        return await self._detail(playlist)

    async def get_playlists_by_user(self, user_id: str) -> List[PlaylistSummary]:
        await self.assembler.get_user(user_id)
        result = await self.db.execute(
            select(Playlist)
            .where(Playlist.user_id == user_id)
            .order_by(Playlist.created_at, Playlist.id)
        )
        playlists = result.scalars().all()
        summaries = await self._summaries([playlist.id for playlist in playlists])

        return [
            PlaylistSummary.model_validate(playlist).model_copy(
                update={
                    "video_count": summaries[playlist.id][0],
                    "playlist_thumbnail": summaries[playlist.id][1],
                }
            )
            for playlist in playlists
        ]

    async def get_save_playlist_data(self, user_id: str) -> List[SavePlaylistEntry]:
        result = await self.db.execute(
            select(Playlist)
            .where(
                Playlist.user_id == user_id,
                Playlist.title.not_in(RESERVED_PLAYLIST_TITLES),
            )
            .order_by(Playlist.created_at, Playlist.id)
        )
        playlists = result.scalars().all()

        video_ids: Dict[str, List[str]] = {playlist.id: [] for playlist in playlists}
        if playlists:
            members = await self.db.execute(
                select(PlaylistHasVideo.playlist_id, PlaylistHasVideo.video_id)
                .where(PlaylistHasVideo.playlist_id.in_(list(video_ids)))
                .order_by(PlaylistHasVideo.id)
            )
            for playlist_id, video_id in members.all():
                video_ids[playlist_id].append(video_id)

        return [
            SavePlaylistEntry.model_validate(playlist).model_copy(update={"video_ids": video_ids[playlist.id]})
            for playlist in playlists
        ]
