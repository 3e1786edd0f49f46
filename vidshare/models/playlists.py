from sqlalchemy import Column, DateTime, ForeignKey, Index, Integer, String, Text, UniqueConstraint, text

from vidshare.db.database import Base, generate_id, utcnow

LIKED_VIDEOS = "Liked Videos"
HISTORY = "History"
RESERVED_PLAYLIST_TITLES = (LIKED_VIDEOS, HISTORY)

_reserved_title_clause = text("title IN ('Liked Videos', 'History')")


class Playlist(Base):
    __tablename__ = "playlists"

    id = Column(String, primary_key=True, default=generate_id)

    user_id = Column(String, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)

    title = Column(String, nullable=False)
    description = Column(Text, nullable=True)

    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)

    __table_args__ = (
        Index(
            "uq_playlists_user_reserved_title",
            "user_id",
            "title",
            unique=True,
            postgresql_where=_reserved_title_clause,
            sqlite_where=_reserved_title_clause,
        ),
    )


class PlaylistHasVideo(Base):
    __tablename__ = "playlist_has_videos"

    # autoincrement id doubles as insertion order
    id = Column(Integer, primary_key=True, autoincrement=True)

    playlist_id = Column(String, ForeignKey("playlists.id", ondelete="CASCADE"), nullable=False, index=True)
    video_id = Column(String, ForeignKey("videos.id", ondelete="CASCADE"), nullable=False, index=True)

    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)

    __table_args__ = (
        UniqueConstraint("playlist_id", "video_id", name="uq_playlist_video"),
    )
