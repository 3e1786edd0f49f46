from sqlalchemy import Boolean, Column, DateTime, ForeignKey, String, Text

from vidshare.db.database import Base, generate_id, utcnow


class Video(Base):
    __tablename__ = "videos"

    id = Column(String, primary_key=True, default=generate_id)

    user_id = Column(String, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)

    title = Column(String, nullable=True)
    description = Column(Text, nullable=True)
    thumbnail_url = Column(String, nullable=True)
    video_url = Column(String, nullable=True)

    # only published videos appear in public listings
    publish = Column(Boolean, nullable=False, default=False)

    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False, index=True)
