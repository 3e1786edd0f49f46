from sqlalchemy import Column, DateTime, ForeignKey, String, Text

from vidshare.db.database import Base, generate_id, utcnow


class Comment(Base):
    __tablename__ = "comments"

    id = Column(String, primary_key=True, default=generate_id)

    video_id = Column(String, ForeignKey("videos.id", ondelete="CASCADE"), nullable=False, index=True)
    user_id = Column(String, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)

    message = Column(Text, nullable=False)

    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
