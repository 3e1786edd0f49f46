from sqlalchemy import Column, DateTime, ForeignKey, String, Text

from vidshare.db.database import Base, generate_id, utcnow


class Announcement(Base):
    __tablename__ = "announcements"

    id = Column(String, primary_key=True, default=generate_id)

    user_id = Column(String, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)

    message = Column(Text, nullable=False)

    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
