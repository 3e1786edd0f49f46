from sqlalchemy import Column, DateTime, String, Text

from vidshare.db.database import Base, generate_id, utcnow


class Users(Base):
    __tablename__ = "users"

    id = Column(String, primary_key=True, default=generate_id)

    name = Column(String, nullable=True)
    email = Column(String, unique=True, index=True, nullable=True)
    image = Column(String, nullable=True)
    background_image = Column(String, nullable=True)
    handle = Column(String, nullable=True)
    description = Column(Text, nullable=True)

    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
