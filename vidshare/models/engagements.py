from enum import Enum

from sqlalchemy import Column, DateTime, Enum as SAEnum, Index, String, text

from vidshare.db.database import Base, generate_id, utcnow


class EngagementType(str, Enum):
    VIEW = "VIEW"
    LIKE = "LIKE"
    DISLIKE = "DISLIKE"
    FOLLOW = "FOLLOW"


class SubjectType(str, Enum):
    VIDEO = "VIDEO"
    USER = "USER"
    COMMENT = "COMMENT"
    ANNOUNCEMENT = "ANNOUNCEMENT"


TOGGLE_KINDS = (EngagementType.LIKE, EngagementType.DISLIKE, EngagementType.FOLLOW)

_toggle_clause = text("kind != 'VIEW'")


class EngagementEvent(Base):
    __tablename__ = "engagement_events"

    id = Column(String, primary_key=True, default=generate_id)

    subject_type = Column(SAEnum(SubjectType, name="subject_type"), nullable=False)
    subject_id = Column(String, nullable=False)

    # null for anonymous views
    actor_id = Column(String, nullable=True, index=True)

    kind = Column(SAEnum(EngagementType, name="engagement_type"), nullable=False)

    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)

    __table_args__ = (
        Index("ix_engagement_events_subject", "subject_type", "subject_id", "kind"),
        Index(
            "uq_engagement_events_toggle",
            "actor_id",
            "subject_type",
            "subject_id",
            "kind",
            unique=True,
            postgresql_where=_toggle_clause,
            sqlite_where=_toggle_clause,
        ),
    )
