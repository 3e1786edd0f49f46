from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession

from vidshare.models.comments import Comment
from vidshare.schemas.comment import CommentCreate
from vidshare.services.view_assembler import ViewAssembler


class CommentService:
    def __init__(self, db: AsyncSession):
        self.db = db
        self.assembler = ViewAssembler(db)

    async def add_comment(self, user_id: str, payload: CommentCreate) -> Comment:
        video = await self.assembler.get_video(payload.video_id)

        comment = Comment(video_id=video.id, user_id=user_id, message=payload.message)
        self.db.add(comment)
        await self.db.commit()
        await self.db.refresh(comment)

        logger.info(f"User {user_id} commented on video {video.id}")
        return comment
