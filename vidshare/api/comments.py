from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from vidshare.db.database import get_db
from vidshare.models.users import Users
from vidshare.schemas.comment import CommentCreate, CommentResponse
from vidshare.services.comment_service import CommentService
from vidshare.utils.security import get_current_user

comment_router = APIRouter()


@comment_router.post("", response_model=CommentResponse)
async def add_comment(
    payload: CommentCreate,
    current_user: Users = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return await CommentService(db).add_comment(current_user.id, payload)
