from datetime import datetime

from pydantic import BaseModel, Field, ConfigDict


class CommentCreate(BaseModel):
    video_id: str = Field(..., min_length=1)
    message: str = Field(..., min_length=1, max_length=2000)


class CommentResponse(BaseModel):
    id: str
    video_id: str
    user_id: str
    message: str
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class CommentWithCounts(CommentResponse):
    likes: int = 0
    dislikes: int = 0
