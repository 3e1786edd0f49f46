from pydantic import BaseModel


class ToggleResponse(BaseModel):
    active: bool
    conflict_ignored: bool = False


class ViewRecorded(BaseModel):
    video_id: str
    views: int
