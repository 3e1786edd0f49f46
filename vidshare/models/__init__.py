from vidshare.models.users import Users
from vidshare.models.videos import Video
from vidshare.models.playlists import Playlist, PlaylistHasVideo
from vidshare.models.engagements import EngagementEvent, EngagementType, SubjectType
from vidshare.models.comments import Comment
from vidshare.models.announcements import Announcement

__all__ = [
    "Users",
    "Video",
    "Playlist",
    "PlaylistHasVideo",
    "EngagementEvent",
    "EngagementType",
    "SubjectType",
    "Comment",
    "Announcement",
]
