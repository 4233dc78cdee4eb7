"""
Models package initialization
Import all models and setup relationships
"""

from .comment import Comment
from .comment_reaction import CommentReaction
from .department import Department
from .department_member import DepartmentMember
from .department_moderator import DepartmentModerator
from .event import Event
from .event_attendee import EventAttendee
from .moderation_log import ModerationLog
from .notification import Notification
from .pending_post import PendingPost
from .post import Post
from .post_reaction import PostReaction

# Import and setup relationships
from .relations import setup_relationships
from .report import Report
from .user import User
from .user_ban import UserBan

# Setup all relationships after models are imported
setup_relationships()

# Make models available at package level
__all__ = [
    "Comment",
    "CommentReaction",
    "Department",
    "DepartmentMember",
    "DepartmentModerator",
    "Event",
    "EventAttendee",
    "ModerationLog",
    "Notification",
    "PendingPost",
    "Post",
    "PostReaction",
    "Report",
    "User",
    "UserBan",
]
