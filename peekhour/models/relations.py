# peekhour/models/relations.py

from sqlalchemy.orm import relationship

# Import all relevant models
from .comment import Comment
from .comment_reaction import CommentReaction
from .department import Department
from .department_member import DepartmentMember
from .department_moderator import DepartmentModerator
from .event import Event
from .event_attendee import EventAttendee
from .notification import Notification
from .pending_post import PendingPost
from .post import Post
from .post_reaction import PostReaction
from .user import User


def setup_relationships():
    """
    Configure all SQLAlchemy relationships between models.
    """

    # --- Department System Relationships ---

    # 1. Department to Members (One-to-Many)
    Department.members = relationship(
        "DepartmentMember",
        back_populates="department",
        cascade="all, delete-orphan",
    )
    DepartmentMember.department = relationship("Department", back_populates="members")
    DepartmentMember.user = relationship("User")

    # 2. Department creator
    Department.creator = relationship("User", foreign_keys=[Department.created_by])

    # 3. Department to Moderators (One-to-Many)
    Department.moderators = relationship(
        "DepartmentModerator",
        back_populates="department",
        cascade="all, delete-orphan",
    )
    DepartmentModerator.department = relationship(
        "Department", back_populates="moderators"
    )
    DepartmentModerator.user = relationship(
        "User", foreign_keys=[DepartmentModerator.user_id]
    )
    DepartmentModerator.assigner = relationship(
        "User", foreign_keys=[DepartmentModerator.assigned_by]
    )

    # 4. Department to Posts (One-to-Many)
    Department.posts = relationship(
        "Post",
        back_populates="department",
        order_by="Post.created_at.desc()",
    )
    Post.department = relationship("Department", back_populates="posts")

    # 5. User to Posts (One-to-Many)
    User.posts = relationship(
        "Post",
        back_populates="author",
        cascade="all, delete-orphan",
    )
    Post.author = relationship("User", back_populates="posts")

    # 6. Post approval queue
    PendingPost.post = relationship("Post")
    PendingPost.submitter = relationship("User", foreign_keys=[PendingPost.submitted_by])
    PendingPost.reviewer = relationship("User", foreign_keys=[PendingPost.reviewed_by])

    # --- Comment System Relationships ---

    # 7. Post to Comments (One-to-Many)
    Post.comments = relationship(
        "Comment",
        back_populates="post",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="Comment.created_at",
    )
    Comment.post = relationship("Post", back_populates="comments")

    # 8. User to Comments (One-to-Many)
    User.comments = relationship(
        "Comment",
        back_populates="author",
        cascade="all, delete-orphan",
    )
    Comment.author = relationship("User", back_populates="comments")

    # 9. Comment self-referential (for replies). The database cascade removes
    # the subtree, so the ORM must not load and null out children first.
    Comment.parent = relationship(
        "Comment",
        remote_side=[Comment.id],
        back_populates="replies",
    )
    Comment.replies = relationship(
        "Comment",
        back_populates="parent",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    # --- Reaction Relationships ---

    # 10. Post to Reactions (One-to-Many)
    Post.reactions = relationship(
        "PostReaction",
        back_populates="post",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
    PostReaction.post = relationship("Post", back_populates="reactions")
    PostReaction.user = relationship("User")

    # 11. Comment to Reactions (One-to-Many)
    Comment.reactions = relationship(
        "CommentReaction",
        back_populates="comment",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
    CommentReaction.comment = relationship("Comment", back_populates="reactions")
    CommentReaction.user = relationship("User")

    # --- Event Relationships ---

    # 12. Department to Events (One-to-Many)
    Department.events = relationship(
        "Event",
        back_populates="department",
        cascade="all, delete-orphan",
    )
    Event.department = relationship("Department", back_populates="events")
    Event.creator = relationship("User")

    # 13. Event to Attendees (One-to-Many)
    Event.attendees = relationship(
        "EventAttendee",
        back_populates="event",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
    EventAttendee.event = relationship("Event", back_populates="attendees")
    EventAttendee.user = relationship("User")

    # --- Notifications ---

    # 14. Actor of a notification
    Notification.actor = relationship("User", foreign_keys=[Notification.actor_id])
