"""SQLAlchemy models for The Vibe Awards.

All models are imported here so create_all can discover them.
"""

from vibe_awards.models.base import Base, IntPrimaryKeyMixin, PublicUUIDMixin, TimestampMixin
from vibe_awards.models.user import User
from vibe_awards.models.submission import Submission, SubmissionFeature
from vibe_awards.models.battle import Battle
from vibe_awards.models.engagement import Like, Nomination, Vote
from vibe_awards.models.collaboration import CollaborationPost, CollaborationInterest

__all__ = [
    "Base",
    "IntPrimaryKeyMixin",
    "PublicUUIDMixin",
    "TimestampMixin",
    "User",
    "Submission",
    "SubmissionFeature",
    "Battle",
    "Like",
    "Nomination",
    "Vote",
    "CollaborationPost",
    "CollaborationInterest",
]
