"""Services module for business logic and data operations.

This module contains service classes that implement the business logic
of The Vibe Awards. Engagement operations (likes, nominations, battle
votes, collaboration interest) share CountedAssociation for their row and
counter bookkeeping.
"""

from vibe_awards.services.auth_service import AuthService
from vibe_awards.services.battle_service import BattleService
from vibe_awards.services.collaboration_service import CollaborationService
from vibe_awards.services.counted_association import CountedAssociation
from vibe_awards.services.engagement_service import EngagementService
from vibe_awards.services.identity import ActingIdentity, resolve_identity
from vibe_awards.services.query_service import QueryService
from vibe_awards.services.submission_service import SubmissionService

__all__ = [
    "AuthService",
    "BattleService",
    "CollaborationService",
    "CountedAssociation",
    "EngagementService",
    "ActingIdentity",
    "resolve_identity",
    "QueryService",
    "SubmissionService",
]
