"""Pydantic schemas for The Vibe Awards API.

All request/response models are defined here for easy import.
"""

from vibe_awards.schemas.common import ErrorResponse, MessageResponse
from vibe_awards.schemas.health import HealthCheckResponse
from vibe_awards.schemas.auth import AuthResponse, LoginRequest, RegisterRequest, UserResponse
from vibe_awards.schemas.submission import (
    AppBrief,
    AppCreatedResponse,
    AppDetailResponse,
    AppListResponse,
    AppSummary,
    DeveloperProfile,
    SubmitAppRequest,
)
from vibe_awards.schemas.engagement import (
    EngagementStatusResponse,
    LikeResponse,
    MyVoteResponse,
    VoteRequest,
)
from vibe_awards.schemas.battle import (
    BattleResponse,
    BattleSide,
    CreateBattleRequest,
    UpdateBattleStatusRequest,
)
from vibe_awards.schemas.collaboration import (
    CreatePostRequest,
    InterestRequest,
    InterestResponse,
    PostCreatedResponse,
    PostListResponse,
    PostResponse,
    ReviewInterestRequest,
)

__all__ = [
    # Common
    "ErrorResponse",
    "MessageResponse",
    "HealthCheckResponse",
    # Auth
    "AuthResponse",
    "LoginRequest",
    "RegisterRequest",
    "UserResponse",
    # Apps
    "AppBrief",
    "AppCreatedResponse",
    "AppDetailResponse",
    "AppListResponse",
    "AppSummary",
    "DeveloperProfile",
    "SubmitAppRequest",
    # Engagement
    "EngagementStatusResponse",
    "LikeResponse",
    "MyVoteResponse",
    "VoteRequest",
    # Battles
    "BattleResponse",
    "BattleSide",
    "CreateBattleRequest",
    "UpdateBattleStatusRequest",
    # Collaboration
    "CreatePostRequest",
    "InterestRequest",
    "InterestResponse",
    "PostCreatedResponse",
    "PostListResponse",
    "PostResponse",
    "ReviewInterestRequest",
]
