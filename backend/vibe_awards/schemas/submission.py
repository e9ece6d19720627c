"""Submission (app) schemas."""

from datetime import datetime
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

ProjectType = Literal["app", "game", "visual", "music", "video", "cultural"]


class SubmitAppRequest(BaseModel):
    """Body of POST /api/apps. Media is referenced by URL only."""
    name: str = Field(min_length=1, max_length=200)
    short_description: str = Field(min_length=1, max_length=500)
    full_description: str = Field(min_length=1)
    category: str = Field(min_length=1, max_length=100)
    platform: str = Field(min_length=1, max_length=100)
    project_type: ProjectType = "app"
    features: List[str] = Field(default_factory=list, max_length=50)
    icon_url: Optional[str] = Field(None, max_length=1000)
    website_url: Optional[str] = Field(None, max_length=1000)
    store_url: Optional[str] = Field(None, max_length=1000)
    demo_url: Optional[str] = Field(None, max_length=1000)
    github_url: Optional[str] = Field(None, max_length=1000)


class AppBrief(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    uuid: str
    name: str
    status: str


class AppCreatedResponse(BaseModel):
    message: str
    app: AppBrief


class AppSummary(BaseModel):
    """Listing entry with live engagement counts."""
    id: int
    uuid: str
    name: str
    short_description: str
    project_type: str
    category: str
    platform: str
    icon_url: Optional[str] = None
    website_url: Optional[str] = None
    store_url: Optional[str] = None
    demo_url: Optional[str] = None
    github_url: Optional[str] = None
    status: str
    featured: bool
    trending: bool
    staff_pick: bool
    battle_ready: bool
    award_eligible: bool
    view_count: int
    like_count: int
    nomination_count: int
    vote_count: int
    developer_id: int
    developer_name: str
    created_at: datetime


class AppListResponse(BaseModel):
    apps: List[AppSummary]
    total: int


class DeveloperProfile(BaseModel):
    id: int
    uuid: str
    username: str
    avatar_url: Optional[str] = None
    bio: Optional[str] = None
    website_url: Optional[str] = None
    twitter_handle: Optional[str] = None
    linkedin_url: Optional[str] = None


class AppDetailResponse(AppSummary):
    """Detail view: summary plus description, features and developer profile."""
    full_description: str
    features: List[str] = []
    developer: DeveloperProfile
