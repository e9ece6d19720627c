"""Authentication API endpoints."""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from vibe_awards.core.exceptions import AuthenticationRequiredError
from vibe_awards.dependencies import get_current_user, get_db
from vibe_awards.models.user import User
from vibe_awards.schemas import AuthResponse, LoginRequest, RegisterRequest, UserResponse
from vibe_awards.services.auth_service import AuthService, create_access_token

router = APIRouter()


@router.post("/register", response_model=AuthResponse, status_code=201)
async def register(body: RegisterRequest, db: AsyncSession = Depends(get_db)):
    """Register a new user account."""
    service = AuthService(db)
    user = await service.register(
        email=body.email,
        username=body.username,
        password=body.password,
        role=body.role,
    )
    await db.commit()

    return AuthResponse(
        message="User created successfully",
        token=create_access_token(user),
        user=UserResponse.model_validate(user),
    )


@router.post("/login", response_model=AuthResponse)
async def login(body: LoginRequest, db: AsyncSession = Depends(get_db)):
    """Login with email and password."""
    service = AuthService(db)
    user = await service.authenticate(email=body.email, password=body.password)

    if not user:
        raise AuthenticationRequiredError("Invalid credentials")

    await db.commit()
    return AuthResponse(
        message="Login successful",
        token=create_access_token(user),
        user=UserResponse.model_validate(user),
    )


@router.get("/me", response_model=UserResponse)
async def get_me(current_user: User = Depends(get_current_user)):
    """Get current authenticated user info."""
    return UserResponse.model_validate(current_user)
