"""Authentication API endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from meal_planner.api.dependencies import (
    get_current_user,
    get_planner_registry,
    require_configured_backend,
)
from meal_planner.database import get_db
from meal_planner.models.user import User
from meal_planner.schemas.auth import AuthResponse, UserLogin, UserRegister, UserResponse
from meal_planner.services.auth import (
    authenticate_user,
    create_access_token,
    create_user,
    get_user_by_email,
)
from meal_planner.services.planner import PlannerRegistry

router = APIRouter(
    prefix="/api/v1/auth",
    tags=["auth"],
    dependencies=[Depends(require_configured_backend)],
)


@router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
def register(
    user_data: UserRegister,
    db: Annotated[Session, Depends(get_db)],
):
    """Register a new user."""
    if get_user_by_email(db, user_data.email):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Email already registered",
        )

    user = create_user(db, user_data.email, user_data.password, user_data.name)
    access_token = create_access_token(user.id, user.email)

    return AuthResponse(
        access_token=access_token,
        user=UserResponse.model_validate(user),
    )


@router.post("/login", response_model=AuthResponse)
def login(
    credentials: UserLogin,
    db: Annotated[Session, Depends(get_db)],
    registry: Annotated[PlannerRegistry, Depends(get_planner_registry)],
):
    """Login with email and password."""
    user = authenticate_user(db, credentials.email, credentials.password)

    if not user:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Incorrect email or password",
            headers={"WWW-Authenticate": "Bearer"},
        )

    # New session: planner data is re-fetched on next access
    registry.discard(user.id)
    access_token = create_access_token(user.id, user.email)

    return AuthResponse(
        access_token=access_token,
        user=UserResponse.model_validate(user),
    )


@router.get("/me", response_model=UserResponse)
def get_me(
    current_user: Annotated[User, Depends(get_current_user)],
):
    """Get current user information."""
    return current_user


@router.post("/logout")
def logout(
    current_user: Annotated[User, Depends(get_current_user)],
    registry: Annotated[PlannerRegistry, Depends(get_planner_registry)],
):
    """Logout (client should discard token)."""
    registry.discard(current_user.id)
    return {"message": "Logged out successfully"}
