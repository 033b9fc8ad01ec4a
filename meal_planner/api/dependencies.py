"""FastAPI dependencies for authentication, data backend and planner state."""

from typing import Annotated

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from meal_planner.config import get_settings
from meal_planner.database import get_db
from meal_planner.models.user import User
from meal_planner.services.auth import user_id_from_token
from meal_planner.services.data_backend import DataBackend
from meal_planner.services.images import ObjectStorageClient
from meal_planner.services.local_store import LocalBackend
from meal_planner.services.planner import LOCAL_USER_ID, PlannerRegistry, PlannerSession
from meal_planner.services.recipe_service import RecipeService
from meal_planner.services.remote_backend import RemoteBackend

security = HTTPBearer()
optional_security = HTTPBearer(auto_error=False)

NOT_CONFIGURED_DETAIL = "Backend is not configured; this action is unavailable"


def _credentials_error(detail: str = "Invalid authentication credentials") -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def get_backend(db: Annotated[Session, Depends(get_db)]) -> DataBackend:
    """Pick the database backend when configured, else the local fallback store."""
    settings = get_settings()
    if settings.is_backend_configured:
        return RemoteBackend(db, ObjectStorageClient.from_settings(settings))
    return LocalBackend.from_settings(settings)


def require_configured_backend(
    backend: Annotated[DataBackend, Depends(get_backend)],
) -> DataBackend:
    """Reject the request when only the local fallback store is available."""
    if not backend.is_configured:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=NOT_CONFIGURED_DETAIL,
        )
    return backend


def get_current_user(
    credentials: Annotated[HTTPAuthorizationCredentials, Depends(security)],
    db: Annotated[Session, Depends(get_db)],
) -> User:
    """Get the current authenticated user from JWT token."""
    user_id = user_id_from_token(credentials.credentials)
    if user_id is None:
        raise _credentials_error()

    user = db.query(User).filter(User.id == user_id).first()
    if user is None:
        raise _credentials_error("User not found")
    return user


def get_owner_id(
    backend: Annotated[DataBackend, Depends(get_backend)],
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(optional_security)],
    db: Annotated[Session, Depends(get_db)],
) -> int:
    """User id owning planner data.

    Requires a valid token on the database backend; on the local store all
    requests share the anonymous local user.
    """
    if not backend.is_configured:
        return LOCAL_USER_ID
    if credentials is None:
        raise _credentials_error("Not authenticated")
    return get_current_user(credentials, db).id


def get_planner_registry(request: Request) -> PlannerRegistry:
    return request.app.state.planner_registry


def get_planner_session(
    owner_id: Annotated[int, Depends(get_owner_id)],
    registry: Annotated[PlannerRegistry, Depends(get_planner_registry)],
    backend: Annotated[DataBackend, Depends(get_backend)],
) -> PlannerSession:
    """Get the caller's planner session, loading it from the backend on first use."""
    session = registry.get(owner_id)
    session.ensure_loaded(backend)
    return session


def get_recipe_service(
    backend: Annotated[DataBackend, Depends(get_backend)],
) -> RecipeService:
    """Get recipe service with dependencies."""
    return RecipeService(backend)
