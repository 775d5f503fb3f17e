from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from reelreview.schemas.user import User
from reelreview.storage.base import EntityStore
from reelreview.utils.security import decode_access_token


def get_storage(request: Request) -> EntityStore:
    """
    Entity store dependency for FastAPI routes.
    The store is built once at startup and lives on app.state.

    Usage:
        @router.get("/endpoint")
        def endpoint(store: EntityStore = Depends(get_storage)):
            # Use store here
    """
    return request.app.state.storage


# Dependency to get the current authenticated user
security = HTTPBearer()
def get_current_user(
    credentials: HTTPAuthorizationCredentials = Depends(security),
    store: EntityStore = Depends(get_storage)
) -> User:
    # Validate
    user_id = decode_access_token(credentials.credentials)
    if user_id is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid token")

    user = store.get_user(user_id)

    if not user:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="User not found")

    return user
