from fastapi import APIRouter, Depends, HTTPException, status
from reelreview.schemas.auth import (
    UserRegister,
    UserLogin,
    UserUpdate,
    UserResponse,
    TokenResponse,
)
from reelreview.schemas.user import User
from reelreview.services.auth_service import AuthService
from reelreview.storage.base import EntityStore
from reelreview.utils.dependencies import get_current_user, get_storage

# Define router
router = APIRouter(prefix="/api/auth", tags=["Authentication"])

# Register a new user
@router.post("/register", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
def register(user_data: UserRegister, store: EntityStore = Depends(get_storage)):
    """Register a new user"""
    return AuthService.register_user(store, user_data)

# Login endpoint
@router.post("/login", response_model=TokenResponse)
def login(credentials: UserLogin, store: EntityStore = Depends(get_storage)):
    """Login with username and password"""
    return AuthService.login_user(store, credentials)

# Get current authenticated user
@router.get("/me", response_model=UserResponse)
def get_me(current_user: User = Depends(get_current_user)):
    """Get current authenticated user"""
    return current_user

# Update profile of current user
@router.patch("/me", response_model=UserResponse)
def update_me(
    update_data: UserUpdate,
    current_user: User = Depends(get_current_user),
    store: EntityStore = Depends(get_storage)
):
    """Update username, email or profile picture"""
    user = AuthService.update_profile(store, current_user.id, update_data)
    if user is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")
    return user
