from fastapi import APIRouter, Depends, HTTPException, status
from typing import List

from reelreview.schemas.auth import UserResponse
from reelreview.schemas.review import RatingStats, ReviewWithUser
from reelreview.schemas.watchlist import WatchlistWithMovie
from reelreview.services.rating_service import RatingAggregator
from reelreview.services.resolver_service import RelationshipResolver
from reelreview.storage.base import EntityStore
from reelreview.utils.dependencies import get_storage

router = APIRouter(prefix="/api/users", tags=["Users"])


def _require_user(store: EntityStore, user_id: str):
    user = store.get_user(user_id)
    if user is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")
    return user


@router.get("/{user_id}", response_model=UserResponse)
def get_user(user_id: str, store: EntityStore = Depends(get_storage)):
    """Public profile"""
    return _require_user(store, user_id)


@router.get("/{user_id}/reviews", response_model=List[ReviewWithUser])
def get_user_reviews(user_id: str, store: EntityStore = Depends(get_storage)):
    """All reviews written by the user, newest first"""
    _require_user(store, user_id)
    return RelationshipResolver.reviews_for_user(store, user_id)


@router.get("/{user_id}/watchlist", response_model=List[WatchlistWithMovie])
def get_user_watchlist(user_id: str, store: EntityStore = Depends(get_storage)):
    """The user's watchlist with full movie details"""
    _require_user(store, user_id)
    return RelationshipResolver.watchlist_for_user(store, user_id)


@router.get("/{user_id}/stats", response_model=RatingStats)
def get_user_rating_stats(user_id: str, store: EntityStore = Depends(get_storage)):
    """
    Get the user's rating statistics

    Useful for user profile or dashboard displays.
    """
    _require_user(store, user_id)
    return RatingAggregator.user_stats(store, user_id)
