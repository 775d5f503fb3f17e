from fastapi import APIRouter, Depends, HTTPException, status
from typing import List

from reelreview.schemas.user import User
from reelreview.schemas.watchlist import (
    WatchlistAdd,
    WatchlistCheck,
    WatchlistEntry,
    WatchlistStats,
    WatchlistWithMovie
)
from reelreview.services.watchlist_service import WatchlistService
from reelreview.storage.base import EntityStore
from reelreview.utils.dependencies import get_current_user, get_storage

router = APIRouter(prefix="/api/watchlist", tags=["Watchlist"])


# ==================== WATCHLIST ENDPOINTS ====================

@router.post("", response_model=WatchlistEntry, status_code=status.HTTP_201_CREATED)
def add_to_watchlist(
    watchlist_data: WatchlistAdd,
    current_user: User = Depends(get_current_user),
    store: EntityStore = Depends(get_storage)
):
    """
    Add a movie to user's watchlist
    
    - **movie_id**: Catalog movie ID (required)

    Adding the same movie twice returns 409.
    """
    entry = WatchlistService.add_to_watchlist(store, current_user.id, watchlist_data.movie_id)
    if entry is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Movie not found")
    return entry


@router.get("", response_model=List[WatchlistWithMovie])
def get_watchlist(
    current_user: User = Depends(get_current_user),
    store: EntityStore = Depends(get_storage)
):
    """Get user's watchlist, most recently added first"""
    return WatchlistService.get_watchlist(store, current_user.id)


@router.get("/stats", response_model=WatchlistStats)
def get_watchlist_stats(
    current_user: User = Depends(get_current_user),
    store: EntityStore = Depends(get_storage)
):
    """Get watchlist statistics"""
    return WatchlistService.get_watchlist_stats(store, current_user.id)


@router.get("/check/{movie_id}", response_model=WatchlistCheck)
def check_in_watchlist(
    movie_id: str,
    current_user: User = Depends(get_current_user),
    store: EntityStore = Depends(get_storage)
):
    """
    Check if a movie is in user's watchlist
    
    Returns:
    - in_watchlist: boolean
    - item_id: watchlist item ID if exists, null otherwise
    - movie_id: catalog movie ID
    """
    return WatchlistService.check_in_watchlist(store, current_user.id, movie_id)


@router.delete("/{movie_id}", status_code=status.HTTP_204_NO_CONTENT)
def remove_from_watchlist(
    movie_id: str,
    current_user: User = Depends(get_current_user),
    store: EntityStore = Depends(get_storage)
):
    """Remove a movie from watchlist"""
    if not WatchlistService.remove_from_watchlist(store, current_user.id, movie_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Movie not in watchlist")
    return None
