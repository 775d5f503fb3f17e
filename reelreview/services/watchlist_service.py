from typing import List, Optional
import logging

from reelreview.exceptions import Conflict
from reelreview.schemas.watchlist import WatchlistCheck, WatchlistEntry, WatchlistStats, WatchlistWithMovie
from reelreview.services.resolver_service import RelationshipResolver
from reelreview.storage.base import EntityStore

logger = logging.getLogger(__name__)


class WatchlistService:
    """Service for watchlist operations"""

    @staticmethod
    def add_to_watchlist(store: EntityStore, user_id: str, movie_id: str) -> Optional[WatchlistEntry]:
        """
        Add a movie to user's watchlist

        Returns:
            The new entry, or None if the user or movie does not exist

        Raises:
            Conflict: If the movie is already on the watchlist
        """
        with store.transaction():
            if store.get_user(user_id) is None or store.get_movie(movie_id) is None:
                return None

            # Check if already in watchlist
            if store.get_watchlist_entry_for(user_id, movie_id) is not None:
                raise Conflict("Movie already in watchlist")

            entry = store.create_watchlist_entry({"user_id": user_id, "movie_id": movie_id})

        logger.debug(f"User {user_id} added movie {movie_id} to watchlist")
        return entry

    @staticmethod
    def remove_from_watchlist(store: EntityStore, user_id: str, movie_id: str) -> bool:
        """Remove a movie from watchlist; False when it was not there"""
        with store.transaction():
            entry = store.get_watchlist_entry_for(user_id, movie_id)
            if entry is None:
                return False
            return store.delete_watchlist_entry(entry.id)

    @staticmethod
    def check_in_watchlist(store: EntityStore, user_id: str, movie_id: str) -> WatchlistCheck:
        """Check if a movie is in user's watchlist and return item_id if exists"""
        entry = store.get_watchlist_entry_for(user_id, movie_id)
        return WatchlistCheck(
            movie_id=movie_id,
            in_watchlist=entry is not None,
            item_id=entry.id if entry else None
        )

    @staticmethod
    def get_watchlist(store: EntityStore, user_id: str) -> List[WatchlistWithMovie]:
        """Get user's watchlist, most recently added first"""
        return RelationshipResolver.watchlist_for_user(store, user_id)

    @staticmethod
    def get_watchlist_stats(store: EntityStore, user_id: str) -> WatchlistStats:
        """Get watchlist statistics"""
        return WatchlistStats(total_items=len(RelationshipResolver.watchlist_for_user(store, user_id)))
