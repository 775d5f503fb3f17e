"""
Entity Store interface
======================
Authoritative keyed storage for users, movies, reviews and watchlist entries.

Contract shared by every backend:
- create_* assigns a uuid4 id and fills defaults; duplicates are NOT rejected
  (uniqueness is the caller's check)
- get_* returns None for an unknown id
- update_* merges fields and returns the merged record, None for an unknown id
- delete_* returns whether a record existed; nothing cascades
- transaction() serializes writers; work inside it looks atomic to readers
"""
from abc import ABC, abstractmethod
from contextlib import AbstractContextManager
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List, Optional
import threading
import uuid

from reelreview.schemas.user import User
from reelreview.schemas.movie import Movie
from reelreview.schemas.review import Review
from reelreview.schemas.watchlist import WatchlistEntry


def new_id() -> str:
    return str(uuid.uuid4())


class EntityStore(ABC):
    """Abstract storage backend"""

    def __init__(self):
        self._clock_lock = threading.Lock()
        self._last_timestamp: Optional[datetime] = None

    def now(self) -> datetime:
        """
        Current UTC time, strictly increasing per store so creation order
        survives records written within the same clock tick.
        """
        with self._clock_lock:
            now = datetime.now(timezone.utc)
            if self._last_timestamp is not None and now <= self._last_timestamp:
                now = self._last_timestamp + timedelta(microseconds=1)
            self._last_timestamp = now
            return now

    @abstractmethod
    def transaction(self) -> AbstractContextManager:
        """Serialize a group of mutations against other writers"""

    # ==================== USERS ====================

    @abstractmethod
    def create_user(self, data: Dict[str, Any]) -> User: ...

    @abstractmethod
    def get_user(self, user_id: str) -> Optional[User]: ...

    @abstractmethod
    def get_user_by_username(self, username: str) -> Optional[User]: ...

    @abstractmethod
    def get_user_by_email(self, email: str) -> Optional[User]: ...

    @abstractmethod
    def update_user(self, user_id: str, fields: Dict[str, Any]) -> Optional[User]: ...

    @abstractmethod
    def delete_user(self, user_id: str) -> bool: ...

    # ==================== MOVIES ====================

    @abstractmethod
    def create_movie(self, data: Dict[str, Any]) -> Movie: ...

    @abstractmethod
    def get_movie(self, movie_id: str) -> Optional[Movie]: ...

    @abstractmethod
    def get_movie_by_tmdb_id(self, tmdb_id: int) -> Optional[Movie]: ...

    @abstractmethod
    def list_movies(self) -> List[Movie]: ...

    @abstractmethod
    def update_movie(self, movie_id: str, fields: Dict[str, Any]) -> Optional[Movie]: ...

    @abstractmethod
    def delete_movie(self, movie_id: str) -> bool: ...

    # ==================== REVIEWS ====================

    @abstractmethod
    def create_review(self, data: Dict[str, Any]) -> Review: ...

    @abstractmethod
    def get_review(self, review_id: str) -> Optional[Review]: ...

    @abstractmethod
    def get_review_for(self, user_id: str, movie_id: str) -> Optional[Review]: ...

    @abstractmethod
    def reviews_by_movie(self, movie_id: str) -> List[Review]: ...

    @abstractmethod
    def reviews_by_user(self, user_id: str) -> List[Review]: ...

    @abstractmethod
    def update_review(self, review_id: str, fields: Dict[str, Any]) -> Optional[Review]: ...

    @abstractmethod
    def delete_review(self, review_id: str) -> bool: ...

    # ==================== WATCHLIST ====================

    @abstractmethod
    def create_watchlist_entry(self, data: Dict[str, Any]) -> WatchlistEntry: ...

    @abstractmethod
    def get_watchlist_entry(self, entry_id: str) -> Optional[WatchlistEntry]: ...

    @abstractmethod
    def get_watchlist_entry_for(self, user_id: str, movie_id: str) -> Optional[WatchlistEntry]: ...

    @abstractmethod
    def watchlist_by_user(self, user_id: str) -> List[WatchlistEntry]: ...

    @abstractmethod
    def update_watchlist_entry(self, entry_id: str, fields: Dict[str, Any]) -> Optional[WatchlistEntry]: ...

    @abstractmethod
    def delete_watchlist_entry(self, entry_id: str) -> bool: ...
