"""
In-memory Entity Store

Each entity kind lives in a dict keyed by id. Secondary lookups (username,
email, tmdb id, (user, movie) pairs) go through free-standing indexes kept
next to the tables, so they are O(1) instead of scans.

Records are immutable pydantic models replaced whole on update: a reader
holding a Movie always sees a matching (average_rating, review_count) pair.
Writers serialize on one re-entrant lock; readers never take it.
"""
from contextlib import contextmanager
from typing import Any, Dict, Hashable, Iterator, List, Optional, Type, TypeVar
import logging
import threading

from pydantic import BaseModel

from reelreview.schemas.user import User
from reelreview.schemas.movie import Movie
from reelreview.schemas.review import Review
from reelreview.schemas.watchlist import WatchlistEntry
from reelreview.storage.base import EntityStore, new_id

logger = logging.getLogger(__name__)

RecordT = TypeVar("RecordT", bound=BaseModel)


class MemoryStorage(EntityStore):
    """Dict-backed store, one process, no persistence"""

    def __init__(self):
        super().__init__()
        self._lock = threading.RLock()

        self._users: Dict[str, User] = {}
        self._movies: Dict[str, Movie] = {}
        self._reviews: Dict[str, Review] = {}
        self._watchlist: Dict[str, WatchlistEntry] = {}

        # Secondary indexes: key -> id of the first record holding that key
        self._username_index: Dict[Hashable, str] = {}
        self._email_index: Dict[Hashable, str] = {}
        self._tmdb_index: Dict[Hashable, str] = {}
        self._review_pair_index: Dict[Hashable, str] = {}
        self._watchlist_pair_index: Dict[Hashable, str] = {}

    @contextmanager
    def transaction(self) -> Iterator["MemoryStorage"]:
        with self._lock:
            yield self

    # ==================== INTERNALS ====================

    @staticmethod
    def _index_add(index: Dict[Hashable, str], key: Hashable, record_id: str) -> None:
        if key is not None:
            index.setdefault(key, record_id)

    @staticmethod
    def _index_remove(index: Dict[Hashable, str], key: Hashable, record_id: str,
                      table: Dict[str, RecordT], key_of) -> None:
        """Drop key -> record_id, handing the key to another holder if one exists"""
        if key is None or index.get(key) != record_id:
            return
        del index[key]
        for other in table.values():
            if other.id != record_id and key_of(other) == key:
                index[key] = other.id
                break

    def _indexes_for(self, table: Dict[str, RecordT]):
        """(index, key function) pairs maintained for a table"""
        if table is self._users:
            return [
                (self._username_index, lambda u: u.username),
                (self._email_index, lambda u: u.email),
            ]
        if table is self._movies:
            return [(self._tmdb_index, lambda m: m.tmdb_id)]
        if table is self._reviews:
            return [(self._review_pair_index, lambda r: (r.user_id, r.movie_id))]
        if table is self._watchlist:
            return [(self._watchlist_pair_index, lambda w: (w.user_id, w.movie_id))]
        return []

    def _insert(self, table: Dict[str, RecordT], schema: Type[RecordT], data: Dict[str, Any]) -> RecordT:
        with self._lock:
            record = schema.model_validate({**data, "id": new_id()})
            table[record.id] = record
            for index, key_of in self._indexes_for(table):
                self._index_add(index, key_of(record), record.id)
            logger.debug(f"Created {schema.__name__} {record.id}")
            return record

    def _merge(self, table: Dict[str, RecordT], schema: Type[RecordT], record_id: str,
               fields: Dict[str, Any]) -> Optional[RecordT]:
        with self._lock:
            current = table.get(record_id)
            if current is None:
                return None
            fields = {k: v for k, v in fields.items() if k != "id"}
            updated = schema.model_validate({**current.model_dump(), **fields})
            table[record_id] = updated
            for index, key_of in self._indexes_for(table):
                old_key, new_key = key_of(current), key_of(updated)
                if old_key != new_key:
                    self._index_remove(index, old_key, record_id, table, key_of)
                    self._index_add(index, new_key, record_id)
            return updated

    def _remove(self, table: Dict[str, RecordT], record_id: str) -> bool:
        with self._lock:
            record = table.pop(record_id, None)
            if record is None:
                return False
            for index, key_of in self._indexes_for(table):
                self._index_remove(index, key_of(record), record_id, table, key_of)
            logger.debug(f"Deleted {type(record).__name__} {record_id}")
            return True

    @staticmethod
    def _lookup(index: Dict[Hashable, str], table: Dict[str, RecordT], key: Hashable) -> Optional[RecordT]:
        record_id = index.get(key)
        return table.get(record_id) if record_id is not None else None

    # ==================== USERS ====================

    def create_user(self, data: Dict[str, Any]) -> User:
        defaults = {"profile_picture": None, "join_date": self.now()}
        return self._insert(self._users, User, {**defaults, **data})

    def get_user(self, user_id: str) -> Optional[User]:
        return self._users.get(user_id)

    def get_user_by_username(self, username: str) -> Optional[User]:
        return self._lookup(self._username_index, self._users, username)

    def get_user_by_email(self, email: str) -> Optional[User]:
        return self._lookup(self._email_index, self._users, email)

    def update_user(self, user_id: str, fields: Dict[str, Any]) -> Optional[User]:
        return self._merge(self._users, User, user_id, fields)

    def delete_user(self, user_id: str) -> bool:
        return self._remove(self._users, user_id)

    # ==================== MOVIES ====================

    def create_movie(self, data: Dict[str, Any]) -> Movie:
        # Derived fields always start zeroed
        data = {**data, "average_rating": "0", "review_count": 0, "created_at": self.now()}
        return self._insert(self._movies, Movie, data)

    def get_movie(self, movie_id: str) -> Optional[Movie]:
        return self._movies.get(movie_id)

    def get_movie_by_tmdb_id(self, tmdb_id: int) -> Optional[Movie]:
        return self._lookup(self._tmdb_index, self._movies, tmdb_id)

    def list_movies(self) -> List[Movie]:
        return list(self._movies.values())

    def update_movie(self, movie_id: str, fields: Dict[str, Any]) -> Optional[Movie]:
        return self._merge(self._movies, Movie, movie_id, fields)

    def delete_movie(self, movie_id: str) -> bool:
        return self._remove(self._movies, movie_id)

    # ==================== REVIEWS ====================

    def create_review(self, data: Dict[str, Any]) -> Review:
        now = self.now()
        defaults = {"spoiler_warning": False}
        return self._insert(
            self._reviews, Review,
            {**defaults, **data, "likes": 0, "created_at": now, "updated_at": now}
        )

    def get_review(self, review_id: str) -> Optional[Review]:
        return self._reviews.get(review_id)

    def get_review_for(self, user_id: str, movie_id: str) -> Optional[Review]:
        return self._lookup(self._review_pair_index, self._reviews, (user_id, movie_id))

    def reviews_by_movie(self, movie_id: str) -> List[Review]:
        return [r for r in list(self._reviews.values()) if r.movie_id == movie_id]

    def reviews_by_user(self, user_id: str) -> List[Review]:
        return [r for r in list(self._reviews.values()) if r.user_id == user_id]

    def update_review(self, review_id: str, fields: Dict[str, Any]) -> Optional[Review]:
        return self._merge(self._reviews, Review, review_id, fields)

    def delete_review(self, review_id: str) -> bool:
        return self._remove(self._reviews, review_id)

    # ==================== WATCHLIST ====================

    def create_watchlist_entry(self, data: Dict[str, Any]) -> WatchlistEntry:
        return self._insert(self._watchlist, WatchlistEntry, {**data, "added_at": self.now()})

    def get_watchlist_entry(self, entry_id: str) -> Optional[WatchlistEntry]:
        return self._watchlist.get(entry_id)

    def get_watchlist_entry_for(self, user_id: str, movie_id: str) -> Optional[WatchlistEntry]:
        return self._lookup(self._watchlist_pair_index, self._watchlist, (user_id, movie_id))

    def watchlist_by_user(self, user_id: str) -> List[WatchlistEntry]:
        return [w for w in list(self._watchlist.values()) if w.user_id == user_id]

    def update_watchlist_entry(self, entry_id: str, fields: Dict[str, Any]) -> Optional[WatchlistEntry]:
        return self._merge(self._watchlist, WatchlistEntry, entry_id, fields)

    def delete_watchlist_entry(self, entry_id: str) -> bool:
        return self._remove(self._watchlist, entry_id)
