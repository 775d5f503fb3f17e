"""
Relational Entity Store on SQLAlchemy

Same contract as MemoryStorage. Each call runs in its own session unless a
transaction() is open on the current thread, in which case it joins that
session and the whole block commits (or rolls back) together.
"""
from contextlib import contextmanager
from datetime import datetime, timezone
from decimal import Decimal
from enum import Enum
from typing import Any, Dict, Iterator, List, Optional, Type, TypeVar
import logging
import threading

from pydantic import BaseModel
from sqlalchemy.orm import Session, sessionmaker

from reelreview.models.user import User as UserModel
from reelreview.models.movie import Movie as MovieModel
from reelreview.models.review import Review as ReviewModel
from reelreview.models.watchlist import Watchlist as WatchlistModel
from reelreview.schemas.user import User
from reelreview.schemas.movie import Movie
from reelreview.schemas.review import Review
from reelreview.schemas.watchlist import WatchlistEntry
from reelreview.storage.base import EntityStore, new_id

logger = logging.getLogger(__name__)

RecordT = TypeVar("RecordT", bound=BaseModel)


def _column_value(value: Any) -> Any:
    """Convert a record value into something the column types accept"""
    if isinstance(value, Decimal):
        return str(value)
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, list):
        return [_column_value(v) for v in value]
    return value


def _to_record(schema: Type[RecordT], row) -> Optional[RecordT]:
    if row is None:
        return None
    data = {}
    for column in row.__table__.columns:
        value = getattr(row, column.name)
        # SQLite hands back naive datetimes; everything is stored as UTC
        if isinstance(value, datetime) and value.tzinfo is None:
            value = value.replace(tzinfo=timezone.utc)
        data[column.name] = value
    return schema.model_validate(data)


class SqlStorage(EntityStore):
    """Entity Store backed by a SQLAlchemy session factory"""

    def __init__(self, session_factory: sessionmaker):
        super().__init__()
        self._session_factory = session_factory
        self._write_lock = threading.RLock()
        self._local = threading.local()

    @contextmanager
    def _session(self) -> Iterator[Session]:
        active = getattr(self._local, "session", None)
        if active is not None:
            yield active
            return

        session = self._session_factory()
        try:
            yield session
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    @contextmanager
    def transaction(self) -> Iterator["SqlStorage"]:
        if getattr(self._local, "session", None) is not None:
            # Nested block joins the outer transaction
            yield self
            return

        with self._write_lock:
            session = self._session_factory()
            self._local.session = session
            try:
                yield self
                session.commit()
            except Exception:
                session.rollback()
                raise
            finally:
                self._local.session = None
                session.close()

    # ==================== INTERNALS ====================

    def _insert(self, model, schema: Type[RecordT], data: Dict[str, Any]) -> RecordT:
        record = schema.model_validate({**data, "id": new_id()})
        values = {
            column.name: _column_value(getattr(record, column.name))
            for column in model.__table__.columns
        }
        with self._write_lock, self._session() as session:
            session.add(model(**values))
            session.flush()
        logger.debug(f"Created {schema.__name__} {record.id}")
        return record

    def _get(self, model, schema: Type[RecordT], record_id: str) -> Optional[RecordT]:
        with self._session() as session:
            return _to_record(schema, session.get(model, record_id))

    def _first(self, model, schema: Type[RecordT], *criteria) -> Optional[RecordT]:
        with self._session() as session:
            row = session.query(model).filter(*criteria).order_by(model.id).first()
            return _to_record(schema, row)

    def _all(self, model, schema: Type[RecordT], *criteria, order_by=None) -> List[RecordT]:
        with self._session() as session:
            query = session.query(model).filter(*criteria)
            if order_by is not None:
                query = query.order_by(order_by)
            return [_to_record(schema, row) for row in query.all()]

    def _merge(self, model, schema: Type[RecordT], record_id: str,
               fields: Dict[str, Any]) -> Optional[RecordT]:
        fields = {k: v for k, v in fields.items() if k != "id"}
        with self._write_lock, self._session() as session:
            row = session.get(model, record_id)
            if row is None:
                return None
            current = _to_record(schema, row)
            updated = schema.model_validate({**current.model_dump(), **fields})
            for key in fields:
                if hasattr(row, key):
                    setattr(row, key, _column_value(getattr(updated, key)))
            session.flush()
            return updated

    def _remove(self, model, record_id: str) -> bool:
        with self._write_lock, self._session() as session:
            row = session.get(model, record_id)
            if row is None:
                return False
            session.delete(row)
            session.flush()
        logger.debug(f"Deleted {model.__name__} {record_id}")
        return True

    # ==================== USERS ====================

    def create_user(self, data: Dict[str, Any]) -> User:
        defaults = {"profile_picture": None, "join_date": self.now()}
        return self._insert(UserModel, User, {**defaults, **data})

    def get_user(self, user_id: str) -> Optional[User]:
        return self._get(UserModel, User, user_id)

    def get_user_by_username(self, username: str) -> Optional[User]:
        return self._first(UserModel, User, UserModel.username == username)

    def get_user_by_email(self, email: str) -> Optional[User]:
        return self._first(UserModel, User, UserModel.email == email)

    def update_user(self, user_id: str, fields: Dict[str, Any]) -> Optional[User]:
        return self._merge(UserModel, User, user_id, fields)

    def delete_user(self, user_id: str) -> bool:
        return self._remove(UserModel, user_id)

    # ==================== MOVIES ====================

    def create_movie(self, data: Dict[str, Any]) -> Movie:
        data = {**data, "average_rating": "0", "review_count": 0, "created_at": self.now()}
        return self._insert(MovieModel, Movie, data)

    def get_movie(self, movie_id: str) -> Optional[Movie]:
        return self._get(MovieModel, Movie, movie_id)

    def get_movie_by_tmdb_id(self, tmdb_id: int) -> Optional[Movie]:
        return self._first(MovieModel, Movie, MovieModel.tmdb_id == tmdb_id)

    def list_movies(self) -> List[Movie]:
        return self._all(MovieModel, Movie, order_by=MovieModel.created_at)

    def update_movie(self, movie_id: str, fields: Dict[str, Any]) -> Optional[Movie]:
        return self._merge(MovieModel, Movie, movie_id, fields)

    def delete_movie(self, movie_id: str) -> bool:
        return self._remove(MovieModel, movie_id)

    # ==================== REVIEWS ====================

    def create_review(self, data: Dict[str, Any]) -> Review:
        now = self.now()
        defaults = {"spoiler_warning": False}
        return self._insert(
            ReviewModel, Review,
            {**defaults, **data, "likes": 0, "created_at": now, "updated_at": now}
        )

    def get_review(self, review_id: str) -> Optional[Review]:
        return self._get(ReviewModel, Review, review_id)

    def get_review_for(self, user_id: str, movie_id: str) -> Optional[Review]:
        return self._first(
            ReviewModel, Review,
            ReviewModel.user_id == user_id,
            ReviewModel.movie_id == movie_id
        )

    def reviews_by_movie(self, movie_id: str) -> List[Review]:
        return self._all(ReviewModel, Review, ReviewModel.movie_id == movie_id,
                         order_by=ReviewModel.created_at)

    def reviews_by_user(self, user_id: str) -> List[Review]:
        return self._all(ReviewModel, Review, ReviewModel.user_id == user_id,
                         order_by=ReviewModel.created_at)

    def update_review(self, review_id: str, fields: Dict[str, Any]) -> Optional[Review]:
        return self._merge(ReviewModel, Review, review_id, fields)

    def delete_review(self, review_id: str) -> bool:
        return self._remove(ReviewModel, review_id)

    # ==================== WATCHLIST ====================

    def create_watchlist_entry(self, data: Dict[str, Any]) -> WatchlistEntry:
        return self._insert(WatchlistModel, WatchlistEntry, {**data, "added_at": self.now()})

    def get_watchlist_entry(self, entry_id: str) -> Optional[WatchlistEntry]:
        return self._get(WatchlistModel, WatchlistEntry, entry_id)

    def get_watchlist_entry_for(self, user_id: str, movie_id: str) -> Optional[WatchlistEntry]:
        return self._first(
            WatchlistModel, WatchlistEntry,
            WatchlistModel.user_id == user_id,
            WatchlistModel.movie_id == movie_id
        )

    def watchlist_by_user(self, user_id: str) -> List[WatchlistEntry]:
        return self._all(WatchlistModel, WatchlistEntry, WatchlistModel.user_id == user_id,
                         order_by=WatchlistModel.added_at)

    def update_watchlist_entry(self, entry_id: str, fields: Dict[str, Any]) -> Optional[WatchlistEntry]:
        return self._merge(WatchlistModel, WatchlistEntry, entry_id, fields)

    def delete_watchlist_entry(self, entry_id: str) -> bool:
        return self._remove(WatchlistModel, entry_id)
