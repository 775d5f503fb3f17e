"""
Relationship Resolver - denormalized read views

Joins reviews to their author and movie, and watchlist entries to their
movie. Rows pointing at a user or movie that no longer exists are skipped.
"""

from typing import Dict, List, Optional

from reelreview.schemas.movie import Movie, MovieSummary
from reelreview.schemas.review import MovieWithReviews, Review, ReviewWithUser
from reelreview.schemas.user import User, UserSummary
from reelreview.schemas.watchlist import WatchlistWithMovie
from reelreview.storage.base import EntityStore


class RelationshipResolver:
    """Pure read joins over the entity store"""

    @staticmethod
    def _join_reviews(store: EntityStore, reviews: List[Review]) -> List[ReviewWithUser]:
        # Per-call lookup caches, dropped when the call returns
        users: Dict[str, Optional[User]] = {}
        movies: Dict[str, Optional[Movie]] = {}

        joined = []
        for review in reviews:
            if review.user_id not in users:
                users[review.user_id] = store.get_user(review.user_id)
            if review.movie_id not in movies:
                movies[review.movie_id] = store.get_movie(review.movie_id)

            user, movie = users[review.user_id], movies[review.movie_id]
            if user is None or movie is None:
                continue

            joined.append(ReviewWithUser(
                **review.model_dump(),
                user=UserSummary.model_validate(user),
                movie=MovieSummary.model_validate(movie)
            ))

        joined.sort(key=lambda r: r.created_at, reverse=True)
        return joined

    @staticmethod
    def reviews_for_movie(store: EntityStore, movie_id: str) -> List[ReviewWithUser]:
        """All reviews of a movie with author/movie projections, newest first"""
        return RelationshipResolver._join_reviews(store, store.reviews_by_movie(movie_id))

    @staticmethod
    def reviews_for_user(store: EntityStore, user_id: str) -> List[ReviewWithUser]:
        """All reviews written by a user, newest first"""
        return RelationshipResolver._join_reviews(store, store.reviews_by_user(user_id))

    @staticmethod
    def watchlist_for_user(store: EntityStore, user_id: str) -> List[WatchlistWithMovie]:
        """User's watchlist joined with full movie records, most recently added first"""
        if store.get_user(user_id) is None:
            return []

        joined = []
        for entry in store.watchlist_by_user(user_id):
            movie = store.get_movie(entry.movie_id)
            if movie is None:
                continue
            joined.append(WatchlistWithMovie(**entry.model_dump(), movie=movie))

        joined.sort(key=lambda w: w.added_at, reverse=True)
        return joined

    @staticmethod
    def movie_with_reviews(store: EntityStore, movie_id: str) -> Optional[MovieWithReviews]:
        """Movie detail payload, None when the movie does not exist"""
        movie = store.get_movie(movie_id)
        if movie is None:
            return None
        return MovieWithReviews(
            **movie.model_dump(),
            reviews=RelationshipResolver.reviews_for_movie(store, movie_id)
        )
