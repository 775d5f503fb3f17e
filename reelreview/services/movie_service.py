"""
Movie Service - catalog curation
"""

from typing import Optional
import logging

from reelreview.exceptions import Conflict
from reelreview.schemas.movie import Movie, MovieCreate, MovieUpdate
from reelreview.storage.base import EntityStore

logger = logging.getLogger(__name__)

# Curation fields that may be cleared with an explicit null
NULLABLE_FIELDS = {"poster_url", "backdrop_url", "trailer_url"}


class MovieService:
    """Service for adding and curating catalog movies"""

    @staticmethod
    def create_movie(store: EntityStore, movie_data: MovieCreate) -> Movie:
        """
        Add a movie to the catalog.
        Rating fields start at zero and are only moved by reviews.

        Raises:
            Conflict: If another movie already carries the same tmdb_id
        """
        with store.transaction():
            if movie_data.tmdb_id is not None and store.get_movie_by_tmdb_id(movie_data.tmdb_id):
                raise Conflict(f"Movie with tmdb_id {movie_data.tmdb_id} already exists")
            movie = store.create_movie(movie_data.model_dump())

        logger.info(f"Added movie '{movie.title}' ({movie.release_year}) as {movie.id}")
        return movie

    @staticmethod
    def update_movie(store: EntityStore, movie_id: str, update_data: MovieUpdate) -> Optional[Movie]:
        """Apply curation changes, None when the movie does not exist"""
        fields = {
            key: value
            for key, value in update_data.model_dump(exclude_unset=True).items()
            if value is not None or key in NULLABLE_FIELDS
        }
        return store.update_movie(movie_id, fields)
