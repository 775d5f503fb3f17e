"""
Catalog Query Engine - filter, then sort, then paginate

Titles compare the way a reader expects: accents and case are ignored
first ("Édith" sits between "Amélie" and "Zodiac"), then case-folded, then
raw. Tie-break for every sort order is that title order, then id
ascending. Python's sort is stable (also with reverse=True), so sorting by
the tie-break first and the primary key second gives a total order and
pages never overlap.
"""

from decimal import Decimal
from typing import Callable, Dict, List
import logging
import unicodedata

from reelreview.schemas.movie import Genre, Movie
from reelreview.schemas.search import MovieListResponse, MovieQuery, SortOption
from reelreview.schemas.validation import validate_pagination
from reelreview.storage.base import EntityStore

logger = logging.getLogger(__name__)

# Primary sort keys for the descending orders
_DESCENDING_KEYS: Dict[SortOption, Callable[[Movie], object]] = {
    SortOption.YEAR: lambda m: m.release_year,
    SortOption.RATING: lambda m: m.average_rating,
    SortOption.REVIEWS: lambda m: m.review_count,
}


def _collation_key(title: str) -> str:
    """Case- and accent-insensitive form of a title"""
    decomposed = unicodedata.normalize("NFKD", title.casefold())
    return "".join(ch for ch in decomposed if not unicodedata.combining(ch))


def _title_key(movie: Movie):
    return (_collation_key(movie.title), movie.title.casefold(), movie.title, movie.id)


class CatalogService:
    """Service for catalog listing and curation lists"""

    @staticmethod
    def _matches_search(movie: Movie, needle: str) -> bool:
        return (
            needle in movie.title.casefold()
            or needle in movie.director.casefold()
            or any(needle in actor.casefold() for actor in movie.cast)
        )

    @staticmethod
    def filter_movies(movies: List[Movie], query: MovieQuery) -> List[Movie]:
        """Apply every supplied filter (logical AND)"""
        if query.search:
            needle = query.search.casefold()
            movies = [m for m in movies if CatalogService._matches_search(m, needle)]

        if query.genre is not None:
            movies = [m for m in movies if query.genre in m.genres]

        if query.year is not None:
            movies = [m for m in movies if m.release_year == query.year]

        if query.min_rating is not None:
            threshold = Decimal(str(query.min_rating))
            movies = [m for m in movies if m.average_rating >= threshold]

        return movies

    @staticmethod
    def sort_movies(movies: List[Movie], sort: SortOption) -> List[Movie]:
        ordered = sorted(movies, key=_title_key)
        if sort in _DESCENDING_KEYS:
            ordered.sort(key=_DESCENDING_KEYS[sort], reverse=True)
        return ordered

    @staticmethod
    def query_movies(store: EntityStore, query: MovieQuery) -> MovieListResponse:
        """
        List movies matching the query.

        Args:
            store: Entity store
            query: Filters, sort order and pagination

        Returns:
            One page of movies plus the total number of matches
        """
        page, limit = validate_pagination(query.page, query.limit)

        matches = CatalogService.filter_movies(store.list_movies(), query)
        ordered = CatalogService.sort_movies(matches, query.sort)

        start = (page - 1) * limit
        logger.debug(f"Catalog query matched {len(ordered)} movies (page={page}, limit={limit})")
        return MovieListResponse(movies=ordered[start:start + limit], total=len(ordered))

    @staticmethod
    def featured_movies(store: EntityStore) -> List[Movie]:
        """Movies flagged as featured, best rated first"""
        featured = [m for m in store.list_movies() if m.featured]
        return CatalogService.sort_movies(featured, SortOption.RATING)

    @staticmethod
    def trending_movies(store: EntityStore) -> List[Movie]:
        """Movies flagged as trending, best rated first"""
        trending = [m for m in store.list_movies() if m.trending]
        return CatalogService.sort_movies(trending, SortOption.RATING)

    @staticmethod
    def list_genres() -> List[Genre]:
        return list(Genre)
