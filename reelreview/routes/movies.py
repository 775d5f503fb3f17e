from fastapi import APIRouter, Depends, HTTPException, Query, status
from typing import List, Optional

from reelreview.schemas.movie import Genre, GenreListResponse, Movie, MovieCreate, MovieUpdate
from reelreview.schemas.review import MovieWithReviews, RatingStats, Review, ReviewCreate, ReviewWithUser
from reelreview.schemas.search import MovieListResponse, MovieQuery, SortOption
from reelreview.schemas.user import User
from reelreview.schemas.validation import MAX_PAGE_SIZE
from reelreview.services.catalog_service import CatalogService
from reelreview.services.movie_service import MovieService
from reelreview.services.rating_service import RatingAggregator
from reelreview.services.resolver_service import RelationshipResolver
from reelreview.services.review_service import ReviewService
from reelreview.storage.base import EntityStore
from reelreview.utils.dependencies import get_current_user, get_storage

router = APIRouter(prefix="/api/movies", tags=["Movies"])


# ============================================
# Catalog Listing
# ============================================

@router.get("", response_model=MovieListResponse)
def list_movies(
    search: Optional[str] = Query(None, min_length=1, max_length=200, description="Title, director or cast"),
    genre: Optional[Genre] = Query(None, description="Genre tag"),
    year: Optional[int] = Query(None, ge=1870, le=2100, description="Release year"),
    min_rating: Optional[float] = Query(None, ge=0, le=5, description="Minimum average rating"),
    sort: SortOption = Query(SortOption.TITLE, description="Sort option"),
    page: int = Query(1, ge=1, description="Page number"),
    limit: int = Query(20, ge=1, le=MAX_PAGE_SIZE, description="Results per page"),
    store: EntityStore = Depends(get_storage)
):
    """
    List catalog movies

    **Filters** (combined with AND):
    - search: case-insensitive match on title, director or any cast member
    - genre: exact genre tag
    - year: release year
    - min_rating: average rating at or above this value

    **Sort**: title (A-Z), year / rating / reviews (highest first)

    `total` counts every match, independent of page and limit.
    """
    query = MovieQuery(
        search=search,
        genre=genre,
        year=year,
        min_rating=min_rating,
        sort=sort,
        page=page,
        limit=limit
    )
    return CatalogService.query_movies(store, query)


@router.post("", response_model=Movie, status_code=status.HTTP_201_CREATED)
def create_movie(
    movie_data: MovieCreate,
    current_user: User = Depends(get_current_user),
    store: EntityStore = Depends(get_storage)
):
    """
    Add a movie to the catalog

    **Requires authentication**
    """
    return MovieService.create_movie(store, movie_data)


@router.get("/genres", response_model=GenreListResponse)
def get_genres():
    """Get list of all available movie genres"""
    return {"genres": CatalogService.list_genres()}


# ============================================
# Curation Lists
# ============================================

@router.get("/featured", response_model=List[Movie])
def get_featured(store: EntityStore = Depends(get_storage)):
    """Get featured movies"""
    return CatalogService.featured_movies(store)

@router.get("/trending", response_model=List[Movie])
def get_trending(store: EntityStore = Depends(get_storage)):
    """Get trending movies"""
    return CatalogService.trending_movies(store)


# ============================================
# Movie Details (dynamic routes last)
# ============================================

@router.get("/{movie_id}", response_model=MovieWithReviews)
def get_movie(movie_id: str, store: EntityStore = Depends(get_storage)):
    """Get a movie with its reviews, newest first"""
    movie = RelationshipResolver.movie_with_reviews(store, movie_id)
    if movie is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Movie not found")
    return movie


@router.patch("/{movie_id}", response_model=Movie)
def update_movie(
    movie_id: str,
    update_data: MovieUpdate,
    current_user: User = Depends(get_current_user),
    store: EntityStore = Depends(get_storage)
):
    """
    Update catalog details or the featured / trending flags

    **Requires authentication**
    """
    movie = MovieService.update_movie(store, movie_id, update_data)
    if movie is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Movie not found")
    return movie


@router.get("/{movie_id}/reviews", response_model=List[ReviewWithUser])
def get_movie_reviews(movie_id: str, store: EntityStore = Depends(get_storage)):
    """Get all reviews for a movie, newest first"""
    if store.get_movie(movie_id) is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Movie not found")
    return RelationshipResolver.reviews_for_movie(store, movie_id)


@router.post("/{movie_id}/reviews", response_model=Review, status_code=status.HTTP_201_CREATED)
def create_review(
    movie_id: str,
    review_data: ReviewCreate,
    current_user: User = Depends(get_current_user),
    store: EntityStore = Depends(get_storage)
):
    """
    Review a movie

    - **rating**: 1 to 5 stars
    - **title**: Review headline
    - **content**: At least 50 characters
    - **spoiler_warning**: Flag reviews that reveal the plot

    One review per user per movie; a second one returns 409.
    """
    review = ReviewService.create_review(store, current_user.id, movie_id, review_data)
    if review is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Movie not found")
    return review


@router.get("/{movie_id}/stats", response_model=RatingStats)
def get_movie_rating_stats(movie_id: str, store: EntityStore = Depends(get_storage)):
    """
    Get rating statistics for a movie

    Returns:
    - Total number of reviews
    - Average star rating
    - Distribution of ratings (how many 1s, 2s, ..., 5s)
    """
    stats = RatingAggregator.rating_stats(store, movie_id)
    if stats is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Movie not found")
    return stats
