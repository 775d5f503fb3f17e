"""
Rating Aggregator - keeps a movie's derived rating fields in step with its reviews

average_rating / review_count are stored on the movie for fast catalog reads.
They are only ever written here, and only from the review mutation path.
"""

from decimal import Decimal, ROUND_HALF_UP
from typing import Dict, Iterable, List, Optional
import logging

from reelreview.schemas.movie import Movie
from reelreview.schemas.review import RatingStats
from reelreview.storage.base import EntityStore

logger = logging.getLogger(__name__)

NO_RATING = Decimal("0")
TWO_PLACES = Decimal("0.01")


class RatingAggregator:
    """Derived rating maintenance and rating statistics"""

    @staticmethod
    def compute_average(ratings: Iterable[int]) -> Decimal:
        """
        Mean of the ratings rounded half away from zero to two decimals.
        An empty set gives the Decimal("0") sentinel.
        """
        ratings = list(ratings)
        if not ratings:
            return NO_RATING
        mean = Decimal(sum(ratings)) / Decimal(len(ratings))
        return mean.quantize(TWO_PLACES, rounding=ROUND_HALF_UP)

    @staticmethod
    def recompute_rating(store: EntityStore, movie_id: str) -> Optional[Movie]:
        """
        Recount a movie's reviews and write (average_rating, review_count) back
        in a single update.

        Returns:
            Updated movie, or None when the movie no longer exists
        """
        with store.transaction():
            if store.get_movie(movie_id) is None:
                logger.warning(f"Skipping rating recompute: movie {movie_id} not found")
                return None

            ratings = [review.rating for review in store.reviews_by_movie(movie_id)]
            average = RatingAggregator.compute_average(ratings)

            movie = store.update_movie(movie_id, {
                "average_rating": average,
                "review_count": len(ratings)
            })
            logger.debug(f"Movie {movie_id} rating -> {average} over {len(ratings)} reviews")
            return movie

    @staticmethod
    def _stats(ratings: List[int]) -> RatingStats:
        # Calculate distribution (how many 1s, 2s, ... 5s)
        distribution: Dict[str, int] = {str(i): 0 for i in range(1, 6)}
        for rating in ratings:
            if 1 <= rating <= 5:
                distribution[str(rating)] += 1

        return RatingStats(
            total_ratings=len(ratings),
            average_rating=RatingAggregator.compute_average(ratings),
            rating_distribution=distribution
        )

    @staticmethod
    def rating_stats(store: EntityStore, movie_id: str) -> Optional[RatingStats]:
        """Rating statistics for a movie, None when the movie does not exist"""
        if store.get_movie(movie_id) is None:
            return None
        return RatingAggregator._stats([r.rating for r in store.reviews_by_movie(movie_id)])

    @staticmethod
    def user_stats(store: EntityStore, user_id: str) -> RatingStats:
        """Statistics over the ratings a user has given"""
        return RatingAggregator._stats([r.rating for r in store.reviews_by_user(user_id)])
