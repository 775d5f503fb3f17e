"""
Review Service - review mutations

Every create/update/delete runs inside one store transaction together with
the rating recompute, so readers never see a review set and a movie rating
that disagree.
"""

from typing import Optional
import logging

from reelreview.exceptions import Conflict, PermissionDenied, ValidationFailure
from reelreview.schemas.review import Review, ReviewCreate, ReviewUpdate
from reelreview.schemas.validation import MIN_REVIEW_LENGTH
from reelreview.services.rating_service import RatingAggregator
from reelreview.storage.base import EntityStore

logger = logging.getLogger(__name__)


class ReviewService:
    """Service for review operations"""

    @staticmethod
    def _check_invariants(rating: int, content: str) -> None:
        """Last line of defence for records built without schema validation"""
        if not isinstance(rating, int) or isinstance(rating, bool) or not 1 <= rating <= 5:
            raise ValidationFailure("Rating must be an integer between 1 and 5")
        if len(content.strip()) < MIN_REVIEW_LENGTH:
            raise ValidationFailure(f"Review must be at least {MIN_REVIEW_LENGTH} characters")

    @staticmethod
    def create_review(
        store: EntityStore,
        user_id: str,
        movie_id: str,
        review_data: ReviewCreate
    ) -> Optional[Review]:
        """
        Write a new review and refresh the movie's rating

        Returns:
            The review, or None if the user or movie does not exist

        Raises:
            Conflict: If the user already reviewed this movie
            ValidationFailure: If rating or content break the review invariants
        """
        ReviewService._check_invariants(review_data.rating, review_data.content)

        with store.transaction():
            if store.get_user(user_id) is None or store.get_movie(movie_id) is None:
                return None

            if store.get_review_for(user_id, movie_id) is not None:
                raise Conflict("You have already reviewed this movie")

            review = store.create_review({
                **review_data.model_dump(),
                "user_id": user_id,
                "movie_id": movie_id
            })
            RatingAggregator.recompute_rating(store, movie_id)

        logger.info(f"User {user_id} reviewed movie {movie_id} ({review.rating} stars)")
        return review

    @staticmethod
    def update_review(
        store: EntityStore,
        review_id: str,
        update_data: ReviewUpdate,
        user_id: Optional[str] = None
    ) -> Optional[Review]:
        """
        Edit a review; the movie rating is recomputed when the stars change

        Args:
            user_id: When given, only the review's owner may edit it

        Returns:
            The updated review, or None if it does not exist
        """
        fields = update_data.model_dump(exclude_unset=True, exclude_none=True)

        with store.transaction():
            review = store.get_review(review_id)
            if review is None:
                return None
            if user_id is not None and review.user_id != user_id:
                raise PermissionDenied("You can only edit your own reviews")

            ReviewService._check_invariants(
                fields.get("rating", review.rating),
                fields.get("content", review.content)
            )

            fields["updated_at"] = store.now()
            updated = store.update_review(review_id, fields)

            if updated.rating != review.rating:
                RatingAggregator.recompute_rating(store, review.movie_id)

        return updated

    @staticmethod
    def delete_review(store: EntityStore, review_id: str, user_id: Optional[str] = None) -> bool:
        """
        Delete a review and recompute its movie's rating

        Returns:
            False if the review does not exist
        """
        with store.transaction():
            review = store.get_review(review_id)
            if review is None:
                return False
            if user_id is not None and review.user_id != user_id:
                raise PermissionDenied("You can only delete your own reviews")

            store.delete_review(review_id)
            RatingAggregator.recompute_rating(store, review.movie_id)

        logger.info(f"Review {review_id} deleted from movie {review.movie_id}")
        return True

    @staticmethod
    def like_review(store: EntityStore, review_id: str) -> Optional[Review]:
        """Add one like; repeated calls keep counting"""
        with store.transaction():
            review = store.get_review(review_id)
            if review is None:
                return None
            return store.update_review(review_id, {"likes": review.likes + 1})
