"""
Review Routes - edit, delete and like reviews
Creation lives under /api/movies/{movie_id}/reviews
"""

from fastapi import APIRouter, Depends, HTTPException, Path, status

from reelreview.schemas.review import Review, ReviewUpdate
from reelreview.schemas.user import User
from reelreview.services.review_service import ReviewService
from reelreview.storage.base import EntityStore
from reelreview.utils.dependencies import get_current_user, get_storage

router = APIRouter(prefix="/api/reviews", tags=["Reviews"])


@router.put("/{review_id}", response_model=Review)
def update_review(
    update_data: ReviewUpdate,
    review_id: str = Path(..., description="Review ID"),
    current_user: User = Depends(get_current_user),
    store: EntityStore = Depends(get_storage)
):
    """
    Edit one of your reviews

    Only supplied fields change. Changing the rating refreshes the
    movie's average rating.
    """
    review = ReviewService.update_review(store, review_id, update_data, user_id=current_user.id)
    if review is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Review not found")
    return review


@router.delete("/{review_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_review(
    review_id: str = Path(..., description="Review ID to delete"),
    current_user: User = Depends(get_current_user),
    store: EntityStore = Depends(get_storage)
):
    """
    Delete a review by ID

    Only the user who wrote the review can delete it.
    Returns 204 No Content on success.
    """
    if not ReviewService.delete_review(store, review_id, user_id=current_user.id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Review not found")
    return None


@router.post("/{review_id}/like", response_model=Review)
def like_review(
    review_id: str = Path(..., description="Review ID"),
    store: EntityStore = Depends(get_storage)
):
    """Like a review (every call adds one)"""
    review = ReviewService.like_review(store, review_id)
    if review is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Review not found")
    return review
