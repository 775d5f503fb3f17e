"""
Request schema validation
"""
import pytest
from pydantic import ValidationError

from reelreview.schemas.auth import UserRegister, UserUpdate
from reelreview.schemas.movie import Genre, MovieCreate, MovieUpdate
from reelreview.schemas.review import ReviewCreate, ReviewUpdate
from reelreview.schemas.search import MovieQuery, SortOption
from reelreview.schemas.validation import validate_pagination

CONTENT = "An honest, careful review that easily clears the minimum length rule."


def movie_payload(**overrides):
    data = {
        "title": "Arrival",
        "synopsis": "Linguist meets visitors.",
        "director": "Denis Villeneuve",
        "cast": ["Amy Adams"],
        "genres": ["drama", "science_fiction"],
        "release_year": 2016,
        "duration": 116,
    }
    data.update(overrides)
    return data


class TestReviewSchemas:

    def test_valid_review(self):
        review = ReviewCreate(rating=5, title="Great", content=CONTENT)
        assert review.spoiler_warning is False

    @pytest.mark.parametrize("rating", [0, 6])
    def test_rating_range(self, rating):
        with pytest.raises(ValidationError):
            ReviewCreate(rating=rating, title="Great", content=CONTENT)

    def test_content_minimum_length(self):
        with pytest.raises(ValidationError):
            ReviewCreate(rating=3, title="Short", content="Too short to count.")

    def test_whitespace_padding_does_not_count(self):
        with pytest.raises(ValidationError):
            ReviewCreate(rating=3, title="Padded", content="tiny" + " " * 80)

    def test_script_rejected(self):
        with pytest.raises(ValidationError):
            ReviewCreate(rating=3, title="<script>alert(1)</script>", content=CONTENT)
        with pytest.raises(ValidationError):
            ReviewCreate(rating=3, title="Fine", content=CONTENT + "<a href='javascript:x'>")

    def test_unknown_tags_are_stripped(self):
        review = ReviewCreate(rating=4, title="Markup", content=f"<div>{CONTENT}</div> <b>bold</b>")
        assert "<div>" not in review.content
        assert "<b>bold</b>" in review.content

    def test_update_allows_partial(self):
        update = ReviewUpdate(rating=2)
        assert update.model_dump(exclude_unset=True) == {"rating": 2}

        with pytest.raises(ValidationError):
            ReviewUpdate(content="short")


class TestMovieSchemas:

    def test_genres_are_enum_members(self):
        movie = MovieCreate(**movie_payload())
        assert movie.genres == [Genre.DRAMA, Genre.SCIENCE_FICTION]
        assert movie.featured is False and movie.trending is False

    def test_unknown_genre_rejected(self):
        with pytest.raises(ValidationError):
            MovieCreate(**movie_payload(genres=["space-opera"]))

    @pytest.mark.parametrize("field,value", [
        ("release_year", 1700),
        ("duration", 0),
        ("title", ""),
    ])
    def test_bounds(self, field, value):
        with pytest.raises(ValidationError):
            MovieCreate(**movie_payload(**{field: value}))

    def test_update_has_no_derived_fields(self):
        update = MovieUpdate(featured=True, average_rating="5.00", review_count=99)
        assert update.model_dump(exclude_unset=True) == {"featured": True}


class TestQuerySchema:

    def test_defaults(self):
        query = MovieQuery()
        assert query.sort == SortOption.TITLE
        assert (query.page, query.limit) == (1, 20)
        assert query.search is None and query.genre is None

    def test_min_rating_bounds(self):
        with pytest.raises(ValidationError):
            MovieQuery(min_rating=5.5)
        with pytest.raises(ValidationError):
            MovieQuery(min_rating=-1)

    def test_unknown_sort(self):
        with pytest.raises(ValidationError):
            MovieQuery(sort="popularity")

    @pytest.mark.parametrize("page,limit,expected", [
        (1, 20, (1, 20)),
        (0, 0, (1, 1)),
        (-3, -3, (1, 1)),
        (5, 101, (5, 100)),
    ])
    def test_validate_pagination(self, page, limit, expected):
        assert validate_pagination(page, limit) == expected


class TestAuthSchemas:

    def test_valid_registration(self):
        user = UserRegister(username="film_fan", email="fan@example.com", password="Secret123")
        assert user.profile_picture is None

    @pytest.mark.parametrize("password", ["short1A", "alllower1", "ALLUPPER1", "NoDigitsHere"])
    def test_weak_passwords(self, password):
        with pytest.raises(ValidationError):
            UserRegister(username="film_fan", email="fan@example.com", password=password)

    @pytest.mark.parametrize("username", ["ab", "has space", "dash-name"])
    def test_bad_usernames(self, username):
        with pytest.raises(ValidationError):
            UserRegister(username=username, email="fan@example.com", password="Secret123")

    def test_bad_email(self):
        with pytest.raises(ValidationError):
            UserUpdate(email="not-an-email")
