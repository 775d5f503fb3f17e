"""
Seed the catalog with a default user and a few well-known movies

Idempotent: records already present (by username / tmdb id) are left alone.

Usage:
    STORAGE_BACKEND=sql python -m reelreview.seed
"""
import logging

from reelreview.schemas.movie import Genre
from reelreview.storage.base import EntityStore
from reelreview.utils.security import hash_password

logger = logging.getLogger(__name__)

DEFAULT_USER = {
    "username": "default",
    "email": "default@example.com",
    "password": "Password1",
    "profile_picture": "https://i.pravatar.cc/150?u=default",
}

SEED_MOVIES = [
    {
        "tmdb_id": 27205,
        "title": "Inception",
        "synopsis": "A thief who steals corporate secrets through the use of dream-sharing "
                    "technology is given the inverse task of planting an idea into the mind of a C.E.O.",
        "director": "Christopher Nolan",
        "cast": ["Leonardo DiCaprio", "Joseph Gordon-Levitt", "Elliot Page"],
        "genres": [Genre.ACTION, Genre.ADVENTURE, Genre.SCIENCE_FICTION],
        "release_year": 2010,
        "duration": 148,
        "poster_url": "/inception.jpg",
        "featured": True,
        "trending": False,
    },
    {
        "tmdb_id": 278,
        "title": "The Shawshank Redemption",
        "synopsis": "Two imprisoned men bond over a number of years, finding solace and eventual "
                    "redemption through acts of common decency.",
        "director": "Frank Darabont",
        "cast": ["Tim Robbins", "Morgan Freeman", "Bob Gunton"],
        "genres": [Genre.DRAMA],
        "release_year": 1994,
        "duration": 142,
        "poster_url": "/shawshank.jpg",
        "featured": False,
        "trending": True,
    },
    {
        "tmdb_id": 155,
        "title": "The Dark Knight",
        "synopsis": "When the menace known as the Joker emerges from his mysterious past, he wreaks "
                    "havoc and chaos on the people of Gotham.",
        "director": "Christopher Nolan",
        "cast": ["Christian Bale", "Heath Ledger", "Aaron Eckhart"],
        "genres": [Genre.ACTION, Genre.CRIME, Genre.DRAMA],
        "release_year": 2008,
        "duration": 152,
        "poster_url": "/dark_knight.jpg",
        "featured": True,
        "trending": False,
    },
]


def seed(store: EntityStore) -> None:
    """Insert the default user and seed movies that are missing"""
    with store.transaction():
        if store.get_user_by_username(DEFAULT_USER["username"]) is None:
            store.create_user({
                "username": DEFAULT_USER["username"],
                "email": DEFAULT_USER["email"],
                "password_hash": hash_password(DEFAULT_USER["password"]),
                "profile_picture": DEFAULT_USER["profile_picture"],
            })
            logger.info("Seeded default user")

        added = 0
        for movie in SEED_MOVIES:
            if store.get_movie_by_tmdb_id(movie["tmdb_id"]) is None:
                store.create_movie(movie)
                added += 1

    logger.info(f"Seeded {added} movies")


if __name__ == "__main__":
    from reelreview.storage import build_storage

    logging.basicConfig(level=logging.INFO)
    seed(build_storage())
