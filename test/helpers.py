from types import SimpleNamespace
from unittest.mock import MagicMock

from bson import ObjectId

from api_movies.config import Settings
from api_movies.errors import DatabaseNotInitializedError


def make_collection():
    """Collection double with the PyMongo methods the handlers call."""
    collection = MagicMock()
    collection.find.return_value = []
    collection.find_one.return_value = None
    return collection


class FakeDatabase:
    """Database double handing out one mock collection per name."""

    def __init__(self, connected: bool = True):
        self.connected = connected
        self.collections = {}

    def get_collection(self, name: str):
        if not self.connected:
            raise DatabaseNotInitializedError()
        if name not in self.collections:
            self.collections[name] = make_collection()
        return self.collections[name]


def insert_result(inserted_id=None):
    return SimpleNamespace(inserted_id=inserted_id or ObjectId())


def update_result(matched_count: int):
    return SimpleNamespace(matched_count=matched_count, modified_count=matched_count)


def delete_result(deleted_count: int):
    return SimpleNamespace(deleted_count=deleted_count)


def valid_object_id():
    return str(ObjectId())


def make_settings(tmp_dir: str):
    return Settings(
        secret_key="test-secret",
        watchlist_path=f"{tmp_dir}/watchlist.json",
    )


VALID_MOVIE_BODY = {
    "title": "Test Movie",
    "description": "A test movie description",
    "genre": ["Action", "Drama"],
    "releaseYear": 2024,
    "director": "Test Director",
    "duration": 120,
    "rating": 8.5,
    "posterUrl": "https://example.com/poster.jpg",
    "trailerUrl": "https://example.com/trailer.mp4",
    "cast": ["Actor One", "Actor Two"],
    "language": "English",
    "country": "USA",
    "addedDate": "2024-01-01",
    "views": 1000,
    "isPopular": True,
    "copyrightStatus": "Licensed",
}

VALID_POPULAR_BODY = {"movieId": "movie-123", **VALID_MOVIE_BODY}

VALID_COMMENT_BODY = {
    "movieTitle": "Test Movie",
    "user": "testuser",
    "text": "Great movie!",
    "rating": 9,
    "createdAt": "2024-06-15",
    "likes": 42,
}

VALID_USER_BODY = {
    "name": "Test User",
    "email": "test@example.com",
    "profilePicture": "https://example.com/me.png",
    "createdAt": "2024-01-01",
    "updatedAt": "2024-01-02",
}
