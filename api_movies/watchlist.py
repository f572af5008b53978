import json
import logging
import os
import threading
from uuid import uuid4

from flask import Blueprint, jsonify, request

from .auth import principal_email
from .movies_functions import utc_timestamp_iso

logger = logging.getLogger(__name__)


class WatchlistStore:
    """
    Watchlist entries kept in memory and mirrored to a JSON file.

    The file is read once when the store is created and rewritten in full
    after every addition.
    """

    def __init__(self, path: str):
        self.path = path
        self._lock = threading.Lock()
        self.items = self._load()

    def _load(self):
        if not os.path.exists(self.path):
            return []
        with open(self.path, encoding="utf-8") as handle:
            data = json.load(handle)
        if not isinstance(data, list):
            raise ValueError(f"Watchlist file {self.path} must contain a JSON array")
        return data

    def add(self, movie_id: str, user: str):
        """
        Append an entry and persist the whole list.

        Args:
            movie_id (str): Movie identifier from the request.
            user (str): Principal email or the anonymous sentinel.

        Returns:
            dict: The stored entry.

        Raises:
            OSError: When the file cannot be written; the list is left unchanged.
        """
        item = {
            "_id": str(uuid4()),
            "movieId": movie_id,
            "user": user,
            "addedAt": utc_timestamp_iso(),
        }
        # Concurrent adds must not copy the same list
        with self._lock:
            updated = self.items + [item]

            directory = os.path.dirname(self.path)
            if directory:
                os.makedirs(directory, exist_ok=True)
            with open(self.path, "w", encoding="utf-8") as handle:
                json.dump(updated, handle, indent=2)

            self.items = updated
        return item


def build_watchlist_blueprint(store: WatchlistStore):
    """
    Create the blueprint serving ``/watchlist``.

    Args:
        store (WatchlistStore): Store backing the endpoints.

    Returns:
        Blueprint: Watchlist blueprint.
    """
    blueprint = Blueprint("watchlist", __name__, url_prefix="/watchlist")

    @blueprint.route("", methods=["GET"])
    def get_watchlist():
        return jsonify(store.items)

    @blueprint.route("", methods=["POST"])
    def add_to_watchlist():
        payload = request.get_json(silent=True)
        if not isinstance(payload, dict):
            payload = {}
        movie_id = payload.get("movieId")
        if not movie_id:
            return jsonify({"message": "movieId is required"}), 400

        try:
            item = store.add(movie_id, principal_email())
        except OSError as exc:
            logger.error("Error writing watchlist file %s: %s", store.path, exc)
            return jsonify({"message": "Failed to save watchlist", "error": str(exc)}), 500

        return jsonify(item), 201

    return blueprint
