"""
Generic list/get/create/update/delete handlers shared by every collection.

A resource is described by a ``ResourceConfig``; ``ResourceHandlerSet`` runs
the five operations against the database without knowing about Flask, and
``build_resource_blueprint`` exposes them over HTTP.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Callable

from bson import ObjectId
from flask import Blueprint, jsonify, request

from .database import Database
from .errors import ApiError, MissingFieldsError, NotFoundError, StorageError, ValidationError
from .movies_functions import (
    build_document,
    find_by_identifier,
    find_missing_fields,
    is_valid_object_id,
    serialize_document,
)

logger = logging.getLogger(__name__)

MOVIE_FIELDS = (
    "title",
    "description",
    "genre",
    "releaseYear",
    "director",
    "duration",
    "rating",
    "posterUrl",
    "trailerUrl",
    "cast",
    "language",
    "country",
    "addedDate",
    "views",
    "isPopular",
    "copyrightStatus",
)

COMMENT_FIELDS = ("movieTitle", "user", "text", "rating", "createdAt", "likes")

USER_FIELDS = ("name", "email", "profilePicture", "createdAt", "updatedAt")


@dataclass(frozen=True)
class ResourceConfig:
    name: str
    collection: str
    required_fields: tuple[str, ...]
    label: str
    plural: str
    created_message: str

    @property
    def not_found_message(self):
        return f"{self.label.capitalize()} not found"

    @property
    def invalid_id_message(self):
        return f"Invalid {self.label} ID format"


RESOURCES = (
    ResourceConfig(
        name="movies",
        collection="movies",
        required_fields=MOVIE_FIELDS,
        label="movie",
        plural="movies",
        created_message="Movie added successfully",
    ),
    ResourceConfig(
        name="most-popular",
        collection="mostpopular",
        required_fields=("movieId",) + MOVIE_FIELDS,
        label="movie",
        plural="movies",
        created_message="Movie added to most popular",
    ),
    ResourceConfig(
        name="comments",
        collection="comments",
        required_fields=COMMENT_FIELDS,
        label="comment",
        plural="comments",
        created_message="Comment added successfully",
    ),
    ResourceConfig(
        name="users",
        collection="users",
        required_fields=USER_FIELDS,
        label="user",
        plural="users",
        created_message="User added successfully",
    ),
)


@dataclass
class ResourceRequest:
    path_params: dict[str, str] = field(default_factory=dict)
    payload: Any = None


@dataclass
class ResourceResponse:
    status: int
    body: Any = None

    def to_flask(self):
        """
        Convert to a Flask view return value.

        Returns:
            tuple: Response body and status code.
        """
        if self.body is None:
            return "", self.status
        return jsonify(self.body), self.status


class ResourceHandlerSet:
    """Run the five CRUD operations for one collection."""

    def __init__(self, config: ResourceConfig, database: Database):
        self.config = config
        self.database = database

    def _collection(self):
        return self.database.get_collection(self.config.collection)

    def _run(self, action: str, failure_message: str, operation: Callable[[], ResourceResponse]):
        """
        Execute an operation and turn raised errors into responses.

        Args:
            action (str): Operation name used in log lines.
            failure_message (str): Message returned when storage fails.
            operation (Callable): Zero-argument callable doing the work.

        Returns:
            ResourceResponse: Success or error response.
        """
        try:
            return operation()
        except (ValidationError, NotFoundError) as exc:
            logger.info("%s %s rejected: %s", action, self.config.name, exc.message)
            return ResourceResponse(exc.status_code, exc.to_response())
        except Exception as exc:
            logger.exception("%s %s failed", action, self.config.name)
            detail = exc.message if isinstance(exc, ApiError) else str(exc)
            error = StorageError(failure_message, error=detail)
            return ResourceResponse(error.status_code, error.to_response())

    def _require_valid_id(self, req: ResourceRequest):
        resource_id = req.path_params.get("id")
        if not is_valid_object_id(resource_id):
            raise ValidationError(self.config.invalid_id_message)
        return ObjectId(resource_id)

    def _require_fields(self, req: ResourceRequest):
        missing = find_missing_fields(self.config.required_fields, req.payload)
        if missing:
            raise MissingFieldsError(missing)
        return build_document(self.config.required_fields, req.payload)

    def list_all(self, req: ResourceRequest):
        def operation():
            documents = [serialize_document(doc) for doc in self._collection().find()]
            return ResourceResponse(200, documents)

        return self._run("list", f"Error retrieving {self.config.plural}", operation)

    def get_one(self, req: ResourceRequest):
        def operation():
            document = find_by_identifier(self._collection(), req.path_params.get("id"))
            if not document:
                raise NotFoundError(self.config.not_found_message)
            return ResourceResponse(200, serialize_document(document))

        return self._run("get", f"Error retrieving {self.config.label}", operation)

    def create(self, req: ResourceRequest):
        def operation():
            document = self._require_fields(req)
            result = self._collection().insert_one(document)
            return ResourceResponse(201, {
                "message": self.config.created_message,
                "insertedId": str(result.inserted_id),
            })

        return self._run("create", f"Error adding {self.config.label}", operation)

    def update(self, req: ResourceRequest):
        def operation():
            object_id = self._require_valid_id(req)
            document = self._require_fields(req)
            result = self._collection().update_one({"_id": object_id}, {"$set": document})
            if result.matched_count == 0:
                raise NotFoundError(self.config.not_found_message)
            return ResourceResponse(204)

        return self._run("update", f"Error updating {self.config.label}", operation)

    def delete(self, req: ResourceRequest):
        def operation():
            object_id = self._require_valid_id(req)
            result = self._collection().delete_one({"_id": object_id})
            if result.deleted_count == 0:
                raise NotFoundError(self.config.not_found_message)
            return ResourceResponse(204)

        return self._run("delete", f"Error deleting {self.config.label}", operation)


def build_resource_blueprint(config: ResourceConfig, database: Database):
    """
    Create the Flask blueprint serving one resource.

    Args:
        config (ResourceConfig): Resource description.
        database (Database): Shared database handle.

    Returns:
        Blueprint: Blueprint mounted at ``/<config.name>``.
    """
    handlers = ResourceHandlerSet(config, database)
    blueprint = Blueprint(config.name.replace("-", "_"), __name__, url_prefix=f"/{config.name}")

    @blueprint.route("", methods=["GET"])
    def list_resources():
        return handlers.list_all(ResourceRequest()).to_flask()

    @blueprint.route("", methods=["POST"])
    def create_resource():
        payload = request.get_json(silent=True)
        return handlers.create(ResourceRequest(payload=payload)).to_flask()

    @blueprint.route("/<resource_id>", methods=["GET"])
    def get_resource(resource_id: str):
        return handlers.get_one(ResourceRequest(path_params={"id": resource_id})).to_flask()

    @blueprint.route("/<resource_id>", methods=["PUT"])
    def update_resource(resource_id: str):
        payload = request.get_json(silent=True)
        return handlers.update(ResourceRequest(path_params={"id": resource_id}, payload=payload)).to_flask()

    @blueprint.route("/<resource_id>", methods=["DELETE"])
    def delete_resource(resource_id: str):
        return handlers.delete(ResourceRequest(path_params={"id": resource_id})).to_flask()

    return blueprint
