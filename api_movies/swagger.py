from .resources import ResourceConfig


def build_error_schema():
    return {
        "type": "object",
        "properties": {
            "message": {"type": "string"},
            "error": {"type": "string"},
            "missingFields": {"type": "array", "items": {"type": "string"}},
        },
    }


def build_resource_paths(config: ResourceConfig):
    """
    Describe the five operations of a resource.

    Args:
        config (ResourceConfig): Resource description.

    Returns:
        dict: OpenAPI path items keyed by path.
    """
    tag = config.name.replace("-", " ").title()
    schema_ref = {"$ref": f"#/components/schemas/{config.collection}"}
    error_ref = {"$ref": "#/components/schemas/Error"}
    body = {"required": True, "content": {"application/json": {"schema": schema_ref}}}
    id_param = [{"name": "id", "in": "path", "required": True, "schema": {"type": "string"}}]

    def error_response(description: str):
        return {"description": description, "content": {"application/json": {"schema": error_ref}}}

    collection_path = {
        "get": {
            "tags": [tag],
            "summary": f"Get all {config.plural}",
            "responses": {
                "200": {
                    "description": "OK",
                    "content": {"application/json": {"schema": {"type": "array", "items": schema_ref}}},
                },
                "500": error_response("Storage failure"),
            },
        },
        "post": {
            "tags": [tag],
            "summary": f"Create {config.label}",
            "requestBody": body,
            "responses": {
                "201": {"description": config.created_message},
                "400": error_response("Missing required fields"),
                "500": error_response("Storage failure"),
            },
        },
    }
    item_path = {
        "get": {
            "tags": [tag],
            "summary": f"Get single {config.label} by ID",
            "parameters": id_param,
            "responses": {
                "200": {"description": "OK", "content": {"application/json": {"schema": schema_ref}}},
                "404": error_response(config.not_found_message),
                "500": error_response("Storage failure"),
            },
        },
        "put": {
            "tags": [tag],
            "summary": f"Update {config.label} by ID",
            "parameters": id_param,
            "requestBody": body,
            "responses": {
                "204": {"description": "Updated"},
                "400": error_response(f"{config.invalid_id_message} or missing fields"),
                "404": error_response(config.not_found_message),
                "500": error_response("Storage failure"),
            },
        },
        "delete": {
            "tags": [tag],
            "summary": f"Delete {config.label} by ID",
            "parameters": id_param,
            "responses": {
                "204": {"description": "Deleted"},
                "400": error_response(config.invalid_id_message),
                "404": error_response(config.not_found_message),
                "500": error_response("Storage failure"),
            },
        },
    }
    return {f"/{config.name}": collection_path, f"/{config.name}/{{id}}": item_path}


def build_watchlist_paths():
    item_schema = {
        "type": "object",
        "properties": {
            "_id": {"type": "string"},
            "movieId": {"type": "string"},
            "user": {"type": "string"},
            "addedAt": {"type": "string", "format": "date-time"},
        },
    }
    return {
        "/watchlist": {
            "get": {
                "tags": ["Watchlist"],
                "summary": "Get the watchlist",
                "responses": {
                    "200": {
                        "description": "OK",
                        "content": {"application/json": {"schema": {"type": "array", "items": item_schema}}},
                    }
                },
            },
            "post": {
                "tags": ["Watchlist"],
                "summary": "Add a movie to the watchlist",
                "requestBody": {
                    "required": True,
                    "content": {
                        "application/json": {
                            "schema": {
                                "type": "object",
                                "required": ["movieId"],
                                "properties": {"movieId": {"type": "string"}},
                            }
                        }
                    },
                },
                "responses": {
                    "201": {"description": "Added", "content": {"application/json": {"schema": item_schema}}},
                    "400": {"description": "movieId is required"},
                    "500": {"description": "Failed to save watchlist"},
                },
            },
        }
    }


def build_openapi_document(resources: tuple[ResourceConfig, ...] | list[ResourceConfig], host: str):
    """
    Generate the OpenAPI description of the API.

    Args:
        resources (tuple | list): Registered resource configs.
        host (str): Host and port shown as the server URL.

    Returns:
        dict: OpenAPI 3.0 document.
    """
    paths = {}
    schemas = {"Error": build_error_schema()}
    for config in resources:
        paths.update(build_resource_paths(config))
        schemas[config.collection] = {
            "type": "object",
            "required": list(config.required_fields),
            "properties": {name: {} for name in config.required_fields},
        }
    paths.update(build_watchlist_paths())

    return {
        "openapi": "3.0.3",
        "info": {
            "title": "Movies API",
            "description": "A RESTful API for managing movie collections and most popular movies.",
            "version": "1.0.0",
        },
        "servers": [{"url": f"http://{host}"}, {"url": f"https://{host}"}],
        "paths": paths,
        "components": {"schemas": schemas},
    }
