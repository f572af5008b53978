import logging

from flask import Flask, jsonify, request
from flask_cors import CORS

from .auth import auth_blueprint
from .config import Settings
from .database import Database
from .resources import RESOURCES, build_resource_blueprint
from .swagger import build_openapi_document
from .watchlist import WatchlistStore, build_watchlist_blueprint

logger = logging.getLogger(__name__)


def create_app(settings: Settings | None = None, database: Database | None = None, watchlist: WatchlistStore | None = None):
    """
    Build the Flask application.

    Args:
        settings (Settings | None): Configuration, read from the environment when None.
        database (Database | None): Database handle, connected from settings when None.
        watchlist (WatchlistStore | None): Watchlist store, loaded from settings when None.

    Returns:
        Flask: Configured application.
    """
    settings = settings or Settings.from_env()
    if database is None:
        database = Database(settings.mongo_uri, settings.database_name)
        database.connect()
    if watchlist is None:
        watchlist = WatchlistStore(settings.watchlist_path)

    app = Flask(__name__)
    app.json.sort_keys = False
    app.config["SECRET_KEY"] = settings.secret_key
    app.config["FEDERATED_LOGIN_URL"] = settings.federated_login_url
    CORS(app, origins=settings.cors_origins)

    for config in RESOURCES:
        app.register_blueprint(build_resource_blueprint(config, database))
    app.register_blueprint(build_watchlist_blueprint(watchlist))
    app.register_blueprint(auth_blueprint)

    @app.route("/", methods=["GET"])
    def index():
        return "Hello World!"

    @app.route("/api-docs", methods=["GET"])
    def api_docs():
        return jsonify(build_openapi_document(RESOURCES, request.host))

    return app


def main():
    settings = Settings.from_env()
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    app = create_app(settings)
    logger.info("Server is running at http://%s:%s", settings.host, settings.port)
    app.run(host=settings.host, port=settings.port, debug=settings.debug)


if __name__ == "__main__":
    main()
