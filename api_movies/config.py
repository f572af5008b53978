import os
from dataclasses import dataclass, field

from dotenv import load_dotenv


def env_int(name: str, default: int):
    """
    Read an integer environment variable.

    Args:
        name (str): Variable name.
        default (int): Value used when the variable is unset or not a number.

    Returns:
        int: Parsed value or the default.
    """
    raw_value = os.environ.get(name)
    if raw_value is None or not raw_value.strip():
        return default
    try:
        return int(raw_value)
    except ValueError:
        return default


def env_bool(name: str, default: bool = False):
    """
    Read a boolean environment variable.

    Args:
        name (str): Variable name.
        default (bool): Value used when the variable is unset or empty.

    Returns:
        bool: Parsed flag.
    """
    raw_value = os.environ.get(name)
    if raw_value is None:
        return default
    normalized = raw_value.strip().lower()
    if not normalized:
        return default
    return normalized in {"1", "true", "yes", "on"}


def env_list(name: str, default: list[str]):
    """
    Read a comma-separated environment variable.

    Args:
        name (str): Variable name.
        default (list[str]): Value used when the variable is unset or empty.

    Returns:
        list[str]: Stripped, non-empty entries.
    """
    raw_value = os.environ.get(name)
    if not raw_value:
        return list(default)
    entries = [entry.strip() for entry in raw_value.split(",")]
    return [entry for entry in entries if entry] or list(default)


@dataclass
class Settings:
    mongo_uri: str = "mongodb://localhost:27017"
    database_name: str = "yourMovies"
    host: str = "0.0.0.0"
    port: int = 3000
    debug: bool = False
    secret_key: str = "dev-secret-key"
    watchlist_path: str = os.path.join("db", "watchlist.json")
    cors_origins: list[str] = field(default_factory=lambda: ["*"])
    log_level: str = "INFO"
    federated_login_url: str = "/login/federated/google"

    @classmethod
    def from_env(cls, dotenv: bool = True):
        """
        Build settings from environment variables.

        Args:
            dotenv (bool): Load a ``.env`` file first when True.

        Returns:
            Settings: Populated settings.
        """
        if dotenv:
            load_dotenv()

        defaults = cls()
        mongo_uri = (
            os.environ.get("MONGO_URI")
            or os.environ.get("MONGO_DB_CONNECTION_STRING")
            or defaults.mongo_uri
        )
        return cls(
            mongo_uri=mongo_uri,
            database_name=os.environ.get("MONGO_DB_NAME", defaults.database_name),
            host=os.environ.get("HOST", defaults.host),
            port=env_int("PORT", defaults.port),
            debug=env_bool("FLASK_DEBUG", defaults.debug),
            secret_key=os.environ.get("SECRET_KEY", defaults.secret_key),
            watchlist_path=os.environ.get("WATCHLIST_PATH", defaults.watchlist_path),
            cors_origins=env_list("CORS_ORIGINS", defaults.cors_origins),
            log_level=os.environ.get("LOG_LEVEL", defaults.log_level).upper(),
            federated_login_url=os.environ.get("FEDERATED_LOGIN_URL", defaults.federated_login_url),
        )
