# config/base.py
import os


def _coerce_bool(value, default=False):
    """Convert environment-style truthy/falsey values to bool."""
    if value is None:
        return default
    if isinstance(value, bool):
        return value
    value_str = str(value).strip().lower()
    if value_str in {"1", "true", "yes", "on"}:
        return True
    if value_str in {"0", "false", "no", "off"}:
        return False
    return default


def _parse_int(value, default, *, minimum=1, maximum=None):
    """
    Parse an integer setting, falling back to ``default`` when it is missing,
    malformed or outside the allowed bounds.
    """
    if value is None or str(value).strip() == "":
        return default
    try:
        number = int(str(value).strip())
    except ValueError:
        return default
    if number < minimum or (maximum is not None and number > maximum):
        return default
    return number


class Config:
    _flask_env = os.environ.get("FLASK_ENV", "development")
    _is_testing = _flask_env == "testing"
    _is_production = _flask_env == "production"

    SECRET_KEY = os.environ.get("SECRET_KEY")

    # Only require SECRET_KEY in production mode
    if not SECRET_KEY and _is_production:
        raise ValueError(
            "SECRET_KEY environment variable is required in production. "
            'Generate with: python -c "import secrets; print(secrets.token_hex(32))"'
        )

    if not SECRET_KEY and not _is_testing:
        import warnings

        warnings.warn(
            "SECRET_KEY not set. Using default for development only. "
            "Set SECRET_KEY environment variable before deploying.",
            UserWarning,
        )
        SECRET_KEY = "dev-secret-key-change-in-production"

    if not SECRET_KEY:
        SECRET_KEY = "test-secret-key-placeholder"

    SQLALCHEMY_TRACK_MODIFICATIONS = False
    SQLALCHEMY_ENGINE_OPTIONS = {}

    # Importer configuration
    IMPORTER_ENABLED = _coerce_bool(os.environ.get("IMPORTER_ENABLED"), default=True)
    IMPORTER_UPLOAD_DIR = os.environ.get("IMPORTER_UPLOAD_DIR")
    IMPORTER_MAX_UPLOAD_MB = _parse_int(os.environ.get("IMPORTER_MAX_UPLOAD_MB"), 25)
    # Werkzeug rejects larger request bodies with 413 before the view runs.
    MAX_CONTENT_LENGTH = IMPORTER_MAX_UPLOAD_MB * 1024 * 1024
    IMPORTER_HEADER_ROW = _parse_int(os.environ.get("IMPORTER_HEADER_ROW"), 1)
    IMPORTER_ALIAS_PATH = os.environ.get("IMPORTER_ALIAS_PATH")

    # Dynamic field schema configuration
    IMPORTER_FIELD_NAME_MAX_LENGTH = _parse_int(
        os.environ.get("IMPORTER_FIELD_NAME_MAX_LENGTH"), 50, maximum=100
    )
    IMPORTER_SCAN_BATCH_SIZE = _parse_int(os.environ.get("IMPORTER_SCAN_BATCH_SIZE"), 200, maximum=10000)


class DevelopmentConfig(Config):
    DEBUG = True
    # Use instance folder for database to avoid conflicts
    _config_dir = os.path.dirname(os.path.abspath(__file__))
    _project_root = os.path.dirname(_config_dir)
    instance_path = os.path.join(_project_root, "instance")

    if not os.path.exists(instance_path):
        os.makedirs(instance_path, exist_ok=True)

    # SQLite URI needs forward slashes, also on Windows
    db_path = os.path.join(instance_path, "enquiries_dev.db").replace("\\", "/")
    db_uri = f"sqlite:///{db_path}"

    SQLALCHEMY_DATABASE_URI = os.environ.get("DATABASE_URL", db_uri)
    SQLALCHEMY_ECHO = _coerce_bool(os.environ.get("SQLALCHEMY_ECHO"), default=False)
    if SQLALCHEMY_DATABASE_URI.startswith("sqlite"):
        SQLALCHEMY_ENGINE_OPTIONS = {
            "connect_args": {
                "check_same_thread": False,
                "timeout": 5,
            }
        }
    else:
        SQLALCHEMY_ENGINE_OPTIONS = {}


class TestingConfig(Config):
    TESTING = True
    SECRET_KEY = os.environ.get("SECRET_KEY", "test-secret-key-for-testing-only")
    SQLALCHEMY_DATABASE_URI = "sqlite:///:memory:"  # In-memory database for testing
    SQLALCHEMY_ECHO = False
    SQLALCHEMY_ENGINE_OPTIONS = {
        "connect_args": {
            "check_same_thread": False,
            "timeout": 5,
        }
    }
    IMPORTER_ENABLED = True
    IMPORTER_ALIAS_PATH = None


class ProductionConfig(Config):
    DEBUG = False
    uri = os.environ.get("DATABASE_URL")
    if uri and uri.startswith("postgres://"):
        uri = uri.replace("postgres://", "postgresql://", 1)
    SQLALCHEMY_DATABASE_URI = uri
    SQLALCHEMY_ECHO = False
