import os

from dotenv import load_dotenv
from sqlalchemy.engine import URL


load_dotenv()


def _get_bool(value: str | None, default: bool = False) -> bool:
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}

APP_ENV = os.getenv("APP_ENV", "development")
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()


def _build_database_url() -> str:
    explicit_url = os.getenv("DATABASE_URL")
    if explicit_url:
        return explicit_url

    server = os.getenv("SQL_SERVER")
    if not server:
        return "sqlite:///./education.db"

    # Azure SQL requires an encrypted connection.
    return URL.create(
        "mssql+pyodbc",
        username=os.getenv("SQL_USER"),
        password=os.getenv("SQL_PASSWORD"),
        host=server,
        database=os.getenv("SQL_DATABASE", "TimeTracker"),
        query={
            "driver": os.getenv("SQL_ODBC_DRIVER", "ODBC Driver 18 for SQL Server"),
            "Encrypt": "yes",
            "TrustServerCertificate": "no",
        },
    ).render_as_string(hide_password=False)


DATABASE_URL = _build_database_url()
DB_POOL_SIZE = int(os.getenv("DB_POOL_SIZE", "10"))
DB_POOL_TIMEOUT_SECONDS = int(os.getenv("DB_POOL_TIMEOUT_SECONDS", "30"))
DB_POOL_RECYCLE_SECONDS = int(os.getenv("DB_POOL_RECYCLE_SECONDS", "1800"))
CREATE_SCHEMA_ON_STARTUP = _get_bool(os.getenv("CREATE_SCHEMA_ON_STARTUP"), default=False)

JWT_SECRET_KEY = os.getenv("JWT_SECRET_KEY", os.getenv("JWT_SECRET", "change-me"))
JWT_ALGORITHM = os.getenv("JWT_ALGORITHM", "HS256")
JWT_EXPIRES_MINUTES = int(os.getenv("JWT_EXPIRES_MINUTES", str(8 * 60)))

API_PREFIX = os.getenv("API_PREFIX", "/api").rstrip("/")
CORS_ORIGINS = [origin.strip() for origin in os.getenv("CORS_ORIGINS", "*").split(",") if origin.strip()]

def validate_runtime_config() -> None:
    if APP_ENV.lower() == "production" and JWT_SECRET_KEY == "change-me":
        raise RuntimeError("JWT_SECRET_KEY must be set in production.")
