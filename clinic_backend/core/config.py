import os

from dotenv import load_dotenv


load_dotenv()


def _get_bool(value: str | None, default: bool = False) -> bool:
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _get_list(value: str | None, default: list[str]) -> list[str]:
    if not value:
        return default
    return [item.strip() for item in value.split(",") if item.strip()]


APP_ENV = os.getenv("APP_ENV", "development")
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./clinic.db")
DATABASE_ECHO = _get_bool(os.getenv("DATABASE_ECHO"), default=False)

# "sql" keeps documents in a SQLAlchemy table, "firestore" talks to Cloud Firestore.
DOCUMENT_STORE_BACKEND = os.getenv("DOCUMENT_STORE_BACKEND", "sql").strip().lower()
# "jwt" verifies locally signed tokens, "firebase" verifies Firebase ID tokens.
IDENTITY_PROVIDER = os.getenv("IDENTITY_PROVIDER", "jwt").strip().lower()

FIREBASE_PROJECT_ID = os.getenv("FIREBASE_PROJECT_ID", "")
FIREBASE_CREDENTIALS_PATH = os.getenv("FIREBASE_CREDENTIALS_PATH", "")

JWT_SECRET_KEY = os.getenv("JWT_SECRET_KEY", "change-me")
JWT_ALGORITHM = os.getenv("JWT_ALGORITHM", "HS256")
JWT_EXPIRES_MINUTES = int(os.getenv("JWT_EXPIRES_MINUTES", "60"))

CORS_ALLOWED_ORIGINS = _get_list(os.getenv("CORS_ALLOWED_ORIGINS"), ["http://localhost:4200"])


def validate_runtime_config() -> None:
    if APP_ENV.lower() == "production" and IDENTITY_PROVIDER == "jwt" and JWT_SECRET_KEY == "change-me":
        raise RuntimeError("JWT_SECRET_KEY must be set in production.")
    if DOCUMENT_STORE_BACKEND not in {"sql", "firestore"}:
        raise RuntimeError(f"Unsupported DOCUMENT_STORE_BACKEND: {DOCUMENT_STORE_BACKEND}")
    if IDENTITY_PROVIDER not in {"jwt", "firebase"}:
        raise RuntimeError(f"Unsupported IDENTITY_PROVIDER: {IDENTITY_PROVIDER}")
