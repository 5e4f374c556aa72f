import os

from dotenv import load_dotenv

load_dotenv()


def _flag(name, default="false"):
    return os.getenv(name, default).lower() in ("1", "true", "yes", "on")


def _origins(raw):
    return [origin.strip() for origin in raw.split(",") if origin.strip()]


class Config:
    SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-change-me")
    SQLALCHEMY_DATABASE_URI = os.getenv("DATABASE_URL", "sqlite:///taskboard.db")
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    # Where unauthenticated browser navigations are sent
    LOGIN_URL = os.getenv("LOGIN_URL", "http://localhost:5173/login")

    CORS_ALLOWED_ORIGINS = _origins(
        os.getenv("CORS_ALLOWED_ORIGINS", "http://localhost:5173,http://localhost:3000")
    )

    IDENTITY_SESSION_KEY = "identity"
    CSRF_SESSION_KEY = "csrf_token"
    CSRF_HEADER = "X-CSRF-Token"
    CSRF_ENFORCE = _flag("CSRF_ENFORCE")

    SHOW_EXCEPTION_DETAILS = _flag("SHOW_EXCEPTION_DETAILS")
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

    SESSION_COOKIE_HTTPONLY = True
    SESSION_COOKIE_SECURE = _flag("SESSION_COOKIE_SECURE")
    SESSION_COOKIE_SAMESITE = os.getenv("SESSION_COOKIE_SAMESITE", "Lax")

    # Server-side sessions: the cookie only carries the session id
    SESSION_TYPE = os.getenv("SESSION_TYPE", "sqlalchemy")
    SESSION_SQLALCHEMY_TABLE = "sessions"
    SESSION_PERMANENT = False


class DevelopmentConfig(Config):
    DEBUG = True
    SHOW_EXCEPTION_DETAILS = _flag("SHOW_EXCEPTION_DETAILS", "true")


class TestingConfig(Config):
    TESTING = True
    SECRET_KEY = "testing"
    SQLALCHEMY_DATABASE_URI = "sqlite://"
    CORS_ALLOWED_ORIGINS = ["http://localhost:5173", "http://localhost:3000"]
    CSRF_ENFORCE = False
    SHOW_EXCEPTION_DETAILS = False
    LOG_LEVEL = "WARNING"
    SESSION_TYPE = "cachelib"
