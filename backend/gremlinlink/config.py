import os
from dotenv import load_dotenv

load_dotenv()


def store_engine_options(uri, timeout):
    """
    Engine options that bound every Block Store round trip.

    A stalled database must fail fast instead of hanging the redirect path,
    so pool checkout, driver connect and statement execution all share one
    timeout budget.
    """
    options = {"pool_pre_ping": True}
    uri = uri or ""

    if uri.startswith("sqlite"):
        options["connect_args"] = {"timeout": timeout}
        return options

    options["pool_timeout"] = timeout
    if uri.startswith("postgresql"):
        options["connect_args"] = {
            "connect_timeout": max(int(timeout), 1),
            "options": f"-c statement_timeout={int(timeout * 1000)}",
        }
    return options


class BaseConfig:
    SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret")
    JWT_SECRET_KEY = os.getenv("JWT_SECRET_KEY", SECRET_KEY)
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

    # seconds
    STORE_TIMEOUT_SECONDS = float(os.getenv("STORE_TIMEOUT_SECONDS", "5"))

    ANALYTICS_ENABLED = os.getenv("ANALYTICS_ENABLED", "true").lower() == "true"
    ANALYTICS_WORKERS = int(os.getenv("ANALYTICS_WORKERS", "2"))

    PUBLIC_CACHE_ENABLED = True


class DevelopmentConfig(BaseConfig):
    DEBUG = True
    LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG")
    SQLALCHEMY_DATABASE_URI = os.getenv("DEV_DATABASE_URI", "sqlite:///gremlinlink-dev.db")


class ProductionConfig(BaseConfig):
    DEBUG = False
    SQLALCHEMY_DATABASE_URI = os.getenv("DATABASE_URI")


class TestingConfig(BaseConfig):
    TESTING = True
    SQLALCHEMY_DATABASE_URI = "sqlite://"
    JWT_SECRET_KEY = "test-jwt-secret-with-enough-length-for-hs256"
    STORE_TIMEOUT_SECONDS = 2.0
    ANALYTICS_WORKERS = 1
    PUBLIC_CACHE_ENABLED = False


config_by_name = {
    "development": DevelopmentConfig,
    "production": ProductionConfig,
    "testing": TestingConfig,
}
