import os
from dotenv import load_dotenv

load_dotenv()


def _env_bool(name, default=False):
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


class BaseConfig:
    SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret")
    JWT_SECRET_KEY = os.getenv("JWT_SECRET_KEY", SECRET_KEY)
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    # Preview tokens are short-lived; minutes, not hours
    PREVIEW_TOKEN_TTL_SECONDS = int(os.getenv("PREVIEW_TOKEN_TTL_SECONDS", 900))
    PREVIEW_TOKEN_STORE = os.getenv("PREVIEW_TOKEN_STORE", "database")  # database | memory
    PREVIEW_SITE_URL = os.getenv("PREVIEW_SITE_URL", "http://localhost:3001")
    PREVIEW_LOAD_TIMEOUT_SECONDS = int(os.getenv("PREVIEW_LOAD_TIMEOUT_SECONDS", 10))

    NORMALIZE_LIST_ITEMS = _env_bool("NORMALIZE_LIST_ITEMS")

class DevelopmentConfig(BaseConfig):
    DEBUG = True
    SQLALCHEMY_DATABASE_URI = os.getenv("DEV_DATABASE_URI", "sqlite:///dev.db")

class TestingConfig(BaseConfig):
    TESTING = True
    SQLALCHEMY_DATABASE_URI = "sqlite://"
    JWT_SECRET_KEY = "test-secret-key-with-enough-length-for-hs256"
    PREVIEW_TOKEN_STORE = "database"

class ProductionConfig(BaseConfig):
    DEBUG = False
    SQLALCHEMY_DATABASE_URI = os.getenv("DATABASE_URI")

config_by_name = {
    "development": DevelopmentConfig,
    "testing": TestingConfig,
    "production": ProductionConfig
}
