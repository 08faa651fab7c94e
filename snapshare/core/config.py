# snapshare/core/config.py

import os
from datetime import timedelta


def _env_list(key: str, default: str) -> set:
    return {item.strip().lower() for item in os.getenv(key, default).split(',') if item.strip()}


class Config:
    """Settings shared by every environment. Values come from the process environment (.env)."""
    JWT_SECRET_KEY = os.getenv('JWT_SECRET_KEY')

    # Tokens travel in httpOnly cookies named the way the web client expects.
    JWT_TOKEN_LOCATION = ['cookies']
    JWT_ACCESS_COOKIE_NAME = 'accessToken'
    JWT_REFRESH_COOKIE_NAME = 'refreshToken'
    JWT_ACCESS_TOKEN_EXPIRES = timedelta(days=1)
    JWT_REFRESH_TOKEN_EXPIRES = timedelta(days=7)
    JWT_COOKIE_SECURE = False
    JWT_COOKIE_SAMESITE = 'Lax'
    JWT_COOKIE_CSRF_PROTECT = os.getenv('JWT_COOKIE_CSRF_PROTECT', 'false').lower() == 'true'

    FIREBASE_CREDENTIALS_PATH = os.getenv('FIREBASE_CREDENTIALS_PATH')
    FIREBASE_STORAGE_BUCKET = os.getenv('FIREBASE_STORAGE_BUCKET')

    # Upload limits (5 MB, jpg/png only)
    MAX_CONTENT_LENGTH = int(os.getenv('MAX_CONTENT_LENGTH', 5 * 1024 * 1024))
    ALLOWED_IMAGE_EXTENSIONS = _env_list('ALLOWED_IMAGE_EXTENSIONS', 'jpg,jpeg,png')

    DEFAULT_PAGE_LIMIT = 10
    MAX_PAGE_LIMIT = 100

    DEFAULT_BIO = "Hi, I'm using SnapShare!"


class DevelopmentConfig(Config):
    DEBUG = True
    FIREBASE_CREDENTIALS_PATH = os.getenv('DEV_FIREBASE_CREDENTIALS_PATH', Config.FIREBASE_CREDENTIALS_PATH)


class TestingConfig(Config):
    """Test settings. Store handles are injected by the test suite, so no credentials are needed."""
    TESTING = True
    DEBUG = False
    JWT_SECRET_KEY = os.getenv('TEST_JWT_SECRET_KEY', 'snapshare-testing-secret-key-0123456789abcdef')
    FIREBASE_CREDENTIALS_PATH = os.getenv('TEST_FIREBASE_CREDENTIALS_PATH')
    FIREBASE_STORAGE_BUCKET = os.getenv('TEST_FIREBASE_STORAGE_BUCKET', 'snapshare-test.appspot.com')


class ProductionConfig(Config):
    DEBUG = False
    JWT_COOKIE_SECURE = True
    # Cross-site cookies must be Secure + SameSite=None for the hosted frontend
    JWT_COOKIE_SAMESITE = 'None'


config_by_name = dict(
    development=DevelopmentConfig,
    testing=TestingConfig,
    production=ProductionConfig
)
