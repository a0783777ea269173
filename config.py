"""Configuration module for Flask application."""
import os
from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()


class Config:
    """Base configuration class."""

    # Flask
    SECRET_KEY = os.getenv('SECRET_KEY', 'dev-secret-key-change-in-production')
    DEBUG = os.getenv('FLASK_DEBUG', '1') == '1'
    ENV = os.getenv('FLASK_ENV', 'development')
    JSON_SORT_KEYS = False

    # Database - Support multiple environment variable naming conventions
    # Priority: DATABASE_URL > DB_* > POSTGRES_*
    DATABASE_URL = os.getenv('DATABASE_URL')

    if not DATABASE_URL:
        # Try DB_* variables (Docker style)
        DB_HOST = os.getenv('DB_HOST') or os.getenv('POSTGRES_HOST', 'localhost')
        DB_PORT = os.getenv('DB_PORT') or os.getenv('POSTGRES_PORT', '5432')
        DB_NAME = os.getenv('DB_NAME') or os.getenv('POSTGRES_DB', 'grocery')
        DB_USER = os.getenv('DB_USER') or os.getenv('POSTGRES_USER', 'grocery')
        DB_PASSWORD = os.getenv('DB_PASSWORD') or os.getenv('POSTGRES_PASSWORD', 'grocery')

        DATABASE_URL = (
            f"postgresql+psycopg://{DB_USER}:{DB_PASSWORD}"
            f"@{DB_HOST}:{DB_PORT}/{DB_NAME}"
        )

    # SQLAlchemy
    SQLALCHEMY_DATABASE_URI = DATABASE_URL
    SQLALCHEMY_ECHO = os.getenv('SQLALCHEMY_ECHO', 'false').lower() == 'true'
    # Create missing tables on startup (handy for local SQLite runs)
    AUTO_CREATE_TABLES = os.getenv('AUTO_CREATE_TABLES', 'false').lower() == 'true'

    # JWT
    JWT_SECRET = os.getenv('JWT_SECRET', 'grocery-store-secret-key-for-jwt-token-generation-minimum-256-bits')
    JWT_ALGORITHM = 'HS256'
    JWT_EXPIRATION_SECONDS = int(os.getenv('JWT_EXPIRATION_SECONDS', '86400'))  # 24 hours

    # Admin API access (comma separated emails)
    ADMIN_EMAILS = {
        email.strip().lower()
        for email in os.getenv('ADMIN_EMAILS', '').split(',')
        if email.strip()
    }

    # Catalog
    SEARCH_MIN_LENGTH = int(os.getenv('SEARCH_MIN_LENGTH', '2'))

    # Orders
    ORDER_NUMBER_MAX_ATTEMPTS = int(os.getenv('ORDER_NUMBER_MAX_ATTEMPTS', '5'))
    PAYMENT_METHODS = {'COD', 'CARD', 'UPI', 'WALLET', 'NETBANKING'}


class TestConfig(Config):
    """Configuration used by the test suite (in-memory SQLite)."""

    TESTING = True
    DEBUG = False
    ENV = 'testing'
    SQLALCHEMY_DATABASE_URI = 'sqlite://'
    SQLALCHEMY_ECHO = False
    AUTO_CREATE_TABLES = True
    JWT_SECRET = 'test-jwt-secret-key-with-enough-length-for-hs256'
    ADMIN_EMAILS = {'admin@grocery.test'}
