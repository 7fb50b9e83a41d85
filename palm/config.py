import os
import tempfile
from datetime import timedelta

from dotenv import load_dotenv

load_dotenv()


class Config:
    SECRET_KEY = os.getenv('SECRET_KEY', 'dev-key-please-change')
    SQLALCHEMY_DATABASE_URI = os.getenv('DATABASE_URL', 'sqlite:///palm.db')
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    JWT_SECRET_KEY = os.getenv('JWT_SECRET_KEY', 'jwt-secret-key-please-change')
    JWT_ACCESS_TOKEN_EXPIRES = timedelta(days=1)

    LOG_LEVEL = os.getenv('LOG_LEVEL', 'INFO')

    # Meal images live under this directory and are served through /api/images
    IMAGE_STORAGE_ROOT = os.getenv('IMAGE_STORAGE_ROOT', os.path.join(os.getcwd(), 'uploads'))
    MAX_IMAGE_BYTES = 10 * 1024 * 1024
    # Request bodies above this are rejected with 413 before the form is parsed
    MAX_CONTENT_LENGTH = MAX_IMAGE_BYTES + 1024 * 1024

    SMTP_HOST = os.getenv('SMTP_HOST', '')
    SMTP_PORT = int(os.getenv('SMTP_PORT', '587'))
    SMTP_USER = os.getenv('SMTP_USER', '')
    SMTP_PASSWORD = os.getenv('SMTP_PASS', '')
    SMTP_FROM = os.getenv('SMTP_FROM', '')

    APP_URL = os.getenv('APP_URL', 'http://localhost:3000')
    FOLLOW_REQUEST_TTL_DAYS = int(os.getenv('FOLLOW_REQUEST_TTL_DAYS', '7'))


class DevelopmentConfig(Config):
    DEBUG = True


class TestingConfig(Config):
    TESTING = True
    SQLALCHEMY_DATABASE_URI = 'sqlite:///:memory:'
    JWT_SECRET_KEY = 'testing-jwt-secret-key-that-is-long-enough'
    IMAGE_STORAGE_ROOT = os.path.join(tempfile.gettempdir(), 'palm-test-images')
    SMTP_HOST = ''


class ProductionConfig(Config):
    LOG_LEVEL = os.getenv('LOG_LEVEL', 'WARNING')


CONFIGS = {
    'development': DevelopmentConfig,
    'testing': TestingConfig,
    'production': ProductionConfig,
}
