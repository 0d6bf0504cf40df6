import os
from datetime import timedelta


class Config:
    # Database
    SQLALCHEMY_DATABASE_URI = os.getenv('DATABASE_URL', 'sqlite:///gymbuddy.db')
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    # JWT (tokens are issued by the auth service with the same secret)
    JWT_SECRET_KEY = os.getenv('JWT_SECRET_KEY', 'your-secret-key-change-in-production')
    JWT_ACCESS_TOKEN_EXPIRES = timedelta(hours=24)
    JWT_TOKEN_LOCATION = ['headers', 'cookies']
    JWT_HEADER_NAME = 'Authorization'
    JWT_HEADER_TYPE = 'Bearer'
    JWT_COOKIE_SECURE = True
    JWT_COOKIE_CSRF_PROTECT = True
    JWT_COOKIE_SAMESITE = 'Lax'

    CORS_ORIGINS = os.getenv('CORS_ORIGINS', 'http://localhost:3000').split(',')

    # Logging
    LOG_LEVEL = os.getenv('LOG_LEVEL', 'INFO')

    # Socket.IO
    SOCKETIO_ASYNC_MODE = 'eventlet'

    # Scheduler
    SCHEDULER_ENABLED = True
    SCHEDULER_API_ENABLED = False

    # Matching
    MATCH_SUGGESTION_DISTANCE_KM = 10
    MATCH_DEFAULT_DISTANCE_KM = 20
    MATCH_DEFAULT_LIMIT = 10
    MATCH_MAX_LIMIT = 50
    MATCH_MAX_DISTANCE_KM = 500
    MATCH_MIN_SCORE = 0
    MATCH_DEFAULT_AGE_MIN = 18
    MATCH_DEFAULT_AGE_MAX = 100
    MATCH_PARALLEL_FETCH = True
    MATCH_REQUEST_TTL_DAYS = 7
    MATCH_EXPIRY_INTERVAL_MINUTES = 30


class DevelopmentConfig(Config):
    DEBUG = True
    JWT_COOKIE_SECURE = False  # plain HTTP in development
    LOG_LEVEL = os.getenv('LOG_LEVEL', 'DEBUG')


class ProductionConfig(Config):
    DEBUG = False
    JWT_SECRET_KEY = os.getenv('JWT_SECRET_KEY')
    SQLALCHEMY_DATABASE_URI = os.getenv('DATABASE_URL')
    PREFERRED_URL_SCHEME = 'https'


class TestingConfig(Config):
    TESTING = True
    SQLALCHEMY_DATABASE_URI = 'sqlite:///:memory:'
    JWT_SECRET_KEY = 'test-secret-key-with-enough-length-for-hs256'
    JWT_COOKIE_SECURE = False
    JWT_COOKIE_CSRF_PROTECT = False
    SOCKETIO_ASYNC_MODE = 'threading'
    SCHEDULER_ENABLED = False
    # in-memory SQLite shares a single connection across threads
    MATCH_PARALLEL_FETCH = False


config = {
    'development': DevelopmentConfig,
    'production': ProductionConfig,
    'testing': TestingConfig,
    'default': DevelopmentConfig
}
