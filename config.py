import os


def _env_bool(name: str, default: bool = False) -> bool:
    val = os.getenv(name)
    if val is None:
        return default
    return val.strip().lower() in {"1", "true", "yes", "on", "y"}


class Config:
    SECRET_KEY = os.getenv('SECRET_KEY', 'dev_secret_key')
    SQLALCHEMY_DATABASE_URI = os.getenv('DATABASE_URI', 'sqlite:///cesizen.db')
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    DEBUG = _env_bool('FLASK_DEBUG', False)
    LOG_LEVEL = os.getenv('LOG_LEVEL', 'INFO')

    # Auth
    JWT_SECRET = os.getenv('JWT_SECRET') or SECRET_KEY
    JWT_ALGORITHM = 'HS256'
    JWT_EXPIRES_HOURS = int(os.getenv('JWT_EXPIRES_HOURS', '24'))
    BCRYPT_ROUNDS = int(os.getenv('BCRYPT_ROUNDS', '10'))
    RESET_TOKEN_TTL_MINUTES = 60

    # Reset links point at the front-end
    FRONTEND_URL = os.getenv('FRONTEND_URL', 'http://localhost:5173')

    # SMTP
    MAIL_SERVER = os.getenv('MAIL_SERVER', 'smtp.zoho.com')
    MAIL_USE_SSL = _env_bool('MAIL_USE_SSL', False)
    MAIL_USE_TLS = _env_bool('MAIL_USE_TLS', True)
    MAIL_PORT = int(os.getenv('MAIL_PORT') or (465 if MAIL_USE_SSL else 587))
    MAIL_USERNAME = os.getenv('MAIL_USERNAME')
    MAIL_PASSWORD = os.getenv('MAIL_PASSWORD')
    MAIL_DEFAULT_SENDER = os.getenv('MAIL_DEFAULT_SENDER') or MAIL_USERNAME or 'no-reply@cesizen.fr'
    MAIL_FROM_NAME = os.getenv('MAIL_FROM_NAME', 'CESIZen')
    MAIL_SUPPRESS_SEND = _env_bool('MAIL_SUPPRESS_SEND', False)


class TestConfig(Config):
    TESTING = True
    SECRET_KEY = 'test-secret'
    JWT_SECRET = 'test-jwt-secret'
    SQLALCHEMY_DATABASE_URI = 'sqlite:///:memory:'
    BCRYPT_ROUNDS = 4
    MAIL_SUPPRESS_SEND = True
    FRONTEND_URL = 'http://frontend.test'
