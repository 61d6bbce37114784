import os
import yaml

ROOT_PATH = os.path.dirname(__file__)
CONFIG_FILE_PATH = os.path.join(ROOT_PATH, "env.yaml")

if os.path.exists(CONFIG_FILE_PATH):
    with open(CONFIG_FILE_PATH, "r") as r_file:
        data = yaml.safe_load(r_file) or dict()
else:
    data = dict()


class ApplicationConfig:
    DB_URI = data.get("DB_URI", "sqlite+aiosqlite:///./invite_service.db")
    API_PORT = data.get("API_PORT", 8000)
    API_HOST = data.get("API_HOST", "0.0.0.0")
    CORS_ORIGINS = data.get("CORS_ORIGINS", [])
    CORS_ALLOW_CREDENTIALS = data.get("CORS_ALLOW_CREDENTIALS", True)
    LOG_LEVEL = data.get("LOG_LEVEL", "INFO")
    ENABLE_LOGGING_MIDDLEWARE = bool(data.get("ENABLE_LOGGING_MIDDLEWARE", 1))
    APP_URL = data.get("APP_URL", "http://localhost:5173")
    # Access tokens and sessions issued by the account store
    JWT_SECRET = data.get("JWT_SECRET", "dev-secret-key-change-in-production")
    ACCESS_TOKEN_TTL_MINUTES = int(data.get("ACCESS_TOKEN_TTL_MINUTES", 15))
    REFRESH_TOKEN_TTL_DAYS = int(data.get("REFRESH_TOKEN_TTL_DAYS", 30))
    BCRYPT_ROUNDS = int(data.get("BCRYPT_ROUNDS", 12))
    # Invitation redemption
    INVITE_SIGNING_SECRET = data.get(
        "INVITE_SIGNING_SECRET", "dev-invite-signing-key-change-in-production"
    )
    CAPABILITY_TOKEN_TTL_SECONDS = int(data.get("CAPABILITY_TOKEN_TTL_SECONDS", 3600))
    MIN_PASSWORD_LENGTH = int(data.get("MIN_PASSWORD_LENGTH", 6))
