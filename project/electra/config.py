# electra/config.py

from pydantic_settings import BaseSettings, SettingsConfigDict

class Settings(BaseSettings):
    AUTH_SECRET_KEY: str
    AUTH_TOKEN_EXPIRE_MINUTES: int = 24 * 60
    AUTH_HASH_ROUNDS: int = 535000           # раунды sha256_crypt

    DATABASE_URL: str = "sqlite+aiosqlite:///./electra.db"

    CLOUDINARY_CLOUD_NAME: str = ""
    CLOUDINARY_API_KEY: str = ""
    CLOUDINARY_API_SECRET: str = ""
    ORDER_IMAGE_FOLDER: str = "sarathi-orders"   # папка заказов на Cloudinary

    SPECIAL_STAFF_EMAIL: str = "special@electrical.com"
    SEED_ADMIN_PASSWORD: str = "admin123"
    SEED_STAFF_PASSWORD: str = "staff123"

    HOST: str = "0.0.0.0"
    PORT: int = 5000

    LOG_DIR: str = "log"
    LOG_PRINT: str = "1"
    LOG_PRINT_DB: str = "0"

    model_config = SettingsConfigDict(
        env_file=".env",
        extra="ignore"
    )

settings = Settings()
