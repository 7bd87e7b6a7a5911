from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    DATABASE_URL: str = "postgresql+asyncpg://app:devpassword@db:5432/promptmarket"
    REDIS_URL: str = "redis://redis:6379/0"

    # "sql" for the persistent store, "memory" for the ephemeral one
    STORE_BACKEND: str = "sql"
    SEED_MEMORY_STORE: bool = True

    JWT_SECRET_KEY: str = ""
    JWT_ACCESS_TOKEN_EXPIRE_MINUTES: int = 7 * 24 * 60
    JWT_ISSUER: str = "promptmarket"
    JWT_AUDIENCE: str = "promptmarket-users"

    BCRYPT_ROUNDS: int = 12

    APP_ENV: str = "development"

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}


settings = Settings()
