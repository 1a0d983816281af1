from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    APP_NAME: str = "Stock Ledger"
    DATABASE_URL: str = "sqlite:///./stock_ledger.db"

    LOG_LEVEL: str = "INFO"

    # Upper bound on uniqueness probes per generated identifier (0 = unbounded)
    IDENTIFIER_MAX_ATTEMPTS: int = 10000

    # Username reported for rows written without an actor
    SYSTEM_ACTOR_NAME: str = "SYSTEM"

    model_config = {"env_file": ".env"}


settings = Settings()
