from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    APP_NAME: str = "Customer Ledger"
    version: str = "0.1.0"
    DEBUG: bool = False
    APP_DOMAIN: str = "example.com"
    APP_DATABASE_DSN: str = "sqlite:////tmp/ledger.db"

    # CORS
    CORS_ORIGINS: str = "http://localhost:3000,http://localhost:5173"

    # Logging level applied to the "ledger" logger hierarchy
    LOG_LEVEL: str = "INFO"

    # Unpaid bills due within this many days are reported as "due_soon"
    DUE_SOON_DAYS: int = 7

    # Statement rendering only; never used in balance arithmetic
    CURRENCY_SYMBOL: str = "Rs."
    SHOP_NAME: str = "Customer Statement"


settings = Settings()
