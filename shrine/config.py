from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    database_url: str = "sqlite+aiosqlite:///./shrine.db"
    environment: str = "local"
    debug: bool = True
    session_secret_key: str = "dev-secret-change-me"
    log_level: str = "INFO"

    # Dice engine limits. Anything above these fails as an invalid roll.
    dice_max_count: int = 100
    dice_max_sides: int = 1000
    dice_max_total_dice: int = 1000


settings = Settings()
