from decimal import Decimal

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    model_config = {"env_file": ".env", "env_file_encoding": "utf-8", "env_prefix": "MORTY_"}

    # Saved scenarios
    scenario_db_path: str = "data/scenarios.db"

    # App
    debug: bool = False
    log_level: str = "INFO"
    cors_allow_origins: list[str] = ["*"]

    # Defaults for new calculations
    default_currency: str = "USD"
    default_locale: str = "en-US"
    default_term_years: int = 30
    default_pmi_cancel_ltv_percent: Decimal = Decimal("80")  # Conventional loans drop PMI at 80% LTV


settings = Settings()
