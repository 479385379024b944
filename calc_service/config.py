from pydantic_settings import BaseSettings, SettingsConfigDict
from functools import lru_cache


def _csv_values(raw: str) -> list[str]:
    return [item.strip() for item in raw.split(",") if item.strip()]


class Settings(BaseSettings):
    # App
    APP_NAME: str = "Calculator Service"
    DEBUG: bool = False
    HOST: str = "0.0.0.0"
    PORT: int = 3005
    SUPPORT_CONTACT: str = "support@calculator.com"

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_DIR: str = ""

    # Circuit breaker
    BREAKER_FAILURE_THRESHOLD: int = 5
    BREAKER_RECOVERY_TIMEOUT_SECONDS: float = 30.0
    BREAKER_PROTECTED_OPERATIONS: str = "addition,subtraction,multiplication,division"

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=True, extra="ignore")

    @property
    def protected_operations(self) -> frozenset[str]:
        return frozenset(_csv_values(self.BREAKER_PROTECTED_OPERATIONS))


@lru_cache()
def get_settings() -> Settings:
    return Settings()
