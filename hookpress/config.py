from dotenv import load_dotenv
from pydantic_settings import BaseSettings, SettingsConfigDict

load_dotenv()


class Settings(BaseSettings):
    # Application settings
    app_name: str = "HookPress"
    app_version: str = "1.0.0"
    debug: bool = False
    environment: str = "development"

    # Hook registration defaults
    default_priority: int = 10
    default_accepted_args: int = 1

    # Plugin settings
    plugins_config_file: str = "data/plugins_config.json"

    # Logging settings
    log_level: str = "INFO"
    log_json: bool = False

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )


settings = Settings()
