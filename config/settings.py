from pydantic import Field
from pydantic_settings import BaseSettings


class BotSettings(BaseSettings):
    discord_token: str | None = Field(default=None, description="Discord bot token")
    database_url: str = Field(default="sqlite:///data/bot.db", description="Database connection URL")

    bot_prefix: str = Field(default="!", description="Default command prefix")
    environment: str = Field(default="development", description="Environment")
    log_level: str = Field(default="INFO", description="Logging level")

    # Dispatch configuration
    help_page_size: int = Field(default=25, ge=1, le=25, description="Commands listed per help embed")
    ignore_bots: bool = Field(default=True, description="Ignore messages written by other bots")
    dispatch_timeout: float | None = Field(
        default=None, gt=0, description="Seconds a single command dispatch may take, unbounded if unset"
    )

    # Development settings
    debug: bool = Field(default=False, description="Enable debug mode")

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = False
        extra = "ignore"


# Global settings instance
settings = BotSettings()
