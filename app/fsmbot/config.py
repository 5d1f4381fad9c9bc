from typing import Literal

from pydantic import field_validator, model_validator
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Общие настройки процесса (не привязаны к конкретному боту)."""

    # Logging
    log_level: str = "INFO"

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore",
    }


class BotConfig(BaseSettings):
    """
    Настройки одного экземпляра бота.

    Читаются из ENV с префиксом BOT_ (BOT_TOKEN, BOT_OWNER_ID, ...),
    но могут быть заданы и явно: BotConfig(token="...", use_state=True).
    В одном процессе может жить несколько ботов с разными конфигами.
    """

    # Telegram
    token: str
    debug: bool = False

    # Владелец бота (0 = не задан)
    owner_id: int = 0

    # Канал для принудительной отправки всех исходящих (0 = выключено)
    channel_id: int = 0

    # Stateful (читает апдейты и диспатчит по состояниям) / stateless (только отправка)
    use_state: bool = False

    # Отвечать только владельцу (работает только при owner_id != 0)
    answer_only_to_owner: bool = False

    # Long polling
    polling_timeout: int = 60
    poll_error_delay: float = 3.0

    # Каталог с файлами для send_photo / send_document
    uploads_dir: str = "uploads"

    # Хранилище состояний пользователей
    state_backend: Literal["memory", "redis", "sql"] = "memory"
    redis_dsn: str = "redis://localhost:6379/0"
    state_ttl_seconds: int | None = None
    database_dsn: str = "sqlite:///fsmbot.db"

    model_config = {
        "env_prefix": "BOT_",
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore",
    }

    @field_validator("token")
    @classmethod
    def _token_not_blank(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("BOT_TOKEN must not be empty")
        return v

    @field_validator("owner_id", "channel_id", mode="before")
    @classmethod
    def _empty_str_to_zero(cls, v: object) -> object:
        """Пустая строка из ENV -> 0."""
        if isinstance(v, str) and v.strip() == "":
            return 0
        return v

    @field_validator("state_ttl_seconds", mode="before")
    @classmethod
    def _empty_str_to_none(cls, v: object) -> object:
        """Пустая строка из ENV -> None."""
        if isinstance(v, str) and v.strip() == "":
            return None
        return v

    @model_validator(mode="after")
    def _check_ttl(self) -> "BotConfig":
        if self.state_ttl_seconds is not None and self.state_ttl_seconds <= 0:
            raise ValueError("BOT_STATE_TTL_SECONDS must be positive")
        return self

    @property
    def effective_owner_id(self) -> int:
        """ID владельца для фильтра входящих, 0 если фильтр выключен."""
        if self.answer_only_to_owner and self.owner_id != 0:
            return self.owner_id
        return 0


settings = Settings()
