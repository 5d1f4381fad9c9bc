from fsmbot.config import BotConfig
from fsmbot.bot.states import MemoryStateStore, StateStore
from fsmbot.storage.db import create_session_factory
from fsmbot.storage.redis_store import RedisStateStore, create_redis
from fsmbot.storage.repo import SqlStateStore


def create_state_store(config: BotConfig) -> StateStore:
    """Хранилище состояний по BOT_STATE_BACKEND."""
    if config.state_backend == "redis":
        return RedisStateStore(create_redis(config.redis_dsn), ttl_seconds=config.state_ttl_seconds)
    if config.state_backend == "sql":
        return SqlStateStore(create_session_factory(config.database_dsn))
    return MemoryStateStore()
