import redis

from fsmbot.errors import UnknownUserError
from fsmbot.logging import logger
from fsmbot.bot.states import DEFAULT_STATE, StateStore, UserState


def create_redis(dsn: str) -> redis.Redis:
    """Создать клиент Redis."""
    return redis.from_url(dsn, decode_responses=True)


class RedisStateStore(StateStore):
    """
    Состояния в Redis: общий стор для нескольких процессов-обработчиков.

    Создание записи через SET NX (атомарная проверка + установка),
    смена состояния через SET XX (только если запись уже есть).
    Если задан ttl_seconds, запись истекает после ttl секунд без смены состояния.
    """

    _KEY_PREFIX = "fsm:state"

    def __init__(
        self,
        client: redis.Redis,
        default_state: str = DEFAULT_STATE,
        ttl_seconds: int | None = None,
    ):
        super().__init__(default_state)
        self._redis = client
        self._ttl = ttl_seconds

    def get(self, user_id: int | str) -> UserState:
        key = self._key(user_id)
        state = self._redis.get(key)
        if state is None:
            created = self._redis.set(key, self.default_state, nx=True, ex=self._ttl)
            if created:
                logger.info("New state record for user %s", user_id)
            # Если параллельный обработчик успел первым, читаем его значение
            state = self._redis.get(key) or self.default_state
        return UserState(user_id=user_id, state=state)

    def set(self, user_id: int | str, state: str) -> UserState:
        updated = self._redis.set(self._key(user_id), state, xx=True, ex=self._ttl)
        if not updated:
            raise UnknownUserError(user_id)
        return UserState(user_id=user_id, state=state)

    def _key(self, user_id: int | str) -> str:
        return f"{self._KEY_PREFIX}:{self.record_key(user_id)}"
