"""
Состояния пользователей.

UserState: снимок позиции пользователя в диалоге.
StateStore: интерфейс хранилища. MemoryStateStore: реализация в памяти процесса.
Redis/SQL-реализации лежат в fsmbot.storage.
"""
import threading
from abc import ABC, abstractmethod
from dataclasses import dataclass

from fsmbot.errors import UnknownUserError

# Состояние, в котором оказывается любой новый пользователь
DEFAULT_STATE = "start"


@dataclass(frozen=True)
class UserState:
    user_id: int | str
    state: str


class StateStore(ABC):
    """
    Одна запись на пользователя; запись создаётся лениво при первом get().

    Во всех реализациях 7 и "7" считаются одним пользователем: ключ записи строится через record_key().
    """

    def __init__(self, default_state: str = DEFAULT_STATE):
        self.default_state = default_state

    @staticmethod
    def record_key(user_id: int | str) -> str:
        return str(user_id)

    @abstractmethod
    def get(self, user_id: int | str) -> UserState:
        """Вернуть запись пользователя, атомарно создав её с default_state при необходимости."""

    @abstractmethod
    def set(self, user_id: int | str, state: str) -> UserState:
        """
        Перезаписать состояние существующей записи.

        Для пользователя без записи бросает UnknownUserError.
        """


class MemoryStateStore(StateStore):
    """Хранит состояния в словаре под мьютексом. Записи живут до конца процесса."""

    def __init__(self, default_state: str = DEFAULT_STATE):
        super().__init__(default_state)
        # record_key(user_id) -> state
        self._states: dict[str, str] = {}
        self._lock = threading.Lock()

    def get(self, user_id: int | str) -> UserState:
        with self._lock:
            state = self._states.setdefault(self.record_key(user_id), self.default_state)
        return UserState(user_id=user_id, state=state)

    def set(self, user_id: int | str, state: str) -> UserState:
        key = self.record_key(user_id)
        with self._lock:
            if key not in self._states:
                raise UnknownUserError(user_id)
            self._states[key] = state
        return UserState(user_id=user_id, state=state)

    def __len__(self) -> int:
        with self._lock:
            return len(self._states)
