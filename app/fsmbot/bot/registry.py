import threading
from typing import TYPE_CHECKING, Callable, Protocol

import telebot

from fsmbot.bot.states import UserState

if TYPE_CHECKING:
    from fsmbot.bot.client import Bot


class StateHandler(Protocol):
    """Логика состояния: реагирует на сообщение, может отвечать и менять состояние."""

    def __call__(self, bot: "Bot", message: telebot.types.Message, user_state: UserState) -> None: ...


class HandlerRegistry:
    """Соответствие state -> handler. Повторная регистрация молча заменяет прежнюю."""

    def __init__(self) -> None:
        self._handlers: dict[str, StateHandler] = {}
        self._lock = threading.Lock()

    def register(self, state: str, handler: StateHandler) -> None:
        with self._lock:
            self._handlers[state] = handler

    def lookup(self, state: str) -> tuple[StateHandler | None, bool]:
        with self._lock:
            handler = self._handlers.get(state)
        return handler, handler is not None

    def handler(self, state: str) -> Callable[[StateHandler], StateHandler]:
        """Декоратор: @registry.handler("start")."""

        def decorator(func: StateHandler) -> StateHandler:
            self.register(state, func)
            return func

        return decorator

    def states(self) -> list[str]:
        with self._lock:
            return sorted(self._handlers)
