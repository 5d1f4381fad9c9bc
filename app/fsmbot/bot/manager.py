from dataclasses import dataclass
from typing import TYPE_CHECKING

import telebot

from fsmbot.logging import logger
from fsmbot.bot.registry import HandlerRegistry, StateHandler
from fsmbot.bot.states import MemoryStateStore, StateStore, UserState

if TYPE_CHECKING:
    from fsmbot.bot.client import Bot


@dataclass(frozen=True)
class DispatchResult:
    """Итог одной попытки диспатча."""
    # Хендлер найден и отработал без исключения
    handled: bool
    # Состояние пользователя на момент диспатча (None, если хранилище недоступно)
    state: str | None
    error: str | None = None


class StateManager:
    """
    Маршрутизация сообщения по текущему состоянию отправителя.

    Единственное место, где хранилище состояний и реестр хендлеров используются вместе.
    """

    def __init__(self, store: StateStore | None = None, registry: HandlerRegistry | None = None):
        self.store = store if store is not None else MemoryStateStore()
        self.registry = registry if registry is not None else HandlerRegistry()

    def get_state(self, user_id: int | str) -> UserState:
        return self.store.get(user_id)

    def set_state(self, user_id: int | str, state: str) -> UserState:
        user_state = self.store.set(user_id, state)
        logger.info("User %s moved to state %s", user_id, state)
        return user_state

    def register_state(self, state: str, handler: StateHandler) -> None:
        self.registry.register(state, handler)

    def get_handler(self, state: str) -> tuple[StateHandler | None, bool]:
        return self.registry.lookup(state)

    def dispatch(self, bot: "Bot", message: telebot.types.Message, user_id: int | str) -> DispatchResult:
        """Найти хендлер для состояния пользователя и синхронно вызвать его (одна попытка)."""
        try:
            user_state = self.get_state(user_id)
        except Exception as e:
            # Недоступное хранилище (Redis/БД) не должно останавливать цикл обновлений
            logger.error("Failed to load state for user %s: %s", user_id, e)
            return DispatchResult(handled=False, state=None, error=str(e))

        handler, exists = self.get_handler(user_state.state)
        if not exists:
            logger.warning("No handler found for state: %s", user_state.state)
            return DispatchResult(handled=False, state=user_state.state)

        try:
            handler(bot, message, user_state)
        except Exception as e:
            # Падение одного хендлера не должно останавливать цикл обновлений
            logger.exception("Handler for state %s failed on user %s: %s", user_state.state, user_id, e)
            return DispatchResult(handled=False, state=user_state.state, error=str(e))

        return DispatchResult(handled=True, state=user_state.state)
