"""Исключения fsmbot."""


class FsmBotError(Exception):
    pass


class BotConfigError(FsmBotError):
    """Бот не может быть создан: неверный токен или Telegram недоступен при старте."""


class UnknownUserError(FsmBotError, LookupError):
    """Смена состояния для пользователя, которого хранилище ещё не видело."""

    def __init__(self, user_id: int | str):
        super().__init__(f"no state record for user {user_id!r}")
        self.user_id = user_id


class StatelessModeError(FsmBotError):
    """Операция требует stateful-режима (use_state=True)."""
