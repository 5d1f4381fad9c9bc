from typing import Callable

from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from fsmbot.errors import UnknownUserError
from fsmbot.logging import logger
from fsmbot.bot.states import DEFAULT_STATE, StateStore, UserState
from fsmbot.storage.models import UserStateRecord


class Repository:
    def __init__(self, session: Session):
        self.session = session

    def get_or_create_state(self, user_id: str, default_state: str) -> str:
        """Вернуть состояние пользователя, создав запись при первом обращении."""
        stmt = select(UserStateRecord.state).where(UserStateRecord.user_id == user_id)
        state = self.session.execute(stmt).scalar_one_or_none()
        if state is not None:
            return state

        self.session.add(UserStateRecord(user_id=user_id, state=default_state))
        try:
            self.session.commit()
        except IntegrityError:
            # Запись успела создать параллельная сессия
            self.session.rollback()
            return self.session.execute(stmt).scalar_one()

        logger.info("New state record for user %s", user_id)
        return default_state

    def update_state(self, user_id: str, state: str) -> bool:
        """Сменить состояние. False, если записи нет."""
        stmt = update(UserStateRecord).where(UserStateRecord.user_id == user_id).values(state=state)
        result = self.session.execute(stmt)
        self.session.commit()
        return result.rowcount > 0


class SqlStateStore(StateStore):
    """Персистентные состояния: переживают рестарт процесса."""

    def __init__(self, session_factory: Callable[[], Session], default_state: str = DEFAULT_STATE):
        super().__init__(default_state)
        self._session_factory = session_factory

    def get(self, user_id: int | str) -> UserState:
        with self._session_factory() as session:
            state = Repository(session).get_or_create_state(self.record_key(user_id), self.default_state)
        return UserState(user_id=user_id, state=state)

    def set(self, user_id: int | str, state: str) -> UserState:
        with self._session_factory() as session:
            found = Repository(session).update_state(self.record_key(user_id), state)
        if not found:
            raise UnknownUserError(user_id)
        return UserState(user_id=user_id, state=state)
