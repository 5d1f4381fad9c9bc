from dataclasses import dataclass, field
from types import SimpleNamespace
from typing import Any, Callable

import pytest
import telebot

from fsmbot.bot.client import Bot
from fsmbot.bot.states import MemoryStateStore
from fsmbot.config import BotConfig

OWNER_ID = 1001
STRANGER_ID = 2002
CHANNEL_ID = -100500


def make_config(**overrides: Any) -> BotConfig:
    values = {"token": "123456:TEST-token", "use_state": True}
    values.update(overrides)
    return BotConfig(_env_file=None, **values)


def make_message(text: str | None, user_id: int = OWNER_ID, chat_id: int | None = None, message_id: int = 1) -> telebot.types.Message:
    payload: dict[str, Any] = {
        "message_id": message_id,
        "date": 1700000000,
        "chat": {"id": chat_id if chat_id is not None else user_id, "type": "private"},
        "from": {"id": user_id, "is_bot": False, "first_name": "Test"},
    }
    if text is not None:
        payload["text"] = text
    return telebot.types.Message.de_json(payload)


def make_update(update_id: int, message: telebot.types.Message | None) -> SimpleNamespace:
    return SimpleNamespace(update_id=update_id, message=message)


@dataclass
class SentCall:
    method: str
    chat_id: int
    payload: Any
    kwargs: dict[str, Any] = field(default_factory=dict)


class FakeApi:
    """Подмена telebot.TeleBot: записывает исходящие, отдаёт заранее заданные пачки апдейтов."""

    def __init__(self, batches: list[Any] | None = None):
        self.sent: list[SentCall] = []
        self.batches = list(batches or [])
        self.poll_offsets: list[int | None] = []
        self.send_error: Exception | None = None
        self.on_exhausted: Callable[[], None] | None = None

    def get_updates(self, offset=None, limit=None, timeout=20, allowed_updates=None, long_polling_timeout=20):
        self.poll_offsets.append(offset)
        if not self.batches:
            if self.on_exhausted is not None:
                self.on_exhausted()
            return []
        batch = self.batches.pop(0)
        if isinstance(batch, Exception):
            raise batch
        return batch

    def _record(self, method: str, chat_id: int, payload: Any, **kwargs: Any) -> SimpleNamespace:
        if self.send_error is not None:
            raise self.send_error
        self.sent.append(SentCall(method, chat_id, payload, kwargs))
        return SimpleNamespace(message_id=len(self.sent))

    def send_message(self, chat_id, text, parse_mode=None, reply_markup=None):
        return self._record("message", chat_id, text, parse_mode=parse_mode, reply_markup=reply_markup)

    def send_photo(self, chat_id, photo, caption=None):
        return self._record("photo", chat_id, photo, caption=caption)

    def send_document(self, chat_id, document, caption=None, visible_file_name=None):
        return self._record("document", chat_id, document, caption=caption, visible_file_name=visible_file_name)

    def texts_to(self, chat_id: int) -> list[str]:
        return [c.payload for c in self.sent if c.method == "message" and c.chat_id == chat_id]


class FakeRedis:
    """Минимальный in-memory аналог redis.Redis (decode_responses=True) для SET NX/XX."""

    def __init__(self):
        self.data: dict[str, str] = {}
        self.ttl: dict[str, int] = {}

    def get(self, key: str) -> str | None:
        return self.data.get(key)

    def set(self, key: str, value: str, nx: bool = False, xx: bool = False, ex: int | None = None) -> bool | None:
        if nx and key in self.data:
            return None
        if xx and key not in self.data:
            return None
        self.data[key] = value
        if ex is not None:
            self.ttl[key] = ex
        else:
            self.ttl.pop(key, None)
        return True

    def expire_now(self, key: str) -> None:
        self.data.pop(key, None)
        self.ttl.pop(key, None)


@pytest.fixture
def api() -> FakeApi:
    return FakeApi()


@pytest.fixture
def bot(api: FakeApi) -> Bot:
    return Bot(make_config(), api=api, store=MemoryStateStore())


@pytest.fixture
def fake_redis() -> FakeRedis:
    return FakeRedis()
