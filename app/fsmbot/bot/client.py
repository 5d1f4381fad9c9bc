import threading
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Iterable, Iterator

import telebot
from telebot.types import KeyboardButton, ReplyKeyboardMarkup

from fsmbot.config import BotConfig
from fsmbot.errors import BotConfigError, StatelessModeError
from fsmbot.logging import configure_transport_logging, logger
from fsmbot.bot.keyboards import build_keyboard
from fsmbot.bot.manager import DispatchResult, StateManager
from fsmbot.bot.permissions import is_allowed, sender_id
from fsmbot.bot.registry import StateHandler
from fsmbot.bot.states import StateStore, UserState
from fsmbot.storage.factory import create_state_store


@dataclass(frozen=True)
class SendResult:
    """Результат исходящей отправки."""
    success: bool
    # Фактический адресат (с учётом channel_id)
    chat_id: int
    message_id: int | None = None
    error: str | None = None


class Bot:
    """
    Telegram-бот с двумя режимами.

      - stateful  (use_state=True):  читает апдейты и диспатчит их по состоянию отправителя
      - stateless (use_state=False): только отправляет сообщения по запросу внешнего кода
    """

    def __init__(
        self,
        config: BotConfig,
        api: telebot.TeleBot | None = None,
        store: StateStore | None = None,
    ):
        self.config = config
        configure_transport_logging(config.debug)
        self.api = api if api is not None else self._connect(config)

        self.use_state = config.use_state
        self.owner_id = config.effective_owner_id
        self.channel_id = config.channel_id
        self.uploads_dir = Path(config.uploads_dir)

        self.state_manager: StateManager | None = None
        if self.use_state:
            self.state_manager = StateManager(store if store is not None else create_state_store(config))

        self._stop_event = threading.Event()

    @staticmethod
    def _connect(config: BotConfig) -> telebot.TeleBot:
        """Создать клиента Telegram и проверить токен через getMe."""
        try:
            api = telebot.TeleBot(config.token, threaded=False)
            me = api.get_me()
        except Exception as e:
            raise BotConfigError(f"Telegram rejected bot token: {e}") from e
        logger.info("Authorized on account %s", me.username)
        return api

    # --- Состояния ---

    def _require_state(self) -> StateManager:
        if self.state_manager is None:
            raise StatelessModeError("bot was created with use_state=False")
        return self.state_manager

    def register_state(self, state: str, handler: StateHandler) -> None:
        self._require_state().register_state(state, handler)

    def state_handler(self, state: str) -> Callable[[StateHandler], StateHandler]:
        """Декоратор: @bot.state_handler("start")."""
        return self._require_state().registry.handler(state)

    def get_state(self, user_id: int | str) -> UserState:
        return self._require_state().get_state(user_id)

    def set_state(self, user_id: int | str, state: str) -> UserState:
        return self._require_state().set_state(user_id, state)

    # --- Цикл обновлений ---

    def start(self) -> None:
        """В stateful-режиме блокирует поток, пока поток апдейтов открыт."""
        if not self.use_state:
            logger.info("Bot started in stateless mode. Ready to send updates.")
            return
        logger.info("Bot started in stateful mode, owner filter: %s", self.owner_id or "off")
        self.run(self.iter_messages())

    def start_in_background(self) -> threading.Thread:
        thread = threading.Thread(target=self.start, name="fsmbot-updates", daemon=True)
        thread.start()
        return thread

    def stop(self) -> None:
        """Закрыть поток апдейтов. Цикл завершится после текущей пачки."""
        self._stop_event.set()

    def iter_messages(self) -> Iterator[telebot.types.Message | None]:
        """Long polling: лениво отдаёт входящие сообщения, пока не вызван stop()."""
        offset: int | None = None
        while not self._stop_event.is_set():
            try:
                updates = self.api.get_updates(
                    offset=offset,
                    timeout=self.config.polling_timeout,
                    allowed_updates=["message"],
                    long_polling_timeout=self.config.polling_timeout,
                )
            except Exception as e:
                logger.error("Failed to fetch updates: %s", e)
                self._stop_event.wait(self.config.poll_error_delay)
                continue

            for update in updates:
                offset = update.update_id + 1
                yield update.message

    def run(self, messages: Iterable[telebot.types.Message | None]) -> None:
        """Обработать сообщения по одному, в порядке поступления."""
        self._require_state()
        for message in messages:
            self.process_message(message)
        logger.info("Update stream closed")

    def process_message(self, message: telebot.types.Message | None) -> DispatchResult | None:
        """None: сообщение отфильтровано и до диспатча не дошло."""
        if message is None or not message.text:
            return None

        user_id = sender_id(message)
        if not is_allowed(user_id, self.owner_id):
            logger.debug("Ignoring message from user %d: owner-only mode", user_id)
            return None

        return self._require_state().dispatch(self, message, user_id)

    # --- Исходящие ---

    def _target(self, chat_id: int) -> int:
        """Если задан channel_id, все исходящие уходят туда."""
        if self.channel_id != 0:
            return self.channel_id
        return chat_id

    def _send(self, chat_id: int, kind: str, send: Callable[[int], Any]) -> SendResult:
        target = self._target(chat_id)
        try:
            sent = send(target)
        except Exception as e:
            logger.error("Failed to send %s to chat %d: %s", kind, target, e)
            return SendResult(success=False, chat_id=target, error=str(e))
        logger.debug("Sent %s to chat %d", kind, target)
        return SendResult(success=True, chat_id=target, message_id=getattr(sent, "message_id", None))

    def _read_upload(self, chat_id: int, relative_path: str) -> bytes | SendResult:
        root = self.uploads_dir.resolve()
        path = (root / relative_path).resolve()
        # Только файлы внутри uploads_dir: без "../" и абсолютных путей
        if not path.is_relative_to(root):
            logger.warning("Rejected upload path outside %s: %s", root, relative_path)
            return SendResult(
                success=False,
                chat_id=self._target(chat_id),
                error=f"path {relative_path!r} is outside uploads dir",
            )
        try:
            return path.read_bytes()
        except OSError as e:
            logger.error("Failed to read upload %s: %s", path, e)
            return SendResult(success=False, chat_id=self._target(chat_id), error=f"cannot read {path}: {e}")

    def send_message(
        self,
        chat_id: int,
        text: str,
        reply_markup: ReplyKeyboardMarkup | None = None,
    ) -> SendResult:
        return self._send(
            chat_id,
            "message",
            lambda target: self.api.send_message(target, text, reply_markup=reply_markup),
        )

    def send_rich_message(
        self,
        chat_id: int,
        text: str,
        parse_mode: str,
        reply_markup: ReplyKeyboardMarkup | None = None,
    ) -> SendResult:
        """parse_mode: "HTML", "Markdown" или "MarkdownV2"."""
        return self._send(
            chat_id,
            "rich message",
            lambda target: self.api.send_message(target, text, parse_mode=parse_mode, reply_markup=reply_markup),
        )

    def send_photo(self, chat_id: int, photo_path: str, caption: str | None = None) -> SendResult:
        """photo_path: путь относительно uploads_dir."""
        data = self._read_upload(chat_id, photo_path)
        if isinstance(data, SendResult):
            return data
        return self._send(
            chat_id,
            "photo",
            lambda target: self.api.send_photo(target, data, caption=caption or None),
        )

    def send_document(self, chat_id: int, document_path: str, caption: str | None = None) -> SendResult:
        """document_path: путь относительно uploads_dir."""
        data = self._read_upload(chat_id, document_path)
        if isinstance(data, SendResult):
            return data
        return self._send(
            chat_id,
            "document",
            lambda target: self.api.send_document(
                target,
                data,
                caption=caption or None,
                visible_file_name=Path(document_path).name,
            ),
        )

    def update_keyboard(self, *buttons: KeyboardButton | str) -> ReplyKeyboardMarkup:
        return build_keyboard(*buttons)
