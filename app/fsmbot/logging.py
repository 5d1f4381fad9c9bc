import logging
import sys

import telebot

from fsmbot.config import settings

_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
_DATEFMT = "%Y-%m-%d %H:%M:%S"

# Обработчик, которым заменён консольный вывод telebot (None, пока не настроен)
_transport_handler: logging.Handler | None = None


def _stdout_handler(level: int | str) -> logging.Handler:
    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(fmt=_FORMAT, datefmt=_DATEFMT))
    return handler


def setup_logging() -> logging.Logger:
    """Логгер приложения fsmbot: stdout, уровень из LOG_LEVEL."""
    logger = logging.getLogger("fsmbot")
    logger.setLevel(settings.log_level.upper())
    if not logger.handlers:
        logger.addHandler(_stdout_handler(settings.log_level.upper()))
    return logger


def configure_transport_logging(debug: bool) -> None:
    """
    Перевести логи telebot на формат fsmbot; debug=True (BOT_DEBUG) включает лог запросов к Telegram API.

    Логгер telebot общий для всех ботов процесса, поэтому уровень только повышается:
    бот без debug не выключает подробный лог, включённый другим ботом.
    """
    global _transport_handler
    transport = telebot.logger
    if _transport_handler is None:
        for handler in list(transport.handlers):
            transport.removeHandler(handler)
        _transport_handler = _stdout_handler(logging.DEBUG)
        transport.addHandler(_transport_handler)

    if debug:
        transport.setLevel(logging.DEBUG)


logger = setup_logging()
