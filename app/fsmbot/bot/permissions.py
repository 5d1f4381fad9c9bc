"""
Фильтр доступа к stateful-боту.

Два режима:
  - public: owner_id == 0, отвечаем всем
  - owner-only: отвечаем только отправителю с owner_id
"""
import telebot


def sender_id(message: telebot.types.Message) -> int:
    """ID отправителя; для сообщений без from_user (посты каналов) берём ID чата."""
    if message.from_user is not None:
        return message.from_user.id
    return message.chat.id


def is_allowed(user_id: int, owner_id: int) -> bool:
    """owner_id == 0 означает, что фильтр выключен."""
    return owner_id == 0 or user_id == owner_id
