from telebot.types import ReplyKeyboardMarkup, KeyboardButton


def build_keyboard(*buttons: KeyboardButton | str) -> ReplyKeyboardMarkup:
    """Клавиатура, где каждая кнопка занимает отдельный ряд."""
    markup = ReplyKeyboardMarkup(resize_keyboard=True, one_time_keyboard=False)
    for button in buttons:
        markup.row(button)
    return markup
