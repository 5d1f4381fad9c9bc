import telebot

from fsmbot.logging import logger
from fsmbot.bot.client import Bot
from fsmbot.bot.messages import (
    START_PROMPT,
    GREET_REPLY,
    BYE_REPLY,
    GREETING_HINT,
    FAREWELL_REMINDER,
)
from fsmbot.bot.states import DEFAULT_STATE, UserState

# Состояния демо-диалога
STATE_START = DEFAULT_STATE
STATE_GREETING = "greeting"
STATE_FAREWELL = "farewell"


def register_handlers(bot: Bot) -> None:
    """Регистрирует хендлеры демо-диалога start -> greeting -> farewell."""

    @bot.state_handler(STATE_START)
    def handle_start(bot: Bot, message: telebot.types.Message, user_state: UserState) -> None:
        logger.info("Conversation started by user %s", user_state.user_id)
        bot.send_message(message.chat.id, START_PROMPT)
        bot.set_state(user_state.user_id, STATE_GREETING)

    @bot.state_handler(STATE_GREETING)
    def handle_greeting(bot: Bot, message: telebot.types.Message, user_state: UserState) -> None:
        text = (message.text or "").strip()
        if text == "greet":
            bot.send_message(message.chat.id, GREET_REPLY)
        elif text == "bye":
            bot.send_message(message.chat.id, BYE_REPLY)
            bot.set_state(user_state.user_id, STATE_FAREWELL)
        else:
            bot.send_message(message.chat.id, GREETING_HINT)

    @bot.state_handler(STATE_FAREWELL)
    def handle_farewell(bot: Bot, message: telebot.types.Message, user_state: UserState) -> None:
        # Напоминание уходит всегда, в том числе на "start"
        bot.send_message(message.chat.id, FAREWELL_REMINDER)
        if (message.text or "").strip() == "start":
            bot.set_state(user_state.user_id, STATE_START)
