from fsmbot.config import BotConfig
from fsmbot.logging import logger
from fsmbot.bot.client import Bot
from fsmbot.bot.handlers import register_handlers
from fsmbot.bot.messages import LOG_TEST_MESSAGE


def create_bot(config: BotConfig) -> Bot:
    """Создать бота; в stateful-режиме сразу зарегистрировать хендлеры."""
    bot = Bot(config)
    if bot.use_state:
        register_handlers(bot)
    return bot


def main() -> None:
    logger.info("Starting fsmbot...")

    # Настройки из ENV (BOT_*), режим stateful задаётся здесь
    config = BotConfig(use_state=True)
    stateful_bot = create_bot(config)
    updates_thread = stateful_bot.start_in_background()

    # Stateless-бот на том же токене: только отправка, например логов в канал
    if config.channel_id:
        stateless_bot = create_bot(config.model_copy(update={"use_state": False}))
        stateless_bot.start()
        result = stateless_bot.send_message(0, LOG_TEST_MESSAGE)
        if not result.success:
            logger.error("Error sending log message: %s", result.error)

    try:
        updates_thread.join()
    except KeyboardInterrupt:
        logger.info("Stopping fsmbot...")
        stateful_bot.stop()


if __name__ == "__main__":
    main()
