# Тексты демо-диалога

START_PROMPT = "Hello! How can I assist you? (type 'greet' or 'bye')"
GREET_REPLY = "Nice to meet you! How are you?"
BYE_REPLY = "Goodbye! Have a great day!"
GREETING_HINT = "Please type 'greet' or 'bye'"
FAREWELL_REMINDER = "You have already said goodbye. Type 'start' to begin again."

LOG_TEST_MESSAGE = "This is a test log message."
