"""Text of the server's numbered system messages."""

from __future__ import annotations

UNKNOWN_CODE_MESSAGE = "Неизвестный код ошибки"

_DEFAULT_MESSAGES = {
    100: "Соединение установлено",
    200: "Операция выполнена успешно",
    400: "Ошибка запроса",
    500: "Внутренняя ошибка сервера",
    600: "Добро пожаловать!",
    800: "Client disconnected",
    900: "Вы сменили имя",
    1000: "Сервер завершает работу. Переподключаемся...",
    1100: "теперь известен как",
    1200: "Please set your name first using /name <YourName>",
    1300: "Server shutting down",
    1400: "Для раздлеления текста",
}


class ServerMessageDictionary:
    """Maps message codes to their text."""

    def __init__(self) -> None:
        self._messages: dict[int, str] = dict(_DEFAULT_MESSAGES)

    def get_message(self, code: int) -> str:
        """Return the text for a code, or a fallback for unknown codes."""
        return self._messages.get(code, UNKNOWN_CODE_MESSAGE)

    def add_message(self, code: int, message: str) -> None:
        """Add or replace the text for a code."""
        self._messages[code] = message