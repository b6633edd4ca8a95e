"""Parsing of incoming client messages and routing them to handlers."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Callable, Hashable, Optional

from chatbye.enums import (
    MessageSource,
    MessageType,
    string_to_message_source,
    string_to_message_type,
)
from chatbye.json_builder import DATE_FORMAT

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class ParsedMessage:
    """The fields of an incoming JSON message."""

    kind: MessageType
    source: MessageSource
    message: str
    date_time: Optional[datetime]
    new_name: str
    old_name: str


def _text(obj: dict[str, Any], key: str) -> str:
    value = obj.get(key)
    return value if isinstance(value, str) else ""


def _parse_date(text: str) -> Optional[datetime]:
    try:
        return datetime.strptime(text, DATE_FORMAT)
    except ValueError:
        return None


def parse_message(json_data: bytes | str) -> ParsedMessage:
    """Parse a JSON message; raises ValueError unless it is a JSON object."""
    if isinstance(json_data, bytes):
        json_data = json_data.decode("utf-8")
    obj = json.loads(json_data)
    if not isinstance(obj, dict):
        raise ValueError("message is not a JSON object")
    return ParsedMessage(
        kind=string_to_message_type(_text(obj, "type")),
        source=string_to_message_source(_text(obj, "source")),
        message=_text(obj, "message"),
        date_time=_parse_date(_text(obj, "date")),
        new_name=_text(obj, "new_name"),
        old_name=_text(obj, "old_name"),
    )


class MessageDispatcher:
    """Routes each incoming message to the handler for its kind."""

    def __init__(
        self,
        on_host_status: Callable[[Hashable], Any] | None = None,
        on_change_name: Callable[..., Any] | None = None,
        on_client_message: Callable[[str, Hashable], Any] | None = None,
        on_unnamed_client: Callable[[], Any] | None = None,
    ) -> None:
        self._on_host_status = on_host_status or (lambda client: None)
        self._on_change_name = on_change_name or (lambda *args: None)
        self._on_client_message = on_client_message or (lambda message, client: None)
        self._on_unnamed_client = on_unnamed_client or (lambda: None)

    def process_message(self, json_data: bytes | str, client: Hashable) -> None:
        """Parse one message from a client and call the matching handler."""
        try:
            parsed = parse_message(json_data)
        except ValueError:
            log.debug("JSON parsing error")
            return

        if parsed.kind is MessageType.HOST_STATUS:
            self._on_host_status(client)
        elif parsed.kind in (MessageType.CHANGE_NAME, MessageType.SET_NAME):
            self._on_change_name(
                parsed.kind, parsed.date_time, parsed.new_name, parsed.old_name, client
            )
        elif parsed.message:
            self._on_client_message(parsed.message, client)
        else:
            self._on_unnamed_client()