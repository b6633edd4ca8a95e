"""Builders for the JSON documents the server sends."""

from __future__ import annotations

import json
from dataclasses import dataclass
from datetime import datetime
from ipaddress import IPv4Address, IPv6Address
from typing import Any, Union

from chatbye.enums import (
    MessageSource,
    MessageType,
    message_source_to_string,
    message_type_to_string,
)

DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

HostLike = Union[str, IPv4Address, IPv6Address, None]


@dataclass(frozen=True)
class AddressEntry:
    """An address configured on a network interface."""

    ip: str
    netmask: str = ""
    broadcast: str = ""


def _timestamp() -> str:
    return datetime.now().strftime(DATE_FORMAT)


def _indented(obj: dict[str, Any]) -> bytes:
    text = json.dumps(obj, indent=4, sort_keys=True, ensure_ascii=False)
    return (text + "\n").encode("utf-8")


def _compact(obj: dict[str, Any]) -> bytes:
    text = json.dumps(obj, separators=(",", ":"), sort_keys=True, ensure_ascii=False)
    return text.encode("utf-8")


def _host_text(host: HostLike) -> str:
    return "" if host is None else str(host)


def create_message(source: MessageSource, sender: str, message: str) -> bytes:
    """A chat message from a named sender."""
    return _indented(
        {
            "type": message_type_to_string(MessageType.MESSAGE),
            "date": _timestamp(),
            "from": sender,
            "source": message_source_to_string(source),
            "message": message,
        }
    )


def create_request_name() -> bytes:
    """A request asking the client for its name."""
    return _indented(
        {
            "type": message_type_to_string(MessageType.REQUEST_NAME),
            "date": _timestamp(),
            "source": message_source_to_string(MessageSource.SYSTEM),
        }
    )


def create_nickname_change(kind: MessageType, new_name: str, old_name: str = "") -> bytes:
    """A name-set or name-change notice; old_name is omitted when empty."""
    obj: dict[str, Any] = {
        "type": message_type_to_string(kind),
        "date": _timestamp(),
        "source": message_source_to_string(MessageSource.SERVER),
    }
    if old_name:
        obj["old_name"] = old_name
    obj["new_name"] = new_name
    return _indented(obj)


def create_system_message(message: str) -> bytes:
    """A message from the server itself."""
    return _indented(
        {
            "type": message_type_to_string(MessageType.MESSAGE),
            "date": _timestamp(),
            "source": message_source_to_string(MessageSource.SERVER),
            "message": message,
        }
    )


def create_server_shutting_down(
    host: HostLike, message: str, new_host_name: str, client_names: str
) -> bytes:
    """Notice that the server stops, naming the client that takes over."""
    return _indented(
        {
            "type": message_type_to_string(MessageType.SERVER_SHUTTING_DOWN),
            "date": _timestamp(),
            "source": message_source_to_string(MessageSource.SERVER),
            "client_names": client_names,
            "host": _host_text(host),
            "host_name": new_host_name,
            "message": message,
        }
    )


def send_server_details(message: str, entry: AddressEntry, port: int) -> bytes:
    """Discovery reply describing where the server listens."""
    return _indented(
        {
            "message": message,
            "host_address": entry.ip,
            "netmask": entry.netmask,
            "broadcast": entry.broadcast,
            "port": str(port),
        }
    )


def send_client_list_name(message: str) -> bytes:
    """The list of connected client names."""
    return _indented(
        {
            "type": message_type_to_string(MessageType.CLIENT_LIST),
            "date": _timestamp(),
            "source": message_source_to_string(MessageSource.SYSTEM),
            "message": message,
        }
    )


def create_host_status_message(is_host: bool) -> bytes:
    """Compact notice of whether a client hosts the server."""
    return _compact(
        {
            "type": message_type_to_string(MessageType.HOST_STATUS),
            "source": message_source_to_string(MessageSource.SYSTEM),
            "isHost": bool(is_host),
        }
    )