"""Enumerations shared by the chat server and its wire format."""

from __future__ import annotations

from enum import Enum, auto


class MessageSource(Enum):
    """Who a chat message originates from."""

    SERVER = "Server"
    CLIENT = "Client"
    SYSTEM = "System"
    BOT = "Bot"


class MessageType(Enum):
    """Kind of a chat protocol message; values are the wire names."""

    MESSAGE = "message"
    SET_NAME = "set_name"
    CHANGE_NAME = "change_name"
    SERVER_SHUTTING_DOWN = "Server_Shutting_Down"
    HOST_STATUS = "host_status"
    REQUEST_NAME = "request_name"
    CLIENT_LIST = "client_list"
    IMAGE = "image"
    FILE = "file"
    SYSTEM = "System"


class HostBindingMode(Enum):
    """How the server binds its listening port."""

    DYNAMIC_PORT = auto()  # search other ports on failure
    FIXED_PORT = auto()  # bind strictly to the given port


class HostMode(Enum):
    """Which network interfaces a host is offered on."""

    ONLY_WIFI = auto()
    ONLY_LAN = auto()
    ALL_INTERFACES = auto()


class InterfaceFilter(Enum):
    """Which network interfaces are considered when scanning."""

    ONLY_WIFI = auto()
    ONLY_LAN = auto()
    ALL_INTERFACES = auto()


class ScanMode(Enum):
    """How widely to look for servers."""

    FULL_SCAN = auto()  # every address on the network, plus ports
    SINGLE_IP_ONLY = auto()  # one address, plus ports


_SOURCES_BY_NAME = {source.value: source for source in MessageSource}

# The System type is written as "System" but only the lower-case
# spelling is recognised when reading.
_TYPES_BY_NAME = {
    kind.value: kind for kind in MessageType if kind is not MessageType.SYSTEM
} | {"system": MessageType.SYSTEM}


def message_source_to_string(source: MessageSource) -> str:
    """Return the wire name of a message source."""
    return source.value


def string_to_message_source(text: str) -> MessageSource:
    """Parse a wire name into a source; unknown names mean SERVER."""
    return _SOURCES_BY_NAME.get(text, MessageSource.SERVER)


def message_type_to_string(kind: MessageType) -> str:
    """Return the wire name of a message type."""
    return kind.value


def string_to_message_type(text: str) -> MessageType:
    """Parse a wire name into a message type; unknown names mean MESSAGE."""
    return _TYPES_BY_NAME.get(text, MessageType.MESSAGE)