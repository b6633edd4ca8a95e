"""Bookkeeping of connected clients and their names."""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Callable, Hashable

from chatbye.enums import MessageType
from chatbye.json_builder import create_nickname_change, send_client_list_name

log = logging.getLogger(__name__)


class ClientManager:
    """Tracks client names and addresses and announces changes.

    Clients are any hashable objects; their address is read from a
    ``peer_address`` attribute when they choose a name.
    """

    def __init__(self, send_to_client: Callable[[bytes], Any]) -> None:
        self._send = send_to_client
        self._names: dict[Hashable, str] = {}
        self._ips: dict[str, Any] = {}
        self.host_client: Hashable | None = None
        self.client_list_message = ""
        self.client_list_known = ""

    def add_client(self, client: Hashable, name: str, ip: Any) -> None:
        """Register a client under a name with its address."""
        self._names[client] = name
        self._ips[name] = ip

    def remove_client(self, client: Hashable) -> None:
        """Forget a client and the address stored under its name."""
        name = self._names.pop(client, None)
        if name is not None:
            self._ips.pop(name, None)

    def new_host_name(self) -> str:
        """Name of the first client whose name differs from the host's, or ''."""
        current = self._names.get(self.host_client, "")
        new_name = next((name for name in self._names.values() if name != current), "")
        if new_name:
            log.debug("New host: %s", new_name)
        else:
            log.debug("Could not find a new host, all clients have the same name.")
        return new_name

    def set_client_name(
        self,
        kind: MessageType,
        date_time: datetime | None,
        new_name: str,
        old_name: str,
        client: Hashable | None,
    ) -> None:
        """Record a client's chosen name and announce it."""
        if client is None:
            return
        self._names[client] = new_name
        self._ips[new_name] = getattr(client, "peer_address", None)
        log.debug("Client set name to: %s", new_name)

        if kind is MessageType.SET_NAME:
            self._send(create_nickname_change(MessageType.SET_NAME, new_name))
        elif kind is MessageType.CHANGE_NAME:
            self._send(create_nickname_change(MessageType.CHANGE_NAME, old_name, new_name))
        self.broadcast_client_list()

    def broadcast_client_list(self) -> None:
        """Send the comma-separated list of client names."""
        self.client_list_message = ", ".join(self._names.values())
        self._send(send_client_list_name(self.client_list_message))

    def client_name(self, client: Hashable) -> str:
        """The client's name, or '' if unknown."""
        return self._names.get(client, "")

    def client_ip(self, name: str) -> Any:
        """The address stored for a name, or None if unknown."""
        return self._ips.get(name)

    def all_client_names(self) -> list[str]:
        """Names of all registered clients."""
        return list(self._names.values())

    def clear(self) -> None:
        """Forget every client."""
        self._names.clear()
        self._ips.clear()

    def has_client(self, client: Hashable) -> bool:
        """Whether the client has a registered name."""
        return client in self._names

    def preserve_client_list_before_host_change(self) -> str:
        """Drop the host and return the remaining names, comma separated."""
        self._names.pop(self.host_client, None)
        self.client_list_known = ", ".join(self._names.values())
        return self.client_list_known