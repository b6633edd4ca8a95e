"""Server-side reactions to client events."""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Optional

from chatbye.client_manager import ClientManager
from chatbye.dictionary import ServerMessageDictionary
from chatbye.enums import MessageSource, MessageType
from chatbye.json_builder import (
    create_message,
    create_request_name,
    create_server_shutting_down,
    create_system_message,
)
from chatbye.tcp_sender import TcpSender

log = logging.getLogger(__name__)

CLIENT_DISCONNECTED = 800
NAME_REQUIRED = 1200
SERVER_SHUTTING_DOWN = 1300


class ServerController:
    """Coordinates the client registry and the sender."""

    def __init__(self, client_manager: ClientManager, tcp_sender: TcpSender) -> None:
        self.client_manager = client_manager
        self.tcp_sender = tcp_sender
        self.messages = ServerMessageDictionary()
        self.server_shutting_down = False

    def shutdown(self) -> None:
        """Tell every client the server stops and who should host next."""
        manager = self.client_manager
        new_host_name = manager.new_host_name()
        new_host_ip = manager.client_ip(new_host_name)
        known_clients = manager.preserve_client_list_before_host_change()

        manager.clear()
        manager.broadcast_client_list()

        log.info("The server shuts down...")
        payload = create_server_shutting_down(
            new_host_ip,
            self.messages.get_message(SERVER_SHUTTING_DOWN),
            new_host_name,
            known_clients,
        )
        self.server_shutting_down = True
        self.tcp_sender.shutdown_and_notify(payload)
        log.info("The name of the new host: %s", new_host_name)

    def handle_client_disconnected(self, client: Any) -> None:
        """Announce a departed client and forget it once it is gone."""
        if client is None:
            return
        if self.server_shutting_down:
            log.debug("Client left during shutdown; no message is sent.")
            return

        if self.client_manager.has_client(client):
            name = self.client_manager.client_name(client)
            text = f"{self.messages.get_message(CLIENT_DISCONNECTED)}: {name}"
            self.tcp_sender.send_to_client(create_system_message(text))

        if not client.connected:
            if self.tcp_sender.remove_client(client):
                self.client_manager.remove_client(client)
                log.info("Client disconnected")
            else:
                log.warning("Error removing client from the sender")
            self.client_manager.broadcast_client_list()

    def send_to_client(self, payload: bytes) -> None:
        """Broadcast a payload to every client."""
        self.tcp_sender.send_to_client(payload)

    def handle_new_client_connection(self, client: Any) -> None:
        """Register a newly connected client and refresh the client list."""
        self.tcp_sender.add_client(client)
        self.client_manager.broadcast_client_list()

    def on_host_status_received(self, client: Any) -> None:
        """Mark the client as host and ask for its name."""
        self.client_manager.host_client = client
        self.tcp_sender.send_to_client(create_request_name())

    def on_change_name_requested(
        self,
        kind: MessageType,
        date_time: Optional[datetime],
        new_name: str,
        old_name: str,
        client: Any,
    ) -> None:
        """Record a client's new name."""
        self.client_manager.set_client_name(kind, date_time, new_name, old_name, client)

    def on_client_sent_message(self, message: str, client: Any) -> None:
        """Relay a message from a named client to everyone."""
        if self.client_manager.has_client(client):
            name = self.client_manager.client_name(client)
            self.tcp_sender.send_to_client(create_message(MessageSource.CLIENT, name, message))

    def on_unnamed_client_tried_to_send(self) -> None:
        """Remind clients to choose a name first."""
        text = self.messages.get_message(NAME_REQUIRED)
        self.tcp_sender.send_to_client(create_system_message(text))