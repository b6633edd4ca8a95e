"""Length-prefixed framing and delivery of messages to connected clients."""

from __future__ import annotations

import logging
from typing import Any, Protocol

log = logging.getLogger(__name__)

HEADER_SIZE = 2
MAX_PAYLOAD = 0xFFFF


class Client(Protocol):
    """What the sender needs from a connected client."""

    @property
    def connected(self) -> bool: ...

    def write(self, data: bytes) -> Any: ...

    def close(self) -> Any: ...


def encode_frame(payload: bytes) -> bytes:
    """Prefix a payload with its length as a big-endian 16-bit integer."""
    if len(payload) > MAX_PAYLOAD:
        raise ValueError(f"payload of {len(payload)} bytes does not fit in one frame")
    return len(payload).to_bytes(HEADER_SIZE, "big") + bytes(payload)


class FrameDecoder:
    """Reassembles length-prefixed frames from a byte stream."""

    def __init__(self) -> None:
        self._buffer = bytearray()

    def feed(self, data: bytes) -> list[bytes]:
        """Add received bytes and return every frame now complete."""
        self._buffer += data
        frames: list[bytes] = []
        while len(self._buffer) >= HEADER_SIZE:
            size = int.from_bytes(self._buffer[:HEADER_SIZE], "big")
            end = HEADER_SIZE + size
            if len(self._buffer) < end:
                break
            frames.append(bytes(self._buffer[HEADER_SIZE:end]))
            del self._buffer[:end]
        return frames


class TcpSender:
    """Holds the connected clients and broadcasts frames to them."""

    def __init__(self) -> None:
        self._clients: list[Client] = []

    @property
    def clients(self) -> list[Client]:
        """The registered clients, in the order they were added."""
        return list(self._clients)

    def send_to_client(self, payload: bytes) -> int:
        """Send one frame to every connected client; return how many got it."""
        if not self._clients:
            return 0
        frame = encode_frame(payload)
        delivered = 0
        for client in list(self._clients):
            if client.connected:
                client.write(frame)
                delivered += 1
        return delivered

    def add_client(self, client: Client) -> None:
        """Register a client to receive broadcasts."""
        self._clients.append(client)

    def remove_client(self, client: Client) -> bool:
        """Unregister a client; return whether it was registered."""
        try:
            self._clients.remove(client)
        except ValueError:
            return False
        return True

    def remove_all_clients(self) -> None:
        """Close and forget every client."""
        for client in self._clients:
            client.close()
        self._clients.clear()

    def shutdown_and_notify(self, payload: bytes) -> None:
        """Send a final frame to everyone, then disconnect them all."""
        self.send_to_client(payload)
        self.remove_all_clients()