"""Answers UDP discovery requests from clients looking for a server."""

from __future__ import annotations

import asyncio
import logging
import socket
from typing import Any, Optional

from chatbye.enums import HostBindingMode
from chatbye.json_builder import AddressEntry, send_server_details

log = logging.getLogger(__name__)

DISCOVERY_PORT = 50501
MULTICAST_GROUP = "239.255.43.21"
DISCOVERY_REQUEST = b"SERVER_DISCOVERY"
GREETING = "We look forward to seeing you on our server)"


class _DiscoveryProtocol(asyncio.DatagramProtocol):
    def __init__(self, service: "UdpService") -> None:
        self._service = service
        self._transport: Optional[asyncio.DatagramTransport] = None

    def connection_made(self, transport: Any) -> None:
        self._transport = transport

    def datagram_received(self, data: bytes, addr: Any) -> None:
        response = self._service.response_for(data)
        if response is not None and self._transport is not None:
            self._transport.sendto(response, addr)


class UdpService:
    """Listens for discovery datagrams and replies with server details."""

    discovery_port = DISCOVERY_PORT

    def __init__(self, entry: AddressEntry, port: int) -> None:
        self.entry = entry
        self.port = port
        self._transport: Optional[asyncio.DatagramTransport] = None

    @property
    def address(self) -> Optional[tuple[str, int]]:
        """The local address the service is bound to, if running."""
        if self._transport is None:
            return None
        return self._transport.get_extra_info("sockname")

    def response_for(self, datagram: bytes) -> Optional[bytes]:
        """The reply to a datagram, or None if it is not a discovery request."""
        if datagram == DISCOVERY_REQUEST:
            return send_server_details(GREETING, self.entry, self.port)
        return None

    def _open_socket(self, interface_ip: str) -> Optional[socket.socket]:
        sock = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)
        try:
            sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
            if hasattr(socket, "SO_REUSEPORT"):
                try:
                    sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEPORT, 1)
                except OSError:
                    pass
            sock.bind(("0.0.0.0", self.discovery_port))
        except OSError as exc:
            log.warning("Cannot bind discovery socket: %s", exc)
            sock.close()
            return None
        try:
            membership = socket.inet_aton(MULTICAST_GROUP) + socket.inet_aton(interface_ip)
            sock.setsockopt(socket.IPPROTO_IP, socket.IP_ADD_MEMBERSHIP, membership)
        except OSError as exc:
            log.debug("Cannot join multicast group via %s: %s", interface_ip, exc)
        sock.setblocking(False)
        return sock

    async def start(
        self, interface_ip: str, mode: HostBindingMode = HostBindingMode.DYNAMIC_PORT
    ) -> bool:
        """Start answering discovery requests; return whether it is running.

        Nothing is started for a fixed-port binding.
        """
        if mode is HostBindingMode.FIXED_PORT:
            return False
        sock = self._open_socket(interface_ip)
        if sock is None:
            return False
        loop = asyncio.get_running_loop()
        self._transport, _ = await loop.create_datagram_endpoint(
            lambda: _DiscoveryProtocol(self), sock=sock
        )
        return True

    def close(self) -> None:
        """Stop listening."""
        if self._transport is not None:
            self._transport.close()
            self._transport = None