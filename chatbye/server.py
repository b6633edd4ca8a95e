"""The chat server: accepts TCP clients and answers discovery requests."""

from __future__ import annotations

import argparse
import asyncio
import logging
from typing import Optional

from chatbye.client_manager import ClientManager
from chatbye.dispatcher import MessageDispatcher
from chatbye.enums import HostBindingMode
from chatbye.json_builder import AddressEntry
from chatbye.server_controller import ServerController
from chatbye.tcp_sender import FrameDecoder, TcpSender
from chatbye.udp_service import UdpService

log = logging.getLogger(__name__)

_READ_SIZE = 4096
_CLOSE_TIMEOUT = 3.0


class _Connection:
    """One connected client socket."""

    def __init__(self, reader: asyncio.StreamReader, writer: asyncio.StreamWriter) -> None:
        self.reader = reader
        self.writer = writer
        peer = writer.get_extra_info("peername")
        self.peer_address: Optional[str] = peer[0] if peer else None
        self._open = True

    @property
    def connected(self) -> bool:
        return self._open and not self.writer.is_closing()

    def write(self, data: bytes) -> None:
        if self.connected:
            self.writer.write(data)

    def close(self) -> None:
        self._open = False
        self.writer.close()


class Server:
    """A chat server listening on one address."""

    def __init__(self) -> None:
        self.tcp_sender = TcpSender()
        self.client_manager = ClientManager(self.tcp_sender.send_to_client)
        self.controller = ServerController(self.client_manager, self.tcp_sender)
        self.dispatcher = MessageDispatcher(
            on_host_status=self.controller.on_host_status_received,
            on_change_name=self.controller.on_change_name_requested,
            on_client_message=self.controller.on_client_sent_message,
            on_unnamed_client=self.controller.on_unnamed_client_tried_to_send,
        )
        self.udp_service: Optional[UdpService] = None
        self.port: Optional[int] = None
        self._server: Optional[asyncio.AbstractServer] = None

    @property
    def is_listening(self) -> bool:
        """Whether the server accepts connections."""
        return self._server is not None

    async def start(
        self,
        entry: AddressEntry,
        port: int,
        mode: HostBindingMode = HostBindingMode.DYNAMIC_PORT,
    ) -> bool:
        """Listen on the entry's address; return whether that succeeded.

        Unless the port is fixed, discovery requests are answered too.
        """
        try:
            self._server = await asyncio.start_server(self._handle, entry.ip, port)
        except OSError as exc:
            log.warning("TCP server is not running on %s port %s: %s", entry.ip, port, exc)
            return False
        self.port = self._server.sockets[0].getsockname()[1]
        log.info("The TCP server is running on %s port %s", entry.ip, self.port)

        if mode is not HostBindingMode.FIXED_PORT:
            self.udp_service = UdpService(entry, self.port)
            await self.udp_service.start(entry.ip, mode)
        return True

    async def _handle(self, reader: asyncio.StreamReader, writer: asyncio.StreamWriter) -> None:
        connection = _Connection(reader, writer)
        log.info("Client connected from %s", connection.peer_address)
        self.controller.handle_new_client_connection(connection)
        decoder = FrameDecoder()
        try:
            while chunk := await reader.read(_READ_SIZE):
                for frame in decoder.feed(chunk):
                    try:
                        self.dispatcher.process_message(frame, connection)
                    except ValueError as exc:
                        log.warning("Cannot deliver message: %s", exc)
        except ConnectionError:
            pass
        finally:
            connection.close()
            self.controller.handle_client_disconnected(connection)

    async def close(self) -> None:
        """Notify clients, stop listening and stop answering discovery."""
        if self._server is not None:
            self.controller.shutdown()
            self._server.close()
            try:
                await asyncio.wait_for(self._server.wait_closed(), _CLOSE_TIMEOUT)
            except asyncio.TimeoutError:
                log.warning("Timed out waiting for clients to disconnect")
            self._server = None
        if self.udp_service is not None:
            self.udp_service.close()
            self.udp_service = None


async def _serve(entry: AddressEntry, port: int, mode: HostBindingMode) -> int:
    server = Server()
    if not await server.start(entry, port, mode):
        return 1
    try:
        await asyncio.Event().wait()
    finally:
        await server.close()
    return 0


def main(argv: Optional[list[str]] = None) -> int:
    """Run a chat server until interrupted."""
    parser = argparse.ArgumentParser(prog="chatbye", description="Run a chat server.")
    parser.add_argument("port", type=int, help="TCP port to listen on")
    parser.add_argument("--host", default="127.0.0.1", help="address to listen on")
    parser.add_argument("--netmask", default="", help="netmask announced to clients")
    parser.add_argument("--broadcast", default="", help="broadcast address announced to clients")
    parser.add_argument(
        "--fixed-port", action="store_true", help="do not answer discovery requests"
    )
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(message)s")
    entry = AddressEntry(ip=args.host, netmask=args.netmask, broadcast=args.broadcast)
    mode = HostBindingMode.FIXED_PORT if args.fixed_port else HostBindingMode.DYNAMIC_PORT
    try:
        return asyncio.run(_serve(entry, args.port, mode))
    except KeyboardInterrupt:
        return 0


if __name__ == "__main__":
    raise SystemExit(main())