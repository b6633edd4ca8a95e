from dataclasses import dataclass, field

import pytest

from chatbye.tcp_sender import FrameDecoder, TcpSender, encode_frame


@dataclass(eq=False)
class FakeClient:
    connected: bool = True
    written: bytearray = field(default_factory=bytearray)
    closed: bool = False

    def write(self, data):
        self.written += data

    def close(self):
        self.closed = True
        self.connected = False


def test_encode_frame_prefixes_big_endian_length():
    assert encode_frame(b"abc") == b"\x00\x03abc"


def test_encode_frame_empty_payload():
    assert encode_frame(b"") == b"\x00\x00"


def test_encode_frame_rejects_oversized_payload():
    with pytest.raises(ValueError):
        encode_frame(b"x" * 0x10000)


def test_encode_frame_accepts_largest_payload():
    frame = encode_frame(b"y" * 0xFFFF)
    assert frame[:2] == b"\xff\xff"
    assert len(frame) == 0xFFFF + 2


def test_decoder_round_trip_multiple_frames():
    payloads = [b"first", b"", b"third one"]
    stream = b"".join(encode_frame(p) for p in payloads)
    assert FrameDecoder().feed(stream) == payloads


def test_decoder_handles_byte_by_byte_input():
    decoder = FrameDecoder()
    stream = encode_frame(b"hello") + encode_frame(b"world")
    collected = []
    for index in range(len(stream)):
        collected.extend(decoder.feed(stream[index:index + 1]))
    assert collected == [b"hello", b"world"]


def test_decoder_keeps_incomplete_frame():
    decoder = FrameDecoder()
    frame = encode_frame(b"partial")
    assert decoder.feed(frame[:4]) == []
    assert decoder.feed(frame[4:]) == [b"partial"]


def test_send_without_clients_delivers_nothing():
    assert TcpSender().send_to_client(b"data") == 0


def test_send_writes_frame_to_connected_clients_only():
    sender = TcpSender()
    live, dead = FakeClient(), FakeClient(connected=False)
    sender.add_client(live)
    sender.add_client(dead)
    assert sender.send_to_client(b"payload") == 1
    assert bytes(live.written) == encode_frame(b"payload")
    assert dead.written == bytearray()


def test_remove_client_reports_membership():
    sender = TcpSender()
    client = FakeClient()
    sender.add_client(client)
    assert sender.remove_client(client) is True
    assert sender.remove_client(client) is False
    assert sender.clients == []


def test_remove_all_clients_closes_them():
    sender = TcpSender()
    clients = [FakeClient(), FakeClient()]
    for client in clients:
        sender.add_client(client)
    sender.remove_all_clients()
    assert all(client.closed for client in clients)
    assert sender.clients == []


def test_shutdown_notifies_then_disconnects():
    sender = TcpSender()
    client = FakeClient()
    sender.add_client(client)
    sender.shutdown_and_notify(b"bye")
    assert FrameDecoder().feed(bytes(client.written)) == [b"bye"]
    assert client.closed
    assert sender.clients == []