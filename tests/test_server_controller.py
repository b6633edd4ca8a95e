import json
from dataclasses import dataclass, field

from chatbye.client_manager import ClientManager
from chatbye.dictionary import ServerMessageDictionary
from chatbye.enums import MessageType
from chatbye.server_controller import ServerController
from chatbye.tcp_sender import FrameDecoder, TcpSender


@dataclass(eq=False)
class FakeClient:
    peer_address: str = "192.0.2.1"
    connected: bool = True
    written: bytearray = field(default_factory=bytearray)
    closed: bool = False

    def write(self, data):
        self.written += data

    def close(self):
        self.closed = True
        self.connected = False


def received(client):
    return [json.loads(frame) for frame in FrameDecoder().feed(bytes(client.written))]


def make_controller():
    sender = TcpSender()
    manager = ClientManager(sender.send_to_client)
    return ServerController(manager, sender), manager, sender


def named_client(controller, name, address="192.0.2.1"):
    client = FakeClient(peer_address=address)
    controller.handle_new_client_connection(client)
    controller.on_change_name_requested(MessageType.SET_NAME, None, name, "", client)
    return client


def test_new_connection_gets_client_list():
    controller, _, sender = make_controller()
    client = FakeClient()
    controller.handle_new_client_connection(client)
    assert sender.clients == [client]
    [frame] = received(client)
    assert frame["type"] == "client_list"
    assert frame["message"] == ""


def test_set_name_registers_and_announces():
    controller, manager, _ = make_controller()
    client = named_client(controller, "alice")
    assert manager.client_name(client) == "alice"
    frames = received(client)
    assert frames[1]["type"] == "set_name"
    assert frames[1]["new_name"] == "alice"
    assert frames[2]["message"] == "alice"


def test_change_name_swaps_fields_as_sent():
    controller, manager, _ = make_controller()
    client = named_client(controller, "alice")
    controller.on_change_name_requested(MessageType.CHANGE_NAME, None, "carol", "alice", client)
    assert manager.client_name(client) == "carol"
    change = received(client)[-2]
    assert change["type"] == "change_name"
    assert change["new_name"] == "alice"
    assert change["old_name"] == "carol"


def test_host_status_requests_name():
    controller, manager, _ = make_controller()
    client = FakeClient()
    controller.handle_new_client_connection(client)
    controller.on_host_status_received(client)
    assert manager.host_client is client
    assert received(client)[-1]["type"] == "request_name"


def test_message_from_named_client_is_relayed():
    controller, _, _ = make_controller()
    client = named_client(controller, "alice")
    controller.on_client_sent_message("hello", client)
    frame = received(client)[-1]
    assert frame["from"] == "alice"
    assert frame["source"] == "Client"
    assert frame["message"] == "hello"


def test_message_from_unknown_client_is_dropped():
    controller, _, _ = make_controller()
    listener = FakeClient()
    controller.handle_new_client_connection(listener)
    before = bytes(listener.written)
    controller.on_client_sent_message("hello", FakeClient())
    assert bytes(listener.written) == before


def test_unnamed_client_gets_reminder():
    controller, _, _ = make_controller()
    client = FakeClient()
    controller.handle_new_client_connection(client)
    controller.on_unnamed_client_tried_to_send()
    frame = received(client)[-1]
    assert frame["message"] == ServerMessageDictionary().get_message(1200)
    assert frame["source"] == "Server"


def test_disconnect_announces_and_forgets_client():
    controller, manager, sender = make_controller()
    alice = named_client(controller, "alice")
    bob = named_client(controller, "bob", "192.0.2.2")
    bob.connected = False
    controller.handle_client_disconnected(bob)
    assert not manager.has_client(bob)
    assert sender.clients == [alice]
    frames = received(alice)
    assert frames[-2]["message"] == ServerMessageDictionary().get_message(800) + ": bob"
    assert frames[-1]["message"] == "alice"


def test_shutdown_hands_over_to_another_client():
    controller, manager, sender = make_controller()
    alice = named_client(controller, "alice")
    bob = named_client(controller, "bob", "192.0.2.2")
    controller.on_host_status_received(alice)
    controller.shutdown()

    final = received(bob)[-1]
    assert final["type"] == "Server_Shutting_Down"
    assert final["host_name"] == "bob"
    assert final["host"] == "192.0.2.2"
    assert final["client_names"] == "bob"
    assert final["message"] == ServerMessageDictionary().get_message(1300)
    assert controller.server_shutting_down is True
    assert alice.closed and bob.closed
    assert sender.clients == []
    assert manager.all_client_names() == []


def test_disconnect_during_shutdown_sends_nothing():
    controller, _, _ = make_controller()
    alice = named_client(controller, "alice")
    controller.shutdown()
    before = bytes(alice.written)
    alice.connected = True
    controller.handle_client_disconnected(alice)
    assert bytes(alice.written) == before