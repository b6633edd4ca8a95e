# chatbye

A small chat server for a local network, built on `asyncio` and the
standard library alone. Clients connect over TCP and exchange JSON
messages; each message travels in a frame that starts with a two-byte
big-endian length. Unless it is started with a fixed port, the server also
answers discovery requests on UDP port `50501` (joining the multicast group
`239.255.43.21` through the address it listens on) with its address,
netmask, broadcast address and port.

## Installing

```
pip install .
```

To run the tests:

```
pip install .[test]
pytest
```

## Running the server

```
chatbye-server 5000 --host 192.168.1.10
```

Arguments and options:

- `port`: the TCP port to listen on (`0` lets the system choose one).
- `--host`: the address to listen on; `127.0.0.1` by default. Discovery
  joins the multicast group through this address, so use the machine's
  network address for clients on other machines to find the server.
- `--netmask`, `--broadcast`: values announced in discovery replies; empty
  by default.
- `--fixed-port`: do not answer discovery requests.

The command runs until interrupted. It exits with status 1 if it cannot
listen on the address and port. On shutdown the server sends every client a
final notice and closes their connections.

## What travels over the wire

Every message is a JSON object with a `type` field (`message`, `set_name`,
`change_name`, `request_name`, `host_status`, `client_list`,
`Server_Shutting_Down`, `image`, `file`, `system`) and a `source` field
(`Server`, `Client`, `System` or `Bot`). Most messages also carry a `date`
in the form `yyyy-MM-dd hh:mm:ss`. Unknown types are read as `message`,
unknown sources as `Server`.

How the server reacts to what a client sends:

- `host_status`: the client is taken as the host, and a `request_name`
  message is sent.
- `set_name` with `new_name`, or `change_name` with `old_name` and
  `new_name`: the name is recorded, the change is announced, and the list of
  names is sent again.
- any other type with a non-empty `message`: if the client has a name, the
  text is relayed to everyone as a `message` from that name.
- any other type without text: everyone is reminded to set a name first.

The list of names, comma separated, is sent to every client as a
`client_list` message whenever a client connects, sets or changes its name,
or leaves. When a named client leaves, a `Client disconnected: <name>`
message is sent.

When the server shuts down it sends a `Server_Shutting_Down` message whose
`host_name` and `host` name the first client whose name differs from the
host's (and its address), and whose `client_names` lists the clients other
than the host, so that the clients can agree on who hosts next.

A discovery request is the datagram `SERVER_DISCOVERY`; the reply is a JSON
object with `message`, `host_address`, `netmask`, `broadcast` and `port`
(the port as a string). Other datagrams get no reply.

## Using it from Python

- `chatbye.server`: `Server`, with `await start(entry, port, mode)`
  (returns whether it listens) and `await close()`; `main(argv=None)` is
  the command above.
- `chatbye.enums`: `MessageType`, `MessageSource`, `HostBindingMode`,
  `HostMode`, `InterfaceFilter`, `ScanMode`, and the string conversions
  `message_type_to_string`, `string_to_message_type`,
  `message_source_to_string`, `string_to_message_source`.
- `chatbye.json_builder`: `AddressEntry` and the functions that build each
  kind of message, such as `create_message`, `create_system_message`,
  `create_nickname_change`, `create_server_shutting_down` and
  `send_server_details`.
- `chatbye.tcp_sender`: `encode_frame` (raises `ValueError` for payloads
  over 65535 bytes) and `FrameDecoder` for the framing, and `TcpSender`,
  which sends a frame to every connected client.
- `chatbye.dispatcher`: `parse_message` and `MessageDispatcher`, which
  decide what an incoming message asks for.
- `chatbye.client_manager`: `ClientManager`, which keeps each client's name
  and address.
- `chatbye.dictionary`: `ServerMessageDictionary`, the numbered texts the
  server sends.
- `chatbye.udp_service`: `UdpService`, which answers discovery requests.
- `chatbye.server_controller`: `ServerController`, which ties these together.

```python
from chatbye.enums import MessageSource
from chatbye.json_builder import create_message
from chatbye.tcp_sender import FrameDecoder, encode_frame

frame = encode_frame(create_message(MessageSource.CLIENT, "alice", "hello"))
decoder = FrameDecoder()
for payload in decoder.feed(frame):
    print(payload.decode("utf-8"))
```

```python
import asyncio

from chatbye.enums import HostBindingMode
from chatbye.json_builder import AddressEntry
from chatbye.server import Server


async def run() -> None:
    server = Server()
    if await server.start(AddressEntry(ip="127.0.0.1"), 0, HostBindingMode.FIXED_PORT):
        print("listening on port", server.port)
        await server.close()


asyncio.run(run())
```

## What it does not do

This package is the server side only. It has no chat client and no
graphical interface, does not send discovery requests or look for servers
itself, and keeps no settings or history: names and the client list live in
memory while the server runs. `HostBindingMode.DYNAMIC_PORT` only means that
discovery requests are answered; the server does not search for another
port when the one given is taken.