# tp0net

tp0net is a small TCP client and server pair that speak a simple binary
protocol. The client reads lines typed at the console, logs them and sends
them to the server. The server logs whatever it receives.

No libraries beyond the Python standard library are needed.

## Installation

```
pip install .
```

To run the tests as well:

```
pip install ".[test]"
pytest
```

## Running

First start the server. By default it listens on TCP port 4444 on all IPv4
addresses and waits for a single client:

```
tp0net-server
```

Options:

* `--host HOST`: address to bind to (default: all addresses)
* `--port PORT`: port to listen on (default: `4444`)
* `--log PATH`: log file (default: `log.log`)

The server logs at DEBUG level to the log file and to standard output.

Then start the client in another terminal:

```
tp0net-client
```

Options:

* `--config PATH`: configuration file (default: `../cliente.config`)
* `--log PATH`: log file (default: `tp0.log`)

The client logs at INFO level to the log file and to standard output. It
works in three steps:

1. It reads its configuration and logs the values of `CLAVE`, `IP` and
   `PUERTO`. If the file cannot be read, it prints an error and exits with
   status 1.
2. It reads lines from the console (prompt `> `) and logs each one. The first
   line is always logged. After that it stops at an empty line, at end of
   input, or after logging a line that starts with `exit`.
3. It connects to the server at `IP`:`PUERTO` and sends the `CLAVE` value as a
   message. It then reads more lines up to an empty line or end of input,
   bundles them into a single packet and sends it.

The server logs each message it receives and every value in each packet. An
unknown operation code is logged as a warning. When the client disconnects,
the server logs an error and exits with status 1.

## Client configuration

The configuration file has one `KEY=VALUE` pair per line. Empty lines and
lines starting with `#` are ignored; a later key overrides an earlier one; a
non-empty line without `=` is an error.

```
IP=127.0.0.1
PUERTO=4444
CLAVE=hello
```

## Wire format

Every integer is a 4-byte little-endian signed `int`.

| Field     | Size         | Meaning                                   |
|-----------|--------------|-------------------------------------------|
| operation | 4 bytes      | `0` = message, `1` = packet (`OpCode`)    |
| size      | 4 bytes      | length of the payload in bytes            |
| payload   | `size` bytes | see below                                 |

* **Message**: the payload is the UTF-8 text followed by a NUL byte.
* **Packet**: the payload is a sequence of entries. Each entry is a 4-byte
  length followed by that many bytes of value. Text values are stored
  NUL-terminated, and are read back up to the first NUL.

## Library use

The protocol pieces can be used on their own:

```python
from tp0net.protocol import OpCode, Packet, encode_message, decode_values

packet = Packet()
packet.add("first")
packet.add("second")
data = packet.serialize()        # bytes ready to send over a socket

frame = encode_message("hello")  # a complete MESSAGE frame
```

On the receiving side, `read_operation(sock)` reads the operation code; when
the peer has gone away it closes the socket and raises
`ConnectionClosedError`. `read_buffer(sock)` reads a size-prefixed payload,
and `decode_values(payload)` splits a packet payload back into its values,
raising `ValueError` on a malformed payload.

`tp0net.config` offers `parse_config(text)` and `load_config(path)`, which
return a `Config` whose `get_string(key)` raises `KeyError` for a missing key.

## Limitations

The server handles exactly one client and then exits; it does not accept
further connections or serve clients concurrently. When it sees an unknown
operation code it does not skip that frame's payload.