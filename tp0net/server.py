"""Server: accepts one client and logs the messages and packets it sends."""

from __future__ import annotations

import argparse
import logging
import socket
import sys

from tp0net.protocol import (
    ConnectionClosedError,
    OpCode,
    decode_values,
    read_buffer,
    read_operation,
)

PORT = "4444"

_FORMAT = "[%(levelname)s] %(asctime)s %(name)s/(%(process)d:%(thread)d): %(message)s"
_log = logging.getLogger("Servidor")


def create_logger(path: str = "log.log") -> logging.Logger:
    """Return the server logger, writing DEBUG and above to ``path`` and stdout."""
    for handler in list(_log.handlers):
        _log.removeHandler(handler)
        handler.close()
    _log.setLevel(logging.DEBUG)
    formatter = logging.Formatter(_FORMAT)
    for handler in (logging.FileHandler(path, encoding="utf-8"), logging.StreamHandler(sys.stdout)):
        handler.setFormatter(formatter)
        _log.addHandler(handler)
    return _log


def start_server(host: str | None = None, port: str | int = PORT) -> socket.socket:
    """Create an IPv4 listening socket bound to ``host``:``port``."""
    family, socktype, proto, _, address = socket.getaddrinfo(
        host, port, socket.AF_INET, socket.SOCK_STREAM, 0, socket.AI_PASSIVE
    )[0]
    sock = socket.socket(family, socktype, proto)
    try:
        reuse = getattr(socket, "SO_REUSEPORT", socket.SO_REUSEADDR)
        sock.setsockopt(socket.SOL_SOCKET, reuse, 1)
        sock.bind(address)
        sock.listen(socket.SOMAXCONN)
    except OSError:
        sock.close()
        raise
    _log.debug("Listo para escuchar a mi cliente")
    return sock


def wait_for_client(server_sock: socket.socket) -> socket.socket:
    """Accept one client connection."""
    client, _ = server_sock.accept()
    _log.info("Se conecto un cliente!")
    return client


def receive_message(sock: socket.socket) -> str:
    """Read a MESSAGE payload, log it and return its text."""
    text = read_buffer(sock).split(b"\0", 1)[0].decode("utf-8", errors="replace")
    _log.info("Me llego el mensaje %s", text)
    return text


def receive_packet(sock: socket.socket) -> list[str]:
    """Read a PACKET payload and return its values."""
    return decode_values(read_buffer(sock))


def serve_client(sock: socket.socket, logger: logging.Logger) -> int:
    """Handle frames until the client disconnects; returns the exit status."""
    while True:
        try:
            opcode = read_operation(sock)
        except ConnectionClosedError:
            logger.error("el cliente se desconecto. Terminando servidor")
            return 1
        if opcode == OpCode.MESSAGE:
            receive_message(sock)
        elif opcode == OpCode.PACKET:
            values = receive_packet(sock)
            logger.info("Me llegaron los siguientes valores:\n")
            for value in values:
                logger.info("%s", value)
        else:
            logger.warning("Operacion desconocida. No quieras meter la pata")


def main(argv: list[str] | None = None) -> int:
    """Run the server for a single client; returns the process exit status."""
    parser = argparse.ArgumentParser(description="Receive messages from one client.")
    parser.add_argument("--host", default=None)
    parser.add_argument("--port", default=PORT)
    parser.add_argument("--log", default="log.log")
    args = parser.parse_args(argv)

    logger = create_logger(args.log)
    with start_server(args.host, args.port) as server_sock:
        logger.info("Servidor listo para recibir al cliente")
        client = wait_for_client(server_sock)
        with client:
            return serve_client(client, logger)


if __name__ == "__main__":
    sys.exit(main())