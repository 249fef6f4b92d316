"""Client: logs console input and sends a message and a packet to the server."""

from __future__ import annotations

import argparse
import logging
import socket
import sys
from collections.abc import Iterable, Iterator

from tp0net.config import load_config
from tp0net.protocol import Packet, encode_message

_FORMAT = "[%(levelname)s] %(asctime)s %(name)s/(%(process)d:%(thread)d): %(message)s"


def create_logger(path: str = "tp0.log") -> logging.Logger:
    """Return a logger writing INFO and above to ``path`` and to stdout."""
    logger = logging.getLogger("EjemploLogueo")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.setLevel(logging.INFO)
    formatter = logging.Formatter(_FORMAT)
    for handler in (logging.FileHandler(path, encoding="utf-8"), logging.StreamHandler(sys.stdout)):
        handler.setFormatter(formatter)
        logger.addHandler(handler)
    return logger


def read_console(logger: logging.Logger, lines: Iterable[str]) -> list[str]:
    """Log lines until an empty one or one starting with ``exit``.

    The first line is always logged. Returns the lines that were logged.
    """
    source = iter(lines)
    logged = []
    first = next(source, None)
    if first is None:
        return logged
    logger.info(" %s", first)
    logged.append(first)
    for line in source:
        if not line:
            break
        logger.info("%s", line)
        logged.append(line)
        if line.startswith("exit"):
            break
    return logged


def collect_packet(lines: Iterable[str]) -> Packet:
    """Build a packet from lines up to the first empty one."""
    packet = Packet()
    for line in lines:
        if not line:
            break
        packet.add(line)
    return packet


def create_connection(ip: str, port: str | int) -> socket.socket:
    """Open a TCP connection over IPv4 to ``ip``:``port``."""
    family, socktype, proto, _, address = socket.getaddrinfo(
        ip, port, socket.AF_INET, socket.SOCK_STREAM, 0, socket.AI_PASSIVE
    )[0]
    sock = socket.socket(family, socktype, proto)
    try:
        sock.connect(address)
    except OSError:
        sock.close()
        raise
    return sock


def send_message(sock: socket.socket, message: str) -> None:
    """Send ``message`` as a MESSAGE frame."""
    sock.sendall(encode_message(message))


def send_packet(sock: socket.socket, packet: Packet) -> None:
    """Send a serialized packet."""
    sock.sendall(packet.serialize())


def _prompt_lines() -> Iterator[str]:
    while True:
        try:
            yield input("> ")
        except EOFError:
            return


def _close_logger(logger: logging.Logger) -> None:
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()


def main(argv: list[str] | None = None) -> int:
    """Run the client; returns the process exit status."""
    parser = argparse.ArgumentParser(description="Send console input to the server.")
    parser.add_argument("--config", default="../cliente.config")
    parser.add_argument("--log", default="tp0.log")
    args = parser.parse_args(argv)

    logger = create_logger(args.log)
    logger.info("Hola! Soy un log")
    try:
        config = load_config(args.config)
    except OSError:
        print("Error al crear el config desde el archivo cliente.config.")
        _close_logger(logger)
        return 1

    ip = config.get_string("IP")
    port = config.get_string("PUERTO")
    value = config.get_string("CLAVE")
    logger.info(
        "Se obtiene desde el archivo config el valor de la clave: %s, "
        "el valor de la IP: %s y el valor del puerto: %s",
        value, ip, port,
    )

    lines = _prompt_lines()
    read_console(logger, lines)
    try:
        with create_connection(ip, port) as conn:
            send_message(conn, value)
            send_packet(conn, collect_packet(lines))
    finally:
        _close_logger(logger)
    return 0


if __name__ == "__main__":
    sys.exit(main())