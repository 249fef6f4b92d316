import logging
import socket
import struct
import threading
import time

from tp0net.protocol import OpCode, Packet, encode_message, read_operation
from tp0net.server import (
    create_logger,
    main,
    receive_message,
    receive_packet,
    serve_client,
    start_server,
    wait_for_client,
)


def _packet(*values):
    packet = Packet()
    for value in values:
        packet.add(value)
    return packet.serialize()


def test_receive_message():
    left, right = socket.socketpair()
    with left, right:
        left.sendall(encode_message("hola"))
        assert read_operation(right) == OpCode.MESSAGE
        assert receive_message(right) == "hola"


def test_receive_packet():
    left, right = socket.socketpair()
    with left, right:
        left.sendall(_packet("uno", "dos"))
        assert read_operation(right) == OpCode.PACKET
        assert receive_packet(right) == ["uno", "dos"]


def test_serve_client_handles_all_frames(caplog):
    caplog.set_level(logging.DEBUG, logger="Servidor")
    left, right = socket.socketpair()
    left.sendall(encode_message("hola") + _packet("a", "b") + struct.pack("<i", 7))
    left.close()
    logger = logging.getLogger("Servidor")
    assert serve_client(right, logger) == 1
    messages = [r.getMessage() for r in caplog.records]
    assert "Me llego el mensaje hola" in messages
    assert messages.index("a") < messages.index("b")
    assert "Operacion desconocida. No quieras meter la pata" in messages
    assert messages[-1] == "el cliente se desconecto. Terminando servidor"


def test_start_server_and_accept():
    with start_server("127.0.0.1", "0") as server_sock:
        port = server_sock.getsockname()[1]
        with socket.create_connection(("127.0.0.1", port)) as conn:
            client = wait_for_client(server_sock)
            with client:
                conn.sendall(encode_message("ping"))
                assert read_operation(client) == OpCode.MESSAGE
                assert receive_message(client) == "ping"


def test_create_logger_writes_file(tmp_path):
    path = tmp_path / "log.log"
    logger = create_logger(str(path))
    logger.debug("depuracion")
    for handler in logger.handlers:
        handler.flush()
    assert "depuracion" in path.read_text(encoding="utf-8")


def _free_port():
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as sock:
        sock.bind(("127.0.0.1", 0))
        return sock.getsockname()[1]


def test_main_serves_one_client(tmp_path):
    port = _free_port()
    log = tmp_path / "log.log"
    result = []
    thread = threading.Thread(
        target=lambda: result.append(
            main(["--host", "127.0.0.1", "--port", str(port), "--log", str(log)])
        ),
        daemon=True,
    )
    thread.start()
    conn = None
    for _ in range(100):
        try:
            conn = socket.create_connection(("127.0.0.1", port))
            break
        except OSError:
            time.sleep(0.05)
    assert conn is not None
    with conn:
        conn.sendall(encode_message("hola"))
    thread.join(5)
    assert result == [1]
    assert "Me llego el mensaje hola" in log.read_text(encoding="utf-8")