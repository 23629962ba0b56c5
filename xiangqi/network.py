"""A two-player game over TCP: the server plays red, the client black.

Each click is sent as three signed bytes: piece id, row and column.
"""

from __future__ import annotations

import socket
import struct
from typing import Callable, Optional

from .board import NO_PIECE, Board
from .sounds import SoundPlayer

__all__ = ["encode_click", "decode_click", "NetworkGame"]

_CLICK = struct.Struct("bbb")
EMPTY_ADDRESS_MESSAGE = "IP或Port为空，请设置后重试"


def encode_click(piece_id: int, row: int, col: int) -> bytes:
    """The three-byte message for a click."""
    try:
        return _CLICK.pack(piece_id, row, col)
    except struct.error as exc:
        raise ValueError(f"click does not fit the protocol: {exc}") from exc


def decode_click(data: bytes) -> tuple[int, int, int]:
    """Piece id, row and column from the first three bytes of ``data``."""
    if len(data) < _CLICK.size:
        raise ValueError(f"click message needs {_CLICK.size} bytes, got {len(data)}")
    return _CLICK.unpack_from(data)


def _check_address(host: str, port: Optional[int]) -> None:
    if not host or port is None or port == "":
        raise ValueError(EMPTY_ADDRESS_MESSAGE)


class NetworkGame(Board):
    """A board whose clicks are mirrored to a peer over a TCP connection."""

    def __init__(
        self,
        is_server: bool,
        sounds: Optional[SoundPlayer] = None,
        on_game_over: Optional[Callable[[str, str], object]] = None,
    ) -> None:
        super().__init__(sounds, on_game_over)
        self.is_server = is_server
        self.status = ""
        self._server: Optional[socket.socket] = None
        self._conn: Optional[socket.socket] = None

    @property
    def connected(self) -> bool:
        return self._conn is not None

    def listen(self, host: str, port: int) -> int:
        """Listen for the client, restarting if already listening; return the port."""
        if not self.is_server:
            raise RuntimeError("only the server side listens")
        _check_address(host, port)
        if self._server is not None:
            self._server.close()
            self._server = None
        server = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
        server.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
        try:
            server.bind((host, int(port)))
            server.listen()
        except OSError as exc:
            server.close()
            self.status = f"Server failed to start: {exc}"
            raise
        self._server = server
        bound_host, bound_port = server.getsockname()[:2]
        self.status = f'Server is listening on "{bound_host}" port "{bound_port}"'
        return bound_port

    def accept(self) -> socket.socket:
        """Accept the client; a connection already made is kept."""
        if self._conn is not None:
            return self._conn
        if self._server is None:
            raise RuntimeError("server is not listening")
        self._conn, _ = self._server.accept()
        self.status = "Client Connection Successful"
        return self._conn

    def connect(self, host: str, port: int) -> None:
        """Connect the client to the server."""
        if self.is_server:
            raise RuntimeError("only the client side connects")
        _check_address(host, port)
        try:
            self._conn = socket.create_connection((host, int(port)))
        except OSError as exc:
            self.status = f"Server connection failed: {exc}"
            raise
        self.status = f"Server Connection Successful： {host}:{port}"

    def receive(self) -> tuple[int, int, int]:
        """Wait for the peer's click, apply it, and return it."""
        if self._conn is None:
            raise RuntimeError("not connected")
        buffer = bytearray()
        while len(buffer) < _CLICK.size:
            chunk = self._conn.recv(_CLICK.size - len(buffer))
            if not chunk:
                raise ConnectionError("peer closed the connection")
            buffer += chunk
        piece_id, row, col = decode_click(bytes(buffer))
        Board.click_pieces(self, piece_id, row, col)
        return piece_id, row, col

    def click_pieces(self, piece_id: int, row: int, col: int) -> None:
        """Apply a local click and send it to the peer.

        A side may not pick up the other side's pieces.
        """
        if self.select_id == NO_PIECE and piece_id != NO_PIECE:
            if self.is_server != self.pieces[piece_id].red:
                return
        self.check_winner()
        super().click_pieces(piece_id, row, col)
        if self._conn is not None:
            self._conn.sendall(encode_click(piece_id, row, col))

    def close(self) -> None:
        """Close the connection and stop listening."""
        for sock in (self._conn, self._server):
            if sock is not None:
                sock.close()
        self._conn = None
        self._server = None

    def __enter__(self) -> "NetworkGame":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()