import socket

import pytest

from xiangqi.board import NO_PIECE
from xiangqi.network import NetworkGame, decode_click, encode_click


def test_encode_click_bytes():
    assert encode_click(26, 7, 1) == bytes([26, 7, 1])
    assert encode_click(-1, 4, 5) == b"\xff\x04\x05"


def test_decode_round_trip():
    for click in [(0, 0, 0), (31, 9, 8), (-1, 5, 3)]:
        assert decode_click(encode_click(*click)) == click


def test_decode_uses_first_three_bytes():
    assert decode_click(encode_click(3, 2, 1) + b"\x09") == (3, 2, 1)


def test_decode_too_short():
    with pytest.raises(ValueError):
        decode_click(b"\x01\x02")


def test_encode_out_of_range():
    with pytest.raises(ValueError):
        encode_click(300, 0, 0)


def test_server_cannot_pick_black_piece():
    game = NetworkGame(True)
    game.click_pieces(0, 0, 0)
    assert game.select_id == NO_PIECE


def test_client_cannot_pick_red_piece():
    game = NetworkGame(False)
    game.click_pieces(26, 7, 1)
    assert game.select_id == NO_PIECE


def test_server_selects_own_piece_offline():
    game = NetworkGame(True)
    game.click_pieces(26, 7, 1)
    assert game.select_id == 26
    assert game.connected is False


def test_role_checks():
    with pytest.raises(RuntimeError):
        NetworkGame(False).listen("127.0.0.1", 0)
    with pytest.raises(RuntimeError):
        NetworkGame(True).connect("127.0.0.1", 1)
    with pytest.raises(RuntimeError):
        NetworkGame(True).accept()
    with pytest.raises(RuntimeError):
        NetworkGame(True).receive()


def test_empty_address_rejected():
    with pytest.raises(ValueError, match="IP或Port为空"):
        NetworkGame(True).listen("", 0)
    with pytest.raises(ValueError):
        NetworkGame(False).connect("127.0.0.1", None)


def test_connect_failure_sets_status():
    probe = socket.socket()
    probe.bind(("127.0.0.1", 0))
    port = probe.getsockname()[1]
    probe.close()
    client = NetworkGame(False)
    with pytest.raises(OSError):
        client.connect("127.0.0.1", port)
    assert client.status.startswith("Server connection failed")


def test_clicks_are_mirrored_to_peer():
    with NetworkGame(True) as server, NetworkGame(False) as client:
        port = server.listen("127.0.0.1", 0)
        assert f'port "{port}"' in server.status
        client.connect("127.0.0.1", port)
        conn = server.accept()
        assert server.accept() is conn
        assert server.status == "Client Connection Successful"

        server.click_pieces(26, 7, 1)
        assert client.receive() == (26, 7, 1)
        assert client.select_id == 26

        server.click_pieces(NO_PIECE, 7, 4)
        assert client.receive() == (NO_PIECE, 7, 4)
        for game in (server, client):
            assert (game.pieces[26].row, game.pieces[26].col) == (7, 4)
            assert game.red_turn is False


def test_receive_after_peer_closes():
    with NetworkGame(True) as server, NetworkGame(False) as client:
        port = server.listen("127.0.0.1", 0)
        client.connect("127.0.0.1", port)
        server.accept()
        client.close()
        with pytest.raises(ConnectionError):
            server.receive()