from types import SimpleNamespace
from unittest import mock

import pytest

from xiangqi.board import Board
from xiangqi.geometry import LOGICAL_SIZE, RIVER_TEXT, board_lines, center
from xiangqi.gui import BoardView, ChooseWindow, GameMode, main, window_title
from xiangqi.machine import MachineGame
from xiangqi.network import NetworkGame


@pytest.fixture
def fake_tk():
    with mock.patch("xiangqi.gui.tk") as fake:
        yield fake


def make_view(game):
    view = BoardView(mock.MagicMock(), game)
    view.side = int(LOGICAL_SIZE)
    return view


def click(view, row, col, scale=1.0):
    x, y = center(row, col)
    view._on_release(SimpleNamespace(x=x * scale, y=y * scale))


def test_window_titles():
    assert window_title(GameMode.LOCAL) == "玩家自己对战 6.3"
    assert window_title("machine") == "玩家和AI对战 6.3"
    assert window_title(GameMode.NETWORK, True) == "双人网络对战 [服务器 - 红方] [6.3]"
    assert window_title(GameMode.NETWORK, False) == "双人网络对战 [客户端 - 黑方] [6.3]"


def test_window_title_unknown_mode():
    with pytest.raises(ValueError):
        window_title("solitaire")


def test_redraw_draws_every_grid_line(fake_tk):
    view = make_view(Board())
    view.canvas.reset_mock()
    view.redraw()
    assert view.canvas.create_line.call_count == len(board_lines())


def test_redraw_draws_one_circle_per_live_piece(fake_tk):
    game = Board()
    view = make_view(game)
    view.canvas.reset_mock()
    view.redraw()
    assert view.canvas.create_oval.call_count == len(game.pieces)

    game.kill_stone(0)
    view.canvas.reset_mock()
    view.redraw()
    live = sum(1 for piece in game.pieces if not piece.dead)
    assert view.canvas.create_oval.call_count == live
    assert live == len(game.pieces) - 1


def test_redraw_writes_piece_names_and_river(fake_tk):
    game = Board()
    view = make_view(game)
    view.canvas.reset_mock()
    view.redraw()
    texts = {call.kwargs["text"] for call in view.canvas.create_text.call_args_list}
    assert {piece.name(piece.red) for piece in game.pieces} <= texts
    assert {char for char, _ in RIVER_TEXT} <= texts


def test_click_selects_then_moves(fake_tk):
    game = Board()
    view = make_view(game)
    cannon = game.stone_at(7, 1)
    click(view, 7, 1)
    assert game.select_id == cannon
    click(view, 7, 4)
    assert (game.pieces[cannon].row, game.pieces[cannon].col) == (7, 4)
    assert len(game.steps) == 1
    assert game.red_turn is False
    assert game.text_record == "炮八平五"
    last_text = fake_tk.Label.return_value.config.call_args.kwargs["text"]
    assert last_text == game.text_record


def test_click_outside_pieces_is_ignored(fake_tk):
    game = Board()
    view = make_view(game)
    view._on_release(SimpleNamespace(x=0, y=0))
    assert game.select_id == -1
    assert game.steps == []


def test_click_after_game_over_is_ignored(fake_tk):
    game = Board()
    view = make_view(game)
    game.over = True
    click(view, 7, 1)
    assert game.select_id == -1


def test_resize_rescales_clicks(fake_tk):
    game = Board()
    view = make_view(game)
    view._on_resize(SimpleNamespace(width=480, height=600))
    assert view.side == 480
    cannon = game.stone_at(7, 1)
    click(view, 7, 1, scale=480 / LOGICAL_SIZE)
    assert game.select_id == cannon


def test_last_step_marks_and_toggle(fake_tk):
    game = Board()
    view = make_view(game)
    click(view, 7, 1)
    click(view, 7, 4)
    view.canvas.reset_mock()
    view.redraw()
    assert view.canvas.create_rectangle.call_count == 2

    view.canvas.reset_mock()
    view._toggle_step()
    assert game.show_step is False
    assert view.canvas.create_rectangle.call_count == 0


def test_back_undoes_move(fake_tk):
    game = Board()
    view = make_view(game)
    cannon = game.stone_at(7, 1)
    click(view, 7, 1)
    click(view, 7, 4)
    view._on_back()
    assert game.steps == []
    assert (game.pieces[cannon].row, game.pieces[cannon].col) == (7, 1)
    assert game.red_turn is True


def test_tick_advances_running_clock(fake_tk):
    game = Board()
    view = make_view(game)
    game.clock.start_or_pause()
    view._tick()
    assert game.clock.seconds == 1
    view.master.after.assert_called_with(1000, view._tick)
    shown = [call.kwargs.get("text") for call in fake_tk.Label.return_value.config.call_args_list]
    assert game.clock.display() in shown


def test_start_button_respects_disabled_clock(fake_tk):
    game = Board()
    view = make_view(game)
    view._on_start()
    assert game.clock.running is True
    view._on_start()
    assert game.clock.running is False
    game.clock.enabled = False
    view._on_start()
    assert game.clock.running is False


def test_restart_resets_game(fake_tk):
    game = Board()
    view = make_view(game)
    click(view, 7, 1)
    click(view, 7, 4)
    view._on_restart()
    assert game.steps == []
    assert game.red_turn is True
    assert game.select_id == -1


def test_menu_button_calls_callback(fake_tk):
    view = make_view(Board())
    calls = []
    view.on_menu = lambda: calls.append("menu")
    view._on_menu()
    assert calls == ["menu"]


def test_choose_window_title(fake_tk):
    root = mock.MagicMock()
    ChooseWindow(root)
    root.title.assert_called_with("选择游戏方式 6.3")
    assert fake_tk.Button.call_count == len(GameMode)


def test_choose_machine_mode(fake_tk):
    root = mock.MagicMock()
    chooser = ChooseWindow(root)
    view = chooser._start(GameMode.MACHINE)
    assert type(view.game) is MachineGame
    root.withdraw.assert_called_once()
    fake_tk.Toplevel.return_value.title.assert_called_with(window_title(GameMode.MACHINE))
    assert chooser.view is view


def test_choose_local_mode_and_back_to_menu(fake_tk):
    root = mock.MagicMock()
    chooser = ChooseWindow(root)
    view = chooser._start(GameMode.LOCAL)
    assert type(view.game) is Board
    view._on_menu()
    root.deiconify.assert_called_once()
    assert chooser.view is None
    assert chooser.window is None


def test_choose_network_client(fake_tk):
    root = mock.MagicMock()
    chooser = ChooseWindow(root)
    with mock.patch("xiangqi.gui.messagebox.askyesno", return_value=False):
        view = chooser._start(GameMode.NETWORK)
    assert isinstance(view.game, NetworkGame)
    assert view.game.is_server is False
    assert view.game.connected is False
    fake_tk.Toplevel.return_value.title.assert_called_with(window_title(GameMode.NETWORK, False))
    chooser._back_to_menu()


def test_game_over_shows_message(fake_tk):
    root = mock.MagicMock()
    chooser = ChooseWindow(root)
    view = chooser._start(GameMode.LOCAL)
    with mock.patch("xiangqi.gui.messagebox.showinfo") as showinfo:
        view.game.kill_stone(4)
        assert view.game.check_winner() == "red"
    showinfo.assert_called_once()
    assert showinfo.call_args.args == ("提示", "本局结束，红方胜利.")


def test_main_runs_menu(fake_tk):
    assert main([]) == 0
    fake_tk.Tk.return_value.mainloop.assert_called_once()


def test_main_version_exits(fake_tk):
    with pytest.raises(SystemExit):
        main(["--version"])
    assert fake_tk.Tk.call_count == 0