"""Windows for choosing a game mode and playing it."""

from __future__ import annotations

import argparse
import queue
import socket
import threading
import tkinter as tk
from enum import Enum
from tkinter import messagebox
from typing import Callable, Optional, Union

from .board import Board
from .geometry import LOGICAL_SIZE, RADIUS, RIVER_TEXT, board_lines, center, hit_square, real_point
from .machine import MachineGame
from .network import EMPTY_ADDRESS_MESSAGE, NetworkGame
from .sounds import Sound, SoundPlayer

__all__ = ["GameMode", "window_title", "BoardView", "ChooseWindow", "main"]

VERSION = "6.3"
DEFAULT_SIDE = 640
DEFAULT_PORT = 8888
TICK_MS = 1000
POLL_MS = 100

FONT_FAMILY = "FangSong"
BOARD_COLOUR = "#e8c88a"
PIECE_FILL = "#f4e4c4"
SELECTED_FILL = "#a9a9e0"
FROM_FILL = "#b8b8b8"
TO_FILL = "#d0d0d0"

SERVER_QUESTION = "是否作为[服务器]启动?\n- Yes: 服务器, 属红方\n- No: 客户端, 属黑方"
ABOUT_TEXT = f"中国象棋 {VERSION}\n\n玩家自己对战 / 玩家和AI对战 / 双人网络对战"


class GameMode(Enum):
    """The three ways to play."""

    LOCAL = "local"
    MACHINE = "machine"
    NETWORK = "network"


_MODE_NAMES = {
    GameMode.LOCAL: "玩家自己对战",
    GameMode.MACHINE: "玩家和AI对战",
    GameMode.NETWORK: "双人网络对战",
}


def window_title(mode: Union[GameMode, str], is_server: bool = False) -> str:
    """Title of the game window for a mode; ``is_server`` matters for network play."""
    mode = GameMode(mode)
    if mode is GameMode.NETWORK:
        side = "服务器 - 红方" if is_server else "客户端 - 黑方"
        return f"{_MODE_NAMES[mode]} [{side}] [{VERSION}]"
    return f"{_MODE_NAMES[mode]} {VERSION}"


def _local_ipv4() -> str:
    try:
        return socket.gethostbyname(socket.gethostname())
    except OSError:
        return "127.0.0.1"


class BoardView:
    """A canvas showing a game, with the clock, controls and move record beside it."""

    def __init__(self, master, game: Board) -> None:
        self.master = master
        self.game = game
        self.side = DEFAULT_SIDE
        self.on_menu: Optional[Callable[[], object]] = None
        self._events: queue.Queue = queue.Queue()
        self._closed = False

        self.frame = tk.Frame(master)
        self.canvas = tk.Canvas(
            self.frame,
            width=DEFAULT_SIDE,
            height=DEFAULT_SIDE,
            background=BOARD_COLOUR,
            highlightthickness=0,
        )
        self.canvas.pack(side=tk.LEFT, fill=tk.BOTH, expand=True)
        self.canvas.bind("<ButtonRelease-1>", self._on_release)
        self.canvas.bind("<Configure>", self._on_resize)

        panel = tk.Frame(self.frame, padx=8, pady=8)
        panel.pack(side=tk.RIGHT, fill=tk.Y)
        self.clock_label = tk.Label(panel, text=game.clock.display(), font=("Courier", 20))
        self.clock_label.pack(fill=tk.X, pady=4)
        self.start_button = tk.Button(panel, text=game.clock.label, command=self._on_start)
        self.start_button.pack(fill=tk.X)
        controls = (
            ("重置", self._on_clock_reset),
            ("重新开始", self._on_restart),
            ("悔棋", self._on_back),
            ("显示步数", self._toggle_step),
            ("返回菜单", self._on_menu),
            ("关于", self._on_about),
        )
        for text, command in controls:
            tk.Button(panel, text=text, command=command).pack(fill=tk.X, pady=2)

        self.status_label = None
        self.ip_var = None
        self.port_var = None
        if isinstance(game, NetworkGame):
            self._build_network_panel(panel)

        self.record_label = tk.Label(panel, text="", font=(FONT_FAMILY, 16))
        self.record_label.pack(fill=tk.X, pady=8)

        self.frame.pack(fill=tk.BOTH, expand=True)
        self.redraw()
        self.master.after(TICK_MS, self._tick)
        self.master.after(POLL_MS, self._poll)

        if isinstance(game, NetworkGame) and game.is_server:
            self._try_connect()

    # -- drawing -----------------------------------------------------------

    def redraw(self) -> None:
        """Draw the grid, the last move, the pieces and refresh the side panel."""
        canvas = self.canvas
        scale = self.side / LOGICAL_SIZE
        canvas.delete("all")

        for (x1, y1), (x2, y2) in board_lines():
            canvas.create_line(x1 * scale, y1 * scale, x2 * scale, y2 * scale, fill="black")

        font = (FONT_FAMILY, -max(1, round(RADIUS * 5 / 6 * scale)), "bold")
        for char, (x, y, width, height) in RIVER_TEXT:
            canvas.create_text((x + width / 2) * scale, (y + height / 2) * scale, text=char, font=font)

        if self.game.show_step and self.game.steps:
            last = self.game.steps[-1]
            self._draw_square(last.row_from, last.col_from, FROM_FILL, scale)
            self._draw_square(last.row_to, last.col_to, TO_FILL, scale)

        radius = RADIUS * scale
        for piece_id, piece in enumerate(self.game.pieces):
            if piece.dead:
                continue
            x, y = center(piece.row, piece.col)
            x, y = x * scale, y * scale
            fill = SELECTED_FILL if piece_id == self.game.select_id else PIECE_FILL
            canvas.create_oval(x - radius, y - radius, x + radius, y + radius, fill=fill, outline="black")
            canvas.create_text(
                x,
                y,
                text=piece.name(piece.red),
                fill="red" if piece.red else "black",
                font=font,
            )

        self._refresh_panel()

    def _draw_square(self, row: int, col: int, fill: str, scale: float) -> None:
        x, y = center(row, col)
        radius = RADIUS * scale
        self.canvas.create_rectangle(
            x * scale - radius,
            y * scale - radius,
            x * scale + radius,
            y * scale + radius,
            fill=fill,
            outline="black",
        )

    def _refresh_panel(self) -> None:
        clock = self.game.clock
        self.clock_label.config(text=clock.display())
        self.start_button.config(text=clock.label, state=tk.NORMAL if clock.enabled else tk.DISABLED)
        self.record_label.config(text=self.game.text_record)

    # -- events ------------------------------------------------------------

    def _on_release(self, event) -> None:
        if self.game.over:
            return
        x, y = real_point(event.x, event.y, self.side)
        square = hit_square(x, y)
        if square is None:
            return
        self.game.click_square(*square)
        self.redraw()

    def _on_resize(self, event) -> None:
        side = min(event.width, event.height)
        if side > 0:
            self.side = side
            self.redraw()

    def _tick(self) -> None:
        if self._closed:
            return
        self.game.clock.tick()
        self._refresh_panel()
        self.master.after(TICK_MS, self._tick)

    def _poll(self) -> None:
        if self._closed:
            return
        while True:
            try:
                kind, text = self._events.get_nowait()
            except queue.Empty:
                break
            if kind == "status":
                self._set_status(text)
            else:
                self.redraw()
        self.master.after(POLL_MS, self._poll)

    def _on_start(self) -> None:
        if self.game.clock.enabled:
            self.game.clock.start_or_pause()
            self._refresh_panel()

    def _on_clock_reset(self) -> None:
        self.game.clock.reset()
        self._refresh_panel()

    def _on_restart(self) -> None:
        self.game.reset()
        self.redraw()

    def _on_back(self) -> None:
        self.game.back_one()
        self.redraw()

    def _toggle_step(self) -> None:
        self.game.show_step = not self.game.show_step
        self.redraw()

    def _on_menu(self) -> None:
        if self.on_menu is not None:
            self.on_menu()

    def _on_about(self) -> None:
        window = tk.Toplevel(self.master)
        window.title("关于作者")
        tk.Label(window, text=ABOUT_TEXT, justify=tk.LEFT, padx=16, pady=16).pack()
        tk.Button(window, text="关闭", command=window.destroy).pack(pady=8)

    def _close(self) -> None:
        self._closed = True
        if isinstance(self.game, NetworkGame):
            self.game.close()

    # -- network play --------------------------------------------------------

    def _build_network_panel(self, panel) -> None:
        server = self.game.is_server
        box = tk.LabelFrame(panel, text="服务器-红方的IP和Port" if server else "请输入[服务器]的IP和Port")
        box.pack(fill=tk.X, pady=8)
        self.ip_var = tk.StringVar(value=_local_ipv4() if server else "127.0.0.1")
        self.port_var = tk.StringVar(value=str(DEFAULT_PORT))
        entry = tk.Entry(box, textvariable=self.ip_var)
        if server:
            entry.config(state=tk.DISABLED)
        entry.pack(fill=tk.X)
        tk.Spinbox(box, from_=1, to=65535, textvariable=self.port_var).pack(fill=tk.X)
        tk.Button(box, text="监听" if server else "连接", command=self._try_connect).pack(fill=tk.X)
        self.status_label = tk.Label(box, text="", wraplength=200, justify=tk.LEFT)
        self.status_label.pack(fill=tk.X)

    def _set_status(self, text: str) -> None:
        if self.status_label is not None:
            self.status_label.config(text=text)

    def _try_connect(self) -> None:
        game = self.game
        host = str(self.ip_var.get()).strip()
        port_text = str(self.port_var.get()).strip()
        if not host or not port_text:
            self._set_status(EMPTY_ADDRESS_MESSAGE)
            return
        try:
            port = int(port_text)
        except ValueError:
            self._set_status(EMPTY_ADDRESS_MESSAGE)
            return

        if game.is_server:
            try:
                game.listen("0.0.0.0", port)
            except OSError:
                self._set_status(game.status)
                return
            target = self._serve
        else:
            try:
                game.connect(host, port)
            except OSError:
                self._set_status(game.status)
                return
            target = self._receive_loop
        self._set_status(game.status)
        threading.Thread(target=target, daemon=True).start()

    def _serve(self) -> None:
        try:
            self.game.accept()
        except (OSError, RuntimeError):
            return
        self._events.put(("status", self.game.status))
        self._receive_loop()

    def _receive_loop(self) -> None:
        while not self._closed:
            try:
                self.game.receive()
            except (OSError, RuntimeError):
                if not self._closed:
                    self._events.put(("status", "连接已断开"))
                return
            self._events.put(("redraw", ""))


class ChooseWindow:
    """The start menu offering the three game modes."""

    def __init__(self, root) -> None:
        self.root = root
        self.window = None
        self.view: Optional[BoardView] = None
        root.title(f"选择游戏方式 {VERSION}")
        root.geometry("360x160")
        root.resizable(False, False)
        for mode in GameMode:
            tk.Button(root, text=_MODE_NAMES[mode], command=lambda m=mode: self._start(m)).pack(
                fill=tk.BOTH, expand=True, padx=10, pady=4
            )

    def _start(self, mode: GameMode) -> BoardView:
        is_server = False
        if mode is GameMode.NETWORK:
            is_server = bool(messagebox.askyesno("提示", SERVER_QUESTION, parent=self.root))
        self.root.withdraw()

        sounds = SoundPlayer(self._sound)
        if mode is GameMode.LOCAL:
            game: Board = Board(sounds, self._show_result)
        elif mode is GameMode.MACHINE:
            game = MachineGame(sounds, self._show_result)
        else:
            game = NetworkGame(is_server, sounds, self._show_result)

        window = tk.Toplevel(self.root)
        window.title(window_title(mode, is_server))
        window.protocol("WM_DELETE_WINDOW", self._back_to_menu)
        view = BoardView(window, game)
        view.on_menu = self._back_to_menu
        self.window, self.view = window, view
        return view

    def _back_to_menu(self) -> None:
        if self.view is not None:
            self.view._close()
        if self.window is not None:
            self.window.destroy()
        self.window = None
        self.view = None
        self.root.deiconify()

    def _sound(self, sound: Sound) -> None:
        if sound in (Sound.WIN, Sound.GENERAL):
            self.root.bell()

    def _show_result(self, title: str, message: str) -> None:
        parent = self.window if self.window is not None else self.root
        messagebox.showinfo(title, message, parent=parent)


def main(argv=None) -> int:
    """Open the start menu and run until it is closed."""
    parser = argparse.ArgumentParser(prog="xiangqi", description="Play Chinese chess.")
    parser.add_argument("--version", action="version", version=f"%(prog)s {VERSION}")
    parser.parse_args(argv)
    root = tk.Tk()
    ChooseWindow(root)
    root.mainloop()
    return 0