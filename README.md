# xiangqi

Chinese chess (象棋) on a 9×10 board. There are three ways to play:

- both sides at one computer,
- red against a simple computer opponent,
- against another person over TCP.

## Installation

```
pip install .
```

The window uses tkinter, which comes with most Python installations. The package has no other dependencies.

## Playing

```
xiangqi
```

`xiangqi --version` prints the version.

A menu opens with three choices:

- **玩家自己对战**: both sides are played at the same computer.
- **玩家和AI对战**: you play red and the computer plays black. The computer takes the capture that leaves the best material balance. When no capture is possible, it makes a random move to an empty square.
- **双人网络对战**: a dialog asks whether this copy is the server.
  - The server plays red. It listens on the port shown.
  - The client plays black. It connects to the IP and port you enter.

To move, click one of your pieces and then click the target square. Red moves first. The game ends when a general is captured.

The board window shows:

- the last move, as a highlighted start and end square,
- a text record of that move, such as `炮二平五`.

It also has:

- a game clock, which starts on your first click and can be paused and reset,
- a restart button,
- an undo button (悔棋),
- a button that shows or hides the last move,
- an about box,
- a button that returns to the menu.

## Using the rules from Python

The game logic does not depend on the window:

```python
from xiangqi.board import Board

board = Board()
board.click_square(7, 1)   # select one of red's cannons
board.click_square(7, 4)   # move it to the centre file
print(board.text_record)   # 炮八平五
board.back_one()           # take the move back
```

### `xiangqi.pieces`

- `PieceType`, `Piece` and `Step`.
- `initial_piece(piece_id)` and `initial_pieces()`. Ids 0–15 are black and ids 16–31 are red.

### `xiangqi.board`

- `Board` holds the movement rules, selection, move history and undo.
- `GameClock` is the game clock.
- `relation(...)` is a distance helper used by the rules.

### `xiangqi.machine`

- `MachineGame` is a `Board` on which black answers each red move by itself.
- `best_move()` returns the move black will play.
- `calc_score()` returns the material balance.

### `xiangqi.network`

- `NetworkGame` is a `Board` whose clicks are sent to the other player.
  - The server calls `listen(host, port)` and then `accept()`.
  - The client calls `connect(host, port)`.
  - `receive()` waits for the other player's click and applies it.
- `encode_click` and `decode_click` convert a click to and from its message. A message is three signed bytes: piece id, row and column.

### `xiangqi.sounds`

- `SoundPlayer` passes each `Sound` event to a callback you supply.

### `xiangqi.geometry`

- Converts between board squares and pixels on a 960×960 logical canvas: `center`, `hit_square` and `real_point`.
- `board_lines` returns the grid lines.

## Limitations

- A move may leave your own general in check. The only end condition is the capture of a general; checkmate and stalemate are not detected.
- The computer looks only one move ahead.
- No sound files are played. The window rings the terminal bell when a game is won and when a general is in check.
- Network play has no reconnection. If the connection drops, the status line reports it and play stops.

## Running the tests

```
pip install ".[test]"
pytest
```