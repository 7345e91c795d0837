"""
berserk/games/gravity.py - Gravity/Rotation Variant

The board is a 12x12 byte tensor:
    0   empty
    1   player (exactly one)
    2   target
    3   wall
    131, 132  special blocking tiles

Actions (the shared Action enum, interpreted here):
    LEFT / RIGHT  shift the player one column (cost 1); stepping onto a
                  target collects it, collecting the last one wins
    UP            rotate the whole grid clockwise (cost 2)
    DOWN          rotate the whole grid counter-clockwise (cost 2)

After every action gravity settles the grid: player and target tiles fall
into empty cells below them until nothing moves. Walls and special tiles
never fall. Settling is part of the transition, not of the search.
"""

from typing import List, Optional, Tuple

import numpy as np

from ..core import GameInterface, Action, Outcome, fingerprint_bytes
from .chase import Pos

SIZE = 12

EMPTY = 0
PLAYER = 1
TARGET = 2
WALL = 3
SPECIAL_A = 131
SPECIAL_B = 132

VALID_TILES = (EMPTY, PLAYER, TARGET, WALL, SPECIAL_A, SPECIAL_B)
FALLING = (PLAYER, TARGET)

TILE_GLYPHS = {
    EMPTY: '.',
    PLAYER: '@',
    TARGET: 'o',
    WALL: '#',
    SPECIAL_A: 'x',
    SPECIAL_B: 'X',
}
GLYPH_TILES = {g: t for t, g in TILE_GLYPHS.items()}

ACTION_COSTS = {
    Action.LEFT: 1,
    Action.RIGHT: 1,
    Action.UP: 2,
    Action.DOWN: 2,
}

ACTION_NAMES = {
    Action.LEFT: "shift-left",
    Action.RIGHT: "shift-right",
    Action.UP: "rotate-cw",
    Action.DOWN: "rotate-ccw",
}


# ============================================================
# GRAVITY BOARD
# ============================================================

class GravityBoard:
    """
    12x12 tensor board.

    tiles is indexed [y, x] (row-major, y grows downward). The player
    position and remaining target count are derived once at construction.
    Boards stored by the solver are never written to; transitions work on
    a copy of the array.
    """
    __slots__ = ['tiles', 'player', 'targets']

    def __init__(self, tiles: np.ndarray):
        if tiles.shape != (SIZE, SIZE):
            raise ValueError(f"Expected a {SIZE}x{SIZE} grid, got {tiles.shape}")
        players = np.argwhere(tiles == PLAYER)
        if len(players) != 1:
            raise ValueError(f"Expected exactly one player tile, got {len(players)}")
        self.tiles = tiles
        y, x = players[0]
        self.player = Pos(int(x), int(y))
        self.targets = int(np.count_nonzero(tiles == TARGET))

    def __eq__(self, other):
        return isinstance(other, GravityBoard) and np.array_equal(self.tiles, other.tiles)

    def __hash__(self):
        return hash(self.tiles.tobytes())

    def at(self, pos: Pos) -> Optional[int]:
        if 0 <= pos.x < SIZE and 0 <= pos.y < SIZE:
            return int(self.tiles[pos.y, pos.x])
        return None

    def to_bytes(self) -> bytes:
        return self.tiles.tobytes()

    def display(self) -> str:
        return "\n".join(''.join(TILE_GLYPHS[int(t)] for t in row) for row in self.tiles)

    def __str__(self):
        return self.display()

    def __repr__(self):
        return f"GravityBoard(player={tuple(self.player)}, targets={self.targets})"

    @staticmethod
    def from_bytes(blob: bytes) -> 'GravityBoard':
        """
        Build a board from the raw 144-byte blob.

        Raises:
            ValueError: wrong length, unknown byte value, or not one player
        """
        if len(blob) != SIZE * SIZE:
            raise ValueError(f"Expected {SIZE * SIZE} bytes, got {len(blob)}")
        tiles = np.frombuffer(blob, dtype=np.uint8).reshape(SIZE, SIZE).copy()
        bad = np.setdiff1d(np.unique(tiles), np.array(VALID_TILES, dtype=np.uint8))
        if bad.size:
            raise ValueError(f"Unknown tile values: {bad.tolist()}")
        return GravityBoard(tiles)

    @staticmethod
    def from_text(text: str) -> 'GravityBoard':
        """Build a board from 12 rows of display glyphs ('.', '@', 'o', '#', 'x', 'X')"""
        rows = [line for line in text.splitlines() if line.strip()]
        if len(rows) != SIZE or any(len(row) != SIZE for row in rows):
            raise ValueError(f"Expected {SIZE} rows of {SIZE} glyphs")
        try:
            values = [[GLYPH_TILES[c] for c in row] for row in rows]
        except KeyError as e:
            raise ValueError(f"Unknown glyph {e.args[0]!r}") from e
        return GravityBoard(np.array(values, dtype=np.uint8))


# ============================================================
# PHYSICS
# ============================================================

def settle(tiles: np.ndarray) -> np.ndarray:
    """
    Apply gravity in place until stable.

    Falling tiles never pass each other or a fixed tile, so repeatedly
    dropping them one cell ends with every run of cells between fixed tiles
    compacted downward in order. That end state is built in one bottom-up
    scan per column.
    """
    for x in range(SIZE):
        column = tiles[:, x].tolist()
        floor = SIZE - 1  # lowest free cell in the current run
        for y in range(SIZE - 1, -1, -1):
            c = column[y]
            if c in FALLING:
                if y != floor:
                    column[floor] = c
                    column[y] = EMPTY
                floor -= 1
            elif c != EMPTY:
                floor = y - 1
        tiles[:, x] = column
    return tiles


def rotate(tiles: np.ndarray, clockwise: bool) -> np.ndarray:
    """Quarter turn of the whole grid (returns a new array)"""
    return np.ascontiguousarray(np.rot90(tiles, -1 if clockwise else 1))


# ============================================================
# GRAVITY GAME INTERFACE
# ============================================================

class GravityGame(GameInterface[GravityBoard]):
    """
    Gravity transition function.

    There is no losing outcome in this variant: every action is either
    BLOCKED (the settled grid did not change), MOVED, or VICTORY.
    """

    name = "gravity"

    def fingerprint(self, state: GravityBoard) -> int:
        return fingerprint_bytes(state.to_bytes())

    def action_cost(self, action: Action) -> int:
        return ACTION_COSTS[action]

    def describe(self, action: Action) -> str:
        return ACTION_NAMES[action]

    def render(self, state: GravityBoard) -> str:
        return state.display()

    def apply(self, state: GravityBoard, action: Action) -> Outcome[GravityBoard]:
        if action in (Action.LEFT, Action.RIGHT):
            return self._shift(state, -1 if action is Action.LEFT else 1)
        return self._rotate(state, clockwise=action is Action.UP)

    def _shift(self, state: GravityBoard, dx: int) -> Outcome[GravityBoard]:
        x, y = state.player
        dest = state.at(Pos(x + dx, y))
        if dest not in (EMPTY, TARGET):
            # The shift fails but gravity still runs
            return self._settled(state, state.tiles.copy())

        tiles = state.tiles.copy()
        tiles[y, x] = EMPTY
        tiles[y, x + dx] = PLAYER
        board = GravityBoard(settle(tiles))

        if dest == TARGET and board.targets == 0:
            return Outcome.victory(board)
        return Outcome.moved(board)

    def _rotate(self, state: GravityBoard, clockwise: bool) -> Outcome[GravityBoard]:
        return self._settled(state, rotate(state.tiles, clockwise))

    @staticmethod
    def _settled(state: GravityBoard, tiles: np.ndarray) -> Outcome[GravityBoard]:
        """Settle tiles; BLOCKED if the result is the input board"""
        board = GravityBoard(settle(tiles))
        if board == state:
            return Outcome.blocked(state)
        return Outcome.moved(board)


# ============================================================
# SAMPLE BOARDS / LOADING
# ============================================================

SAMPLE_MAP = "\n".join([
    "############",
    "#..........#",
    "#..........#",
    "#..........#",
    "#.......x..#",
    "#..........#",
    "#..........#",
    "#..........#",
    "#...##.....#",
    "#..........#",
    "#@.o...o...#",
    "############",
])


def sample_board() -> GravityBoard:
    """Built-in demo board"""
    return GravityBoard.from_text(SAMPLE_MAP)


def line_board(targets: int = 3) -> GravityBoard:
    """
    Walled board with the player on the floor and `targets` targets lined up
    directly to its right.
    """
    tiles = np.zeros((SIZE, SIZE), dtype=np.uint8)
    tiles[0, :] = WALL
    tiles[SIZE - 1, :] = WALL
    tiles[:, 0] = WALL
    tiles[:, SIZE - 1] = WALL
    tiles[SIZE - 2, 1] = PLAYER
    for i in range(targets):
        tiles[SIZE - 2, 2 + i] = TARGET
    return GravityBoard(tiles)


def load_board(path: str) -> GravityBoard:
    """Load a gravity board from a raw 144-byte file"""
    with open(path, 'rb') as f:
        return GravityBoard.from_bytes(f.read())


def save_board(board: GravityBoard, path: str):
    with open(path, 'wb') as f:
        f.write(board.to_bytes())
