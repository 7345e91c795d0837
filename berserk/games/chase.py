"""
berserk/games/chase.py - Chase Variant ("steal the $ from the berserker king")

The board:
- '#' wall, '@' player (exactly one), 'K' adversary (one or more),
  '$' exit (exactly one), ' ' floor
- The legacy '=' adversary glyph is accepted when loading

One turn:
1. The player steps one tile (walls and the grid edge block the step)
2. Stepping onto an adversary kills the player, onto the exit wins
3. Every adversary then takes two chase steps toward the player

Each adversary step compares dx=|px-kx| and dy=|py-ky|. With dx < dy it tries
the horizontal step first, otherwise the vertical one, and falls back to the
other axis if the first one fails. A zero offset, a wall, another adversary
or the grid edge make a step fail. After any step round in which something
moved, an adversary standing on the player kills it.
"""

from typing import List, Tuple, Optional, NamedTuple

from ..core import GameInterface, Action, Outcome, fingerprint_bytes

WALL = '#'
PLAYER = '@'
HUNTER = 'K'
EXIT = '$'
FLOOR = ' '

GLYPHS = {WALL, PLAYER, HUNTER, EXIT, FLOOR}
GLYPH_ALIASES = {'=': HUNTER}

OFFSETS = {
    Action.LEFT: (-1, 0),
    Action.RIGHT: (1, 0),
    Action.UP: (0, -1),
    Action.DOWN: (0, 1),
}


class Pos(NamedTuple):
    x: int
    y: int

    def offset(self, dx: int, dy: int) -> 'Pos':
        return Pos(self.x + dx, self.y + dy)


# ============================================================
# CHASE BOARD
# ============================================================

class ChaseBoard:
    """
    Immutable chase board.

    tiles is a row-major tuple of glyphs. player/hunters/exit are position
    caches derived from the tiles (the exit is remembered separately because
    an adversary standing on it hides the '$').
    """
    __slots__ = ['tiles', 'width', 'height', 'player', 'hunters', 'exit']

    def __init__(self, tiles: Tuple[str, ...], width: int,
                 player: Pos, hunters: Tuple[Pos, ...], exit_pos: Pos):
        self.tiles = tiles
        self.width = width
        self.height = len(tiles) // width
        self.player = player
        self.hunters = hunters
        self.exit = exit_pos

    def __eq__(self, other):
        return (isinstance(other, ChaseBoard)
                and self.width == other.width and self.tiles == other.tiles)

    def __hash__(self):
        return hash(self.tiles)

    def at(self, pos: Pos) -> Optional[str]:
        """Glyph at pos, None outside the grid"""
        if 0 <= pos.x < self.width and 0 <= pos.y < self.height:
            return self.tiles[pos.y * self.width + pos.x]
        return None

    def rows(self) -> List[str]:
        return [''.join(self.tiles[y * self.width:(y + 1) * self.width])
                for y in range(self.height)]

    def display(self) -> str:
        return "\n".join(self.rows())

    def __str__(self):
        return self.display()

    def __repr__(self):
        return f"ChaseBoard({self.width}x{self.height}, player={tuple(self.player)})"

    def to_bytes(self) -> bytes:
        return ''.join(self.tiles).encode('ascii')

    @staticmethod
    def from_text(text: str) -> 'ChaseBoard':
        """
        Parse a chase map.

        Raises:
            ValueError: ragged rows, unknown glyphs, or wrong glyph counts
        """
        lines = text.splitlines()
        while lines and not lines[-1].strip():
            lines.pop()
        if not lines:
            raise ValueError("Empty map")

        width = len(lines[0])
        for i, line in enumerate(lines):
            if len(line) != width:
                raise ValueError(
                    f"Inconsistent row length at row {i}: expected {width}, got {len(line)}")

        tiles = []
        for line in lines:
            for c in line:
                c = GLYPH_ALIASES.get(c, c)
                if c not in GLYPHS:
                    raise ValueError(f"Unknown glyph {c!r}")
                tiles.append(c)

        positions = {glyph: [Pos(i % width, i // width)
                             for i, c in enumerate(tiles) if c == glyph]
                     for glyph in (PLAYER, HUNTER, EXIT)}

        if len(positions[PLAYER]) != 1:
            raise ValueError(f"Expected exactly one '@', got {len(positions[PLAYER])}")
        if len(positions[EXIT]) != 1:
            raise ValueError(f"Expected exactly one '$', got {len(positions[EXIT])}")
        if not positions[HUNTER]:
            raise ValueError("Expected at least one 'K'")

        return ChaseBoard(tuple(tiles), width, positions[PLAYER][0],
                          tuple(positions[HUNTER]), positions[EXIT][0])


# ============================================================
# PHYSICS (operate on a mutable tile list)
# ============================================================

def _at(tiles: List[str], width: int, height: int, pos: Pos) -> Optional[str]:
    if 0 <= pos.x < width and 0 <= pos.y < height:
        return tiles[pos.y * width + pos.x]
    return None


def _set(tiles: List[str], width: int, pos: Pos, c: str):
    tiles[pos.y * width + pos.x] = c


def _sign(v: int) -> int:
    return (v > 0) - (v < 0)


def move_player(tiles: List[str], width: int, height: int,
                player: Pos, offset: Tuple[int, int]) -> Optional[Pos]:
    """Step the player; return the destination or None if blocked"""
    dest = player.offset(*offset)
    at_dest = _at(tiles, width, height, dest)
    if at_dest is None or at_dest == WALL:
        return None
    _set(tiles, width, player, FLOOR)
    _set(tiles, width, dest, PLAYER)
    return dest


def move_hunter(tiles: List[str], width: int, height: int, exit_pos: Pos,
                hunter: Pos, offset: Tuple[int, int]) -> Optional[Pos]:
    """Step one adversary; return the destination or None if the step fails"""
    if offset == (0, 0):
        return None
    dest = hunter.offset(*offset)
    at_dest = _at(tiles, width, height, dest)
    if at_dest is None or at_dest in (WALL, HUNTER):
        return None
    _set(tiles, width, hunter, EXIT if hunter == exit_pos else FLOOR)
    _set(tiles, width, dest, HUNTER)
    return dest


def move_hunters(tiles: List[str], width: int, height: int, exit_pos: Pos,
                 player: Pos, hunters: Tuple[Pos, ...]) -> Tuple[bool, Tuple[Pos, ...]]:
    """One chase step for every adversary, in board order"""
    moved = False
    new_hunters = []
    for hunter in hunters:
        horizontal = (_sign(player.x - hunter.x), 0)
        vertical = (0, _sign(player.y - hunter.y))
        if abs(player.x - hunter.x) < abs(player.y - hunter.y):
            order = (horizontal, vertical)
        else:
            order = (vertical, horizontal)

        dest = None
        for offset in order:
            dest = move_hunter(tiles, width, height, exit_pos, hunter, offset)
            if dest is not None:
                break

        if dest is None:
            new_hunters.append(hunter)
        else:
            moved = True
            new_hunters.append(dest)
    return moved, tuple(new_hunters)


# ============================================================
# CHASE GAME INTERFACE
# ============================================================

class ChaseGame(GameInterface[ChaseBoard]):
    """
    Chase transition function.

    Every action costs 1. Adversaries take hunter_steps chase steps per
    player move (2 by default).
    """

    name = "chase"

    def __init__(self, hunter_steps: int = 2):
        self.hunter_steps = hunter_steps

    def fingerprint(self, state: ChaseBoard) -> int:
        return fingerprint_bytes(state.to_bytes())

    def describe(self, action: Action) -> str:
        return f"move-{action.value}"

    def render(self, state: ChaseBoard) -> str:
        return state.display()

    def apply(self, state: ChaseBoard, action: Action) -> Outcome[ChaseBoard]:
        width, height = state.width, state.height
        tiles = list(state.tiles)

        player = move_player(tiles, width, height, state.player, OFFSETS[action])
        if player is None:
            return Outcome.blocked(state)

        hunters = state.hunters
        if player in hunters:
            return Outcome.dead(self._board(tiles, state, player, hunters))
        if player == state.exit:
            return Outcome.victory(self._board(tiles, state, player, hunters))

        for _ in range(self.hunter_steps):
            moved, hunters = move_hunters(tiles, width, height, state.exit, player, hunters)
            if moved and player in hunters:
                return Outcome.dead(self._board(tiles, state, player, hunters))

        return Outcome.moved(self._board(tiles, state, player, hunters))

    @staticmethod
    def _board(tiles: List[str], state: ChaseBoard, player: Pos,
               hunters: Tuple[Pos, ...]) -> ChaseBoard:
        return ChaseBoard(tuple(tiles), state.width, player, hunters, state.exit)


# ============================================================
# SAMPLE MAP / LOADING
# ============================================================

SAMPLE_MAP = "\n".join([
    "############",
    "#  @      K#",
    "#   ##     #",
    "#   #      #",
    "#   ##     #",
    "#          #",
    "#       $  #",
    "############",
])


def sample_board() -> ChaseBoard:
    """Built-in default map (single adversary)"""
    return ChaseBoard.from_text(SAMPLE_MAP)


def load_board(path: str) -> ChaseBoard:
    """Load a chase map from a text file"""
    with open(path, 'r') as f:
        return ChaseBoard.from_text(f.read())
