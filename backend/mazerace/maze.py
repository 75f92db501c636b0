"""Maze generation for race rounds.

Grids are lists of rows (``grid[y][x]``) holding ``WALL`` or ``PATH``, the
same integers the browser client draws from.
"""

import random
from collections import deque
from typing import List, Optional, Set, Tuple

WALL = 1
PATH = 0

START = (1, 1)

# Two-cell steps so walls stay between carved cells
_DIRECTIONS = [(0, -2), (0, 2), (-2, 0), (2, 0)]

Grid = List[List[int]]


def exit_cell(width: int, height: int) -> Tuple[int, int]:
    return width - 2, height - 2


def check_dimensions(width: int, height: int) -> None:
    if width < 5 or height < 5 or width % 2 == 0 or height % 2 == 0:
        raise ValueError(f"maze dimensions must be odd and >= 5, got {width}x{height}")


def generate_maze(width: int, height: int, rng: Optional[random.Random] = None) -> Grid:
    """Carve a perfect maze with a randomized depth-first backtracker.

    Each step shuffles the four directions and advances into the first
    unvisited neighbour in that order; a cell with no unvisited neighbour is
    popped. The exit is carved afterwards so it is always open.
    """
    check_dimensions(width, height)
    rng = rng or random.Random()

    grid = [[WALL] * width for _ in range(height)]
    sx, sy = START
    grid[sy][sx] = PATH
    stack = [START]
    directions = list(_DIRECTIONS)

    while stack:
        x, y = stack[-1]
        rng.shuffle(directions)
        candidates = []
        for dx, dy in directions:
            nx, ny = x + dx, y + dy
            if 0 < nx < width - 1 and 0 < ny < height - 1 and grid[ny][nx] == WALL:
                candidates.append((nx, ny, dx // 2, dy // 2))

        if candidates:
            nx, ny, hx, hy = candidates[0]
            grid[ny][nx] = PATH
            grid[y + hy][x + hx] = PATH
            stack.append((nx, ny))
        else:
            stack.pop()

    ex, ey = exit_cell(width, height)
    grid[ey][ex] = PATH
    return grid


def is_open(grid: Grid, x: int, y: int) -> bool:
    return 0 <= y < len(grid) and 0 <= x < len(grid[y]) and grid[y][x] == PATH


def reachable_cells(grid: Grid, start: Tuple[int, int] = START) -> Set[Tuple[int, int]]:
    """Flood fill from ``start`` over orthogonally adjacent path cells."""
    if not is_open(grid, *start):
        return set()
    seen = {start}
    queue = deque([start])
    while queue:
        x, y = queue.popleft()
        for dx, dy in ((0, -1), (0, 1), (-1, 0), (1, 0)):
            nxt = (x + dx, y + dy)
            if nxt not in seen and is_open(grid, *nxt):
                seen.add(nxt)
                queue.append(nxt)
    return seen


def is_solvable(grid: Grid) -> bool:
    height = len(grid)
    width = len(grid[0]) if height else 0
    return exit_cell(width, height) in reachable_cells(grid)


def render_maze(grid: Grid, wall: str = '#', path: str = ' ') -> str:
    height = len(grid)
    width = len(grid[0]) if height else 0
    end = exit_cell(width, height)
    lines = []
    for y, row in enumerate(grid):
        chars = []
        for x, cell in enumerate(row):
            if (x, y) == START:
                chars.append('S')
            elif (x, y) == end:
                chars.append('E')
            else:
                chars.append(wall if cell == WALL else path)
        lines.append(''.join(chars))
    return '\n'.join(lines)
