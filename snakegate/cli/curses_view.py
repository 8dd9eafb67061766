"""
Curses drawing for the game board, the side panels and the menu screens.

Everything here only reads GameState snapshots and store contents; the
session itself is driven from cli/play.py.
"""

import curses
from typing import List, Optional

from ..domain.constants import (
    GATE_COOLDOWN_TICKS,
    ITEM_LIFESPAN,
    MAX_GROWTH_ITEMS,
    MAX_POISON_ITEMS,
    MIN_SNAKE_LENGTH,
    CellKind,
)
from ..domain.game_state import GameState
from ..services.ranking import DISPLAY_ENTRIES, RankingEntry

CELL_WIDTH = 3
PANEL_GAP = 5
PANEL_WIDTH = 40
NAME_MAX_LENGTH = 30

# Color pair ids
SNAKE_BODY = 1
DANGER = 2
HEAD_OR_GROWTH = 3
GATE = 4
WALL = 5
IMMUNE = 6
HIGHLIGHT = 7

CELL_GLYPHS = {
    CellKind.EMPTY: ("   ", 0),
    CellKind.WALL: ("███", WALL),
    CellKind.IMMUNE_WALL: ("▣▣▣", IMMUNE),
    CellKind.SNAKE_BODY: (" o ", SNAKE_BODY),
    CellKind.GROWTH: (" + ", HEAD_OR_GROWTH),
    CellKind.POISON: (" x ", DANGER),
    CellKind.GATE: ("[ ]", GATE),
}
HEAD_GLYPH = (" O ", HEAD_OR_GROWTH)

MENU_ITEMS = ["Game Start", "Game Rules", "Ranking", "Exit"]
MENU_START, MENU_RULES, MENU_RANKING, MENU_EXIT = range(4)


def init_colors() -> None:
    if not curses.has_colors():
        return
    curses.start_color()
    curses.init_pair(SNAKE_BODY, curses.COLOR_GREEN, curses.COLOR_BLACK)
    curses.init_pair(DANGER, curses.COLOR_RED, curses.COLOR_BLACK)
    curses.init_pair(HEAD_OR_GROWTH, curses.COLOR_YELLOW, curses.COLOR_BLACK)
    curses.init_pair(GATE, curses.COLOR_BLUE, curses.COLOR_BLACK)
    curses.init_pair(WALL, curses.COLOR_WHITE, curses.COLOR_BLACK)
    curses.init_pair(IMMUNE, curses.COLOR_CYAN, curses.COLOR_BLACK)
    curses.init_pair(HIGHLIGHT, curses.COLOR_BLACK, curses.COLOR_WHITE)


def required_size(height: int, width: int):
    """(rows, cols) the terminal needs for a board of height x width."""
    return height + 5, width * CELL_WIDTH + PANEL_WIDTH


def safe_addstr(win, y: int, x: int, text: str, attr: int = 0) -> None:
    """addstr that ignores writes falling off the edge of the window."""
    try:
        win.addstr(y, x, text, attr)
    except curses.error:
        pass


def centered(win, y: int, text: str, attr: int = 0) -> None:
    _, max_x = win.getmaxyx()
    safe_addstr(win, y, max(0, (max_x - len(text)) // 2), text, attr)


def draw_board(win, state: GameState) -> None:
    for row, line in enumerate(state.cells):
        for col, kind in enumerate(line):
            glyph, pair = CELL_GLYPHS.get(kind, (" ? ", 0))
            if kind == CellKind.SNAKE_BODY and (row, col) == state.head:
                glyph, pair = HEAD_GLYPH
            safe_addstr(win, row, col * CELL_WIDTH, glyph, curses.color_pair(pair))


def draw_scoreboard(win, state: GameState, high_score: int) -> int:
    """Draws the score panel; returns the next free row."""
    x = state.width * CELL_WIDTH + PANEL_GAP
    y = 1
    safe_addstr(win, y, x, "=== SCORE BOARD ===", curses.A_BOLD)
    y += 1
    safe_addstr(win, y, x, f"Growth : {state.scores['growth']}")
    y += 1
    safe_addstr(win, y, x, f"Poison : {state.scores['poison']}")
    y += 1
    safe_addstr(win, y, x, f"Gate   : {state.scores['gate']}")
    y += 1
    safe_addstr(win, y, x, "-" * 19)
    y += 1
    safe_addstr(win, y, x, f"Total  : {state.total_score}", curses.A_BOLD)
    y += 1
    safe_addstr(win, y, x, f"Best   : {high_score}")
    y += 1
    safe_addstr(win, y, x, "-" * 19)
    y += 1
    if state.item_frames_left > 0:
        safe_addstr(win, y, x, f"Items expire in {state.item_frames_left}")
    else:
        safe_addstr(win, y, x, "No items active")
    y += 1
    if state.gate_ticks_left is not None:
        safe_addstr(win, y, x, f"Gates move in {state.gate_ticks_left}")
    else:
        safe_addstr(win, y, x, "No gates active")
    y += 1
    if state.gate_cooldown > 0:
        safe_addstr(win, y, x, f"Gate cooldown {state.gate_cooldown}", curses.color_pair(DANGER))
    return y + 2


def draw_mission_board(win, state: GameState, start_y: int) -> None:
    x = state.width * CELL_WIDTH + PANEL_GAP
    y = start_y
    safe_addstr(win, y, x, f"=== MISSION (stage {state.stage_index + 1}/{state.stage_count}) ===",
                curses.A_BOLD)
    y += 1
    labels = {
        'length': "Length",
        'growth': "Growth",
        'poison': "Poison",
        'gate': "Gates ",
    }
    for key, label in labels.items():
        current, required, done = state.missions[key]
        mark = "[v]" if done else "[ ]"
        safe_addstr(win, y, x, f"{label}: {current}/{required} {mark}")
        y += 1
    safe_addstr(win, y, x, f"Max length: {state.max_length}")
    y += 1
    safe_addstr(win, y, x, f"Turns left: {state.turns_remaining}")
    y += 2
    if all(done for _, _, done in state.missions.values()):
        safe_addstr(win, y, x, "MISSION CLEAR!", curses.color_pair(HEAD_OR_GROWTH) | curses.A_BOLD)
    else:
        safe_addstr(win, y, x, "Mission in progress...")


def draw_game(win, state: GameState, high_score: int) -> None:
    win.erase()
    draw_board(win, state)
    next_y = draw_scoreboard(win, state, high_score)
    draw_mission_board(win, state, next_y)
    if state.paused:
        centered(win, state.height + 1, "PAUSED - Press 'P' to resume",
                 curses.color_pair(HIGHLIGHT) | curses.A_BOLD)

    need_rows, need_cols = required_size(state.height, state.width)
    max_y, max_x = win.getmaxyx()
    if max_y < need_rows or max_x < need_cols:
        safe_addstr(win, state.height + 2, 0,
                    f"Terminal too small, recommended {need_cols}x{need_rows}",
                    curses.color_pair(DANGER))
    win.refresh()


def wait_for_space(win) -> None:
    win.timeout(-1)
    while win.getch() != ord(' '):
        pass


def wait_for_size(win, height: int, width: int) -> bool:
    """Block until the terminal is large enough; False if the user pressed q."""
    need_rows, need_cols = required_size(height, width)
    win.timeout(100)
    try:
        while True:
            max_y, max_x = win.getmaxyx()
            if max_y >= need_rows and max_x >= need_cols:
                return True
            win.erase()
            centered(win, max_y // 2 - 1, "Terminal is too small.", curses.color_pair(DANGER))
            centered(win, max_y // 2,
                     f"Please enlarge the window! Recommended: width {need_cols}, height {need_rows}")
            win.refresh()
            if win.getch() in (ord('q'), ord('Q')):
                return False
    finally:
        win.timeout(-1)


def show_menu(win) -> int:
    """Main menu; returns one of the MENU_* indices."""
    selected = MENU_START
    win.timeout(-1)
    while True:
        max_y, _ = win.getmaxyx()
        win.erase()
        centered(win, max_y // 2 - 6, "S N A K E   G A T E", curses.A_BOLD)
        centered(win, max_y // 2 - 5, "-" * 26)
        for index, label in enumerate(MENU_ITEMS):
            attr = curses.color_pair(HIGHLIGHT) | curses.A_BOLD if index == selected else 0
            centered(win, max_y // 2 - 2 + index * 2, label, attr)
        centered(win, max_y - 2, "Use UP/DOWN arrows and Enter to select.")
        win.refresh()

        key = win.getch()
        if key == curses.KEY_UP:
            selected = (selected - 1) % len(MENU_ITEMS)
        elif key == curses.KEY_DOWN:
            selected = (selected + 1) % len(MENU_ITEMS)
        elif key in (curses.KEY_ENTER, 10, 13):
            return selected
        elif key in (ord('q'), ord('Q')):
            return MENU_EXIT


def rules_lines(stage_count: int, gate_lifespan: int) -> List[str]:
    return [
        "Snake Movement:",
        "  -> Use arrow keys (or WASD) to move; the snake moves every tick.",
        "     Forbidden: U-turns, hitting walls or your own body.",
        "  -> Press 'P' to pause and again to resume, 'Q' to quit.",
        "",
        "Items:",
        "  -> Growth item (+): +1 length.   Poison item (x): -1 length.",
        f"     Length below {MIN_SNAKE_LENGTH} = Game Over.",
        f"     Items vanish after {ITEM_LIFESPAN} ticks; max {MAX_GROWTH_ITEMS} growth, "
        f"{MAX_POISON_ITEMS} poison.",
        "",
        "Gates ([ ]):",
        "  -> Pairs appear on walls (never corners); enter one to exit the other.",
        f"     Gates move after {gate_lifespan} ticks on the first stage.",
        f"     Cooldown {GATE_COOLDOWN_TICKS} ticks: entering a gate during cooldown = Game Over.",
        "  -> Edge gates send you into the board; inner gates keep your direction,",
        "     then try clockwise, counter-clockwise, then reverse.",
        "",
        "Missions:",
        "  -> Reach the length, growth, poison and gate targets to clear a stage.",
        f"  -> Each stage has a turn limit. Clear all {stage_count} stages to win.",
    ]


def show_rules(win, stage_count: int, gate_lifespan: int) -> int:
    """Rules screen; returns 0 for Previous, 1 for Game Start."""
    choice = 0
    options = ["< Previous", "Game Start >"]
    win.timeout(-1)
    while True:
        max_y, max_x = win.getmaxyx()
        win.erase()
        centered(win, 1, "< Game Rules >", curses.A_BOLD)
        y = 3
        for line in rules_lines(stage_count, gate_lifespan):
            safe_addstr(win, y, 2, line)
            y += 1

        button_y = min(max(y + 1, max_y - 4), max_y - 2)
        total = len(options[0]) + 5 + len(options[1])
        x = (max_x - total) // 2
        for index, label in enumerate(options):
            attr = curses.color_pair(HIGHLIGHT) | curses.A_BOLD if index == choice else 0
            safe_addstr(win, button_y, x, label, attr)
            x += len(label) + 5
        centered(win, button_y + 1, "Use Left/Right arrows and Enter to navigate.")
        win.refresh()

        key = win.getch()
        if key in (curses.KEY_LEFT, curses.KEY_UP):
            choice = 0
        elif key in (curses.KEY_RIGHT, curses.KEY_DOWN):
            choice = 1
        elif key in (curses.KEY_ENTER, 10, 13):
            return choice


def format_ranking(entries: List[RankingEntry], limit: int = DISPLAY_ENTRIES) -> List[str]:
    return [f"{index}. {entry.name}: {entry.score}"
            for index, entry in enumerate(entries[:limit], start=1)]


def show_ranking(win, entries: List[RankingEntry]) -> None:
    win.erase()
    max_y, max_x = win.getmaxyx()
    centered(win, 2, "TOP RANKING", curses.A_BOLD)
    lines = format_ranking(entries)
    if not lines:
        centered(win, 4, "No ranking yet.")
    else:
        start_x = max(0, (max_x - max(len(line) for line in lines)) // 2)
        for offset, line in enumerate(lines):
            safe_addstr(win, 4 + offset, start_x, line)
    centered(win, max_y - 2, "Press [spacebar] to return to the menu.")
    win.refresh()
    wait_for_space(win)


def prompt_name(win) -> str:
    win.timeout(-1)
    win.erase()
    win.box()
    max_y, max_x = win.getmaxyx()
    welcome = "Welcome to Snake Gate!"
    prompt = "Enter your name: "
    x = max(0, (max_x - len(welcome)) // 2)
    safe_addstr(win, max_y // 2 - 2, x, welcome)
    safe_addstr(win, max_y // 2, x, prompt)
    win.refresh()

    curses.echo()
    try:
        curses.curs_set(1)
    except curses.error:
        pass
    try:
        raw = win.getstr(max_y // 2, x + len(prompt) + 1, NAME_MAX_LENGTH)
    finally:
        curses.noecho()
        try:
            curses.curs_set(0)
        except curses.error:
            pass
    name = raw.decode('utf-8', errors='replace').strip() if raw else ""
    return name or "Player"


def show_stage_clear(win, cleared_stage: int) -> None:
    win.erase()
    max_y, _ = win.getmaxyx()
    centered(win, max_y // 2, f"STAGE {cleared_stage + 1} CLEARED! NEXT STAGE!",
             curses.color_pair(HEAD_OR_GROWTH) | curses.A_BOLD)
    win.refresh()


def show_game_over(win, state: GameState, player_name: str, final_score: int, rank: int,
                   ranking_size: int, reason_text: Optional[str]) -> None:
    win.erase()
    max_y, _ = win.getmaxyx()
    y = max(1, max_y // 2 - 6)
    centered(win, y, " G A M E   O V E R ", curses.color_pair(DANGER) | curses.A_BOLD)
    y += 2
    centered(win, y, f"Reason: {reason_text or 'Unknown mishap on the snake trail!'}")
    y += 2
    centered(win, y, f"Final Score for {player_name}: {final_score}", curses.A_BOLD)
    y += 2
    centered(win, y, "------ Final Stats ------")
    y += 1
    for line in (
        f"Stage Reached: {state.stage_index + 1}/{state.stage_count}",
        f"Max Length Achieved: {state.max_length}",
        f"Growth Items Collected: {state.missions['growth'][0]}",
        f"Poison Items Touched: {state.missions['poison'][0]}",
        f"Gates Used: {state.missions['gate'][0]}",
    ):
        centered(win, y, line)
        y += 1
    y += 1
    centered(win, y, f"Your Ranking: {rank} / {ranking_size}")
    centered(win, max_y - 2, "Press [spacebar] to return to the menu.")
    win.refresh()
    wait_for_space(win)


def show_victory(win, player_name: str, final_score: int) -> None:
    win.erase()
    max_y, _ = win.getmaxyx()
    centered(win, max_y // 2 - 3, "YOU HAVE CLEARED ALL STAGES!",
             curses.color_pair(HEAD_OR_GROWTH) | curses.A_BOLD)
    centered(win, max_y // 2 - 1, "Thank you for playing Snake Gate!")
    centered(win, max_y // 2 + 1, f"Final Score for {player_name}: {final_score}", curses.A_BOLD)
    centered(win, max_y - 2, "Press [spacebar] to return to the main menu.")
    win.refresh()
    wait_for_space(win)
