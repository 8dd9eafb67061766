"""
Item lifecycle - growth and poison items that share one lifespan timer.
"""

import logging
import random
from typing import Optional

from .constants import (
    CellKind,
    GROWTH_SPAWN_INTERVAL,
    ITEM_LIFESPAN,
    MAX_GROWTH_ITEMS,
    MAX_POISON_ITEMS,
    POISON_SPAWN_INTERVAL,
)
from .grid import Grid, Position

logger = logging.getLogger(__name__)


class ItemManager:
    """
    Spawns and expires items on a grid.

    Both item kinds share a single countdown (frames_left). Every successful
    spawn resets it to the full lifespan; when it runs out every item of
    both kinds disappears in the same tick.
    """

    def __init__(
        self,
        grid: Grid,
        rng: Optional[random.Random] = None,
        lifespan: int = ITEM_LIFESPAN,
        max_growth: int = MAX_GROWTH_ITEMS,
        max_poison: int = MAX_POISON_ITEMS,
        growth_interval: int = GROWTH_SPAWN_INTERVAL,
        poison_interval: int = POISON_SPAWN_INTERVAL,
    ):
        self.grid = grid
        self.rng = rng or random.Random()
        self.lifespan = lifespan
        self.frames_left = lifespan
        self.caps = {CellKind.GROWTH: max_growth, CellKind.POISON: max_poison}
        self.intervals = {CellKind.GROWTH: growth_interval, CellKind.POISON: poison_interval}

    def reset(self) -> None:
        self.frames_left = self.lifespan

    def spawn_growth(self) -> Optional[Position]:
        return self._spawn(CellKind.GROWTH)

    def spawn_poison(self) -> Optional[Position]:
        return self._spawn(CellKind.POISON)

    def _spawn(self, kind: CellKind) -> Optional[Position]:
        if self.grid.count(kind) >= self.caps[kind]:
            return None

        # Choose from the eligible set directly so a full board cannot stall us
        empty_cells = self.grid.cells_of(CellKind.EMPTY)
        if not empty_cells:
            logger.debug("No empty cell left for %s item; skipping spawn", kind.name.lower())
            return None

        pos = self.rng.choice(empty_cells)
        self.grid.set_cell(pos, kind)
        self.frames_left = self.lifespan
        logger.debug("Spawned %s item at %s", kind.name.lower(), pos)
        return pos

    def tick_lifespan(self) -> bool:
        """
        Count one tick off the shared timer.

        Returns:
            True if the timer ran out on this tick and all items were cleared.
        """
        if self.frames_left <= 0:
            return False
        self.frames_left -= 1
        if self.frames_left > 0:
            return False
        self.clear_all()
        logger.debug("Item lifespan expired; cleared all items")
        return True

    def clear_all(self) -> None:
        self.grid.replace_all(CellKind.GROWTH, CellKind.EMPTY)
        self.grid.replace_all(CellKind.POISON, CellKind.EMPTY)

    def spawn_scheduled(self, tick: int) -> None:
        """Attempt the periodic spawns that fall due on this tick number."""
        for kind, interval in self.intervals.items():
            if interval > 0 and tick > 0 and tick % interval == 0:
                self._spawn(kind)
