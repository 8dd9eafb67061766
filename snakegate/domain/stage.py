"""
Stage configuration and mission tracking.
"""

from dataclasses import dataclass, fields
from pathlib import Path
from typing import Dict, List, Tuple, Union

import yaml


@dataclass(frozen=True)
class StageConfig:
    """
    Static settings for one stage.

    wall_probability is a percentage (0-100) chance per interior cell.
    tick_delay_ms is how long the front end waits for input each tick.
    """
    wall_probability: float
    mission_length: int
    mission_growth: int
    mission_poison: int
    mission_gate: int
    turn_limit: int
    tick_delay_ms: int
    gate_lifespan: int


DEFAULT_STAGES: Tuple[StageConfig, ...] = (
    StageConfig(1.5, 6, 5, 2, 2, 500, 220, 100),
    StageConfig(2.5, 9, 7, 4, 3, 400, 180, 75),
    StageConfig(3.5, 12, 9, 6, 4, 300, 120, 50),
    StageConfig(4.5, 15, 11, 8, 5, 250, 60, 40),
)

STAGE_FIELDS = [f.name for f in fields(StageConfig)]


def load_stages(path: Union[str, Path]) -> Tuple[StageConfig, ...]:
    """
    Load stage definitions from a YAML file.

    The file holds either a list of mappings or a mapping with a `stages`
    key. Each mapping needs every StageConfig field.

    Raises:
        ValueError: if the file is malformed or a stage is incomplete.
    """
    with open(path, 'r', encoding='utf-8') as f:
        data = yaml.safe_load(f)

    if isinstance(data, dict):
        data = data.get('stages')
    if not isinstance(data, list) or not data:
        raise ValueError(f"{path}: expected a non-empty list of stages")

    stages: List[StageConfig] = []
    for index, entry in enumerate(data):
        if not isinstance(entry, dict):
            raise ValueError(f"{path}: stage {index} is not a mapping")
        missing = [name for name in STAGE_FIELDS if name not in entry]
        if missing:
            raise ValueError(f"{path}: stage {index} is missing {', '.join(missing)}")
        try:
            stage = StageConfig(
                wall_probability=float(entry['wall_probability']),
                **{name: int(entry[name]) for name in STAGE_FIELDS if name != 'wall_probability'}
            )
        except (TypeError, ValueError) as exc:
            raise ValueError(f"{path}: stage {index} has an invalid value: {exc}") from exc
        if stage.turn_limit <= 0 or stage.gate_lifespan <= 0 or stage.tick_delay_ms <= 0:
            raise ValueError(f"{path}: stage {index} needs positive turn_limit, gate_lifespan and tick_delay_ms")
        stages.append(stage)
    return tuple(stages)


class MissionTracker:
    """Per-stage counters; everything here resets when a stage begins."""

    def __init__(self):
        self.growth_collected = 0
        self.poison_collected = 0
        self.gates_used = 0
        self.turns = 0

    def reset(self) -> None:
        self.growth_collected = 0
        self.poison_collected = 0
        self.gates_used = 0
        self.turns = 0

    def status(self, stage: StageConfig, length: int) -> Dict[str, Tuple[int, int, bool]]:
        """Mission name -> (current, required, done)."""
        progress = {
            'length': (length, stage.mission_length),
            'growth': (self.growth_collected, stage.mission_growth),
            'poison': (self.poison_collected, stage.mission_poison),
            'gate': (self.gates_used, stage.mission_gate),
        }
        return {name: (current, required, current >= required)
                for name, (current, required) in progress.items()}

    def evaluate_clear(self, stage: StageConfig, length: int) -> bool:
        return all(done for _, _, done in self.status(stage, length).values())

    def turns_remaining(self, stage: StageConfig) -> int:
        return stage.turn_limit - self.turns

    def __repr__(self):
        return (
            f"<MissionTracker growth={self.growth_collected} poison={self.poison_collected} "
            f"gates={self.gates_used} turns={self.turns}>"
        )
