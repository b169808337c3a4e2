"""Configuration for ruler layout."""

import logging
from dataclasses import dataclass
from typing import Tuple

from seqcompare.types import Dataset

# Original layout drew the full-sequence ruler for positions below 550
DEFAULT_MAX_POSITION = 549


@dataclass
class RulerConfig:
    """Configuration for coordinate rulers.

    Attributes:
        max_position: Last 1-based position covered by the dense ruler (default: 549)
        boundary_tick: Positions with position % 10 == boundary_tick are labelled (default: 0)
        mid_tick: Positions with position % 10 == mid_tick get a mid separator (default: 5)
        filler: Text for unlabelled ruler columns (default: empty)
    """
    max_position: int = DEFAULT_MAX_POSITION
    boundary_tick: int = 0
    mid_tick: int = 5
    filler: str = ''

    def __post_init__(self):
        self.validate()

    def validate(self) -> None:
        if self.max_position < 1:
            raise ValueError(f"max_position must be >= 1, got {self.max_position}")
        for name, tick in (('boundary_tick', self.boundary_tick), ('mid_tick', self.mid_tick)):
            if not 0 <= tick <= 9:
                raise ValueError(f"{name} must be in 0..9, got {tick}")
        if (self.boundary_tick - self.mid_tick) % 10 != 5:
            raise ValueError(f"Ruler ticks must be 5 apart modulo 10, got "
                             f"({self.boundary_tick}, {self.mid_tick})")

    def ensure_covers(self, dataset: Dataset) -> bool:
        """Warn if the dense ruler is shorter than the longest sequence."""
        longest = dataset.longest_sequence()
        if longest > self.max_position:
            logging.warning(f"Ruler ends at position {self.max_position} but the longest "
                            f"sequence has {longest} residues")
            return False
        return True

    @classmethod
    def from_args(cls, args) -> 'RulerConfig':
        """Create config from command-line arguments.

        The ruler_ticks arg is a "B,M" string, e.g. "0,5" or "1,6".
        """
        boundary_tick, mid_tick = parse_ticks(getattr(args, 'ruler_ticks', None) or '0,5')
        return cls(
            max_position=getattr(args, 'max_position', DEFAULT_MAX_POSITION),
            boundary_tick=boundary_tick,
            mid_tick=mid_tick,
            filler=getattr(args, 'filler', '') or '',
        )


def parse_ticks(text: str) -> Tuple[int, int]:
    parts = [part.strip() for part in text.split(',')]
    if len(parts) != 2:
        raise ValueError(f"Ruler ticks must be given as 'B,M', got {text!r}")
    try:
        return int(parts[0]), int(parts[1])
    except ValueError:
        raise ValueError(f"Ruler ticks must be integers, got {text!r}")
