"""Per-track and per-batch sync result models."""

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Dict, List, Optional

from .track import LovedTrack


class ImportOutcome(str, Enum):
    """Outcome of importing a single loved track."""

    IMPORTED = "imported"
    SKIPPED = "skipped"
    FAILED = "failed"


@dataclass
class TrackResult:
    """Result of processing one loved track."""

    track: LovedTrack
    outcome: ImportOutcome
    path: Optional[Path] = None
    reason: Optional[str] = None

    @classmethod
    def imported(cls, track: LovedTrack, path: Path) -> 'TrackResult':
        return cls(track=track, outcome=ImportOutcome.IMPORTED, path=path)

    @classmethod
    def skipped(cls, track: LovedTrack) -> 'TrackResult':
        return cls(track=track, outcome=ImportOutcome.SKIPPED)

    @classmethod
    def failed(cls, track: LovedTrack, reason: str) -> 'TrackResult':
        return cls(track=track, outcome=ImportOutcome.FAILED, reason=reason)


@dataclass
class SyncSummary:
    """Summary of a sync batch.

    Counters are derived from ``results`` so that
    ``total == imported + skipped + errors`` always holds.
    """

    results: List[TrackResult] = field(default_factory=list)

    def _count(self, outcome: ImportOutcome) -> int:
        return sum(1 for result in self.results if result.outcome == outcome)

    @property
    def total(self) -> int:
        return len(self.results)

    @property
    def imported(self) -> int:
        return self._count(ImportOutcome.IMPORTED)

    @property
    def skipped(self) -> int:
        return self._count(ImportOutcome.SKIPPED)

    @property
    def errors(self) -> int:
        return self._count(ImportOutcome.FAILED)

    def as_dict(self) -> Dict[str, int]:
        return {
            'total': self.total,
            'imported': self.imported,
            'skipped': self.skipped,
            'errors': self.errors,
        }
