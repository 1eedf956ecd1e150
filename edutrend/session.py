"""Session state and the recompute trigger behind the dashboard.

The only mutable state is a `SessionState` (dataset plus the current
selection). Every change goes through `SessionController.update`, which
bumps the revision and recomputes the whole pipeline synchronously.
Outcomes computed for an older revision are dropped by `accept`.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from typing import Optional

import pandas as pd

from edutrend.data import empty_dataset
from edutrend.filters import DEFAULT_HORIZON, Selection, clamp_horizon
from edutrend.pipeline import IDLE_MESSAGE, STATUS_IDLE, ProjectionOutcome, run_pipeline

logger = logging.getLogger(__name__)

IDLE = "Idle"
READY = "Ready"

_UNSET = object()


@dataclass(frozen=True)
class SessionState:
    dataset: pd.DataFrame = field(default_factory=empty_dataset, compare=False)
    region: str = ""
    level: str = ""
    horizon: int = DEFAULT_HORIZON

    @property
    def selection(self) -> Selection:
        return Selection(region=self.region, level=self.level, horizon=self.horizon)


class SessionController:
    def __init__(self, state: Optional[SessionState] = None):
        self.state = state or SessionState()
        self.revision = 0
        self.outcome: Optional[ProjectionOutcome] = None
        self._recompute()

    @property
    def phase(self) -> str:
        if self.state.dataset.empty or not self.state.selection.is_complete:
            return IDLE
        return READY

    def update(self, *, dataset=_UNSET, region=_UNSET, level=_UNSET, horizon=_UNSET) -> ProjectionOutcome:
        changes = {}
        if dataset is not _UNSET:
            changes["dataset"] = dataset
        if region is not _UNSET:
            changes["region"] = (region or "").strip()
        if level is not _UNSET:
            changes["level"] = (level or "").strip()
        if horizon is not _UNSET:
            changes["horizon"] = clamp_horizon(horizon)
        if not changes:
            return self.outcome
        self.state = replace(self.state, **changes)
        return self._recompute()

    def compute(self):
        """Start a computation for the current state; returns (revision, outcome)."""
        self.revision += 1
        if self.phase == IDLE:
            return self.revision, ProjectionOutcome(status=STATUS_IDLE, selection=self.state.selection, message=IDLE_MESSAGE)
        return self.revision, run_pipeline(self.state.dataset, self.state.selection)

    def accept(self, revision: int, outcome: ProjectionOutcome) -> bool:
        if revision != self.revision:
            logger.debug("Discarding outcome for stale revision %d (current %d)", revision, self.revision)
            return False
        self.outcome = outcome
        return True

    def _recompute(self) -> ProjectionOutcome:
        revision, outcome = self.compute()
        self.accept(revision, outcome)
        return self.outcome
