"""Selection state machine: one record per stage of a topic selection run."""

from datetime import datetime, timezone

# Ordered selection stages
STAGES = [
    "aggregating", "clustering", "scoring", "enriching", "ranking", "filtering",
]
TERMINAL = ("selected", "fallback")


class SelectionState:
    """Tracks stage progress for one selection run.

    Each stage records: status (done/failed), timestamp, and a few counters.
    A run ends in exactly one terminal state, ``selected`` or ``fallback``.
    """

    def __init__(self, category: str):
        self.category = category
        self.stages = {}
        self.current = "aggregating"
        self.outcome = None
        self.reason = ""

    def is_done(self, stage: str) -> bool:
        return self.stages.get(stage, {}).get("status") == "done"

    def complete_stage(self, stage: str, artifacts: dict | None = None):
        """Mark a stage as completed and advance to the next one."""
        if stage not in STAGES:
            raise ValueError(f"Unknown stage: {stage}")
        if self.outcome is not None:
            raise RuntimeError(f"Selection already finished ({self.outcome})")
        self.stages[stage] = {
            "status": "done",
            "timestamp": datetime.now(timezone.utc).isoformat(),
        }
        if artifacts:
            self.stages[stage]["artifacts"] = artifacts
        idx = STAGES.index(stage)
        self.current = STAGES[idx + 1] if idx + 1 < len(STAGES) else "filtering"

    def get_artifact(self, stage: str, key: str, default=None):
        return self.stages.get(stage, {}).get("artifacts", {}).get(key, default)

    def finish(self, outcome: str, reason: str = ""):
        """Enter a terminal state. Can only happen once per run."""
        if outcome not in TERMINAL:
            raise ValueError(f"Unknown terminal state: {outcome}")
        if self.outcome is not None:
            raise RuntimeError(f"Selection already finished ({self.outcome})")
        self.outcome = outcome
        self.current = outcome
        self.reason = reason

    @property
    def finished(self) -> bool:
        return self.outcome is not None

    def summary(self) -> str:
        """Human-readable status of all stages."""
        lines = []
        for stage in STAGES:
            status = self.stages.get(stage, {}).get("status", "pending")
            marker = {"done": "+", "pending": " "}.get(status, "?")
            lines.append(f"  [{marker}] {stage}")
        if self.outcome:
            lines.append(f"  => {self.outcome.upper()}")
        return "\n".join(lines)
