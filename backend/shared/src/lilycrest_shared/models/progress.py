"""Value objects produced by the reservation progress tracker.

These are recomputed from a reservation snapshot on every request and carry
no identity of their own.
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from .enums import ActionKind, ProgressStep, StepStatus

STEP_ORDER: tuple[ProgressStep, ...] = (
    ProgressStep.ROOM_SELECTED,
    ProgressStep.VISIT_SCHEDULED,
    ProgressStep.VISIT_COMPLETED,
    ProgressStep.APPLICATION_SUBMITTED,
    ProgressStep.PAYMENT_SUBMITTED,
    ProgressStep.CONFIRMED,
)


class StepView(BaseModel):
    """Display state of one stage in the tracker."""

    model_config = ConfigDict(frozen=True)

    step: ProgressStep
    status: StepStatus
    editable: bool = False
    rejection_reason: str | None = None
    completed_date: datetime | None = None


class DerivedProgress(BaseModel):
    """The six-stage progress view for one reservation."""

    model_config = ConfigDict(frozen=True)

    current_step_index: int = Field(..., ge=-1, le=len(STEP_ORDER) - 1)
    steps: tuple[StepView, ...] = Field(
        ..., min_length=len(STEP_ORDER), max_length=len(STEP_ORDER)
    )
    has_reservation: bool

    @property
    def current_step(self) -> ProgressStep | None:
        """Tag of the furthest completed stage, or None without a reservation."""
        if self.current_step_index < 0:
            return None
        return STEP_ORDER[self.current_step_index]

    def step(self, tag: ProgressStep) -> StepView:
        return self.steps[STEP_ORDER.index(tag)]


class NextAction(BaseModel):
    """The single recommended action shown above the tracker."""

    model_config = ConfigDict(frozen=True)

    title: str
    description: str
    button_text: str
    target_step: ProgressStep | None = None
    kind: ActionKind
