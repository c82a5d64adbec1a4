"""Ordered, fail-fast execution of setup steps."""
import logging
from dataclasses import dataclass, field
from typing import Callable, Generic, List, Optional, Sequence, TypeVar

from privastead_setup.errors import ProvisioningError
from privastead_setup.utils import log_error, log_warning

logger = logging.getLogger(__name__)

Ctx = TypeVar("Ctx")


@dataclass
class Step(Generic[Ctx]):
    """A named stage of the run.

    The precondition runs before the action and the postcondition after
    it; either one signals failure by raising ProvisioningError. A
    required step that fails stops the run. An optional step's failure
    is reported and the run carries on.
    """
    name: str
    action: Callable[[Ctx], None]
    required: bool = True
    precondition: Optional[Callable[[Ctx], None]] = None
    postcondition: Optional[Callable[[Ctx], None]] = None

    def execute(self, ctx: Ctx) -> None:
        if self.precondition is not None:
            self.precondition(ctx)
        self.action(ctx)
        if self.postcondition is not None:
            self.postcondition(ctx)


@dataclass
class PipelineResult:
    completed: List[str] = field(default_factory=list)
    error: Optional[ProvisioningError] = None
    failed_step: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def exit_code(self) -> int:
        return 0 if self.error is None else self.error.exit_code


class Pipeline(Generic[Ctx]):
    """Runs steps in the order given, stopping at the first required failure."""

    def __init__(self, steps: Sequence[Step[Ctx]]) -> None:
        self.steps = list(steps)

    def run(self, ctx: Ctx) -> PipelineResult:
        result = PipelineResult()
        for step in self.steps:
            logger.debug("Starting step %s", step.name)
            try:
                step.execute(ctx)
            except ProvisioningError as e:
                if not step.required:
                    log_warning(f"{step.name} skipped: {e}")
                    continue
                log_error(str(e))
                logger.debug("Step %s aborted the run with status %d", step.name, e.exit_code)
                result.error = e
                result.failed_step = step.name
                return result
            result.completed.append(step.name)
        return result

    def __len__(self) -> int:
        return len(self.steps)

    def __repr__(self) -> str:
        names = ", ".join(s.name if s.required else f"{s.name}?" for s in self.steps)
        return f"Pipeline([{names}])"
