"""Phase abstraction and the sequential runner used by the map builder."""

import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, Iterable, List

log = logging.getLogger(__name__)


class PipelinePhase(ABC):
    phase_name: str

    @abstractmethod
    def run(self, context: Dict[str, Any]) -> Dict[str, Any]:
        raise NotImplementedError


class PipelineRunner:
    """Runs phases in order, folding each phase's output into one context."""

    def __init__(self, phases: Iterable[PipelinePhase]) -> None:
        self.phases: List[PipelinePhase] = list(phases)

    def run(self, context: Dict[str, Any]) -> Dict[str, Any]:
        current = dict(context)
        executed: List[str] = []
        for phase in self.phases:
            log.debug("map phase %s started", phase.phase_name)
            phase_result = phase.run(current)
            if not isinstance(phase_result, dict):
                raise TypeError(f"Phase '{phase.phase_name}' must return dict context.")
            current.update(phase_result)
            executed.append(phase.phase_name)
        current["executed_phases"] = executed
        return current
