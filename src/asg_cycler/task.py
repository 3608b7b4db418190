"""
Execution context for a single start/stop run.

A Task carries the region the run targets, lazily evaluated logging, and the
best-effort boundary (``unsafe``) that wraps every mutating provider call so a
failing action is recorded and reported instead of aborting the run.
"""
import logging
from dataclasses import dataclass, asdict
from typing import Any, Callable, List, Optional, Union

logger = logging.getLogger(__name__)

Message = Union[str, Callable[[], str]]


class TaskFailure(Exception):
    """Raised for configuration errors and for runs with failed actions"""
    pass


@dataclass
class ActionResult:
    """Outcome of one action executed inside the best-effort boundary."""
    description: str
    ok: bool
    skipped: bool = False
    error: Optional[str] = None

    def to_dict(self):
        return asdict(self)


class Task:
    """Execution context handed to the controller."""

    def __init__(self, region: str, name: str = "asg-cycler", dryrun: bool = False,
                 log: Optional[logging.Logger] = None):
        self.region = region
        self.name = name
        self.dryrun = dryrun
        self.logger = log or logger
        self._results: List[ActionResult] = []

    def _log(self, level: int, message: Message) -> None:
        # Callables are only evaluated when the level is enabled
        if not self.logger.isEnabledFor(level):
            return
        if callable(message):
            message = message()
        self.logger.log(level, message)

    def debug(self, message: Message) -> None:
        self._log(logging.DEBUG, message)

    def info(self, message: Message) -> None:
        self._log(logging.INFO, message)

    def warn(self, message: Message) -> None:
        self._log(logging.WARNING, message)

    def unsafe(self, description: str, operation: Callable[[], Any]) -> ActionResult:
        """Run an operation, recording any failure instead of raising it.

        Args:
            description: Human readable label for the action
            operation: Zero-argument callable performing the action

        Returns:
            The recorded ActionResult
        """
        if self.dryrun:
            self.info(f"[dryrun] {description}")
            result = ActionResult(description, ok=True, skipped=True)
        else:
            self.info(description)
            try:
                operation()
                result = ActionResult(description, ok=True)
            except TaskFailure:
                raise
            except Exception as e:
                self.logger.error(f"{description} failed: {str(e)}")
                result = ActionResult(description, ok=False, error=str(e))

        self._results.append(result)
        return result

    @property
    def results(self) -> List[ActionResult]:
        return list(self._results)

    @property
    def failures(self) -> List[ActionResult]:
        return [r for r in self._results if not r.ok]

    def raise_on_failures(self) -> None:
        """Raise TaskFailure if any best-effort action failed during the run."""
        failures = self.failures
        if not failures:
            return
        details = "; ".join(f"{f.description}: {f.error}" for f in failures)
        raise TaskFailure(f"{len(failures)} action(s) failed in {self.name}: {details}")
