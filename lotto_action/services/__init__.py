"""Run orchestration: result checking, purchasing and the run controller."""

from .checker import CheckReport, ResultChecker
from .purchaser import PurchaseOrchestrator, release_on_failure
from .runner import RunController, RunOutcome, bootstrap

__all__ = [
    "CheckReport",
    "PurchaseOrchestrator",
    "ResultChecker",
    "RunController",
    "RunOutcome",
    "bootstrap",
    "release_on_failure",
]
