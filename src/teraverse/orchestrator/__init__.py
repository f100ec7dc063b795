"""
Orchestrator — auto-play, bulk claims and the controller facade.

Provides:
- RunOrchestrator: the auto-play loop and move submission
- ClaimOrchestrator: capacity-aware sequential ROM claims
- Controller: unified API over the orchestrators, store and history
"""

from teraverse.orchestrator.cancellation import CancellationToken
from teraverse.orchestrator.results import ClaimBatchResult, LoopResult, OperationResult
from teraverse.orchestrator.runner import RunOrchestrator, create_runner
from teraverse.orchestrator.claims import (
    ClaimOrchestrator,
    create_claim_orchestrator,
    plan_claims,
)
from teraverse.orchestrator.controller import Controller, create_controller

__all__ = [
    "CancellationToken",
    "ClaimBatchResult",
    "LoopResult",
    "OperationResult",
    "RunOrchestrator",
    "create_runner",
    "ClaimOrchestrator",
    "create_claim_orchestrator",
    "plan_claims",
    "Controller",
    "create_controller",
]
