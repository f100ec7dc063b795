"""
State — session state shared by the orchestrators.

- ActionTokenTracker: the single action token
- RunLedger: per-run bookkeeping (item deltas, move counts)
- GameStore: the owned state object passed to every orchestrator
- Eligibility: daily limit and energy checks for starting runs
"""

from teraverse.state.token import ActionToken, ActionTokenTracker
from teraverse.state.ledger import RunLedger, create_ledger
from teraverse.state.store import GameStore
from teraverse.state.eligibility import (
    can_start_run,
    effective_max_runs,
    ineligibility_reason,
    run_slots,
)

__all__ = [
    "ActionToken",
    "ActionTokenTracker",
    "RunLedger",
    "create_ledger",
    "GameStore",
    "can_start_run",
    "effective_max_runs",
    "ineligibility_reason",
    "run_slots",
]
