"""Built-in runtime pallets and their benchmark registries.

Importing this package registers every built-in pallet's benchmarks in the
process-wide catalog (see ``weighbench.core.registry``).
"""
from __future__ import annotations

from typing import Any, Dict

from . import balances, identity

PALLETS = (balances, identity)

RUNTIME_CALLS: Dict[str, Any] = {}
for _pallet in PALLETS:
    RUNTIME_CALLS.update(_pallet.CALLS)


def genesis() -> Dict[str, Any]:
    """Merged genesis state of all built-in pallets."""
    state: Dict[str, Any] = {}
    for pallet in PALLETS:
        state.update(pallet.genesis())
    return state


__all__ = ["balances", "identity", "PALLETS", "RUNTIME_CALLS", "genesis"]
