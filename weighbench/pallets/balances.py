"""
Balances pallet: free and reserved balances per account.

Storage layout:
    balances/free/<account>      int
    balances/reserved/<account>  int
"""
from __future__ import annotations

from weighbench.adapters.base import BaseStore
from weighbench.adapters.dispatcher import DispatchError, ensure_signed
from weighbench.core.account import account
from weighbench.core.case import SetupContext
from weighbench.core.models import Invocation, Origin
from weighbench.core.params import param
from weighbench.core.registry import benchmarks, case

EXISTENTIAL_DEPOSIT = 1
MAX_TRANSFER = 1_000_000


def _free_key(who: str) -> str:
    return f"balances/free/{who}"


def _reserved_key(who: str) -> str:
    return f"balances/reserved/{who}"


def free_balance(state: BaseStore, who: str) -> int:
    return state.get(_free_key(who), 0)


def reserved_balance(state: BaseStore, who: str) -> int:
    return state.get(_reserved_key(who), 0)


def make_free_balance(state: BaseStore, who: str, amount: int) -> None:
    if amount < 0:
        raise ValueError(f"Balance cannot be negative: {amount}")
    if amount == 0:
        state.delete(_free_key(who))
    else:
        state.put(_free_key(who), amount)


def reserve(state: BaseStore, who: str, amount: int) -> None:
    free = free_balance(state, who)
    if amount > free:
        raise DispatchError(f"InsufficientBalance: {who} has {free}, needs {amount}")
    make_free_balance(state, who, free - amount)
    state.put(_reserved_key(who), reserved_balance(state, who) + amount)


def unreserve(state: BaseStore, who: str, amount: int) -> int:
    """Move up to ``amount`` back to free balance; returns what was actually moved."""
    reserved = reserved_balance(state, who)
    moved = min(amount, reserved)
    if reserved - moved:
        state.put(_reserved_key(who), reserved - moved)
    else:
        state.delete(_reserved_key(who))
    make_free_balance(state, who, free_balance(state, who) + moved)
    return moved


# ---------- calls ----------
def transfer(state: BaseStore, origin: Origin, dest: str, value: int) -> dict:
    sender = ensure_signed(origin)
    if value <= 0:
        raise DispatchError("Transfer value must be positive")
    free = free_balance(state, sender)
    if value > free:
        raise DispatchError(f"InsufficientBalance: {sender} has {free}, needs {value}")
    remaining = free - value
    if 0 < remaining < EXISTENTIAL_DEPOSIT:
        raise DispatchError("Transfer would leave sender below the existential deposit")
    dest_free = free_balance(state, dest)
    if dest_free + value < EXISTENTIAL_DEPOSIT:
        raise DispatchError("Transfer would not create the destination account")
    make_free_balance(state, sender, remaining)
    make_free_balance(state, dest, dest_free + value)
    return {"from": sender, "to": dest, "value": value}


CALLS = {
    "balances.transfer": transfer,
}


def genesis() -> dict:
    return {}


# ---------- benchmarks ----------
def _fund_caller(ctx: SetupContext) -> None:
    ctx["caller"] = account("caller", 0, ctx.seed)
    make_free_balance(ctx.state, ctx["caller"], MAX_TRANSFER * 2)


def _create_recipient(ctx: SetupContext, existing: int) -> None:
    ctx["recipient"] = account("recipient", 0, ctx.seed)
    make_free_balance(ctx.state, ctx["recipient"], existing)


def _build_transfer(ctx: SetupContext) -> Invocation:
    return Invocation.of(
        "balances.transfer", ctx["recipient"], ctx.params["u"],
        origin=Origin.signed(ctx["caller"]),
    )


registry = benchmarks(
    "balances",
    cases=[
        case(
            "transfer",
            [
                param("u", 1, MAX_TRANSFER),
                # 0 means the transfer creates the recipient account
                param("e", 0, 1000, instancer=_create_recipient),
            ],
            build=_build_transfer,
            setup=_fund_caller,
        ),
    ],
)
