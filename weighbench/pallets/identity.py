"""
Identity pallet: registrars, on-chain identities, judgements and sub-accounts.

Storage layout:
    identity/registrars          list of {"account", "fee"}
    identity/of/<account>        {"info", "judgements": [[reg_index, judgement, fee], ...], "deposit"}
    identity/subs_of/<account>   {"subs": [account, ...], "deposit"}
    identity/super_of/<account>  [parent, name]

Its benchmarks show every way a parameter can be declared: ``r`` comes from
the common pool verbatim, ``x`` from the pool with a case-specific instancer,
and ``s`` is overridden outright by ``clear_identity``.
"""
from __future__ import annotations

from typing import Any, Dict, List, Sequence

from weighbench.adapters.base import BaseStore
from weighbench.adapters.dispatcher import DispatchError, ensure_root, ensure_signed
from weighbench.core.account import account
from weighbench.core.case import SetupContext
from weighbench.core.models import Invocation, Origin
from weighbench.core.params import CommonParams, common, param
from weighbench.core.registry import benchmarks, case

from .balances import make_free_balance, reserve, unreserve

MAX_REGISTRARS = 20
MAX_ADDITIONAL_FIELDS = 100
MAX_SUB_ACCOUNTS = 100

BASIC_DEPOSIT = 10
FIELD_DEPOSIT = 2
SUB_ACCOUNT_DEPOSIT = 5

REGISTRARS_KEY = "identity/registrars"

# Judgements a registrar cannot be asked to redo; "FeePaid" holds a reserved fee.
STICKY_JUDGEMENTS = ("FeePaid", "Erroneous")


def _of_key(who: str) -> str:
    return f"identity/of/{who}"


def _subs_key(who: str) -> str:
    return f"identity/subs_of/{who}"


def _super_key(who: str) -> str:
    return f"identity/super_of/{who}"


def registrars(state: BaseStore) -> List[Dict[str, Any]]:
    return state.get(REGISTRARS_KEY, [])


def identity_of(state: BaseStore, who: str) -> Dict[str, Any] | None:
    return state.get(_of_key(who))


def subs_of(state: BaseStore, who: str) -> List[str]:
    return state.get(_subs_key(who), {}).get("subs", [])


def total_deposit(identity: Dict[str, Any]) -> int:
    """Identity deposit plus the fees still reserved for pending judgements."""
    fees = sum(fee for _, judgement, fee in identity["judgements"] if judgement == "FeePaid")
    return identity["deposit"] + fees


def _validate_info(info: Dict[str, Any]) -> List[Any]:
    if not isinstance(info, dict):
        raise DispatchError("Identity info must be a mapping")
    additional = info.get("additional", [])
    if len(additional) > MAX_ADDITIONAL_FIELDS:
        raise DispatchError(f"TooManyFields: {len(additional)} > {MAX_ADDITIONAL_FIELDS}")
    return additional


# ---------- calls ----------
def add_registrar(state: BaseStore, origin: Origin, registrar: str, fee: int = 0) -> int:
    ensure_root(origin)
    current = registrars(state)
    if len(current) >= MAX_REGISTRARS:
        raise DispatchError(f"TooManyRegistrars: limit is {MAX_REGISTRARS}")
    current.append({"account": registrar, "fee": fee})
    state.put(REGISTRARS_KEY, current)
    return len(current) - 1


def set_identity(state: BaseStore, origin: Origin, info: Dict[str, Any]) -> int:
    who = ensure_signed(origin)
    additional = _validate_info(info)
    deposit = BASIC_DEPOSIT + FIELD_DEPOSIT * len(additional)

    existing = identity_of(state, who)
    if existing is None:
        judgements: List[Any] = []
        old_deposit = 0
    else:
        # Sticky judgements (fee paid or erroneous) survive an update; the rest are reset.
        judgements = [j for j in existing["judgements"] if j[1] in STICKY_JUDGEMENTS]
        old_deposit = existing["deposit"]

    if deposit > old_deposit:
        reserve(state, who, deposit - old_deposit)
    elif deposit < old_deposit:
        unreserve(state, who, old_deposit - deposit)

    state.put(_of_key(who), {"info": info, "judgements": judgements, "deposit": deposit})
    return len(judgements)


def set_subs(state: BaseStore, origin: Origin, subs: Sequence[Sequence[str]]) -> int:
    who = ensure_signed(origin)
    if identity_of(state, who) is None:
        raise DispatchError("NotFound: no identity set")
    if len(subs) > MAX_SUB_ACCOUNTS:
        raise DispatchError(f"TooManySubAccounts: {len(subs)} > {MAX_SUB_ACCOUNTS}")

    old = state.get(_subs_key(who), {"subs": [], "deposit": 0})
    new_deposit = SUB_ACCOUNT_DEPOSIT * len(subs)
    if new_deposit > old["deposit"]:
        reserve(state, who, new_deposit - old["deposit"])
    elif new_deposit < old["deposit"]:
        unreserve(state, who, old["deposit"] - new_deposit)

    for sub in old["subs"]:
        state.delete(_super_key(sub))
    ids = []
    for sub, name in subs:
        state.put(_super_key(sub), [who, name])
        ids.append(sub)
    if ids:
        state.put(_subs_key(who), {"subs": ids, "deposit": new_deposit})
    else:
        state.delete(_subs_key(who))
    return len(ids)


def clear_identity(state: BaseStore, origin: Origin) -> int:
    who = ensure_signed(origin)
    existing = identity_of(state, who)
    if existing is None:
        raise DispatchError("NotNamed: no identity to clear")
    subs = state.get(_subs_key(who), {"subs": [], "deposit": 0})
    for sub in subs["subs"]:
        state.delete(_super_key(sub))
    state.delete(_subs_key(who))
    state.delete(_of_key(who))
    return unreserve(state, who, total_deposit(existing) + subs["deposit"])


def request_judgement(state: BaseStore, origin: Origin, reg_index: int, max_fee: int) -> int:
    who = ensure_signed(origin)
    current = registrars(state)
    if not 0 <= reg_index < len(current):
        raise DispatchError(f"EmptyIndex: no registrar at {reg_index}")
    fee = current[reg_index]["fee"]
    if fee > max_fee:
        raise DispatchError(f"FeeChanged: registrar fee {fee} exceeds {max_fee}")
    existing = identity_of(state, who)
    if existing is None:
        raise DispatchError("NoIdentity: set an identity first")

    for index, judgement, _ in existing["judgements"]:
        if index == reg_index and judgement in STICKY_JUDGEMENTS:
            raise DispatchError("StickyJudgement: registrar already holds a fee or verdict for this identity")
    reserve(state, who, fee)
    judgements = [j for j in existing["judgements"] if j[0] != reg_index]
    judgements.append([reg_index, "FeePaid", fee])
    judgements.sort()
    state.put(_of_key(who), {**existing, "judgements": judgements})
    return len(judgements)


CALLS = {
    "identity.add_registrar": add_registrar,
    "identity.set_identity": set_identity,
    "identity.set_subs": set_subs,
    "identity.clear_identity": clear_identity,
    "identity.request_judgement": request_judgement,
}


def genesis() -> dict:
    return {REGISTRARS_KEY: []}


# ---------- benchmarks ----------
def _info(fields: int) -> Dict[str, Any]:
    return {
        "display": "benchmark",
        "additional": [[f"key{i}", f"value{i}"] for i in range(fields)],
    }


def add_registrars(ctx: SetupContext, r: int) -> None:
    for i in range(r):
        add_registrar(ctx.state, Origin.root(), account("registrar", i, ctx.seed), 10)


def _funded_caller(ctx: SetupContext) -> None:
    ctx["caller"] = account("caller", 0, ctx.seed)
    make_free_balance(ctx.state, ctx["caller"], 1_000_000)


def _caller_with_identity(ctx: SetupContext) -> None:
    _funded_caller(ctx)
    set_identity(ctx.state, Origin.signed(ctx["caller"]), _info(0))


def _judged_by_registrars(ctx: SetupContext, r: int) -> None:
    add_registrars(ctx, r)
    caller = Origin.signed(ctx["caller"])
    set_identity(ctx.state, caller, _info(0))
    for i in range(r):
        request_judgement(ctx.state, caller, i, 10)


def _identity_with_fields(ctx: SetupContext, x: int) -> None:
    set_identity(ctx.state, Origin.signed(ctx["caller"]), _info(x))


def _create_subs(ctx: SetupContext, s: int) -> None:
    subs = [[account("sub", i, ctx.seed), f"sub{i}"] for i in range(s)]
    if subs:
        set_subs(ctx.state, Origin.signed(ctx["caller"]), subs)


def _build_add_registrar(ctx: SetupContext) -> Invocation:
    registrar = account("registrar", ctx.params["r"], ctx.seed)
    return Invocation.of("identity.add_registrar", registrar, 10, origin=Origin.root())


def _build_set_identity(ctx: SetupContext) -> Invocation:
    return Invocation.of("identity.set_identity", _info(ctx.params["x"]), origin=Origin.signed(ctx["caller"]))


def _build_set_subs(ctx: SetupContext) -> Invocation:
    subs = [[account("sub", i, ctx.seed), f"sub{i}"] for i in range(ctx.params["s"])]
    return Invocation.of("identity.set_subs", subs, origin=Origin.signed(ctx["caller"]))


def _build_clear_identity(ctx: SetupContext) -> Invocation:
    return Invocation.of("identity.clear_identity", origin=Origin.signed(ctx["caller"]))


def _build_request_judgement(ctx: SetupContext) -> Invocation:
    return Invocation.of(
        "identity.request_judgement", ctx.params["r"] - 1, 10,
        origin=Origin.signed(ctx["caller"]),
    )


registry = benchmarks(
    "identity",
    common=CommonParams(
        param("r", 1, MAX_REGISTRARS, instancer=add_registrars),
        param("s", 1, MAX_SUB_ACCOUNTS),
        param("x", 1, MAX_ADDITIONAL_FIELDS),
    ),
    cases=[
        case("add_registrar", [common("r")], build=_build_add_registrar),
        case(
            "set_identity",
            [common("r", instancer=_judged_by_registrars), common("x")],
            build=_build_set_identity,
            setup=_funded_caller,
        ),
        case("set_subs", [common("s")], build=_build_set_subs, setup=_caller_with_identity),
        case(
            "clear_identity",
            [
                common("r", instancer=_judged_by_registrars),
                param("s", 0, MAX_SUB_ACCOUNTS, instancer=_create_subs),
                common("x", instancer=_identity_with_fields),
            ],
            build=_build_clear_identity,
            setup=_funded_caller,
        ),
        case(
            "request_judgement",
            [common("r"), common("x", instancer=_identity_with_fields)],
            build=_build_request_judgement,
            setup=_funded_caller,
        ),
    ],
)
