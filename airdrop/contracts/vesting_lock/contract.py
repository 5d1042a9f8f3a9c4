# -*- coding: utf-8 -*-
# Token vesting lock
# ------------------
# Holds tokens for beneficiaries and releases them on a cliff + linear
# schedule. Only the token contract itself may open a schedule; it funds the
# lock through its own transfer_from, so it must approve this contract first.
#
# Interface:
#   init(token, cliff_seconds, duration_seconds)
#   lock(beneficiary, amount)            token only; pulls `amount` from the token
#   release() -> int                     pays the caller what has vested
#   releasable(beneficiary) -> int
#   locked_of(beneficiary) -> int
#   released_of(beneficiary) -> int
#   schedule(beneficiary) -> dict
#   token() -> bytes
#
# Schedule (per beneficiary, starting at the lock's block timestamp):
#   now <  start + cliff     -> nothing vested
#   now >= start + duration  -> everything vested
#   otherwise                -> amount * (now - start) // duration

from dropvm.stdlib import abi, calls, events

from airdrop.stdlib.math import require_u256, u256_mul_div_down
from airdrop.stdlib.math.safe_uint import u256_add, u256_sub
from airdrop.stdlib.store import get_bytes, get_flag, get_u256, set_bytes, set_flag, set_u256
from airdrop.stdlib.token import require_address

# ---- storage keys -------------------------------------------------------------------
K_INIT = b"lock:init"
K_TOKEN = b"lock:token"
K_CLIFF = b"lock:cliff"
K_DURATION = b"lock:duration"
K_AMOUNT_PREFIX = b"lock:amt:"
K_START_PREFIX = b"lock:start:"
K_RELEASED_PREFIX = b"lock:rel:"

# ---- errors -------------------------------------------------------------------------
ERR_ALREADY_INIT = b"LOCK:ALREADY_INIT"
ERR_NOT_INIT = b"LOCK:NOT_INIT"
ERR_BAD_SCHEDULE = b"LOCK:BAD_SCHEDULE"
ERR_ZERO_AMOUNT = b"LOCK:ZERO_AMOUNT"
ERR_EXISTS = b"LOCK:SCHEDULE_EXISTS"
ERR_NOT_TOKEN = b"LOCK:NOT_TOKEN"
ERR_NOTHING = b"LOCK:NOTHING_TO_RELEASE"

# ---- events -------------------------------------------------------------------------
EV_LOCKED = b"Locked"
EV_RELEASED = b"Released"


def _guard_inited() -> None:
    abi.require(get_flag(K_INIT), ERR_NOT_INIT)


def _vested(beneficiary: bytes, now: int) -> int:
    amount = get_u256(K_AMOUNT_PREFIX + beneficiary)
    if amount == 0:
        return 0
    start = get_u256(K_START_PREFIX + beneficiary)
    duration = get_u256(K_DURATION)
    if now < start + get_u256(K_CLIFF):
        return 0
    if now >= start + duration:
        return amount
    return u256_mul_div_down(amount, now - start, duration)


# ---- public entrypoints -------------------------------------------------------------

def init(token: bytes, cliff_seconds: int, duration_seconds: int) -> None:
    if get_flag(K_INIT):
        abi.revert(ERR_ALREADY_INIT)
    require_address(token)
    require_u256(cliff_seconds, duration_seconds)
    if duration_seconds == 0 or cliff_seconds > duration_seconds:
        abi.revert(ERR_BAD_SCHEDULE)

    set_bytes(K_TOKEN, token)
    set_u256(K_CLIFF, cliff_seconds)
    set_u256(K_DURATION, duration_seconds)
    set_flag(K_INIT)


def lock(beneficiary: bytes, amount: int) -> None:
    """
    Pull `amount` tokens from the token contract and start `beneficiary`'s
    schedule at the current block timestamp. Callable only by the token; one
    schedule per beneficiary.
    """
    _guard_inited()
    token_addr = get_bytes(K_TOKEN)
    if abi.caller() != token_addr:
        abi.revert(ERR_NOT_TOKEN)
    require_address(beneficiary)
    require_u256(amount)
    if amount == 0:
        abi.revert(ERR_ZERO_AMOUNT)
    if get_u256(K_AMOUNT_PREFIX + beneficiary) != 0:
        abi.revert(ERR_EXISTS)

    start = abi.block_timestamp()
    set_u256(K_AMOUNT_PREFIX + beneficiary, amount)
    set_u256(K_START_PREFIX + beneficiary, start)

    calls.call(token_addr, "transfer_from", token_addr, abi.self_address(), amount)
    events.emit(EV_LOCKED, {"beneficiary": beneficiary, "amount": amount, "start": start})


def release() -> int:
    _guard_inited()
    beneficiary = abi.caller()
    amount = releasable(beneficiary)
    if amount == 0:
        abi.revert(ERR_NOTHING)

    key = K_RELEASED_PREFIX + beneficiary
    set_u256(key, u256_add(get_u256(key), amount))
    events.emit(EV_RELEASED, {"beneficiary": beneficiary, "amount": amount})
    calls.call(get_bytes(K_TOKEN), "transfer", beneficiary, amount)
    return amount


# ---- views --------------------------------------------------------------------------

def token() -> bytes:
    return get_bytes(K_TOKEN)


def locked_of(beneficiary: bytes) -> int:
    require_address(beneficiary)
    return get_u256(K_AMOUNT_PREFIX + beneficiary)


def released_of(beneficiary: bytes) -> int:
    require_address(beneficiary)
    return get_u256(K_RELEASED_PREFIX + beneficiary)


def releasable(beneficiary: bytes) -> int:
    require_address(beneficiary)
    return u256_sub(_vested(beneficiary, abi.block_timestamp()), released_of(beneficiary))


def schedule(beneficiary: bytes) -> dict:
    require_address(beneficiary)
    start = get_u256(K_START_PREFIX + beneficiary)
    return {
        "amount": locked_of(beneficiary),
        "released": released_of(beneficiary),
        "start": start,
        "cliff_ends": start + get_u256(K_CLIFF),
        "ends": start + get_u256(K_DURATION),
    }
