# -*- coding: utf-8 -*-
# Merkle distributor token
# ------------------------
# A fungible token that mints its whole supply at init and hands out the
# airdrop pool exactly once per eligible account. Eligibility is committed as
# a Merkle root over (account, amount) leaves.
#
# Interface:
#   init(name, symbol, decimals, total_supply, airdrop_pool, dev_pool,
#        liquidity_pool, claim_period_ends, service_fee, fee_recipient,
#        liquidity_recipient, dev_beneficiary, treasury_recipient,
#        enforce_claim_deadline=False)
#   set_merkle_root(root)                    admin, once
#   claim(amount, proof)                     value must equal service_fee
#   sweep(destination) -> int                admin, after claim_period_ends
#   start_vest(lock_address)                 admin, once
#   merkle_root() / has_claimed(a) / vest_started() / config() / owner()
#   name() / symbol() / decimals() / total_supply() / balance_of(a) / allowance(o, s)
#   transfer(to, amount) / approve(spender, amount) / transfer_from(owner, to, amount)
#   transfer_ownership(new_owner) / renounce_ownership()
#
# Notes:
# - The claimant is always the caller; the fee is the value attached to the call.
# - The claimed flag and the Claim event are written before any value or token
#   leaves the contract. A re-entrant claim therefore sees the account as claimed.
# - The undistributed pool is this contract's own token balance. Until
#   start_vest runs, that balance also holds the dev pool.

from dropvm.stdlib import abi, calls, events, storage, treasury

from airdrop.stdlib import merkle
from airdrop.stdlib.access import ownable
from airdrop.stdlib.math import is_u256, require_u256
from airdrop.stdlib.store import get_bytes, get_flag, get_u256, set_bytes, set_flag, set_u256
from airdrop.stdlib.token import fungible, require_address

# ---- storage keys -------------------------------------------------------------------
K_INIT = b"drop:init"
K_ROOT = b"drop:root"
K_VEST_STARTED = b"drop:vest"
K_CLAIMED_PREFIX = b"drop:claimed:"

K_AIRDROP_POOL = b"drop:cfg:airdrop_pool"
K_DEV_POOL = b"drop:cfg:dev_pool"
K_LIQUIDITY_POOL = b"drop:cfg:liquidity_pool"
K_TREASURY_POOL = b"drop:cfg:treasury_pool"
K_CLAIM_PERIOD_ENDS = b"drop:cfg:claim_period_ends"
K_SERVICE_FEE = b"drop:cfg:service_fee"
K_FEE_RECIPIENT = b"drop:cfg:fee_recipient"
K_LIQUIDITY_RECIPIENT = b"drop:cfg:liquidity_recipient"
K_DEV_BENEFICIARY = b"drop:cfg:dev_beneficiary"
K_TREASURY_RECIPIENT = b"drop:cfg:treasury_recipient"
K_ENFORCE_DEADLINE = b"drop:cfg:enforce_deadline"

# ---- errors -------------------------------------------------------------------------
ERR_ALREADY_INIT = b"DROP:ALREADY_INIT"
ERR_NOT_INIT = b"DROP:NOT_INIT"
ERR_BAD_ALLOCATION = b"DROP:BAD_ALLOCATION"
ERR_ALREADY_CONFIGURED = b"DROP:ALREADY_CONFIGURED"
ERR_BAD_ROOT = b"DROP:BAD_ROOT"
ERR_INVALID_PROOF = b"DROP:INVALID_PROOF"
ERR_ALREADY_CLAIMED = b"DROP:ALREADY_CLAIMED"
ERR_INSUFFICIENT_FEE = b"DROP:INSUFFICIENT_FEE"
ERR_CLAIM_PERIOD_ENDED = b"DROP:CLAIM_PERIOD_ENDED"
ERR_PERIOD_NOT_ENDED = b"DROP:PERIOD_NOT_ENDED"
ERR_VEST_ALREADY_STARTED = b"DROP:VEST_ALREADY_STARTED"

# ---- events -------------------------------------------------------------------------
EV_ROOT_CHANGED = b"RootChanged"
EV_CLAIM = b"Claim"
EV_SWEPT = b"Swept"
EV_VEST_STARTED = b"VestStarted"


# ---- guards -------------------------------------------------------------------------

def _guard_inited() -> None:
    abi.require(get_flag(K_INIT), ERR_NOT_INIT)


def _only_admin() -> None:
    _guard_inited()
    ownable.require_owner(abi.caller())


def _claimed_key(account: bytes) -> bytes:
    return K_CLAIMED_PREFIX + bytes(account)


# ---- init ---------------------------------------------------------------------------

def init(
    name: bytes,
    symbol: bytes,
    decimals: int,
    total_supply: int,
    airdrop_pool: int,
    dev_pool: int,
    liquidity_pool: int,
    claim_period_ends: int,
    service_fee: int,
    fee_recipient: bytes,
    liquidity_recipient: bytes,
    dev_beneficiary: bytes,
    treasury_recipient: bytes,
    enforce_claim_deadline: bool = False,
) -> None:
    """
    One-time initializer. The caller becomes the administrator. Mints the
    airdrop and dev pools to this contract, the liquidity pool to
    `liquidity_recipient` and the remainder to `treasury_recipient`.
    """
    if get_flag(K_INIT):
        abi.revert(ERR_ALREADY_INIT)

    require_u256(total_supply, airdrop_pool, dev_pool, liquidity_pool, claim_period_ends, service_fee)
    for addr in (fee_recipient, liquidity_recipient, dev_beneficiary, treasury_recipient):
        require_address(addr)

    allocated = airdrop_pool + dev_pool + liquidity_pool
    if allocated > total_supply:
        abi.revert(ERR_BAD_ALLOCATION)
    treasury_pool = total_supply - allocated

    set_flag(K_INIT)
    ownable.init_owner(abi.caller())
    fungible.init_metadata(name, symbol, decimals)

    set_u256(K_AIRDROP_POOL, airdrop_pool)
    set_u256(K_DEV_POOL, dev_pool)
    set_u256(K_LIQUIDITY_POOL, liquidity_pool)
    set_u256(K_TREASURY_POOL, treasury_pool)
    set_u256(K_CLAIM_PERIOD_ENDS, claim_period_ends)
    set_u256(K_SERVICE_FEE, service_fee)
    set_bytes(K_FEE_RECIPIENT, fee_recipient)
    set_bytes(K_LIQUIDITY_RECIPIENT, liquidity_recipient)
    set_bytes(K_DEV_BENEFICIARY, dev_beneficiary)
    set_bytes(K_TREASURY_RECIPIENT, treasury_recipient)
    if enforce_claim_deadline:
        set_flag(K_ENFORCE_DEADLINE)

    me = abi.self_address()
    fungible.mint(me, airdrop_pool + dev_pool)
    fungible.mint(liquidity_recipient, liquidity_pool)
    fungible.mint(treasury_recipient, treasury_pool)


# ---- merkle root registry -----------------------------------------------------------

def merkle_root() -> bytes:
    """The eligibility commitment; 32 zero bytes while unset."""
    return get_bytes(K_ROOT) or merkle.ZERO_ROOT


def set_merkle_root(root: bytes) -> None:
    _only_admin()
    if merkle_root() != merkle.ZERO_ROOT:
        abi.revert(ERR_ALREADY_CONFIGURED)
    if not merkle.is_hash(root) or root == merkle.ZERO_ROOT:
        abi.revert(ERR_BAD_ROOT)
    set_bytes(K_ROOT, root)
    events.emit(EV_ROOT_CHANGED, {"root": root})


# ---- claim ledger -------------------------------------------------------------------

def has_claimed(account: bytes) -> bool:
    require_address(account)
    return get_flag(_claimed_key(account))


# ---- claim processor ----------------------------------------------------------------

def claim(amount: int, proof: list) -> bool:
    """
    Claim `amount` tokens for the caller. The attached value must equal the
    service fee exactly; it is forwarded to the fee recipient.
    """
    _guard_inited()
    account = abi.caller()

    if get_flag(K_ENFORCE_DEADLINE) and abi.block_timestamp() > get_u256(K_CLAIM_PERIOD_ENDS):
        abi.revert(ERR_CLAIM_PERIOD_ENDED)

    root = merkle_root()
    if root == merkle.ZERO_ROOT or not is_u256(amount):
        abi.revert(ERR_INVALID_PROOF)
    if not merkle.verify_proof(proof, root, merkle.leaf_hash(account, amount)):
        abi.revert(ERR_INVALID_PROOF)

    if has_claimed(account):
        abi.revert(ERR_ALREADY_CLAIMED)

    fee = abi.value()
    if fee != get_u256(K_SERVICE_FEE):
        abi.revert(ERR_INSUFFICIENT_FEE)

    set_flag(_claimed_key(account))
    events.emit(EV_CLAIM, {"account": account, "amount": amount})

    treasury.transfer(get_bytes(K_FEE_RECIPIENT), fee)
    fungible.transfer(abi.self_address(), account, amount)
    return True


# ---- sweep --------------------------------------------------------------------------

def sweep(destination: bytes) -> int:
    """Move the whole undistributed balance to `destination` once claims are over."""
    _only_admin()
    require_address(destination)
    if abi.block_timestamp() <= get_u256(K_CLAIM_PERIOD_ENDS):
        abi.revert(ERR_PERIOD_NOT_ENDED)

    me = abi.self_address()
    amount = fungible.balance_of(me)
    fungible.transfer(me, destination, amount)
    events.emit(EV_SWEPT, {"destination": destination, "amount": amount})
    return amount


# ---- vesting ------------------------------------------------------------------------

def vest_started() -> bool:
    return get_flag(K_VEST_STARTED)


def start_vest(lock_address: bytes) -> None:
    """Hand the dev pool to the lock contract on behalf of the dev beneficiary."""
    _only_admin()
    require_address(lock_address)
    if vest_started():
        abi.revert(ERR_VEST_ALREADY_STARTED)
    set_flag(K_VEST_STARTED)

    amount = get_u256(K_DEV_POOL)
    beneficiary = get_bytes(K_DEV_BENEFICIARY)
    fungible.approve(abi.self_address(), lock_address, amount)
    events.emit(EV_VEST_STARTED, {"lock": lock_address, "beneficiary": beneficiary, "amount": amount})
    calls.call(lock_address, "lock", beneficiary, amount)


# ---- configuration view -------------------------------------------------------------

def config() -> dict:
    _guard_inited()
    return {
        "name": fungible.name(),
        "symbol": fungible.symbol(),
        "decimals": fungible.decimals(),
        "total_supply": fungible.total_supply(),
        "airdrop_pool": get_u256(K_AIRDROP_POOL),
        "dev_pool": get_u256(K_DEV_POOL),
        "liquidity_pool": get_u256(K_LIQUIDITY_POOL),
        "treasury_pool": get_u256(K_TREASURY_POOL),
        "claim_period_ends": get_u256(K_CLAIM_PERIOD_ENDS),
        "service_fee": get_u256(K_SERVICE_FEE),
        "fee_recipient": get_bytes(K_FEE_RECIPIENT),
        "liquidity_recipient": get_bytes(K_LIQUIDITY_RECIPIENT),
        "dev_beneficiary": get_bytes(K_DEV_BENEFICIARY),
        "treasury_recipient": get_bytes(K_TREASURY_RECIPIENT),
        "enforce_claim_deadline": get_flag(K_ENFORCE_DEADLINE),
    }


# ---- ownership ----------------------------------------------------------------------

def owner() -> bytes:
    return ownable.get_owner() or b""


def transfer_ownership(new_owner: bytes) -> None:
    ownable.transfer_ownership(abi.caller(), new_owner)


def renounce_ownership() -> None:
    ownable.renounce_ownership(abi.caller())


# ---- token surface ------------------------------------------------------------------

def name() -> bytes:
    return fungible.name()


def symbol() -> bytes:
    return fungible.symbol()


def decimals() -> int:
    return fungible.decimals()


def total_supply() -> int:
    return fungible.total_supply()


def balance_of(addr: bytes) -> int:
    return fungible.balance_of(addr)


def allowance(owner: bytes, spender: bytes) -> int:
    return fungible.allowance(owner, spender)


def transfer(to: bytes, amount: int) -> bool:
    return fungible.transfer(abi.caller(), to, amount)


def approve(spender: bytes, amount: int) -> bool:
    return fungible.approve(abi.caller(), spender, amount)


def transfer_from(owner: bytes, to: bytes, amount: int) -> bool:
    return fungible.transfer_from(abi.caller(), owner, to, amount)
