# Token that can fund a vesting lock from its own balance. Lets the lock's
# guards be exercised without going through the distributor's one-shot
# start_vest.

from dropvm.stdlib import abi, calls

from airdrop.stdlib.token import fungible


def init(supply: int) -> None:
    fungible.init_metadata(b"Lock Funder", b"FUND", 18)
    fungible.mint(abi.self_address(), supply)


def fund(lock: bytes, beneficiary: bytes, amount: int, allowance: int) -> None:
    fungible.approve(abi.self_address(), lock, allowance)
    calls.call(lock, "lock", beneficiary, amount)


def balance_of(addr: bytes) -> int:
    return fungible.balance_of(addr)


def allowance(owner: bytes, spender: bytes) -> int:
    return fungible.allowance(owner, spender)


def transfer(to: bytes, amount: int) -> bool:
    return fungible.transfer(abi.caller(), to, amount)


def transfer_from(owner: bytes, to: bytes, amount: int) -> bool:
    return fungible.transfer_from(abi.caller(), owner, to, amount)
