# Relay used by host tests: nested calls, caught reverts, recursion, receive().

from dropvm.errors import Revert
from dropvm.stdlib import abi, calls, storage


def forward_inc(target: bytes, by: int) -> int:
    return calls.call(target, "inc", by)


def forward_env(target: bytes) -> dict:
    return calls.call(target, "env")


def forward_fail(target: bytes) -> None:
    storage.set(b"touched", b"1")
    calls.call(target, "inc_then_fail")


def try_fail(target: bytes) -> bool:
    storage.set(b"touched", b"1")
    try:
        calls.call(target, "inc_then_fail")
    except Revert as e:
        storage.set(b"last_error", e.reason)
        return False
    return True


def last_error() -> bytes:
    return storage.get(b"last_error")


def touched() -> bool:
    return storage.get(b"touched") == b"1"


def recurse(n: int) -> int:
    if n == 0:
        return 0
    return calls.call(abi.self_address(), "recurse", n - 1) + 1


def receive() -> None:
    prev = storage.get(b"received")
    total = (int.from_bytes(prev, "big") if prev else 0) + abi.value()
    storage.set(b"received", total.to_bytes(32, "big"))


def received() -> int:
    v = storage.get(b"received")
    return int.from_bytes(v, "big") if v else 0
