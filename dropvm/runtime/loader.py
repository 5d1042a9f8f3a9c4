"""
dropvm.runtime.loader — resolve a contract source into deployable code.

A contract is a plain Python module whose public top-level functions are its
entry points. Sources accepted by :func:`load_contract`:

- an already-imported module object
- a dotted module name (``"airdrop.contracts.distributor.contract"``)
- a path to a ``.py`` file
- a path to a ``manifest.json`` (or a directory containing one)

Manifest (minimal):
{
  "name": "distributor",
  "version": "1.0.0",
  "source": "contract.py",                  # relative to the manifest
  "exports": ["init", "claim", ...]         # optional; defaults to all public functions
}

The code hash is sha3-256 over the module source bytes, so two deployments of
the same file share a hash.
"""

from __future__ import annotations

import hashlib
import importlib
import importlib.util
import inspect
import json
from dataclasses import dataclass
from pathlib import Path
from types import ModuleType
from typing import Any, Callable, Dict, Optional, Sequence, Tuple, Union

from ..errors import VmError

ContractSource = Union[ModuleType, str, Path]


class LoaderError(VmError):
    def __init__(self, message: str, **context: Any) -> None:
        super().__init__(message, code="loader_error", context=context)


@dataclass(frozen=True)
class ContractCode:
    """Resolved contract: module plus its dispatch table."""

    name: str
    module: ModuleType
    exports: Tuple[str, ...]
    code_hash: bytes
    version: Optional[str] = None

    def has(self, fn: str) -> bool:
        return fn in self.exports

    def entry(self, fn: str) -> Callable[..., Any]:
        if fn not in self.exports:
            raise VmError(
                f"{self.name} has no exported function {fn!r}",
                code="unknown_function",
                context={"contract": self.name, "fn": fn},
            )
        return getattr(self.module, fn)


def _public_functions(module: ModuleType) -> Tuple[str, ...]:
    names = []
    for name, obj in vars(module).items():
        if name.startswith("_") or not inspect.isfunction(obj):
            continue
        # Skip helpers imported from elsewhere.
        if obj.__module__ != module.__name__:
            continue
        names.append(name)
    return tuple(sorted(names))


def _source_hash(module: ModuleType) -> bytes:
    try:
        src = inspect.getsource(module).encode("utf-8")
    except (OSError, TypeError):
        src = module.__name__.encode("utf-8")
    return hashlib.sha3_256(src).digest()


def _check_exports(module: ModuleType, exports: Sequence[str]) -> Tuple[str, ...]:
    out = []
    for name in exports:
        if not isinstance(name, str) or name.startswith("_"):
            raise LoaderError("exports must be public function names", export=name)
        if not callable(getattr(module, name, None)):
            raise LoaderError(f"exported function {name!r} not found", export=name)
        out.append(name)
    return tuple(sorted(out))


def _import_file(path: Path) -> ModuleType:
    mod_name = "dropvm_contract_" + hashlib.sha3_256(str(path.resolve()).encode()).hexdigest()[:16]
    spec = importlib.util.spec_from_file_location(mod_name, path)
    if spec is None or spec.loader is None:
        raise LoaderError(f"cannot load contract from {path}", path=str(path))
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


def _load_manifest(path: Path) -> Dict[str, Any]:
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as e:
        raise LoaderError(f"invalid manifest {path}: {e}", path=str(path)) from e
    if not isinstance(data, dict) or not isinstance(data.get("source"), str):
        raise LoaderError("manifest must be an object with a 'source' path", path=str(path))
    return data


def load_contract(source: ContractSource, *, exports: Optional[Sequence[str]] = None) -> ContractCode:
    """Resolve `source` into a :class:`ContractCode`."""
    manifest: Dict[str, Any] = {}

    if isinstance(source, ModuleType):
        module = source
    elif isinstance(source, Path) or (isinstance(source, str) and source.endswith((".py", ".json"))):
        path = Path(source)
        if path.is_dir():
            path = path / "manifest.json"
        if not path.exists():
            raise LoaderError(f"contract source not found: {path}", path=str(path))
        if path.suffix == ".json":
            manifest = _load_manifest(path)
            module = _import_file(path.parent / manifest["source"])
        else:
            module = _import_file(path)
    elif isinstance(source, str):
        try:
            module = importlib.import_module(source)
        except ImportError as e:
            raise LoaderError(f"cannot import contract module {source!r}", module=source) from e
    else:
        raise LoaderError(f"unsupported contract source type {type(source).__name__}")

    wanted = exports if exports is not None else manifest.get("exports")
    table = _check_exports(module, wanted) if wanted is not None else _public_functions(module)
    if not table:
        raise LoaderError(f"contract {module.__name__} exports no functions")

    name = manifest.get("name") or module.__name__.rsplit(".", 1)[-1]
    if name == "contract" and "." in module.__name__:
        name = module.__name__.rsplit(".", 2)[-2]

    return ContractCode(
        name=str(name),
        module=module,
        exports=table,
        code_hash=_source_hash(module),
        version=manifest.get("version"),
    )


__all__ = ["ContractCode", "LoaderError", "load_contract"]
