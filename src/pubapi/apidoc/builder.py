"""Build a JSON API document for a Python package.

Sources are parsed with ``ast``; the package is never imported. The
document indexes every module, class, function and attribute by dotted id.
Module and class entries list their public members as ``{"name", "id"}``
pairs. A member id can point to an entry that is not in the index (a
re-export from another distribution, or a broken re-export); the extractor
decides what to do with those.

Document layout (format version 1)::

    {
      "format_version": 1,
      "package": {"name": "example-api", "version": "1.2.0"},
      "root": "example_api",
      "index": {
        "example_api": {"id": "example_api", "kind": "module", "name": "example_api",
                        "members": [{"name": "Struct", "id": "example_api._impl.Struct"}]},
        ...
      }
    }
"""

from __future__ import annotations

import ast
import json
import tempfile
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import structlog

from pubapi.apidoc.errors import BuildIoError, GeneralBuildError
from pubapi.apidoc.manifest import Manifest, read_manifest

log = structlog.get_logger()

FORMAT_VERSION = 1


@dataclass(frozen=True, slots=True)
class BuildOptions:
    """Options for :func:`build`."""

    target_dir: Path | None = None
    package: str | None = None


def build(manifest_path: Path, options: BuildOptions | None = None) -> Path:
    """Build the API document for the package at ``manifest_path``.

    Returns the path of the written JSON document.

    Raises:
        BuildError: One of its subclasses, depending on what went wrong.
    """
    options = options or BuildOptions()
    manifest = read_manifest(manifest_path, options.package)
    return write_document(manifest, options)


def write_document(manifest: Manifest, options: BuildOptions | None = None) -> Path:
    """Build and write the document for an already-read manifest."""
    options = options or BuildOptions()
    document = build_document(manifest)
    target_dir = options.target_dir or Path(tempfile.mkdtemp(prefix="pubapi-"))
    out = Path(target_dir) / f"{document['root']}.json"
    try:
        out.parent.mkdir(parents=True, exist_ok=True)
        out.write_text(json.dumps(document, indent=2, sort_keys=True), encoding="utf-8")
    except OSError as e:
        raise BuildIoError(out, e.strerror or str(e)) from e
    log.debug("api_document_written", path=str(out), entries=len(document["index"]))
    return out


def build_document(manifest: Manifest) -> dict[str, Any]:
    """Build the API document in memory."""
    root_name = manifest.source.stem if manifest.source.is_file() else manifest.source.name
    log.debug("building_api_document", package=manifest.name, root=root_name)

    files = _discover_modules(manifest.source, root_name)
    modules: dict[str, _ScannedModule] = {}
    diagnostics: list[str] = []
    for module_name, path, is_package in files:
        try:
            text = path.read_text(encoding="utf-8")
        except UnicodeDecodeError as e:
            diagnostics.append(f"{path}: not valid UTF-8: {e.reason}")
            continue
        except OSError as e:
            raise BuildIoError(path, e.strerror or str(e)) from e
        try:
            tree = ast.parse(text, filename=str(path))
        except SyntaxError as e:
            diagnostics.append(f"{path}:{e.lineno}: {e.msg}")
            continue
        modules[module_name] = _scan_module(module_name, is_package, tree)

    if diagnostics:
        raise GeneralBuildError("\n".join(diagnostics))

    index = _Linker(root_name, modules).link()
    return {
        "format_version": FORMAT_VERSION,
        "package": {"name": manifest.name, "version": manifest.version},
        "root": root_name,
        "index": index,
    }


# =============================================================================
# Discovery
# =============================================================================


def _discover_modules(source: Path, root_name: str) -> list[tuple[str, Path, bool]]:
    """(module name, file, is_package) for every importable module, sorted."""
    if source.is_file():
        return [(root_name, source, False)]

    found: list[tuple[str, Path, bool]] = []
    for path in sorted(source.rglob("*.py")):
        rel = path.relative_to(source)
        if "__pycache__" in rel.parts:
            continue
        # Every directory on the way must be a regular package
        parents = [source.joinpath(*rel.parts[:i]) for i in range(1, len(rel.parts))]
        if not all((p / "__init__.py").is_file() for p in parents):
            continue
        parts = [root_name, *rel.parts[:-1]]
        if path.name == "__init__.py":
            found.append((".".join(parts), path, True))
        else:
            found.append((".".join([*parts, path.stem]), path, False))
    return sorted(found)


# =============================================================================
# Scanning
# =============================================================================


def is_public_name(name: str) -> bool:
    return not name.startswith("_")


def _is_dunder(name: str) -> bool:
    return len(name) > 4 and name.startswith("__") and name.endswith("__")


@dataclass
class _ScannedModule:
    name: str
    is_package: bool
    definitions: dict[str, list[dict[str, Any]]] = field(default_factory=dict)
    imports: dict[str, str] = field(default_factory=dict)
    all_names: list[str] | None = None


def _unparse(node: ast.AST | None) -> str | None:
    return ast.unparse(node) if node is not None else None


def _decorators(node: ast.FunctionDef | ast.AsyncFunctionDef | ast.ClassDef) -> list[str]:
    return [ast.unparse(d) for d in node.decorator_list]


def _function_entry(node: ast.FunctionDef | ast.AsyncFunctionDef) -> dict[str, Any]:
    return {
        "kind": "function",
        "name": node.name,
        "params": ast.unparse(node.args),
        "returns": _unparse(node.returns),
        "is_async": isinstance(node, ast.AsyncFunctionDef),
        "decorators": _decorators(node),
    }


def _literal_value(node: ast.expr | None) -> str | None:
    if node is None:
        return None
    try:
        ast.literal_eval(node)
    except (ValueError, TypeError, SyntaxError, MemoryError, RecursionError):
        return None
    return ast.unparse(node)


def _attribute_entry(
    name: str, annotation: ast.expr | None, value: ast.expr | None, scope: str
) -> dict[str, Any]:
    return {
        "kind": "attribute",
        "name": name,
        "annotation": _unparse(annotation),
        # Only constant values are part of the signature
        "value": _literal_value(value) if name.isupper() else None,
        "scope": scope,
    }


def _flatten_body(body: list[ast.stmt]) -> list[ast.stmt]:
    """Top-level statements, including those under top-level if/try blocks."""
    out: list[ast.stmt] = []
    for stmt in body:
        if isinstance(stmt, ast.If):
            out.extend(_flatten_body(stmt.body))
            out.extend(_flatten_body(stmt.orelse))
        elif isinstance(stmt, ast.Try):
            out.extend(_flatten_body(stmt.body))
            for handler in stmt.handlers:
                out.extend(_flatten_body(handler.body))
            out.extend(_flatten_body(stmt.orelse))
            out.extend(_flatten_body(stmt.finalbody))
        else:
            out.append(stmt)
    return out


def _assigned_names(stmt: ast.Assign | ast.AnnAssign) -> list[str]:
    targets = stmt.targets if isinstance(stmt, ast.Assign) else [stmt.target]
    return [t.id for t in targets if isinstance(t, ast.Name)]


def _add_definition(defs: dict[str, list[dict[str, Any]]], entry: dict[str, Any]) -> None:
    """Record a definition. First one wins, except that @overload variants accumulate."""
    existing = defs.get(entry["name"])
    is_overload = any(d in ("overload", "typing.overload") for d in entry.get("decorators", []))
    if existing is None:
        defs[entry["name"]] = [entry]
    elif is_overload and all(
        any(d in ("overload", "typing.overload") for d in e.get("decorators", []))
        for e in existing
    ):
        existing.append(entry)


def _scan_class(node: ast.ClassDef) -> dict[str, Any]:
    members: dict[str, list[dict[str, Any]]] = {}
    for stmt in node.body:
        if isinstance(stmt, ast.FunctionDef | ast.AsyncFunctionDef):
            if not (is_public_name(stmt.name) or _is_dunder(stmt.name)):
                continue
            entry = _function_entry(stmt)
            if any(d.endswith((".setter", ".deleter")) for d in entry["decorators"]):
                continue
            _add_definition(members, entry)
        elif isinstance(stmt, ast.ClassDef):
            if is_public_name(stmt.name):
                _add_definition(members, _scan_class(stmt))
        elif isinstance(stmt, ast.Assign | ast.AnnAssign):
            for name in _assigned_names(stmt):
                if is_public_name(name):
                    annotation = stmt.annotation if isinstance(stmt, ast.AnnAssign) else None
                    _add_definition(
                        members, _attribute_entry(name, annotation, stmt.value, "class")
                    )
    return {
        "kind": "class",
        "name": node.name,
        "bases": [ast.unparse(b) for b in node.bases]
        + [ast.unparse(k) for k in node.keywords],
        "decorators": _decorators(node),
        "children": members,
    }


def _resolve_relative(module: _ScannedModule, level: int, target: str | None) -> str:
    package = module.name if module.is_package else module.name.rpartition(".")[0]
    parts = package.split(".")
    if level > 1:
        parts = parts[: len(parts) - (level - 1)]
    base = ".".join(parts)
    if target:
        return f"{base}.{target}" if base else target
    return base


def _literal_names(node: ast.expr) -> list[str] | None:
    if isinstance(node, ast.List | ast.Tuple):
        names = [e.value for e in node.elts if isinstance(e, ast.Constant)]
        if all(isinstance(n, str) for n in names) and len(names) == len(node.elts):
            return names  # type: ignore[return-value]
    return None


def _scan_module(name: str, is_package: bool, tree: ast.Module) -> _ScannedModule:
    module = _ScannedModule(name=name, is_package=is_package)
    for stmt in _flatten_body(tree.body):
        if isinstance(stmt, ast.FunctionDef | ast.AsyncFunctionDef):
            entry = _function_entry(stmt)
            _add_definition(module.definitions, entry)
        elif isinstance(stmt, ast.ClassDef):
            _add_definition(module.definitions, _scan_class(stmt))
        elif isinstance(stmt, ast.ImportFrom):
            base = (
                _resolve_relative(module, stmt.level, stmt.module)
                if stmt.level
                else stmt.module or ""
            )
            for alias in stmt.names:
                if alias.name == "*":
                    continue
                module.imports[alias.asname or alias.name] = f"{base}.{alias.name}"
        elif isinstance(stmt, ast.Import):
            for alias in stmt.names:
                if alias.asname:
                    module.imports[alias.asname] = alias.name
        elif isinstance(stmt, ast.Assign | ast.AnnAssign | ast.AugAssign):
            if isinstance(stmt, ast.AugAssign):
                if (
                    isinstance(stmt.target, ast.Name)
                    and stmt.target.id == "__all__"
                    and (extra := _literal_names(stmt.value)) is not None
                ):
                    module.all_names = [*(module.all_names or []), *extra]
                continue
            for target in _assigned_names(stmt):
                if target == "__all__" and stmt.value is not None:
                    module.all_names = _literal_names(stmt.value)
                elif is_public_name(target):
                    annotation = stmt.annotation if isinstance(stmt, ast.AnnAssign) else None
                    _add_definition(
                        module.definitions,
                        _attribute_entry(target, annotation, stmt.value, "module"),
                    )
    return module


# =============================================================================
# Linking
# =============================================================================


class _Linker:
    """Turns scanned modules into the flat, id-keyed index."""

    def __init__(self, root: str, modules: dict[str, _ScannedModule]) -> None:
        self._root = root
        self._modules = modules
        self._index: dict[str, dict[str, Any]] = {}

    def _is_internal(self, dotted: str) -> bool:
        return dotted == self._root or dotted.startswith(f"{self._root}.")

    def resolve(self, dotted: str, seen: frozenset[str] = frozenset()) -> list[str]:
        """Follow import chains to the ids of the defining entries.

        An overloaded function resolves to one id per variant. Returns
        ``[dotted]`` when it cannot be resolved.
        """
        if dotted in self._modules or dotted in seen:
            return [dotted]
        module_name, _, attr = dotted.rpartition(".")
        module = self._modules.get(module_name)
        if module is None:
            return [dotted]
        if attr in module.definitions:
            count = len(module.definitions[attr])
            if count == 1:
                return [dotted]
            return [f"{dotted}#{n}" for n in range(count)]
        if attr in module.imports:
            return self.resolve(module.imports[attr], seen | {dotted})
        return [dotted]

    def _exports(self, module: _ScannedModule) -> list[str]:
        if module.all_names is not None:
            return list(dict.fromkeys(module.all_names))
        names = [n for n in module.definitions if is_public_name(n)]
        names.extend(
            n
            for n, target in module.imports.items()
            if is_public_name(n) and self._is_internal(target)
        )
        return list(dict.fromkeys(names))

    def _add_entries(self, entry_id: str, entries: list[dict[str, Any]]) -> list[str]:
        """Index one name's definitions; overloads get numbered ids."""
        ids = []
        for n, entry in enumerate(entries):
            item_id = entry_id if len(entries) == 1 else f"{entry_id}#{n}"
            self._add_entry(item_id, entry)
            ids.append(item_id)
        return ids

    def _add_entry(self, entry_id: str, entry: dict[str, Any]) -> None:
        children = entry.pop("children", None)
        entry = {"id": entry_id, **entry}
        if children is not None:
            members = []
            for name, defs in children.items():
                for child_id in self._add_entries(f"{entry_id}.{name}", defs):
                    members.append({"name": name, "id": child_id})
            entry["members"] = members
        self._index[entry_id] = entry

    def link(self) -> dict[str, dict[str, Any]]:
        for module_name in sorted(self._modules):
            module = self._modules[module_name]
            local_ids = {
                name: self._add_entries(f"{module_name}.{name}", defs)
                for name, defs in module.definitions.items()
            }

            members: list[dict[str, str]] = []
            for name in self._exports(module):
                if name in local_ids:
                    members.extend({"name": name, "id": i} for i in local_ids[name])
                elif name in module.imports:
                    members.extend(
                        {"name": name, "id": i} for i in self.resolve(module.imports[name])
                    )
                elif f"{module_name}.{name}" in self._modules:
                    members.append({"name": name, "id": f"{module_name}.{name}"})
                else:
                    # Listed in __all__ but not statically visible
                    members.append({"name": name, "id": f"{module_name}.{name}"})

            exported = {m["name"] for m in members}
            prefix = f"{module_name}."
            for sub in sorted(self._modules):
                if not sub.startswith(prefix) or "." in sub[len(prefix) :]:
                    continue
                short = sub[len(prefix) :]
                if is_public_name(short) and short not in exported:
                    members.append({"name": short, "id": sub})

            self._index[module_name] = {
                "id": module_name,
                "kind": "module",
                "name": module_name.rpartition(".")[2],
                "members": members,
            }
        return self._index
