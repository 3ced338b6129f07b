"""
Practice rules: AST-based checks on what the code does.

The recommended ones flag likely bugs rather than style; discovery keeps
them at error even when the corpus violates them.
"""

import ast
from typing import Dict, Iterator, List, Set, Tuple

from .base import EnumOption, Finding, ObjectOption, Rule

SCOPE_NODES = (ast.FunctionDef, ast.AsyncFunctionDef, ast.ClassDef, ast.Lambda)
MUTABLE_LITERALS = (ast.List, ast.Dict, ast.Set, ast.ListComp, ast.DictComp, ast.SetComp)
MUTABLE_FACTORIES = {"list", "dict", "set", "bytearray"}


def _iter_scope(nodes) -> Iterator[ast.AST]:
    """Walk statements without descending into nested functions, classes or lambdas."""
    stack = list(reversed(list(nodes)))
    while stack:
        node = stack.pop()
        yield node
        if isinstance(node, SCOPE_NODES):
            continue
        stack.extend(reversed(list(ast.iter_child_nodes(node))))


def _functions(tree: ast.AST) -> Iterator[ast.AST]:
    for node in ast.walk(tree):
        if isinstance(node, (ast.FunctionDef, ast.AsyncFunctionDef)):
            yield node


class SortImportsRule(Rule):
    rule_id = "sort-imports"
    description = "Require each block of top-level imports to be sorted"
    schema = (ObjectOption(ignoreCase=[True]),)
    defaults = ({},)

    def check(self, unit, options) -> Iterator[Finding]:
        ignore_case = bool(options[0].get("ignoreCase", False))

        # Group consecutive import statements (no blank line in between)
        groups: List[List[ast.stmt]] = []
        current: List[ast.stmt] = []
        for stmt in unit.tree.body:
            if isinstance(stmt, (ast.Import, ast.ImportFrom)):
                if current and stmt.lineno != current[-1].end_lineno + 1:
                    groups.append(current)
                    current = []
                current.append(stmt)
            elif current:
                groups.append(current)
                current = []
        if current:
            groups.append(current)

        for group in groups:
            if len(group) < 2:
                continue
            group_lines = [unit.lines[stmt.lineno - 1].strip() for stmt in group]
            keys = [line.lower() for line in group_lines] if ignore_case else group_lines
            if keys != sorted(keys):
                start, end = group[0].lineno, group[-1].end_lineno
                yield Finding(start, 0, f"Imports on lines {start}-{end} are not sorted alphabetically.")


class MaxParamsRule(Rule):
    rule_id = "max-params"
    description = "Limit the number of parameters a function may declare"
    schema = (EnumOption(3, 5, 7),)
    defaults = (5,)

    def check(self, unit, options) -> Iterator[Finding]:
        limit = options[0]
        for func in _functions(unit.tree):
            args = func.args
            positional = list(args.posonlyargs) + list(args.args)
            if positional and positional[0].arg in ("self", "cls"):
                positional = positional[1:]
            count = len(positional) + len(args.kwonlyargs)
            if count > limit:
                yield Finding(
                    func.lineno,
                    func.col_offset,
                    f"Function '{func.name}' has too many parameters ({count}). Maximum allowed is {limit}.",
                )


class NoPrintRule(Rule):
    rule_id = "no-print"
    description = "Disallow calls to print()"

    def check(self, unit, options) -> Iterator[Finding]:
        for node in ast.walk(unit.tree):
            if isinstance(node, ast.Call) and isinstance(node.func, ast.Name) and node.func.id == "print":
                yield Finding(node.lineno, node.col_offset, "Unexpected print statement.")


class NoBareExceptRule(Rule):
    rule_id = "no-bare-except"
    description = "Disallow except clauses without an exception type"
    recommended = True

    def check(self, unit, options) -> Iterator[Finding]:
        for node in ast.walk(unit.tree):
            if isinstance(node, ast.ExceptHandler) and node.type is None:
                yield Finding(node.lineno, node.col_offset, "Bare 'except:' catches everything, name an exception type.")


class NoMutableDefaultArgsRule(Rule):
    rule_id = "no-mutable-default-args"
    description = "Disallow mutable values as parameter defaults"
    recommended = True

    def check(self, unit, options) -> Iterator[Finding]:
        for func in _functions(unit.tree):
            defaults = list(func.args.defaults) + [d for d in func.args.kw_defaults if d is not None]
            for default in defaults:
                if self._is_mutable(default):
                    yield Finding(
                        default.lineno,
                        default.col_offset,
                        f"Mutable default argument in '{func.name}'.",
                    )

    @staticmethod
    def _is_mutable(node: ast.AST) -> bool:
        if isinstance(node, MUTABLE_LITERALS):
            return True
        return (
            isinstance(node, ast.Call)
            and isinstance(node.func, ast.Name)
            and node.func.id in MUTABLE_FACTORIES
        )


class NoDupeKeysRule(Rule):
    rule_id = "no-dupe-keys"
    description = "Disallow duplicate constant keys in dict literals"
    recommended = True

    def check(self, unit, options) -> Iterator[Finding]:
        for node in ast.walk(unit.tree):
            if not isinstance(node, ast.Dict):
                continue
            seen: Set[Tuple[str, object]] = set()
            for key in node.keys:
                # None marks a ** unpacking
                if not isinstance(key, ast.Constant):
                    continue
                marker = (type(key.value).__name__, key.value)
                if marker in seen:
                    yield Finding(key.lineno, key.col_offset, f"Duplicate key {key.value!r}.")
                seen.add(marker)


class NoUnusedVarsRule(Rule):
    rule_id = "no-unused-vars"
    description = "Disallow unused imports and unused local variables"
    recommended = True

    def check(self, unit, options) -> Iterator[Finding]:
        # Package initialisers re-export what they import
        if unit.path.endswith("__init__.py"):
            yield from self._check_locals(unit.tree)
            return
        yield from self._check_imports(unit.tree)
        yield from self._check_locals(unit.tree)

    def _check_imports(self, tree: ast.Module) -> Iterator[Finding]:
        imported: Dict[str, ast.AST] = {}
        for stmt in tree.body:
            if isinstance(stmt, ast.Import):
                for alias in stmt.names:
                    name = alias.asname or alias.name.split(".")[0]
                    imported.setdefault(name, stmt)
            elif isinstance(stmt, ast.ImportFrom):
                if stmt.module == "__future__":
                    continue
                for alias in stmt.names:
                    if alias.name == "*":
                        continue
                    imported.setdefault(alias.asname or alias.name, stmt)

        if not imported:
            return

        used = {node.id for node in ast.walk(tree) if isinstance(node, ast.Name) and isinstance(node.ctx, ast.Load)}
        used |= self._exported_names(tree)

        for name, stmt in imported.items():
            if name not in used:
                yield Finding(stmt.lineno, stmt.col_offset, f"'{name}' is imported but never used.")

    @staticmethod
    def _exported_names(tree: ast.Module) -> Set[str]:
        exported: Set[str] = set()
        for stmt in tree.body:
            if not isinstance(stmt, ast.Assign):
                continue
            if not any(isinstance(t, ast.Name) and t.id == "__all__" for t in stmt.targets):
                continue
            if isinstance(stmt.value, (ast.List, ast.Tuple)):
                for element in stmt.value.elts:
                    if isinstance(element, ast.Constant) and isinstance(element.value, str):
                        exported.add(element.value)
        return exported

    def _check_locals(self, tree: ast.Module) -> Iterator[Finding]:
        for func in _functions(tree):
            assigned: Dict[str, ast.Name] = {}
            declared: Set[str] = set()

            for node in _iter_scope(func.body):
                if isinstance(node, (ast.Global, ast.Nonlocal)):
                    declared.update(node.names)
                elif isinstance(node, ast.Assign):
                    for target in node.targets:
                        self._collect_targets(target, assigned)
                elif isinstance(node, ast.AnnAssign) and node.value is not None:
                    self._collect_targets(node.target, assigned)
                elif isinstance(node, ast.withitem) and node.optional_vars is not None:
                    self._collect_targets(node.optional_vars, assigned)

            if not assigned:
                continue

            # Loads anywhere inside the function count, closures included
            loaded = {
                node.id for node in ast.walk(func)
                if isinstance(node, ast.Name) and isinstance(node.ctx, (ast.Load, ast.Del))
            }
            for name, node in assigned.items():
                if name in loaded or name in declared or name.startswith("_"):
                    continue
                yield Finding(node.lineno, node.col_offset, f"'{name}' is assigned a value but never used.")

    @classmethod
    def _collect_targets(cls, target: ast.AST, assigned: Dict[str, ast.Name]) -> None:
        if isinstance(target, ast.Name):
            assigned.setdefault(target.id, target)
        elif isinstance(target, (ast.Tuple, ast.List)):
            for element in target.elts:
                cls._collect_targets(element, assigned)
        elif isinstance(target, ast.Starred):
            cls._collect_targets(target.value, assigned)
