"""Python module dependency extraction from import statements.

Walks a source tree, parses every file with :mod:`ast` and resolves its
imports to other files of the same tree. Module identifiers are POSIX
paths relative to the root (``pkg/core.py``). Imports that do not resolve
to a project file (stdlib, third-party) are not dependencies.
"""

import ast
from fnmatch import fnmatch
from pathlib import Path, PurePosixPath
from typing import Optional, Union

from ..config import DEFAULT_CONFIG, ModularityConfig
from ..exceptions import InvalidPathError
from ..logging_config import get_logger
from .base import DependencyExtractor, ExtractionResult
from .diagram import render_dependency_svg

logger = get_logger(__name__)


def is_excluded(rel_path: str, exclude_patterns: list[str]) -> bool:
    """Check a root-relative POSIX path against glob exclusion patterns.

    ``dir/*`` patterns exclude the directory at any depth.
    """
    pure = PurePosixPath(rel_path)
    parent_dirs = pure.parts[:-1]
    for pattern in exclude_patterns:
        if fnmatch(rel_path, pattern) or pure.match(pattern):
            return True
        if pattern.endswith("/*") and pattern[:-2] in parent_dirs:
            return True
    return False


def _module_key(rel_path: str) -> str:
    """'src/pkg/core.py' -> 'src.pkg.core'; package __init__ maps to the package."""
    pure = PurePosixPath(rel_path)
    dotted = ".".join(pure.with_suffix("").parts)
    if dotted.endswith(".__init__"):
        dotted = dotted[: -len(".__init__")]
    elif dotted == "__init__":
        dotted = ""
    return dotted


def build_path_index(paths: list[str]) -> dict[str, str]:
    """Map dotted module names to file paths for import resolution.

    Each file is indexed under its full dotted path and, for ``src/``
    layouts, without the leading ``src.``.
    """
    index: dict[str, str] = {}
    for path in paths:
        dotted = _module_key(path)
        if not dotted:
            continue
        index.setdefault(dotted, path)
        if dotted.startswith("src."):
            index.setdefault(dotted[4:], path)
    return index


def collect_imports(tree: ast.AST) -> list[tuple[int, str, list[str]]]:
    """Return ``(level, module, names)`` for every import statement.

    ``import a.b`` -> ``(0, "a.b", [])``;
    ``from ..m import x, y`` -> ``(2, "m", ["x", "y"])``.
    """
    # ast.walk is breadth-first; sort back into source order
    statements = sorted(
        (n for n in ast.walk(tree) if isinstance(n, (ast.Import, ast.ImportFrom))),
        key=lambda n: (n.lineno, n.col_offset),
    )

    found: list[tuple[int, str, list[str]]] = []
    for node in statements:
        if isinstance(node, ast.Import):
            found.extend((0, alias.name, []) for alias in node.names)
        else:
            names = [alias.name for alias in node.names if alias.name != "*"]
            found.append((node.level, node.module or "", names))
    return found


class PythonImportExtractor(DependencyExtractor):
    """Extract file-level dependencies of a Python source tree."""

    def __init__(self, root_dir: Union[str, Path], config: Optional[ModularityConfig] = None):
        """
        Initialize extractor.

        Args:
            root_dir: Root directory to scan
            config: Extraction settings (extensions, excludes, file cap)
        """
        self.root_dir = Path(root_dir)
        self.config = config or DEFAULT_CONFIG
        logger.debug(f"Initialized {self.__class__.__name__} for {self.root_dir}")

    def discover_files(self, warnings: Optional[list[str]] = None) -> list[str]:
        """Root-relative POSIX paths of the files to analyze, sorted."""
        ext_set = set(self.config.file_extensions)
        found: list[str] = []
        for filepath in sorted(self.root_dir.rglob("*")):
            if not filepath.is_file() or filepath.suffix not in ext_set:
                continue
            rel_path = filepath.relative_to(self.root_dir).as_posix()
            if is_excluded(rel_path, self.config.exclude_patterns):
                logger.debug(f"Skipped (pattern): {rel_path}")
                continue
            if len(found) >= self.config.max_files:
                message = f"Reached max files limit ({self.config.max_files})"
                logger.warning(message)
                if warnings is not None:
                    warnings.append(message)
                break
            found.append(rel_path)
        return found

    def extract(self, include_diagram: bool = True) -> ExtractionResult:
        """
        Extract the import adjacency of the tree.

        Raises:
            InvalidPathError: If the root is not a directory
        """
        if not self.root_dir.is_dir():
            raise InvalidPathError(self.root_dir, "not a directory")

        warnings: list[str] = []
        paths = self.discover_files(warnings)
        known = set(paths)
        index = build_path_index(paths)

        adjacency: dict[str, list[str]] = {}
        for rel_path in paths:
            tree = self._parse(rel_path, warnings)
            if tree is None:
                continue
            deps: dict[str, None] = {}
            for level, module, names in collect_imports(tree):
                resolved = self._resolve(rel_path, level, module, names, index, known)
                if not resolved:
                    if level > 0:
                        warnings.append(
                            f"{rel_path}: unresolved relative import "
                            f"'{'.' * level}{module}'"
                        )
                    continue
                for target in resolved:
                    if target != rel_path:
                        deps[target] = None
            adjacency[rel_path] = list(deps)

        # Files that failed to parse are not modules; drop edges into them
        adjacency = {
            module: [d for d in deps if d in adjacency] for module, deps in adjacency.items()
        }

        logger.info(
            f"Extraction complete: {len(adjacency)} modules, "
            f"{sum(len(d) for d in adjacency.values())} dependencies, {len(warnings)} warnings"
        )

        diagram = render_dependency_svg(adjacency) if include_diagram and adjacency else None
        return ExtractionResult.from_adjacency(adjacency, diagram=diagram, warnings=warnings)

    def _parse(self, rel_path: str, warnings: list[str]) -> Optional[ast.AST]:
        filepath = self.root_dir / rel_path
        try:
            source = filepath.read_text(encoding="utf-8", errors="replace")
        except OSError as e:
            warnings.append(f"{rel_path}: cannot read file ({e})")
            logger.warning(f"Cannot read {rel_path}: {e}")
            return None
        try:
            return ast.parse(source, filename=rel_path)
        except (SyntaxError, ValueError) as e:
            warnings.append(f"{rel_path}: skipped, cannot parse ({e})")
            logger.warning(f"Parse error for {rel_path}: {e}")
            return None

    def _resolve(
        self,
        source_path: str,
        level: int,
        module: str,
        names: list[str],
        index: dict[str, str],
        known: set[str],
    ) -> list[str]:
        """Resolve one import statement to project files (possibly several)."""
        if level > 0:
            return _resolve_relative(source_path, level, module, names, known)
        return _resolve_absolute(module, names, index)


def _resolve_absolute(module: str, names: list[str], index: dict[str, str]) -> list[str]:
    """``from a.b import c`` -> a/b/c.py if it is a module, else a/b.py.

    ``import a.b.c`` resolves to the longest dotted prefix that is a file.
    """
    resolved = [index[f"{module}.{name}"] for name in names if f"{module}.{name}" in index]
    if names and len(resolved) == len(names):
        return resolved

    parts = module.split(".")
    for end in range(len(parts), 0, -1):
        target = index.get(".".join(parts[:end]))
        if target:
            return [target] + resolved

    return resolved


def _resolve_relative(
    source_path: str, level: int, module: str, names: list[str], known: set[str]
) -> list[str]:
    """Resolve ``from ..module import names`` against the importing file's package."""
    package_dir = PurePosixPath(source_path).parent
    for _ in range(level - 1):
        package_dir = package_dir.parent

    base = package_dir
    if module:
        base = package_dir.joinpath(*module.split("."))

    def _candidate(path: PurePosixPath) -> Optional[str]:
        for candidate in (f"{path}.py", f"{path}/__init__.py"):
            if candidate in known:
                return candidate
        return None

    resolved: list[str] = []
    for name in names:
        target = _candidate(base / name)
        if target:
            resolved.append(target)

    # Names that are not submodules are attributes of the package/module itself
    if len(resolved) < len(names) or not names:
        target = _candidate(base) if module else _candidate(base / "__init__")
        if target:
            resolved.insert(0, target)

    return resolved
