"""
Import Resolution

Turns the path written in an import statement into source text and the
canonical path of the file it came from.
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Iterable, List, Optional

from soldoc.errors import ImportResolutionError

logger = logging.getLogger(__name__)


@dataclass
class ResolvedImport:
    source: str
    path: str


# resolver(import_path, importing_file_path) -> ResolvedImport
ImportResolver = Callable[[str, Optional[str]], ResolvedImport]


class FileImportResolver:
    """
    Resolves imports against the local filesystem.

    Search order:
    - ./x.sol, ../x.sol -> relative to the importing file's directory (or cwd)
    - other paths -> importing file's directory, each include path, then
      node_modules directories walking up from the importing file
    """

    def __init__(self, include_paths: Iterable[Path] = ()):
        self.include_paths = [Path(p) for p in include_paths]

    def __call__(self, import_path: str, from_file: Optional[str] = None) -> ResolvedImport:
        module_file = self._find_source_file(import_path, from_file)
        if module_file is None:
            raise ImportResolutionError(import_path, from_file)

        logger.debug("Resolved import '%s' to %s", import_path, module_file)
        return ResolvedImport(source=module_file.read_text(), path=str(module_file))

    def _find_source_file(self, import_path: str, from_file: Optional[str]) -> Optional[Path]:
        base_dir = Path(from_file).parent if from_file else Path.cwd()

        if import_path.startswith('./') or import_path.startswith('../'):
            candidates = [base_dir / import_path]
        else:
            candidates = [base_dir / import_path]
            candidates.extend(include / import_path for include in self.include_paths)
            candidates.extend(modules / import_path for modules in self._node_modules_dirs(base_dir))

        for candidate in candidates:
            if candidate.is_file():
                return candidate.resolve()

        return None

    def _node_modules_dirs(self, base_dir: Path) -> List[Path]:
        """node_modules directories from base_dir up to the filesystem root."""
        directories = []
        current = base_dir.resolve()
        while True:
            if (current / 'node_modules').is_dir():
                directories.append(current / 'node_modules')
            if current.parent == current:
                break
            current = current.parent
        return directories


default_import_resolver = FileImportResolver()
