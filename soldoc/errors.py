"""
Exceptions raised by soldoc.

Library code raises these; only the CLI catches and reports them.
"""

from typing import Optional


class SoldocError(Exception):
    """Base class for all soldoc errors."""


class SolidityParseError(SoldocError):
    """Source text could not be parsed."""

    def __init__(self, message: str, line: Optional[int] = None):
        self.line = line
        if line is not None:
            message = f"line {line}: {message}"
        super().__init__(message)


class MissingPragmaError(SoldocError):
    """No pragma statement is declared in the source."""


class ContractNotFoundError(SoldocError):
    """The source declares no (matching) contract."""


class ImportResolutionError(SoldocError):
    """An import path could not be turned into source text."""

    def __init__(self, import_path: str, from_file: Optional[str] = None):
        self.import_path = import_path
        self.from_file = from_file
        where = f" (imported from {from_file})" if from_file else ""
        super().__init__(f"Cannot resolve import '{import_path}'{where}")


class CircularInheritanceError(SoldocError):
    """A contract inherits, directly or transitively, from itself."""

    def __init__(self, lineage):
        self.lineage = list(lineage)
        super().__init__("Circular inheritance: " + " -> ".join(self.lineage))
