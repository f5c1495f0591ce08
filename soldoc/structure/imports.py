"""
Import Table and Parent Resolution

Maps the names a contract inherits from to the files they are imported from.
"""

import logging
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional

from soldoc.parser import ImportStatement

logger = logging.getLogger(__name__)


CONTRACT_FILE_EXTENSION = '.sol'


@dataclass
class ImportEntry:
    """Information about an import statement."""
    from_path: str
    alias: str
    default_alias: str

    def to_dict(self) -> Dict[str, str]:
        return {
            'from': self.from_path,
            'alias': self.alias,
            'defaultAlias': self.default_alias,
        }


def contract_name_from_path(path: str) -> str:
    """
    Default alias of an import: last path segment without extension.

    Example:
        contracts/Token.sol -> Token
    """
    name = path[path.rfind('/') + 1:]
    if name.endswith(CONTRACT_FILE_EXTENSION):
        name = name[:-len(CONTRACT_FILE_EXTENSION)]
    return name


def build_import_table(imports: Iterable[ImportStatement]) -> List[ImportEntry]:
    """One ImportEntry per import statement, in declaration order."""
    table = []
    for statement in imports:
        default_alias = contract_name_from_path(statement.from_path)
        table.append(ImportEntry(
            from_path=statement.from_path,
            alias=statement.alias or default_alias,
            default_alias=default_alias
        ))
    return table


def resolve_import_for_name(name: str, import_table: Iterable[ImportEntry]) -> Optional[str]:
    """Path of the first import whose alias is `name`, or None."""
    for entry in import_table:
        if entry.alias == name:
            return entry.from_path
    return None


def resolve_parents(parent_names: Iterable[str], import_table: List[ImportEntry]) -> Dict[str, Optional[str]]:
    """
    Resolve each declared parent to an import path.

    Parents with no matching import alias map to None; they are logged and
    otherwise ignored.
    """
    parents = {}
    for name in parent_names:
        path = resolve_import_for_name(name, import_table)
        if path is None:
            logger.warning("Parent contract '%s' does not match any import alias", name)
        parents[name] = path
    return parents
