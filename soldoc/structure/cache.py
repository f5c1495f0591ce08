"""
Per-structure memoization of derived values.
"""

import logging
from enum import Enum
from typing import Any, Callable, Dict

logger = logging.getLogger(__name__)


class Derivation(Enum):
    """Values derived from a contract source, each computed at most once."""
    SYNTAX_TREE = 'syntax_tree'
    CONTRACT_STATEMENT = 'contract_statement'
    PRAGMA = 'pragma'
    IMPORTS = 'imports'
    PARENTS = 'parents'
    CONSTRUCTOR = 'constructor'
    CONTRACT_ANNOTATION = 'contract_annotation'
    EVENTS = 'events'
    FUNCTIONS = 'functions'
    CONSTANT_FUNCTIONS = 'constant_functions'


class StructureCache:
    """
    Computed values keyed by Derivation.

    None and empty results are cached like any other value. Failed
    computations are not cached and raise again on the next access.
    """

    def __init__(self):
        self._values: Dict[Derivation, Any] = {}

    def get(self, key: Derivation, compute: Callable[[], Any]) -> Any:
        if key not in self._values:
            logger.debug("Computing %s", key.value)
            self._values[key] = compute()
        return self._values[key]

    def __contains__(self, key: Derivation) -> bool:
        return key in self._values
