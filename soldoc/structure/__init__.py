"""
Contract Structure Module

Doc comment extraction, member classification, parent resolution and
inheritance merging for Solidity contracts.
"""

from soldoc.structure.annotations import (
    find_annotation,
    parse_natspec,
)

from soldoc.structure.blocks import (
    BlockClassifier,
    ContractBlock,
    CONSTRUCTOR,
    EVENT,
    FUNCTION,
    CONSTANT_FUNCTION,
)

from soldoc.structure.imports import (
    ImportEntry,
    build_import_table,
    contract_name_from_path,
    resolve_parents,
)

from soldoc.structure.cache import (
    Derivation,
    StructureCache,
)

from soldoc.structure.contract import (
    ContractOptions,
    ContractStructure,
)

__all__ = [
    # Annotations
    'find_annotation',
    'parse_natspec',

    # Blocks
    'BlockClassifier',
    'ContractBlock',
    'CONSTRUCTOR',
    'EVENT',
    'FUNCTION',
    'CONSTANT_FUNCTION',

    # Imports
    'ImportEntry',
    'build_import_table',
    'contract_name_from_path',
    'resolve_parents',

    # Cache
    'Derivation',
    'StructureCache',

    # Main model
    'ContractOptions',
    'ContractStructure',
]
