"""
soldoc

Documentation structure extraction for Solidity contracts.
No compiler required - uses regex pattern matching and brace counting.

Resolves parent contracts through imports and merges inherited events and
functions into one flattened description per contract.
"""

__version__ = "0.2.0"

from soldoc.errors import (
    SoldocError,
    SolidityParseError,
    MissingPragmaError,
    ContractNotFoundError,
    ImportResolutionError,
    CircularInheritanceError,
)

from soldoc.parser import (
    SolidityParser,
    SyntaxTree,
    PragmaStatement,
    ImportStatement,
    ContractStatement,
    EventDeclaration,
    FunctionDeclaration,
    DeclarativeExpression,
    Modifier,
    Parameter,
    parse,
)

from soldoc.resolver import (
    FileImportResolver,
    ResolvedImport,
    default_import_resolver,
)

from soldoc.structure import (
    ContractStructure,
    ContractOptions,
    ContractBlock,
    BlockClassifier,
    ImportEntry,
    find_annotation,
    parse_natspec,
)

__all__ = [
    # Errors
    "SoldocError",
    "SolidityParseError",
    "MissingPragmaError",
    "ContractNotFoundError",
    "ImportResolutionError",
    "CircularInheritanceError",

    # Parser
    "SolidityParser",
    "SyntaxTree",
    "PragmaStatement",
    "ImportStatement",
    "ContractStatement",
    "EventDeclaration",
    "FunctionDeclaration",
    "DeclarativeExpression",
    "Modifier",
    "Parameter",
    "parse",

    # Import resolution
    "FileImportResolver",
    "ResolvedImport",
    "default_import_resolver",

    # Structure
    "ContractStructure",
    "ContractOptions",
    "ContractBlock",
    "BlockClassifier",
    "ImportEntry",
    "find_annotation",
    "parse_natspec",

    # Metadata
    "__version__"
]
