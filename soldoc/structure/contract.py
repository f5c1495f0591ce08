"""
Contract Structure

Builds the documentation model of one Solidity contract and merges it with
the models of the contracts it inherits from.

Every derived value is computed lazily and cached for the lifetime of the
ContractStructure. Parent structures are created on first use and inherit
the import resolver of their child. One StructureRegistry is shared by a
root structure and all of its ancestors, so during one traversal each import
is resolved once and each ancestor contract is built once.
"""

import logging
import posixpath
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from soldoc.errors import CircularInheritanceError, ContractNotFoundError, MissingPragmaError
from soldoc.parser import ContractStatement, SolidityParser, SyntaxTree
from soldoc.resolver import ImportResolver, ResolvedImport, default_import_resolver
from soldoc.structure.blocks import (
    CONSTANT_FUNCTION,
    CONSTRUCTOR,
    EVENT,
    FUNCTION,
    BlockClassifier,
    ContractBlock,
)
from soldoc.structure.cache import Derivation, StructureCache
from soldoc.structure.imports import ImportEntry, build_import_table, resolve_parents

logger = logging.getLogger(__name__)


# Sections that are merged with the parents' sections
INHERITED_SECTIONS = ('events', 'functions', 'constantFunctions')


@dataclass
class ContractOptions:
    """Configuration of a ContractStructure."""
    merge_with_parents: bool = True
    file_path: Optional[str] = None
    import_resolver: ImportResolver = default_import_resolver
    contract_name: Optional[str] = None  # None documents the first contract in the file


@dataclass
class StructureRegistry:
    """
    Resolved imports and built structures of one traversal.

    Imports are keyed by (import path, importing directory), since a
    relative import names the same file from anywhere in one directory.
    Structures are keyed by (canonical path, contract name).
    """
    resolved_imports: Dict[Tuple[str, Optional[str]], ResolvedImport] = field(default_factory=dict)
    structures: Dict[Tuple[str, str], 'ContractStructure'] = field(default_factory=dict)

    def resolve(self, resolver: ImportResolver, import_path: str, from_file: Optional[str]) -> ResolvedImport:
        key = (import_path, posixpath.dirname(from_file) if from_file else None)
        if key not in self.resolved_imports:
            self.resolved_imports[key] = resolver(import_path, from_file)
        return self.resolved_imports[key]


class ContractStructure:
    """
    Documentation model of a single contract.

    Example:
        structure = ContractStructure.from_file(Path('contracts/Token.sol'))
        structure.to_dict()['functions']['transfer']['natspec']
    """

    def __init__(
        self,
        source: str,
        merge_with_parents: bool = True,
        file_path: Optional[str] = None,
        import_resolver: Optional[ImportResolver] = None,
        contract_name: Optional[str] = None,
        _lineage: Tuple[str, ...] = (),
        _registry: Optional[StructureRegistry] = None,
        _first_contract_fallback: bool = False,
    ):
        """
        Args:
            source: Solidity source text
            merge_with_parents: Default for to_dict(); include inherited members
            file_path: Path of the source, passed to the import resolver
            import_resolver: Callable(import_path, file_path) -> ResolvedImport
            contract_name: Contract to document when the file declares several
        """
        self.source = source
        self.options = ContractOptions(
            merge_with_parents=merge_with_parents,
            file_path=file_path,
            import_resolver=import_resolver or default_import_resolver,
            contract_name=contract_name
        )
        self.cache = StructureCache()
        # (import path, parent name) -> parent structure
        self.parent_structures: Dict[Tuple[str, str], 'ContractStructure'] = {}
        self.registry = _registry if _registry is not None else StructureRegistry()

        # Parents named through an import alias may not match any contract name
        self._first_contract_fallback = _first_contract_fallback

        # Canonical paths of this file and every descendant that led here
        self._lineage = tuple(_lineage)
        if file_path and file_path not in self._lineage:
            self._lineage += (file_path,)

    @classmethod
    def from_file(cls, file_path: Path, **options) -> 'ContractStructure':
        """Create a structure from a .sol file on disk."""
        file_path = Path(file_path)
        if not file_path.exists():
            raise FileNotFoundError(f"Solidity file not found: {file_path}")
        return cls(file_path.read_text(), file_path=str(file_path.resolve()), **options)

    def to_dict(self, merge_with_parents: Optional[bool] = None) -> Dict[str, Any]:
        """
        Flattened contract structure.

        Args:
            merge_with_parents: Overrides the configured default when given

        Returns:
            Dictionary with contract, source, parents, events, functions
            and constantFunctions sections
        """
        structure = {
            'contract': self.get_contract_info(),
            'source': self.get_source_info(),
            'parents': dict(self.get_parents()),
            'events': _blocks_to_dict(self.get_events()),
            'functions': _blocks_to_dict(self.get_functions()),
            'constantFunctions': _blocks_to_dict(self.get_constant_functions()),
        }

        if merge_with_parents is None:
            merge_with_parents = self.options.merge_with_parents

        if merge_with_parents:
            structure = self.merge_with_parents(structure)

        return structure

    def merge_with_parents(self, structure: Dict[str, Any]) -> Dict[str, Any]:
        """
        Add inherited members to the member sections of `structure`.

        Parents are merged in declaration order, a later parent replacing
        same-named members of an earlier one. The contract's own members
        replace everything inherited.
        """
        inherited = {key: {} for key in INHERITED_SECTIONS}

        for parent_name, parent_path in self.get_parents().items():
            if parent_path is None:
                continue
            parent_structure = self.get_parent_structure(parent_path, parent_name).to_dict()
            for key in INHERITED_SECTIONS:
                inherited[key].update(parent_structure[key])

        for key in INHERITED_SECTIONS:
            inherited[key].update(structure[key])
            structure[key] = inherited[key]

        return structure

    def get_parent_structure(self, contract_path: str, parent_name: str) -> 'ContractStructure':
        """
        Structure of parent `parent_name`, imported from `contract_path`.

        The contract named `parent_name` is documented; when the file declares
        no such contract (the name is an import alias) its first contract is.

        Raises:
            CircularInheritanceError: If the parent file is this file or one
                of its descendants
        """
        key = (contract_path, parent_name)
        if key not in self.parent_structures:
            resolved = self.registry.resolve(
                self.options.import_resolver, contract_path, self.options.file_path
            )

            if resolved.path in self._lineage:
                raise CircularInheritanceError(self._lineage + (resolved.path,))

            registry_key = (resolved.path, parent_name)
            if registry_key not in self.registry.structures:
                logger.debug("%s: loading parent %s from %s", self.get_name(), parent_name, resolved.path)
                self.registry.structures[registry_key] = ContractStructure(
                    resolved.source,
                    file_path=resolved.path,
                    import_resolver=self.options.import_resolver,
                    contract_name=parent_name,
                    _lineage=self._lineage,
                    _registry=self.registry,
                    _first_contract_fallback=True
                )
            self.parent_structures[key] = self.registry.structures[registry_key]

        return self.parent_structures[key]

    # Source structure

    def get_source_structure(self) -> SyntaxTree:
        return self.cache.get(Derivation.SYNTAX_TREE, lambda: SolidityParser().parse(self.source))

    def get_contract_statement(self) -> ContractStatement:
        return self.cache.get(Derivation.CONTRACT_STATEMENT, self._find_contract_statement)

    def _find_contract_statement(self) -> ContractStatement:
        contracts = self.get_source_structure().contracts
        wanted = self.options.contract_name

        for contract in contracts:
            if wanted is None or contract.name == wanted:
                return contract

        if wanted and self._first_contract_fallback and contracts:
            logger.debug("No contract '%s' in %s, using '%s'", wanted, self._describe_source(), contracts[0].name)
            return contracts[0]

        if wanted:
            raise ContractNotFoundError(f"Contract '{wanted}' is not declared in {self._describe_source()}")
        raise ContractNotFoundError(f"No contract declared in {self._describe_source()}")

    def _describe_source(self) -> str:
        return self.options.file_path or '<source>'

    def get_pragma(self) -> str:
        """Version constraint of the solidity pragma, e.g. '^0.4.18'."""
        return self.cache.get(Derivation.PRAGMA, self._find_pragma)

    def _find_pragma(self) -> str:
        pragmas = self.get_source_structure().pragmas
        if not pragmas:
            raise MissingPragmaError(f"No pragma declared in {self._describe_source()}")

        pragma = next((p for p in pragmas if p.name == 'solidity'), pragmas[0])
        return pragma.version_constraint

    def get_imports(self) -> List[ImportEntry]:
        return self.cache.get(
            Derivation.IMPORTS,
            lambda: build_import_table(self.get_source_structure().imports)
        )

    def get_parents(self) -> Dict[str, Optional[str]]:
        """Declared parent name -> import path (None when unresolved)."""
        return self.cache.get(
            Derivation.PARENTS,
            lambda: resolve_parents(self.get_contract_statement().parents, self.get_imports())
        )

    # Contract structure parts

    def get_name(self) -> str:
        return self.get_contract_statement().name

    def _classifier(self) -> BlockClassifier:
        return BlockClassifier(self.source, self.get_name())

    def get_contract_annotation(self) -> Dict[str, Any]:
        """NatSpec tags of the contract, with the contract name as default title."""
        def compute():
            block = self._classifier().create_block(self.get_contract_statement(), 'contract')
            annotation = block.tags
            if not annotation.get('title'):
                annotation['title'] = self.get_name()
            return annotation

        return self.cache.get(Derivation.CONTRACT_ANNOTATION, compute)

    def get_constructor(self) -> Optional[ContractBlock]:
        def compute():
            classifier = self._classifier()
            body = self.get_contract_statement().body
            node = next(iter(classifier.select(body, CONSTRUCTOR)), None)
            return classifier.create_block(node, CONSTRUCTOR)

        return self.cache.get(Derivation.CONSTRUCTOR, compute)

    def get_contract_info(self) -> Dict[str, Any]:
        constructor = self.get_constructor()
        info = {
            'name': self.get_name(),
            'constructor': constructor.to_dict() if constructor else None,
        }
        info.update(_copy_tags(self.get_contract_annotation()))
        return info

    def get_source_info(self) -> Dict[str, Any]:
        return {
            'pragma': self.get_pragma(),
            'imports': [entry.to_dict() for entry in self.get_imports()],
        }

    def get_events(self) -> Dict[str, ContractBlock]:
        return self.cache.get(Derivation.EVENTS, lambda: self._member_blocks(EVENT))

    def get_functions(self) -> Dict[str, ContractBlock]:
        return self.cache.get(Derivation.FUNCTIONS, lambda: self._member_blocks(FUNCTION))

    def get_constant_functions(self) -> Dict[str, ContractBlock]:
        """Read-only functions and getters of public state variables."""
        return self.cache.get(Derivation.CONSTANT_FUNCTIONS, lambda: self._member_blocks(CONSTANT_FUNCTION))

    def _member_blocks(self, kind: str) -> Dict[str, ContractBlock]:
        classifier = self._classifier()
        body = self.get_contract_statement().body
        return classifier.create_blocks(classifier.select(body, kind), kind)


def _blocks_to_dict(blocks: Dict[str, ContractBlock]) -> Dict[str, Dict[str, Any]]:
    return {name: block.to_dict() for name, block in blocks.items()}


def _copy_tags(tags: Dict[str, Any]) -> Dict[str, Any]:
    return {key: dict(value) if isinstance(value, dict) else value for key, value in tags.items()}
