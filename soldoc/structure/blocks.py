"""
Contract Member Classification

Decides what kind of documented member a contract body declaration is, and
wraps it together with its doc comment.
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Optional

from soldoc.parser import (
    ContractMember,
    DeclarativeExpression,
    EventDeclaration,
    FunctionDeclaration,
    Node,
)
from soldoc.structure.annotations import find_annotation, parse_natspec

logger = logging.getLogger(__name__)


# Member kinds
CONSTRUCTOR = 'constructor'
EVENT = 'event'
FUNCTION = 'function'
CONSTANT_FUNCTION = 'constant-function'

# Modifiers marking a function as read-only ('constant' before Solidity 0.5)
READ_ONLY_MODIFIERS = ('constant', 'view', 'pure')

# Modifiers keeping a function out of the documented interface
HIDDEN_MODIFIERS = ('internal', 'private')


@dataclass
class ContractBlock:
    """A declaration together with the doc comment written above it."""
    name: str
    kind: str
    declaration: Node
    annotation: str = ''

    @property
    def tags(self) -> Dict[str, Any]:
        """NatSpec tags parsed from the annotation."""
        return parse_natspec(self.annotation)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization."""
        result = self.declaration.to_dict()
        result.update({
            'name': self.name,
            'kind': self.kind,
            'annotation': self.annotation,
            'natspec': self.tags,
        })
        return result


class BlockClassifier:
    """
    Classifies the body declarations of one contract.

    Rules, first match wins:
    1. function named like the contract, or `constructor(...)` -> constructor
    2. event -> event
    3. function without read-only or hidden modifiers -> function
    4. read-only function without hidden modifiers -> constant-function
    5. public state variable (implicit getter) -> constant-function

    Everything else is left out of the documentation.
    """

    def __init__(self, source: str, contract_name: str):
        self.source = source
        self.contract_name = contract_name

    def classify(self, node: ContractMember) -> Optional[str]:
        """Return the member kind of `node`, or None if it is not documented."""
        if isinstance(node, FunctionDeclaration):
            if node.is_constructor or node.name == self.contract_name:
                return CONSTRUCTOR
            if node.has_modifier(*HIDDEN_MODIFIERS):
                return None
            if node.has_modifier(*READ_ONLY_MODIFIERS):
                return CONSTANT_FUNCTION
            return FUNCTION

        if isinstance(node, EventDeclaration):
            return EVENT

        if isinstance(node, DeclarativeExpression) and node.is_public:
            return CONSTANT_FUNCTION

        return None

    def select(self, body: Iterable[ContractMember], kind: str) -> List[ContractMember]:
        """Body declarations classified as `kind`, in source order."""
        return [node for node in body if self.classify(node) == kind]

    def create_block(self, node: Optional[Node], kind: str) -> Optional[ContractBlock]:
        if node is None:
            return None
        return ContractBlock(
            name=node.name,
            kind=kind,
            declaration=node,
            annotation=find_annotation(self.source, node.start)
        )

    def create_blocks(self, nodes: Iterable[Node], kind: str) -> Dict[str, ContractBlock]:
        """Member map keyed by name. A later declaration replaces an earlier one."""
        blocks: Dict[str, ContractBlock] = {}
        for node in nodes:
            if node.name in blocks:
                logger.debug(
                    "%s: %s '%s' declared more than once, keeping the last one",
                    self.contract_name, kind, node.name
                )
            blocks[node.name] = self.create_block(node, kind)
        return blocks
