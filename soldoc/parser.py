"""
Solidity Parser

Parses Solidity source files into a tree of tagged declaration nodes using
regex pattern matching and brace counting. No compiler required.

Every node records the character offset where its declaration starts, so the
doc comment above it can be recovered from the raw source later on.
"""

import re
import logging
from dataclasses import dataclass, field, fields
from typing import Any, Dict, List, Optional, Tuple, Union

from soldoc.errors import SolidityParseError

logger = logging.getLogger(__name__)


# Words that may precede the name of a state variable
STATE_VAR_KEYWORDS = {'public', 'private', 'internal', 'constant', 'immutable', 'override'}

# Words that may follow the parameter list of a function type
FUNCTION_TYPE_ATTRIBUTES = {'external', 'internal', 'payable', 'view', 'pure', 'constant'}

# Words that may end an unnamed function declaration
FUNCTION_ATTRIBUTES = FUNCTION_TYPE_ATTRIBUTES | {'public', 'private', 'virtual', 'override'}

# Words that may appear between a parameter type and its name
PARAM_KEYWORDS = {'memory', 'storage', 'calldata', 'indexed'}

# Contract body items that never become documented members
SKIPPED_BODY_ITEMS = ('modifier', 'struct', 'enum', 'using', 'error', 'type')

_IDENTIFIER = re.compile(r'^[A-Za-z_$][\w$]*$')
_MODIFIER_WORD = re.compile(r'\s*([\w.]+)\s*')


class Node:
    """Common behaviour of all syntax tree nodes."""

    @property
    def type(self) -> str:
        return type(self).__name__

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization."""
        result = {'type': self.type}
        for f in fields(self):
            result[f.name] = _to_plain(getattr(self, f.name))
        return result


def _to_plain(value: Any) -> Any:
    if isinstance(value, (Node, Modifier, Parameter)):
        return value.to_dict()
    if isinstance(value, list):
        return [_to_plain(item) for item in value]
    return value


@dataclass
class Modifier:
    """A word following a function's parameter list (visibility, mutability, modifier call)."""
    name: str
    arguments: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {'name': self.name, 'arguments': self.arguments}


@dataclass
class Parameter:
    """A function, return or event parameter."""
    type_name: str
    name: Optional[str] = None
    storage_location: Optional[str] = None
    indexed: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {
            'type': self.type_name,
            'name': self.name,
            'storage_location': self.storage_location,
            'indexed': self.indexed,
        }


@dataclass
class PragmaStatement(Node):
    name: str  # 'solidity', 'experimental', ...
    value: str
    operator: str
    version: Optional[str]
    start: int
    line: int

    @property
    def version_constraint(self) -> str:
        """Operator and version of the first constraint, e.g. '^0.4.18'."""
        if not self.version:
            return ''
        return self.operator + self.version


@dataclass
class ImportStatement(Node):
    from_path: str
    alias: Optional[str]
    symbols: List[Dict[str, Optional[str]]]
    start: int
    line: int

    def to_dict(self) -> Dict[str, Any]:
        result = super().to_dict()
        result['from'] = result.pop('from_path')
        return result


@dataclass
class EventDeclaration(Node):
    name: str
    params: List[Parameter]
    is_anonymous: bool
    start: int
    line: int


@dataclass
class FunctionDeclaration(Node):
    name: str
    params: List[Parameter]
    modifiers: List[Modifier]
    returns: List[Parameter]
    is_constructor: bool
    is_abstract: bool
    start: int
    line: int

    def has_modifier(self, *names: str) -> bool:
        """True if any modifier is named one of `names`."""
        return any(modifier.name in names for modifier in self.modifiers)


@dataclass
class DeclarativeExpression(Node):
    """A state variable declaration."""
    name: str
    type_name: str
    visibility: str
    is_public: bool
    is_constant: bool
    start: int
    line: int


ContractMember = Union[EventDeclaration, FunctionDeclaration, DeclarativeExpression]


@dataclass
class ContractStatement(Node):
    name: str
    kind: str  # 'contract', 'library', 'interface'
    parents: List[str]
    body: List[ContractMember]
    is_abstract: bool
    start: int
    end: int
    line: int


@dataclass
class SyntaxTree:
    """Ordered top-level declarations of one source file."""
    body: List[Union[PragmaStatement, ImportStatement, ContractStatement]] = field(default_factory=list)

    @property
    def pragmas(self) -> List[PragmaStatement]:
        return [elt for elt in self.body if isinstance(elt, PragmaStatement)]

    @property
    def imports(self) -> List[ImportStatement]:
        return [elt for elt in self.body if isinstance(elt, ImportStatement)]

    @property
    def contracts(self) -> List[ContractStatement]:
        return [elt for elt in self.body if isinstance(elt, ContractStatement)]

    def to_dict(self) -> Dict[str, Any]:
        return {'type': 'SourceUnit', 'body': [elt.to_dict() for elt in self.body]}


class SolidityParser:
    """
    Solidity parser based on regex pattern matching.

    Comments and string literals are blanked out (keeping every offset intact)
    before any structure is matched, so neither can produce declarations or
    unbalance the brace counting.
    """

    def parse(self, source_code: str) -> SyntaxTree:
        """
        Parse Solidity source code.

        Args:
            source_code: Full text of one .sol file

        Returns:
            SyntaxTree with pragma, import and contract statements in source order

        Raises:
            SolidityParseError: On unterminated comments/strings or unbalanced brackets
        """
        self._source = source_code
        self._skeleton = _blank_comments_and_strings(source_code)

        tree = SyntaxTree()
        for start, end in self._split_items(0, len(source_code)):
            text = self._skeleton[start:end]

            if re.match(r'pragma\b', text):
                tree.body.append(self._parse_pragma(start, end))
            elif re.match(r'import\b', text):
                tree.body.append(self._parse_import(start, end))
            elif re.match(r'(?:abstract\s+)?(?:contract|library|interface)\b', text):
                tree.body.append(self._parse_contract(start, end))
            else:
                logger.debug("Skipping top-level item at line %d", self._line(start))

        return tree

    def _line(self, offset: int) -> int:
        return self._source.count('\n', 0, offset) + 1

    def _split_items(self, begin: int, end: int) -> List[Tuple[int, int]]:
        """
        Split skeleton[begin:end] into items at bracket depth 0.

        An item ends at a ';' at depth 0, or at the '}' that closes a
        top-level brace block.
        """
        text = self._skeleton
        items = []
        depth = 0
        item_start = None
        closers = {')': '(', ']': '[', '}': '{'}
        stack = []

        for i in range(begin, end):
            char = text[i]
            if item_start is None:
                if char.isspace():
                    continue
                item_start = i

            if char in '([{':
                stack.append(char)
                depth += 1
            elif char in closers:
                if not stack or stack[-1] != closers[char]:
                    raise SolidityParseError(f"Unexpected '{char}'", self._line(i))
                stack.pop()
                depth -= 1
                # 'import {A, B} from "x";' runs on to its ';'
                if depth == 0 and char == '}' and not text.startswith('import', item_start):
                    items.append((item_start, i + 1))
                    item_start = None
            elif char == ';' and depth == 0:
                items.append((item_start, i + 1))
                item_start = None

        if stack:
            raise SolidityParseError(f"Unclosed '{stack[-1]}'", self._line(item_start or begin))
        if item_start is not None:
            raise SolidityParseError("Unterminated declaration", self._line(item_start))

        return items

    def _parse_pragma(self, start: int, end: int) -> PragmaStatement:
        match = re.match(r'pragma\s+(\w+)\s*(.*?)\s*;$', self._source[start:end], re.DOTALL)
        if not match:
            raise SolidityParseError("Malformed pragma", self._line(start))

        value = match.group(2)
        version_match = re.search(r'(?<![\w.])([\^~<>=]*)\s*(\d+(?:\.\d+)*)', value)

        return PragmaStatement(
            name=match.group(1),
            value=value,
            operator=version_match.group(1) if version_match else '',
            version=version_match.group(2) if version_match else None,
            start=start,
            line=self._line(start)
        )

    def _parse_import(self, start: int, end: int) -> ImportStatement:
        """
        Parse the four import forms:

        import "path";  import "path" as X;
        import * as X from "path";  import {A, B as C} from "path";
        """
        text = self._source[start:end]
        alias = None
        symbols = []

        match = re.match(r'import\s+(["\'])(.+?)\1\s*(?:as\s+(\w+))?\s*;$', text, re.DOTALL)
        if match:
            from_path, alias = match.group(2), match.group(3)
        else:
            match = re.match(r'import\s+\*\s*as\s+(\w+)\s+from\s+(["\'])(.+?)\2\s*;$', text, re.DOTALL)
            if match:
                alias, from_path = match.group(1), match.group(3)
            else:
                match = re.match(r'import\s*\{([^}]*)\}\s*from\s+(["\'])(.+?)\2\s*;$', text, re.DOTALL)
                if not match:
                    raise SolidityParseError("Malformed import", self._line(start))
                from_path = match.group(3)
                for symbol in match.group(1).split(','):
                    parts = symbol.split()
                    if not parts:
                        continue
                    symbols.append({
                        'name': parts[0],
                        'alias': parts[2] if len(parts) == 3 and parts[1] == 'as' else None
                    })

        return ImportStatement(
            from_path=from_path,
            alias=alias,
            symbols=symbols,
            start=start,
            line=self._line(start)
        )

    def _parse_contract(self, start: int, end: int) -> ContractStatement:
        text = self._skeleton[start:end]
        match = re.match(
            r'(abstract\s+)?(contract|library|interface)\s+(\w+)\s*(?:is\s+([^{]*?))?\s*\{',
            text, re.DOTALL
        )
        if not match or not text.endswith('}'):
            raise SolidityParseError("Malformed contract declaration", self._line(start))

        parents = []
        if match.group(4):
            for parent in _split_top_level(match.group(4), ','):
                name_match = re.match(r'([\w.]+)', parent.strip())
                if name_match:
                    parents.append(name_match.group(1))

        name = match.group(3)
        body_start = start + match.end()
        body = []
        for item_start, item_end in self._split_items(body_start, end - 1):
            member = self._parse_member(item_start, item_end)
            if member is not None:
                body.append(member)

        return ContractStatement(
            name=name,
            kind=match.group(2),
            parents=parents,
            body=body,
            is_abstract=bool(match.group(1)),
            start=start,
            end=end,
            line=self._line(start)
        )

    def _parse_member(self, start: int, end: int) -> Optional[ContractMember]:
        text = self._skeleton[start:end]
        keyword = re.match(r'\w*', text).group(0)

        if keyword == 'event':
            return self._parse_event(start, end)
        if keyword == 'function' and _is_function_type_variable(text):
            return self._parse_state_variable(start, end)
        if keyword in ('function', 'constructor', 'fallback', 'receive'):
            return self._parse_function(start, end)
        if keyword in SKIPPED_BODY_ITEMS or not text.endswith(';'):
            return None
        return self._parse_state_variable(start, end)

    def _parse_event(self, start: int, end: int) -> EventDeclaration:
        text = self._skeleton[start:end]
        match = re.match(r'event\s+(\w+)\s*\(', text)
        if not match:
            raise SolidityParseError("Malformed event", self._line(start))

        params_end = _matching_paren(text, match.end() - 1)
        if params_end is None:
            raise SolidityParseError("Unclosed event parameters", self._line(start))

        return EventDeclaration(
            name=match.group(1),
            params=_parse_parameters(text[match.end():params_end]),
            is_anonymous=bool(re.search(r'\banonymous\b', text[params_end:])),
            start=start,
            line=self._line(start)
        )

    def _parse_function(self, start: int, end: int) -> FunctionDeclaration:
        text = self._skeleton[start:end]
        match = re.match(r'(function|constructor|fallback|receive)\s*(\w*)\s*\(', text)
        if not match:
            raise SolidityParseError("Malformed function", self._line(start))

        keyword = match.group(1)
        name = match.group(2) if keyword == 'function' else keyword
        if not name:
            # Solidity <0.6 unnamed fallback
            name = 'fallback'

        params_end = _matching_paren(text, match.end() - 1)
        if params_end is None:
            raise SolidityParseError("Unclosed function parameters", self._line(start))

        # Header runs up to the body (or the ';' of an abstract declaration)
        body_match = re.search(r'[{;]', text[params_end:])
        header_end = params_end + body_match.start() if body_match else len(text)
        header = text[params_end + 1:header_end]

        returns = []
        returns_match = re.search(r'\breturns\s*\(', header)
        if returns_match:
            close = _matching_paren(header, returns_match.end() - 1)
            if close is None:
                raise SolidityParseError("Unclosed return parameters", self._line(start))
            returns = _parse_parameters(header[returns_match.end():close])
            header = header[:returns_match.start()] + ' ' + header[close + 1:]

        return FunctionDeclaration(
            name=name,
            params=_parse_parameters(text[match.end():params_end]),
            modifiers=_parse_modifiers(header),
            returns=returns,
            is_constructor=(keyword == 'constructor'),
            is_abstract=text.endswith(';'),
            start=start,
            line=self._line(start)
        )

    def _parse_state_variable(self, start: int, end: int) -> Optional[DeclarativeExpression]:
        text = self._skeleton[start:end - 1]
        head = text[:_top_level_assignment(text)]
        head = re.sub(r'\s*\(', '(', head.strip())
        tokens = _split_top_level(head, None)

        if len(tokens) < 2 or not _IDENTIFIER.match(tokens[-1]):
            logger.debug("Unrecognised contract body item at line %d", self._line(start))
            return None

        # A function type keeps its own visibility and returns clause
        type_end = 1
        if tokens[0].startswith('function('):
            while type_end < len(tokens) - 1 and (
                tokens[type_end] in FUNCTION_TYPE_ATTRIBUTES or tokens[type_end].startswith('returns(')
            ):
                type_end += 1

        keywords = [token for token in tokens[type_end:-1] if token in STATE_VAR_KEYWORDS]
        type_name = ' '.join(
            tokens[:type_end] + [token for token in tokens[type_end:-1] if token not in STATE_VAR_KEYWORDS]
        )
        visibility = next(
            (token for token in keywords if token in ('public', 'private', 'internal')),
            'internal'
        )

        return DeclarativeExpression(
            name=tokens[-1],
            type_name=type_name,
            visibility=visibility,
            is_public=(visibility == 'public'),
            is_constant='constant' in keywords,
            start=start,
            line=self._line(start)
        )


def parse(source_code: str) -> SyntaxTree:
    """Parse Solidity source code with a fresh SolidityParser."""
    return SolidityParser().parse(source_code)


def _blank_comments_and_strings(source_code: str) -> str:
    """
    Replace comments and string literal contents with spaces.

    Newlines are kept and the result has the same length as the input.
    """
    chars = list(source_code)
    length = len(source_code)

    def blank(begin, stop):
        for k in range(begin, stop):
            if chars[k] != '\n':
                chars[k] = ' '

    i = 0
    while i < length:
        if source_code.startswith('//', i):
            stop = source_code.find('\n', i)
            stop = length if stop == -1 else stop
            blank(i, stop)
            i = stop
        elif source_code.startswith('/*', i):
            stop = source_code.find('*/', i + 2)
            if stop == -1:
                raise SolidityParseError("Unterminated comment", source_code.count('\n', 0, i) + 1)
            blank(i, stop + 2)
            i = stop + 2
        elif source_code[i] in '"\'':
            quote = source_code[i]
            j = i + 1
            while j < length and source_code[j] != quote:
                if source_code[j] == '\n':
                    break
                j += 2 if source_code[j] == '\\' else 1
            if j >= length or source_code[j] != quote:
                raise SolidityParseError("Unterminated string", source_code.count('\n', 0, i) + 1)
            blank(i + 1, j)
            i = j + 1
        else:
            i += 1

    return ''.join(chars)


def _matching_paren(text: str, open_index: int) -> Optional[int]:
    """Index of the ')' closing the '(' at open_index."""
    depth = 0
    for i in range(open_index, len(text)):
        if text[i] == '(':
            depth += 1
        elif text[i] == ')':
            depth -= 1
            if depth == 0:
                return i
    return None


def _split_top_level(text: str, separator: Optional[str]) -> List[str]:
    """
    Split text on separator outside of brackets.

    A separator of None splits on whitespace. Empty parts are dropped.
    """
    parts = []
    depth = 0
    current = []

    for char in text:
        if char in '([{':
            depth += 1
        elif char in ')]}':
            depth -= 1

        is_separator = char.isspace() if separator is None else char == separator
        if is_separator and depth == 0:
            parts.append(''.join(current))
            current = []
        else:
            current.append(char)

    parts.append(''.join(current))
    return [part.strip() for part in parts if part.strip()]


def _is_function_type_variable(text: str) -> bool:
    """True for `function (uint) external h;`, False for declarations like `function() external;`."""
    if re.match(r'function\s+[A-Za-z_$]', text) or not text.endswith(';'):
        return False

    head = text[:-1]
    head = re.sub(r'\s*\(', '(', head[:_top_level_assignment(head)].strip())
    tokens = _split_top_level(head, None)
    return len(tokens) > 1 and bool(_IDENTIFIER.match(tokens[-1])) and tokens[-1] not in FUNCTION_ATTRIBUTES


def _top_level_assignment(text: str) -> int:
    """Index of the initializing '=' outside brackets, or len(text)."""
    depth = 0
    for i, char in enumerate(text):
        if char in '([{':
            depth += 1
        elif char in ')]}':
            depth -= 1
        elif char == '=' and depth == 0:
            following = text[i + 1:i + 2]
            preceding = text[i - 1:i] if i else ''
            if following not in ('>', '=') and preceding not in ('=', '!', '<', '>'):
                return i
    return len(text)


def _parse_parameters(params_str: str) -> List[Parameter]:
    parameters = []
    for param in _split_top_level(params_str, ','):
        tokens = _split_top_level(re.sub(r'\s*\(', '(', param), None)

        indexed = 'indexed' in tokens
        location = next((t for t in tokens if t in ('memory', 'storage', 'calldata')), None)
        tokens = [t for t in tokens if t not in PARAM_KEYWORDS]

        name = None
        if len(tokens) > 1 and _IDENTIFIER.match(tokens[-1]) and tokens[-1] != 'payable':
            name = tokens.pop()

        parameters.append(Parameter(
            type_name=' '.join(tokens),
            name=name,
            storage_location=location,
            indexed=indexed
        ))
    return parameters


def _parse_modifiers(header: str) -> List[Modifier]:
    """Parse 'public onlyOwner(x) constant' style words with optional arguments."""
    modifiers = []
    position = 0

    while True:
        match = _MODIFIER_WORD.match(header, position)
        if not match:
            break
        position = match.end()
        arguments = None

        if header[position:position + 1] == '(':
            close = _matching_paren(header, position)
            if close is None:
                break
            arguments = header[position + 1:close].strip()
            position = close + 1

        modifiers.append(Modifier(name=match.group(1), arguments=arguments))

    return modifiers
