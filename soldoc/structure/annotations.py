"""
Doc Comment Extraction

Recovers the documentation comment written immediately above a declaration
and splits it into NatSpec tags.
"""

import re
from typing import Any, Dict, List


# Markers at the start / end of a doc comment line
_LEADING_MARKER = re.compile(r'^(?:/\*\*|/\*|///|\*+)')
_TRAILING_MARKER = re.compile(r'\*+/$')
_TAG = re.compile(r'^@([\w:-]+)\s*(.*)$')


def _is_comment_line(line: str) -> bool:
    """A stripped line that can belong to the doc comment above a declaration."""
    return (
        not line
        or line.startswith('*/')
        or line.startswith('*')
        or line.startswith('/**')
        or line.startswith('///')
    )


def _strip_markers(line: str) -> str:
    line = _TRAILING_MARKER.sub('', line)
    line = _LEADING_MARKER.sub('', line)
    return line.strip()


def find_annotation(source: str, offset: int) -> str:
    """
    Find the doc comment that ends right before `offset`.

    Lines are scanned backward from the offset while they are blank or look
    like part of a `/** ... */` or `///` comment. The first line that does
    not stops the scan.

    Args:
        source: Full source text
        offset: Character offset where the declaration starts

    Returns:
        Comment text with markers removed, lines joined by newline ('' if none)
    """
    lines = re.split(r'\r?\n', source[:offset])
    collected: List[str] = []

    while lines:
        line = lines.pop().strip()
        if not _is_comment_line(line):
            break

        text = _strip_markers(line)
        if text:
            collected.append(text)

    collected.reverse()
    return '\n'.join(collected)


def parse_natspec(annotation: str) -> Dict[str, Any]:
    """
    Split annotation text into NatSpec tags.

    Text before the first tag is the @notice. `@param name text` entries go
    into a 'params' map. Untagged lines continue the previous tag. A tag
    given more than once keeps every value, newline joined.

    Example:
        '@title Token\\n@param to receiver'
        -> {'title': 'Token', 'params': {'to': 'receiver'}}
    """
    tags: Dict[str, Any] = {}
    current_tag = None
    current_param = None

    for line in annotation.split('\n'):
        if not line:
            continue

        match = _TAG.match(line)
        if match:
            tag, text = match.groups()
            if tag == 'param':
                name, _, description = text.partition(' ')
                tags.setdefault('params', {})[name] = description.strip()
                current_tag, current_param = 'params', name
            else:
                tags[tag] = f"{tags[tag]}\n{text}" if tag in tags else text
                current_tag, current_param = tag, None
            continue

        if current_tag is None:
            current_tag = 'notice'

        if current_tag == 'params':
            params = tags['params']
            params[current_param] = f"{params[current_param]}\n{line}".strip()
        elif current_tag in tags:
            tags[current_tag] = f"{tags[current_tag]}\n{line}".strip()
        else:
            tags[current_tag] = line

    return tags
