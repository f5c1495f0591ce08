"""
Serialization Support for Contract Structures

Converts contract structures to JSON, YAML and summary text for output.
"""

import json
from typing import Any, Dict
from pathlib import Path

try:
    import yaml
    YAML_AVAILABLE = True
except ImportError:
    YAML_AVAILABLE = False


def _to_plain(data: Any) -> Any:
    # Accept structures as well as their dictionaries
    if hasattr(data, 'to_dict'):
        return data.to_dict()
    if isinstance(data, list):
        return [item.to_dict() if hasattr(item, 'to_dict') else item for item in data]
    return data


def serialize_to_json(data: Any, pretty: bool = True) -> str:
    """
    Serialize data to JSON string.

    Args:
        data: ContractStructure, or the dict produced by its to_dict()
        pretty: Whether to pretty-print the JSON

    Returns:
        JSON string
    """
    data = _to_plain(data)

    if pretty:
        return json.dumps(data, indent=2, sort_keys=False)
    else:
        return json.dumps(data)


def serialize_to_yaml(data: Any) -> str:
    """
    Serialize data to YAML string.

    Raises:
        ImportError: If PyYAML is not installed
    """
    if not YAML_AVAILABLE:
        raise ImportError(
            "PyYAML is not installed. Install it with: pip install pyyaml"
        )

    return yaml.safe_dump(_to_plain(data), default_flow_style=False, sort_keys=False)


def save_structure(
    data: Any,
    output_path: Path,
    format: str = 'json',
    pretty: bool = True
) -> None:
    """
    Save contract structures in the specified format.

    Args:
        data: Structures to save
        output_path: Path to output file
        format: Output format ('json' or 'yaml')
        pretty: Whether to pretty-print (JSON only)

    Raises:
        ValueError: If format is not supported
        ImportError: If YAML format requested but PyYAML not installed
    """
    format = format.lower()

    if format == 'json':
        output_path.write_text(serialize_to_json(data, pretty=pretty))
    elif format == 'yaml' or format == 'yml':
        output_path.write_text(serialize_to_yaml(data))
    else:
        raise ValueError(f"Unsupported format: {format}. Use 'json' or 'yaml'")


def _first_line(text: str) -> str:
    return text.split('\n', 1)[0] if text else ''


def format_structure_summary(structure: Dict[str, Any]) -> str:
    """
    Format one flattened contract structure as human-readable text.

    Args:
        structure: Output of ContractStructure.to_dict()

    Returns:
        Formatted text string
    """
    contract = structure.get('contract', {})
    source = structure.get('source', {})

    lines = [f"\nCONTRACT: {contract.get('name', 'Unknown')}"]
    if contract.get('title') and contract.get('title') != contract.get('name'):
        lines.append(f"  Title: {contract['title']}")
    if contract.get('author'):
        lines.append(f"  Author: {contract['author']}")
    if source.get('pragma'):
        lines.append(f"  Pragma: {source['pragma']}")

    parents = structure.get('parents', {})
    if parents:
        lines.append(f"  Parents ({len(parents)}):")
        for name, path in parents.items():
            status = path if path else "✗ UNRESOLVED"
            lines.append(f"    - {name} [{status}]")

    if contract.get('constructor'):
        lines.append("  Constructor:")
        lines.append(f"    - {contract['constructor']['name']}")

    sections = [
        ('Events', 'events'),
        ('Functions', 'functions'),
        ('Constant Functions', 'constantFunctions'),
    ]
    for title, key in sections:
        members = structure.get(key, {})
        if not members:
            continue
        lines.append(f"  {title} ({len(members)}):")
        for name, member in members.items():
            notice = _first_line(member.get('natspec', {}).get('notice', ''))
            suffix = f": {notice}" if notice else ""
            lines.append(f"    - {name}{suffix}")

    return '\n'.join(lines)
