"""
soldoc CLI

Extract the documentation structure of Solidity contracts from the command line.
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import List

from soldoc.errors import SoldocError
from soldoc.resolver import FileImportResolver
from soldoc.structure.contract import ContractStructure
from soldoc.structure.serialization import (
    YAML_AVAILABLE,
    format_structure_summary,
    serialize_to_json,
    serialize_to_yaml,
)


def find_solidity_files(paths: List[str]) -> List[Path]:
    """Find all Solidity files in given paths, excluding test files and dependencies."""
    solidity_files = []

    for path_str in paths:
        path = Path(path_str)

        if not path.exists():
            print(f"Warning: Path not found: {path}", file=sys.stderr)
            continue

        if path.is_file():
            if path.suffix == '.sol':
                solidity_files.append(path)
            else:
                print(f"Warning: Not a Solidity file: {path}", file=sys.stderr)
        elif path.is_dir():
            for solidity_file in sorted(path.rglob('*.sol')):
                if not _is_skipped_file(solidity_file):
                    solidity_files.append(solidity_file)

    return solidity_files


def _is_skipped_file(file_path: Path) -> bool:
    """Check if a file is a test file or lives in a dependency directory."""
    name = file_path.name
    parts = file_path.parts

    if name.endswith('.t.sol') or name.startswith('Test'):
        return True

    if 'node_modules' in parts or 'test' in parts or 'tests' in parts:
        return True

    return False


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='soldoc',
        description='Extract documentation structure from Solidity contracts',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  Document a single contract:
    python -m soldoc contracts/Token.sol

  Document a whole directory as JSON:
    python -m soldoc contracts/ --format json -o docs.json

  Only the contract's own members:
    python -m soldoc contracts/Token.sol --no-merge

  Resolve library imports from an extra directory:
    python -m soldoc contracts/Token.sol -I lib/
        """
    )

    parser.add_argument('paths', nargs='+', help='Solidity files or directories')
    parser.add_argument('--format', choices=['json', 'yaml', 'summary'],
                        default='summary', help='Output format (default: summary)')
    parser.add_argument('-o', '--output', help='Output file (default: stdout)')
    parser.add_argument('--no-merge', action='store_true',
                        help='Do not merge members inherited from parent contracts')
    parser.add_argument('--contract', help='Contract to document when a file declares several')
    parser.add_argument('-I', '--include-path', action='append', default=[],
                        help='Extra directory to resolve imports from (repeatable)')
    parser.add_argument('--quiet', action='store_true', help='Suppress progress messages')
    parser.add_argument('--verbose', action='store_true', help='Enable debug logging')

    return parser


def main(argv: List[str] = None) -> int:
    """Main CLI entry point."""
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format='%(levelname)s %(name)s: %(message)s'
    )

    if args.format == 'yaml' and not YAML_AVAILABLE:
        print("Error: YAML format requires pyyaml: pip install pyyaml", file=sys.stderr)
        return 1

    solidity_files = find_solidity_files(args.paths)
    if not solidity_files:
        print("Error: No Solidity files found", file=sys.stderr)
        return 1

    if not args.quiet:
        print(f"Found {len(solidity_files)} Solidity file(s)", file=sys.stderr)

    resolver = FileImportResolver(include_paths=args.include_path)
    structures = {}
    failed = 0

    for file_path in solidity_files:
        if not args.quiet:
            print(f"Parsing {file_path}...", file=sys.stderr)

        try:
            structure = ContractStructure.from_file(
                file_path,
                merge_with_parents=not args.no_merge,
                import_resolver=resolver,
                contract_name=args.contract
            )
            structures[str(file_path)] = structure.to_dict()
        except (SoldocError, OSError) as e:
            print(f"Error parsing {file_path}: {e}", file=sys.stderr)
            failed += 1

    # Generate output
    if args.format == 'summary':
        output_lines = [
            f"\n{'=' * 60}",
            "Solidity Documentation Structure",
            f"{'=' * 60}",
            f"Total Files: {len(solidity_files)}",
            f"Documented Contracts: {len(structures)}",
        ]
        for structure in structures.values():
            output_lines.append(format_structure_summary(structure))
        output = '\n'.join(output_lines)

    elif args.format == 'json':
        output = serialize_to_json(structures)

    else:
        output = serialize_to_yaml(structures)

    # Write output
    if args.output:
        Path(args.output).write_text(output)
        if not args.quiet:
            print(f"\nOutput written to {args.output}", file=sys.stderr)
    else:
        print(output)

    return 1 if failed else 0


if __name__ == '__main__':
    sys.exit(main())
