import unittest

from soldoc.parser import parse
from soldoc.structure.imports import (
    ImportEntry,
    build_import_table,
    contract_name_from_path,
    resolve_parents,
)


class TestImportTable(unittest.TestCase):
    def test_default_alias_from_path(self):
        self.assertEqual(contract_name_from_path('contracts/Token.sol'), 'Token')
        self.assertEqual(contract_name_from_path('Token.sol'), 'Token')
        self.assertEqual(contract_name_from_path('../lib/math/SafeMath'), 'SafeMath')

    def test_alias_defaults_to_file_name(self):
        tree = parse('import "contracts/Token.sol";\nimport "./Owned.sol" as Owner;')
        table = build_import_table(tree.imports)

        self.assertEqual(table, [
            ImportEntry(from_path='contracts/Token.sol', alias='Token', default_alias='Token'),
            ImportEntry(from_path='./Owned.sol', alias='Owner', default_alias='Owned'),
        ])

    def test_entry_to_dict(self):
        entry = ImportEntry(from_path='./A.sol', alias='A', default_alias='A')
        self.assertEqual(entry.to_dict(), {'from': './A.sol', 'alias': 'A', 'defaultAlias': 'A'})


class TestResolveParents(unittest.TestCase):
    def setUp(self):
        self.table = [
            ImportEntry(from_path='./Ownable.sol', alias='Ownable', default_alias='Ownable'),
            ImportEntry(from_path='./token/Standard.sol', alias='Base', default_alias='Standard'),
            ImportEntry(from_path='./other/Ownable.sol', alias='Ownable', default_alias='Ownable'),
        ]

    def test_matching_alias(self):
        parents = resolve_parents(['Ownable', 'Base'], self.table)
        self.assertEqual(parents, {'Ownable': './Ownable.sol', 'Base': './token/Standard.sol'})

    def test_first_match_wins(self):
        self.assertEqual(resolve_parents(['Ownable'], self.table)['Ownable'], './Ownable.sol')

    def test_unmatched_parent_is_none(self):
        with self.assertLogs('soldoc.structure.imports', level='WARNING') as logs:
            parents = resolve_parents(['Missing'], self.table)

        self.assertEqual(parents, {'Missing': None})
        self.assertIn('Missing', logs.output[0])

    def test_resolution_uses_alias_not_default_alias(self):
        # 'Standard' is only the default alias of an aliased import
        with self.assertLogs('soldoc.structure.imports', level='WARNING'):
            parents = resolve_parents(['Standard'], self.table)
        self.assertIsNone(parents['Standard'])

    def test_declaration_order_kept(self):
        parents = resolve_parents(['Base', 'Ownable'], self.table)
        self.assertEqual(list(parents), ['Base', 'Ownable'])


if __name__ == '__main__':
    unittest.main()
