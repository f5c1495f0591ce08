import tempfile
import unittest
from pathlib import Path

from soldoc.errors import ImportResolutionError
from soldoc.resolver import FileImportResolver
from soldoc.structure.contract import ContractStructure


BASE = '''pragma solidity ^0.4.18;

contract Base {
    /// Base event
    event Created();

    function ping() public {}
}
'''

CHILD = '''pragma solidity ^0.4.18;

import "./Base.sol";
import "math/SafeMath.sol";

contract Child is Base, SafeMath {
    function pong() public {}
}
'''

SAFE_MATH = '''pragma solidity ^0.4.18;

contract SafeMath {
    function add(uint a, uint b) public constant returns (uint) {}
}
'''


class TestFileImportResolver(unittest.TestCase):
    def setUp(self):
        self.tmp = tempfile.TemporaryDirectory()
        self.root = Path(self.tmp.name)
        (self.root / 'contracts').mkdir()
        (self.root / 'lib' / 'math').mkdir(parents=True)
        (self.root / 'contracts' / 'Base.sol').write_text(BASE)
        (self.root / 'contracts' / 'Child.sol').write_text(CHILD)
        (self.root / 'lib' / 'math' / 'SafeMath.sol').write_text(SAFE_MATH)
        self.child_path = str(self.root / 'contracts' / 'Child.sol')

    def tearDown(self):
        self.tmp.cleanup()

    def test_relative_import(self):
        resolved = FileImportResolver()('./Base.sol', self.child_path)

        self.assertEqual(resolved.source, BASE)
        self.assertEqual(resolved.path, str((self.root / 'contracts' / 'Base.sol').resolve()))

    def test_include_path(self):
        resolver = FileImportResolver(include_paths=[self.root / 'lib'])
        resolved = resolver('math/SafeMath.sol', self.child_path)

        self.assertEqual(resolved.source, SAFE_MATH)

    def test_node_modules(self):
        modules = self.root / 'node_modules' / 'math'
        modules.mkdir(parents=True)
        (modules / 'SafeMath.sol').write_text(SAFE_MATH)

        resolved = FileImportResolver()('math/SafeMath.sol', self.child_path)
        self.assertEqual(resolved.path, str((modules / 'SafeMath.sol').resolve()))

    def test_missing_file(self):
        with self.assertRaises(ImportResolutionError) as ctx:
            FileImportResolver()('./Nope.sol', self.child_path)
        self.assertEqual(ctx.exception.import_path, './Nope.sol')

    def test_structure_from_file(self):
        resolver = FileImportResolver(include_paths=[self.root / 'lib'])
        structure = ContractStructure.from_file(Path(self.child_path), import_resolver=resolver)
        data = structure.to_dict()

        self.assertEqual(set(data['functions']), {'ping', 'pong'})
        self.assertEqual(list(data['events']), ['Created'])
        self.assertEqual(list(data['constantFunctions']), ['add'])
        self.assertEqual(data['events']['Created']['annotation'], 'Base event')

    def test_from_file_missing(self):
        with self.assertRaises(FileNotFoundError):
            ContractStructure.from_file(self.root / 'Missing.sol')


if __name__ == '__main__':
    unittest.main()
