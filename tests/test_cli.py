import contextlib
import io
import json
import tempfile
import unittest
from pathlib import Path

from soldoc.__main__ import find_solidity_files, main


PARENT = '''pragma solidity ^0.4.18;

contract Parent {
    function inherited() public {}
}
'''

CHILD = '''pragma solidity ^0.4.18;

import "./Parent.sol";

contract Child is Parent {
    function own() public {}
}
'''


class TestCli(unittest.TestCase):
    def setUp(self):
        self.tmp = tempfile.TemporaryDirectory()
        self.root = Path(self.tmp.name)
        (self.root / 'Parent.sol').write_text(PARENT)
        (self.root / 'Child.sol').write_text(CHILD)
        (self.root / 'test').mkdir()
        (self.root / 'test' / 'Child.t.sol').write_text(CHILD)

    def tearDown(self):
        self.tmp.cleanup()

    def run_main(self, argv):
        stdout, stderr = io.StringIO(), io.StringIO()
        with contextlib.redirect_stdout(stdout), contextlib.redirect_stderr(stderr):
            code = main(argv)
        return code, stdout.getvalue(), stderr.getvalue()

    def test_find_files_skips_tests(self):
        files = find_solidity_files([str(self.root)])
        self.assertEqual([f.name for f in files], ['Child.sol', 'Parent.sol'])

    def test_json_output_file(self):
        output = self.root / 'out.json'
        code, _, _ = self.run_main([str(self.root / 'Child.sol'), '--format', 'json', '-o', str(output), '--quiet'])

        self.assertEqual(code, 0)
        data = json.loads(output.read_text())
        child = data[str(self.root / 'Child.sol')]
        self.assertEqual(set(child['functions']), {'inherited', 'own'})

    def test_no_merge(self):
        code, stdout, _ = self.run_main([str(self.root / 'Child.sol'), '--format', 'json', '--no-merge', '--quiet'])

        self.assertEqual(code, 0)
        child = json.loads(stdout)[str(self.root / 'Child.sol')]
        self.assertEqual(list(child['functions']), ['own'])

    def test_summary(self):
        code, stdout, stderr = self.run_main([str(self.root)])

        self.assertEqual(code, 0)
        self.assertIn('Documented Contracts: 2', stdout)
        self.assertIn('CONTRACT: Child', stdout)
        self.assertIn('Found 2 Solidity file(s)', stderr)

    def test_error_exit_code(self):
        (self.root / 'Bad.sol').write_text('contract Bad {}')
        code, _, stderr = self.run_main([str(self.root / 'Bad.sol'), '--quiet'])

        self.assertEqual(code, 1)
        self.assertIn('No pragma declared', stderr)

    def test_no_files(self):
        code, _, stderr = self.run_main([str(self.root / 'missing')])

        self.assertEqual(code, 1)
        self.assertIn('No Solidity files found', stderr)


if __name__ == '__main__':
    unittest.main()
