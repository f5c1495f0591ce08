import unittest

from soldoc.structure.annotations import find_annotation, parse_natspec


class TestFindAnnotation(unittest.TestCase):
    def test_block_comment_above_declaration(self):
        source = "/**\n * @title Foo\n */\nfunction bar() {}"
        offset = source.index('function')

        self.assertEqual(find_annotation(source, offset), "@title Foo")

    def test_multi_line_comment_keeps_line_order(self):
        source = (
            "contract A {\n"
            "    /**\n"
            "     * @notice Mint new tokens\n"
            "     * @param to receiver\n"
            "     */\n"
            "    function mint(address to) public {}\n"
            "}\n"
        )
        offset = source.index('function')

        self.assertEqual(
            find_annotation(source, offset),
            "@notice Mint new tokens\n@param to receiver"
        )

    def test_blank_lines_between_comment_and_declaration(self):
        source = "/** @dev spaced */\n\n\nevent Spaced();"
        offset = source.index('event')

        self.assertEqual(find_annotation(source, offset), "@dev spaced")

    def test_stops_at_code_line(self):
        source = (
            "uint x;\n"
            "/**\n"
            " * second\n"
            " */\n"
            "uint y;"
        )
        offset = source.index('uint y')

        self.assertEqual(find_annotation(source, offset), "second")

    def test_no_comment(self):
        source = "contract A {\n    uint public x;\n    function f() {}\n}"
        offset = source.index('function')

        self.assertEqual(find_annotation(source, offset), "")

    def test_declaration_at_start_of_file(self):
        self.assertEqual(find_annotation("contract A {}", 0), "")

    def test_comment_at_start_of_file(self):
        source = "/** First */\ncontract A {}"
        offset = source.index('contract')

        self.assertEqual(find_annotation(source, offset), "First")

    def test_triple_slash_comments(self):
        source = "    /// @notice Emitted on mint\n    /// @param to receiver\n    event Mint(address to);"
        offset = source.index('event')

        self.assertEqual(find_annotation(source, offset), "@notice Emitted on mint\n@param to receiver")

    def test_regular_line_comment_is_not_documentation(self):
        source = "// just a note\nfunction f() {}"
        offset = source.index('function')

        self.assertEqual(find_annotation(source, offset), "")

    def test_asterisks_inside_text_are_kept(self):
        source = "/**\n * @dev returns a * b\n */\nfunction mul() {}"
        offset = source.index('function')

        self.assertEqual(find_annotation(source, offset), "@dev returns a * b")

    def test_code_on_same_line_hides_comment(self):
        source = "/** hidden */\nuint x; function f() {}"
        offset = source.index('function')

        self.assertEqual(find_annotation(source, offset), "")

    def test_crlf_line_endings(self):
        source = "/**\r\n * @title Foo\r\n */\r\nfunction bar() {}"
        offset = source.index('function')

        self.assertEqual(find_annotation(source, offset), "@title Foo")


class TestParseNatspec(unittest.TestCase):
    def test_tags(self):
        tags = parse_natspec("@title Token\n@author Alice\n@dev Internal notes")

        self.assertEqual(tags, {'title': 'Token', 'author': 'Alice', 'dev': 'Internal notes'})

    def test_untagged_text_is_notice(self):
        tags = parse_natspec("Transfers tokens\n@param to receiver")

        self.assertEqual(tags['notice'], 'Transfers tokens')
        self.assertEqual(tags['params'], {'to': 'receiver'})

    def test_params(self):
        tags = parse_natspec("@param to receiver\n@param amount how many")

        self.assertEqual(tags['params'], {'to': 'receiver', 'amount': 'how many'})

    def test_continuation_lines(self):
        tags = parse_natspec("@notice First line\nsecond line\n@param to the\nreceiver")

        self.assertEqual(tags['notice'], 'First line\nsecond line')
        self.assertEqual(tags['params']['to'], 'the\nreceiver')

    def test_repeated_tag(self):
        tags = parse_natspec("@return first\n@return second")

        self.assertEqual(tags['return'], 'first\nsecond')

    def test_custom_tag(self):
        tags = parse_natspec("@custom:security-contact sec@example.com")

        self.assertEqual(tags['custom:security-contact'], 'sec@example.com')

    def test_empty(self):
        self.assertEqual(parse_natspec(""), {})


if __name__ == '__main__':
    unittest.main()
