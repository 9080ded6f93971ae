import unittest

from asyncsoap.exceptions import OperationFailedError
from asyncsoap.postprocess import PostProcessorRegistry, default_registry, journal_number


class TestJournalNumber(unittest.TestCase):
    def testEscapedMarkers(self):
        self.assertEqual(journal_number("Execute", "&lt;JournalNumber&gt;ABC123&lt;/JournalNumber&gt;"), "ABC123")

    def testLiteralMarkers(self):
        self.assertEqual(journal_number("Execute", "<JournalNumber>ABC123</JournalNumber>"), "ABC123")

    def testSurroundingWhitespace(self):
        self.assertEqual(journal_number("Execute", "\n  <JournalNumber> 42 </JournalNumber>\n"), "42")

    def testMarkerCharactersInValue(self):
        # only the exact markers are removed, not every character they contain
        self.assertEqual(journal_number("Execute", "<JournalNumber>JNb-17</JournalNumber>"), "JNb-17")

    def testUnwrapped(self):
        self.assertEqual(journal_number("Execute", "ABC123"), "ABC123")

    def testFailure(self):
        with self.assertRaises(OperationFailedError) as ctx:
            journal_number("Execute", '<SSC><Payload status="fail"><Message>locked</Message></Payload></SSC>')
        self.assertEqual(ctx.exception.operation, "Execute")
        self.assertEqual(str(ctx.exception), "the operation could not be performed")


class TestPostProcessorRegistry(unittest.TestCase):
    def testDefault(self):
        registry = default_registry()
        self.assertIs(registry["Execute"], journal_number)
        self.assertEqual(len(registry), 1)

    def testDefaultIsFresh(self):
        default_registry().unregister("Execute")
        self.assertIn("Execute", default_registry())

    def testApply(self):
        registry = PostProcessorRegistry()
        self.assertEqual(registry.apply("Query", "as is"), "as is")

        registry.register("Query", lambda operation, text: f"{operation}:{text}")
        self.assertEqual(registry.apply("Query", "x"), "Query:x")
        self.assertEqual(list(registry), ["Query"])

        registry.unregister("Query")
        self.assertNotIn("Query", registry)
        registry.unregister("Query")


if __name__ == "__main__":
    unittest.main()
