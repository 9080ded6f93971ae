import unittest
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Optional

from lxml import etree

from asyncsoap.client.soap import parse_fragment
from asyncsoap.decode import decode, dictify
from asyncsoap.exceptions import DecodeError


@dataclass
class Line:
    account: str = field(metadata={"xml": "AccountCode"})
    amount: Decimal = field(metadata={"xml": "Amount"})
    debit: bool = field(metadata={"xml": "DebitCredit"})


@dataclass
class Journal:
    __xml_name__ = "Journal"

    number: int = field(metadata={"xml": "number", "attribute": True})
    description: Optional[str] = field(metadata={"xml": "Description"})
    lines: list[Line] = field(metadata={"xml": "Line"})
    rate: float = field(default=1.0, metadata={"xml": "Rate"})
    notes: list[str] = field(default_factory=list, metadata={"xml": "Note"})


JOURNAL = b"""
<ns1:Journal xmlns:ns1="urn:ledger" number="17">
  <ns1:Line><ns1:AccountCode>1000</ns1:AccountCode><ns1:Amount>12.50</ns1:Amount><ns1:DebitCredit>true</ns1:DebitCredit></ns1:Line>
  <ns1:Line><ns1:AccountCode>2000</ns1:AccountCode><ns1:Amount>-12.50</ns1:Amount><ns1:DebitCredit>0</ns1:DebitCredit></ns1:Line>
  <ns1:Note>first</ns1:Note>
  <ns1:Note>second</ns1:Note>
</ns1:Journal>
"""


class TestDecode(unittest.TestCase):
    def testDataclass(self):
        journal = decode(parse_fragment(JOURNAL), Journal)

        self.assertEqual(journal.number, 17)
        self.assertIsNone(journal.description)
        self.assertEqual(journal.rate, 1.0)
        self.assertEqual(journal.notes, ["first", "second"])
        self.assertEqual(
            journal.lines,
            [
                Line(account="1000", amount=Decimal("12.50"), debit=True),
                Line(account="2000", amount=Decimal("-12.50"), debit=False),
            ],
        )

    def testRootNameMismatch(self):
        with self.assertRaises(DecodeError):
            decode(parse_fragment(b'<Voucher number="1"/>'), Journal)

    def testMissingRequiredField(self):
        with self.assertRaises(DecodeError):
            decode(parse_fragment(b"<Line><AccountCode>1000</AccountCode></Line>"), Line)

    def testInvalidNumber(self):
        with self.assertRaises(DecodeError):
            decode(parse_fragment(b'<Journal number="seventeen"/>'), Journal)

    def testInvalidBoolean(self):
        data = b"<Line><AccountCode>1</AccountCode><Amount>1</Amount><DebitCredit>maybe</DebitCredit></Line>"
        with self.assertRaises(DecodeError):
            decode(parse_fragment(data), Line)

    def testNil(self):
        @dataclass
        class Value:
            value: Optional[int]

        data = b'<result xmlns:xsi="http://www.w3.org/2001/XMLSchema-instance"><value xsi:nil="true"/></result>'
        self.assertEqual(decode(parse_fragment(data), Value), Value(value=None))

    def testNested(self):
        @dataclass
        class Inner:
            value: int

        @dataclass
        class Outer:
            inner: Inner

        self.assertEqual(decode(parse_fragment(b"<o><inner><value>5</value></inner></o>"), Outer), Outer(Inner(5)))

    def testFirstElementOnly(self):
        @dataclass
        class Value:
            value: int

        data = b"<!-- leading --><a><value>1</value></a><b><value>2</value></b>"
        self.assertEqual(decode(parse_fragment(data), Value).value, 1)

    def testString(self):
        self.assertEqual(decode(parse_fragment(b"<message>hello <b>world</b></message>"), str), "hello world")

    def testScalar(self):
        self.assertEqual(decode(parse_fragment(b"<count> 3 </count>"), int), 3)

    def testElement(self):
        el = decode(parse_fragment(b"<raw><x/></raw>"), etree._Element)
        self.assertEqual(el.tag, "raw")

    def testNoElement(self):
        with self.assertRaises(DecodeError):
            decode(parse_fragment(b"just text"), str)

    def testUnsupportedTarget(self):
        with self.assertRaises(DecodeError):
            decode(parse_fragment(b"<a>1</a>"), complex)


class TestDictify(unittest.TestCase):
    def testCoercion(self):
        el = etree.fromstring(
            b'<r xmlns:xsi="http://www.w3.org/2001/XMLSchema-instance">'
            b"<a>1</a><b>true</b><c>false</c><d>text</d><e xsi:nil=\"true\"/><!-- skipped --></r>"
        )
        self.assertEqual(dictify(el), {"a": 1, "b": True, "c": False, "d": "text", "e": None})


if __name__ == "__main__":
    unittest.main()
