"""
Tests for header field productions
"""

import io
import unittest

from src.modules.addresses import AddressList
from src.modules.headers import (
    Bcc,
    EmptyPath,
    From,
    InReplyTo,
    Keywords,
    MessageId,
    OptionalField,
    OrigDate,
    Received,
    ReturnPath,
    Sender,
    Subject,
    To,
    header_type,
)
from src.modules.lexical import CFWS
from src.modules.parse_error import (
    ExpectedError,
    FieldParseError,
    NotFoundError,
    TrailingInputError,
)
from src.modules.token import Empty


class TestOrigDate(unittest.TestCase):

    def test_case_insensitive_name_is_canonicalized(self):
        header, rem = OrigDate.parse(b"DATE: SAT, 11 Jan 2000 00:00:00 +0000\r\n")
        self.assertEqual(rem, b"")
        out = io.BytesIO()
        count = header.stream(out)
        self.assertEqual(out.getvalue(), b"Date: Sat, 11 Jan 2000 00:00:00 +0000\r\n")
        self.assertEqual(count, 39)

    def test_unfolded_date_round_trips(self):
        data = b"Date: 1 Jan 2020 10:00:00 +0000\r\n"
        header, _ = OrigDate.parse(data)
        self.assertEqual(header.to_bytes(), data)

    def test_bad_date_is_reported_against_header(self):
        with self.assertRaises(FieldParseError) as ctx:
            OrigDate.parse(b"Date: yesterday\r\n")
        self.assertEqual(ctx.exception.production, "Date")


class TestFrom(unittest.TestCase):

    def test_no_space_after_colon_is_preserved(self):
        header, rem = From.parse(b"froM:steven@a.b.c\r\n")
        self.assertEqual(rem, b"")
        out = io.BytesIO()
        self.assertEqual(header.stream(out), 19)
        self.assertEqual(out.getvalue(), b"From:steven@a.b.c\r\n")

    def test_missing_line_break(self):
        with self.assertRaises(FieldParseError) as ctx:
            From.parse(b"From: a@b")
        error = ctx.exception
        self.assertEqual(error.production, "From")
        self.assertIsInstance(error.root_cause(), ExpectedError)
        self.assertEqual(error.root_cause().expected, b"\r\n")
        self.assertTrue(str(error).startswith("From: Expected"))

    def test_other_header_is_not_found(self):
        with self.assertRaises(NotFoundError):
            From.parse(b"To: a@b\r\n")

    def test_longer_name_is_not_a_prefix_match(self):
        with self.assertRaises(NotFoundError):
            From.parse(b"From-Address: a@b\r\n")


class TestBcc(unittest.TestCase):

    def test_comment_only(self):
        header, _ = Bcc.parse(b"bcc: (hah)\r\n")
        self.assertIsInstance(header.value.value, CFWS)

    def test_address_list(self):
        header, _ = Bcc.parse(b"bcc: a@b,c@d\r\n")
        self.assertIsInstance(header.value.value, AddressList)
        self.assertEqual(len(header.value.value), 2)

    def test_empty(self):
        header, _ = Bcc.parse(b"Bcc:\r\n")
        self.assertIsInstance(header.value.value, Empty)
        self.assertEqual(header.to_bytes(), b"Bcc:\r\n")


class TestIdentificationHeaders(unittest.TestCase):

    def test_message_id(self):
        header, _ = MessageId.parse(b"message-id: <1234@local.machine.example>\r\n")
        self.assertEqual(header.value.text, "<1234@local.machine.example>")
        self.assertEqual(header.to_bytes(), b"Message-ID: <1234@local.machine.example>\r\n")

    def test_in_reply_to_list(self):
        header, _ = InReplyTo.parse(b"In-Reply-To: <a@b> <c@d>\r\n")
        self.assertEqual(len(header.value), 2)


class TestInformationalHeaders(unittest.TestCase):

    def test_subject(self):
        header, _ = Subject.parse(b"Subject: This is a test\r\n")
        self.assertEqual(header.value.text, "This is a test")

    def test_folded_subject(self):
        header, _ = Subject.parse(b"Subject: This is\r\n a test\r\n")
        self.assertEqual(header.to_bytes(), b"Subject: This is a test\r\n")

    def test_keywords(self):
        header, _ = Keywords.parse(b"Keywords: alpha, beta gamma\r\n")
        self.assertEqual([phrase.text for phrase in header.value], ["alpha", "beta gamma"])


class TestTraceHeaders(unittest.TestCase):

    def test_received(self):
        data = (b"Received: from mail.example.com by mx.example.org; "
                b"Tue, 01 Jul 2003 10:52:37 +0200\r\n")
        header, rem = Received.parse(data)
        self.assertEqual(rem, b"")
        self.assertEqual(len(header.value.tokens), 4)
        self.assertEqual(header.to_bytes(), data)

    def test_received_date_round_trips(self):
        data = b"Received: by x; 1 Jul 2003 10:52:37 -0000\r\n"
        header, _ = Received.parse(data)
        self.assertEqual(header.to_bytes(), data)

    def test_received_without_date(self):
        with self.assertRaises(FieldParseError):
            Received.parse(b"Received: from x\r\n")

    def test_return_path(self):
        header, _ = ReturnPath.parse(b"Return-Path: <bounce@example.com>\r\n")
        self.assertEqual(header.value.value.addr_spec.text, "bounce@example.com")

    def test_null_return_path(self):
        header, _ = ReturnPath.parse(b"Return-Path: <>\r\n")
        self.assertIsInstance(header.value.value, EmptyPath)
        self.assertEqual(header.to_bytes(), b"Return-Path: <>\r\n")


class TestOptionalField(unittest.TestCase):

    def test_extension_field(self):
        field, rem = OptionalField.parse(b"X-Mailer: Example 1.0\r\n")
        self.assertEqual(rem, b"")
        self.assertEqual(field.field_name, "X-Mailer")
        self.assertEqual(field.value.text, "Example 1.0")
        self.assertEqual(field.to_bytes(), b"X-Mailer: Example 1.0\r\n")

    def test_from_pair(self):
        field = OptionalField.from_pair("X-Priority", " 1")
        self.assertEqual(field.to_bytes(), b"X-Priority: 1\r\n")

    def test_from_pair_rejects_colon_in_name(self):
        with self.assertRaises(TrailingInputError):
            OptionalField.from_pair("X:Y", "1")


class TestConversionBoundary(unittest.TestCase):

    def test_trailing_input_names_header(self):
        with self.assertRaises(TrailingInputError) as ctx:
            Sender.from_value("mike@optcomp.nz[.xyz]")
        self.assertEqual(ctx.exception.production, "Sender")
        self.assertEqual(ctx.exception.offset, 15)

    def test_unparseable_value(self):
        with self.assertRaises(FieldParseError) as ctx:
            From.from_value("not an address")
        self.assertEqual(ctx.exception.production, "From")

    def test_value_object_is_wrapped(self):
        value = AddressList.parse_exact(b"a@b.c")
        header = To.from_value(value)
        self.assertIs(header.value, value)
        self.assertIs(To.from_value(header), header)

    def test_header_type_lookup(self):
        self.assertIs(header_type("message-id"), MessageId)
        self.assertIs(header_type("Return-Path"), ReturnPath)
        self.assertIsNone(header_type("X-Mailer"))


if __name__ == "__main__":
    unittest.main()
