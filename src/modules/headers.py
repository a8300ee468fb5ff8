"""
Header Field Productions
RFC 5322 sections 3.6.1-3.6.7: one type per header field.

PATTERN RECOGNITION: Every header follows the same shape,
``field-name ":" value CRLF``. One generic routine (HeaderField) does the
work; each concrete header is a descriptor naming its canonical field name
and its value production.

SECURITY STORY: Once the field name has matched, the header is committed.
A malformed value is reported as a FieldParseError naming the header rather
than silently falling back to the catch-all OptionalField.
"""

from dataclasses import dataclass
from typing import Any, ClassVar, Dict, Optional, Tuple, Type, Union

from .addresses import AddrSpec, AddressList, AngleAddr, Domain, Mailbox, MailboxList
from .date_time import DateTime
from .lexical import CFWS, FText
from .msg_id import MsgId, MsgIdList
from .parse_error import RECOVERABLE, FieldParseError, ParseError, TrailingInputError
from .token import (
    BytesLike,
    Choice,
    DelimitedList,
    Empty,
    Token,
    match,
    match_name,
    require,
    stream_optional,
    write,
)
from .words import Phrase, Unstructured, Word

CRLF = b"\r\n"


@dataclass(frozen=True)
class BccValue(Choice):
    """Bcc/Resent-Bcc value: address-list / CFWS / nothing"""

    NAME: ClassVar[str] = "Bcc Value"
    ALTERNATIVES = (AddressList, CFWS, Empty)


@dataclass(frozen=True)
class KeywordList(DelimitedList):
    """phrase *("," phrase)"""

    NAME: ClassVar[str] = "Keyword List"
    ITEM = Phrase


@dataclass(frozen=True)
class ReceivedToken(Choice):
    """
    received-token = word / angle-addr / addr-spec / domain

    Tried longest-first so that a dotted host name is not split into a
    single-atom word.
    """

    NAME: ClassVar[str] = "Received Token"
    ALTERNATIVES = (AngleAddr, AddrSpec, Domain, Word)


@dataclass(frozen=True)
class ReceivedValue(Token):
    """*received-token [CFWS] ";" date-time"""

    tokens: Tuple[ReceivedToken, ...]
    cfws: Optional[CFWS]
    date_time: DateTime
    NAME: ClassVar[str] = "Received Value"

    @classmethod
    def parse_at(cls, data: bytes, pos: int) -> Tuple["ReceivedValue", int]:
        tokens = []
        token, pos = ReceivedToken.parse_optional(data, pos)
        while token is not None:
            tokens.append(token)
            token, pos = ReceivedToken.parse_optional(data, pos)
        cfws, pos = CFWS.parse_optional(data, pos)
        pos = require(data, pos, b";")
        date_time, pos = DateTime.parse_at(data, pos)
        return cls(tuple(tokens), cfws, date_time), pos

    def stream(self, w: Any) -> int:
        count = sum(token.stream(w) for token in self.tokens)
        count += stream_optional(self.cfws, w)
        return count + write(w, b";") + self.date_time.stream(w)


@dataclass(frozen=True)
class EmptyPath(Token):
    """[CFWS] "<" [CFWS] ">" [CFWS]"""

    pre_cfws: Optional[CFWS]
    inner_cfws: Optional[CFWS]
    post_cfws: Optional[CFWS]
    NAME: ClassVar[str] = "Empty Path"

    @classmethod
    def parse_at(cls, data: bytes, pos: int) -> Tuple["EmptyPath", int]:
        pre_cfws, pos = CFWS.parse_optional(data, pos)
        pos = match(data, pos, b"<", cls.NAME)
        inner_cfws, pos = CFWS.parse_optional(data, pos)
        pos = match(data, pos, b">", cls.NAME)
        post_cfws, pos = CFWS.parse_optional(data, pos)
        return cls(pre_cfws, inner_cfws, post_cfws), pos

    def stream(self, w: Any) -> int:
        return (stream_optional(self.pre_cfws, w)
                + write(w, b"<")
                + stream_optional(self.inner_cfws, w)
                + write(w, b">")
                + stream_optional(self.post_cfws, w))


@dataclass(frozen=True)
class Path(Choice):
    """path = angle-addr / ([CFWS] "<" [CFWS] ">" [CFWS])"""

    NAME: ClassVar[str] = "Path"
    ALTERNATIVES = (AngleAddr, EmptyPath)


@dataclass(frozen=True)
class HeaderField(Token):
    """
    Generic ``field-name ":" value CRLF`` production

    Subclasses set NAME (the canonical spelling, written on serialization)
    and VALUE_TYPE. The name is matched case-insensitively, colon included.
    """

    value: Token
    VALUE_TYPE: ClassVar[Type[Token]]

    @classmethod
    def parse_at(cls, data: bytes, pos: int):
        pos = match_name(data, pos, cls.NAME.lower().encode("ascii") + b":", cls.NAME)
        try:
            value, pos = cls.VALUE_TYPE.parse_at(data, pos)
            pos = require(data, pos, CRLF)
        except ParseError as e:
            raise FieldParseError(cls.NAME, e) from e
        return cls(value), pos

    def stream(self, w: Any) -> int:
        return (write(w, self.NAME.encode("ascii"))
                + write(w, b":")
                + self.value.stream(w)
                + write(w, CRLF))

    @property
    def field_name(self) -> str:
        return self.NAME

    @classmethod
    def from_value(cls, value: Union["HeaderField", Token, BytesLike, str]) -> "HeaderField":
        """
        Build a header from a value object or from text

        Text is parsed with the header's value production and must be
        consumed entirely.

        Raises:
            TrailingInputError: If the value is followed by unparsed bytes
            FieldParseError: If the value does not parse, naming the header
        """
        if isinstance(value, cls):
            return value
        if isinstance(value, cls.VALUE_TYPE):
            return cls(value)
        try:
            return cls(cls.VALUE_TYPE.parse_exact(value, production=cls.NAME))
        except TrailingInputError:
            raise
        except ParseError as e:
            raise FieldParseError(cls.NAME, e) from e


class OrigDate(HeaderField):
    NAME = "Date"
    VALUE_TYPE = DateTime


class From(HeaderField):
    NAME = "From"
    VALUE_TYPE = MailboxList


class Sender(HeaderField):
    NAME = "Sender"
    VALUE_TYPE = Mailbox


class ReplyTo(HeaderField):
    NAME = "Reply-To"
    VALUE_TYPE = AddressList


class To(HeaderField):
    NAME = "To"
    VALUE_TYPE = AddressList


class Cc(HeaderField):
    NAME = "Cc"
    VALUE_TYPE = AddressList


class Bcc(HeaderField):
    NAME = "Bcc"
    VALUE_TYPE = BccValue


class MessageId(HeaderField):
    NAME = "Message-ID"
    VALUE_TYPE = MsgId


class InReplyTo(HeaderField):
    NAME = "In-Reply-To"
    VALUE_TYPE = MsgIdList


class References(HeaderField):
    NAME = "References"
    VALUE_TYPE = MsgIdList


class Subject(HeaderField):
    NAME = "Subject"
    VALUE_TYPE = Unstructured


class Comments(HeaderField):
    NAME = "Comments"
    VALUE_TYPE = Unstructured


class Keywords(HeaderField):
    NAME = "Keywords"
    VALUE_TYPE = KeywordList


class ResentDate(HeaderField):
    NAME = "Resent-Date"
    VALUE_TYPE = DateTime


class ResentFrom(HeaderField):
    NAME = "Resent-From"
    VALUE_TYPE = MailboxList


class ResentSender(HeaderField):
    NAME = "Resent-Sender"
    VALUE_TYPE = Mailbox


class ResentTo(HeaderField):
    NAME = "Resent-To"
    VALUE_TYPE = AddressList


class ResentCc(HeaderField):
    NAME = "Resent-Cc"
    VALUE_TYPE = AddressList


class ResentBcc(HeaderField):
    NAME = "Resent-Bcc"
    VALUE_TYPE = BccValue


class ResentMessageId(HeaderField):
    NAME = "Resent-Message-ID"
    VALUE_TYPE = MsgId


class Received(HeaderField):
    NAME = "Received"
    VALUE_TYPE = ReceivedValue


class ReturnPath(HeaderField):
    NAME = "Return-Path"
    VALUE_TYPE = Path


@dataclass(frozen=True)
class OptionalField(Token):
    """
    optional-field = field-name ":" unstructured CRLF

    Catch-all for extension and unrecognized headers; the name is kept as
    written.
    """

    name: FText
    value: Unstructured
    NAME: ClassVar[str] = "Optional Field"

    @classmethod
    def parse_at(cls, data: bytes, pos: int) -> Tuple["OptionalField", int]:
        name, pos = FText.parse_at(data, pos)
        pos = match(data, pos, b":", cls.NAME)
        try:
            value, pos = Unstructured.parse_at(data, pos)
            pos = require(data, pos, CRLF)
        except ParseError as e:
            raise FieldParseError(name.text, e) from e
        return cls(name, value), pos

    def stream(self, w: Any) -> int:
        return (self.name.stream(w)
                + write(w, b":")
                + self.value.stream(w)
                + write(w, CRLF))

    @property
    def field_name(self) -> str:
        return self.name.text

    @classmethod
    def from_pair(cls, name: Union[BytesLike, str], value: Union[BytesLike, str]) -> "OptionalField":
        """
        Build an extension field from a name and an unstructured value

        Raises:
            TrailingInputError: If either part has bytes outside its grammar
            FieldParseError: If either part does not parse
        """
        try:
            field_name = FText.parse_exact(name, production="Field Name")
        except TrailingInputError:
            raise
        except RECOVERABLE as e:
            raise FieldParseError("Field Name", e) from e
        unstructured = Unstructured.parse_exact(value, production=field_name.text)
        return cls(field_name, unstructured)


# Canonical lower-case field name -> header type, for every typed header
HEADER_TYPES: Dict[str, Type[HeaderField]] = {
    header.NAME.lower(): header
    for header in (
        OrigDate, From, Sender, ReplyTo, To, Cc, Bcc, MessageId, InReplyTo,
        References, Subject, Comments, Keywords, ResentDate, ResentFrom,
        ResentSender, ResentTo, ResentCc, ResentBcc, ResentMessageId,
        Received, ReturnPath,
    )
}


def header_type(name: str) -> Optional[Type[HeaderField]]:
    """Look up the typed header for a field name (case-insensitive)"""
    return HEADER_TYPES.get(name.lower())
