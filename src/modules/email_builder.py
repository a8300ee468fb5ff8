"""
Email Builder Module
High-level façade for composing and editing messages

PATTERN RECOGNITION: This is the Builder pattern over an immutable tree.
Grammar nodes never change after parsing; the façade keeps ordered lists of
them and "edits" a message by replacing whole fields. ``to_message`` freezes
the current state back into a Message.

SECURITY STORY: Every value handed to a setter crosses the same validation
boundary as parsed input: text is parsed with the header's own grammar and
must be consumed entirely. A value such as "a@b\\r\\nBcc: victim@x" cannot
inject an extra header line because the trailing bytes raise
TrailingInputError instead of being written out.
"""

import logging
import uuid
from datetime import datetime
from typing import Any, List, Optional, Type, Union

from .date_time import DateTime
from .headers import (
    Bcc,
    Cc,
    Comments,
    From,
    HeaderField,
    InReplyTo,
    Keywords,
    MessageId,
    OptionalField,
    OrigDate,
    References,
    ReplyTo,
    Sender,
    Subject,
    To,
)
from .message import Body, Field, Fields, Message, TraceBlock
from .msg_id import MsgId
from .token import BytesLike, Token

logger = logging.getLogger(__name__)

# Position of each header among the fields of a newly composed message;
# extension fields go after all of these
CANONICAL_ORDER = (
    OrigDate, From, Sender, ReplyTo, To, Cc, Bcc, MessageId, InReplyTo,
    References, Subject, Comments, Keywords,
)

HeaderInput = Union[HeaderField, Token, BytesLike, str]


def _rank(field: Field) -> int:
    header = type(field.value)
    if header in CANONICAL_ORDER:
        return CANONICAL_ORDER.index(header)
    return len(CANONICAL_ORDER)


class Email:
    """
    An editable email message

    A new Email needs a From value and a Date; the date defaults to the
    current local time. Date and From are mandatory and only have set/get;
    other single-instance headers have set/get/unset,
    repeatable ones (Comments, Keywords, extension fields) have
    add/get/clear.

    Example:
        >>> email = Email("me@example.com", "Wed, 05 Jan 2015 15:13:05 +1300")
        >>> email.set_subject(" Hello")
        >>> email.as_bytes()
        b'Date:Wed, 05 Jan 2015 15:13:05 +1300\\r\\nFrom:me@example.com\\r\\nSubject: Hello\\r\\n'
    """

    def __init__(self, from_: HeaderInput, date: Union[datetime, HeaderInput, None] = None):
        self.trace_blocks: List[TraceBlock] = []
        self.fields: List[Field] = []
        self.body: Optional[Body] = None
        self.set_date(date if date is not None else datetime.now().astimezone())
        self.set_from(from_)

    # Conversion to and from the grammar tree

    @classmethod
    def from_message(cls, message: Message) -> "Email":
        """Wrap a parsed Message; trace blocks and field order are kept"""
        email = cls.__new__(cls)
        email.trace_blocks = list(message.fields.trace_blocks)
        email.fields = list(message.fields.fields)
        email.body = message.body
        return email

    @classmethod
    def parse(cls, data: Union[BytesLike, str]) -> "Email":
        """
        Parse a complete message

        Raises:
            TrailingInputError: If bytes remain after the message
            ParseError: If a header or the body is malformed
        """
        return cls.from_message(Message.parse_exact(data, production=Message.NAME))

    def to_message(self) -> Message:
        return Message(Fields(tuple(self.trace_blocks), tuple(self.fields)), self.body)

    def stream(self, w: Any) -> int:
        return self.to_message().stream(w)

    def as_bytes(self) -> bytes:
        return self.to_message().to_bytes()

    def __bytes__(self) -> bytes:
        return self.as_bytes()

    # Generic field handling

    def _find(self, header: Type[HeaderField]) -> Optional[int]:
        for index, field in enumerate(self.fields):
            if type(field.value) is header:
                return index
        return None

    def _set(self, header: Type[HeaderField], value: HeaderInput) -> None:
        field = Field(header.from_value(value))
        index = self._find(header)
        if index is not None:
            self.fields[index] = field
        else:
            self._insert(field)
        logger.debug(f"Set {header.NAME} header")

    def _insert(self, field: Field) -> None:
        # after every field of the same or lower rank
        rank = _rank(field)
        position = len(self.fields)
        for index, existing in enumerate(self.fields):
            if _rank(existing) > rank:
                position = index
                break
        self.fields.insert(position, field)

    def _get(self, header: Type[HeaderField]) -> Optional[Token]:
        index = self._find(header)
        return self.fields[index].value.value if index is not None else None

    def _get_all(self, header: Type[Token]) -> List[Token]:
        return [field.value for field in self.fields if type(field.value) is header]

    def _remove(self, header: Type[Token]) -> None:
        self.fields = [field for field in self.fields if type(field.value) is not header]

    # Date

    def set_date(self, value: Union[datetime, HeaderInput]) -> None:
        """Set the Date header from an aware datetime or a date-time value"""
        if isinstance(value, datetime):
            value = DateTime.from_datetime(value)
        self._set(OrigDate, value)

    def get_date(self) -> Optional[DateTime]:
        return self._get(OrigDate)

    # Originator fields

    def set_from(self, value: HeaderInput) -> None:
        self._set(From, value)

    def get_from(self):
        return self._get(From)

    def set_sender(self, value: HeaderInput) -> None:
        self._set(Sender, value)

    def get_sender(self):
        return self._get(Sender)

    def unset_sender(self) -> None:
        self._remove(Sender)

    def set_reply_to(self, value: HeaderInput) -> None:
        self._set(ReplyTo, value)

    def get_reply_to(self):
        return self._get(ReplyTo)

    def unset_reply_to(self) -> None:
        self._remove(ReplyTo)

    # Destination fields

    def set_to(self, value: HeaderInput) -> None:
        self._set(To, value)

    def get_to(self):
        return self._get(To)

    def unset_to(self) -> None:
        self._remove(To)

    def set_cc(self, value: HeaderInput) -> None:
        self._set(Cc, value)

    def get_cc(self):
        return self._get(Cc)

    def unset_cc(self) -> None:
        self._remove(Cc)

    def set_bcc(self, value: HeaderInput) -> None:
        self._set(Bcc, value)

    def get_bcc(self):
        return self._get(Bcc)

    def unset_bcc(self) -> None:
        self._remove(Bcc)

    # Identification fields

    def set_message_id(self, value: HeaderInput) -> None:
        self._set(MessageId, value)

    def get_message_id(self) -> Optional[MsgId]:
        return self._get(MessageId)

    def unset_message_id(self) -> None:
        self._remove(MessageId)

    def generate_message_id(self, domain: str) -> MsgId:
        """
        Set a fresh random Message-ID under ``domain`` and return it

        Raises:
            ParseError: If ``domain`` is not a valid id-right
        """
        msg_id = MsgId.parse_exact(f" <{uuid.uuid4().hex}@{domain}>", production=MessageId.NAME)
        self.set_message_id(msg_id)
        return msg_id

    def set_in_reply_to(self, value: HeaderInput) -> None:
        self._set(InReplyTo, value)

    def get_in_reply_to(self):
        return self._get(InReplyTo)

    def unset_in_reply_to(self) -> None:
        self._remove(InReplyTo)

    def set_references(self, value: HeaderInput) -> None:
        self._set(References, value)

    def get_references(self):
        return self._get(References)

    def unset_references(self) -> None:
        self._remove(References)

    # Informational fields

    def set_subject(self, value: HeaderInput) -> None:
        self._set(Subject, value)

    def get_subject(self):
        return self._get(Subject)

    def unset_subject(self) -> None:
        self._remove(Subject)

    def add_comments(self, value: HeaderInput) -> None:
        self._append(Field(Comments.from_value(value)))

    def get_comments(self) -> List[Token]:
        return [header.value for header in self._get_all(Comments)]

    def clear_comments(self) -> None:
        self._remove(Comments)

    def add_keywords(self, value: HeaderInput) -> None:
        self._append(Field(Keywords.from_value(value)))

    def get_keywords(self) -> List[Token]:
        return [header.value for header in self._get_all(Keywords)]

    def clear_keywords(self) -> None:
        self._remove(Keywords)

    # Extension fields

    def add_optional_field(self, name: Union[BytesLike, str], value: Union[BytesLike, str]) -> None:
        self._append(Field(OptionalField.from_pair(name, value)))

    def get_optional_fields(self, name: Optional[str] = None) -> List[OptionalField]:
        """Extension fields in order, optionally only those called ``name``"""
        fields = self._get_all(OptionalField)
        if name is None:
            return fields
        return [field for field in fields if field.field_name.lower() == name.lower()]

    def clear_optional_fields(self, name: Optional[str] = None) -> None:
        if name is None:
            self._remove(OptionalField)
            return
        self.fields = [
            field for field in self.fields
            if not (isinstance(field.value, OptionalField)
                    and field.value.field_name.lower() == name.lower())
        ]

    def _append(self, field: Field) -> None:
        self._insert(field)
        logger.debug(f"Added {field.field_name} field")

    # Body

    def set_body(self, value: Union[Body, BytesLike, str]) -> None:
        """
        Set the body from text or bytes

        Raises:
            InvalidBodyCharError: On 8-bit bytes or a bare CR/LF
            LineTooLongError: On a line longer than 998 bytes
        """
        if not isinstance(value, Body):
            value = Body.parse_exact(value, production=Body.NAME)
        self.body = value

    def get_body(self) -> Optional[Body]:
        return self.body

    def unset_body(self) -> None:
        self.body = None
