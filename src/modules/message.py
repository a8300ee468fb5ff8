"""
Message Assembly
RFC 5322 sections 3.5 and 3.6: trace blocks, the ordered field list, the
body and the complete message.

PATTERN RECOGNITION: A message is parsed top-down. Trace blocks come first,
then ordinary fields, then an optional blank line and body. Each loop runs
"while it keeps matching" and stops cleanly on the first recoverable
failure, so the next stage can look at what follows.

SECURITY STORY: The body is untrusted bulk data. It is checked byte by byte
for 7-bit cleanliness and for the 998-byte line ceiling, so nothing that
reaches a caller can smuggle bare CR/LF or NUL bytes.
"""

import logging
from dataclasses import dataclass
from typing import Any, ClassVar, Optional, Tuple, Union

from .headers import (
    HEADER_TYPES,
    Bcc,
    Cc,
    Comments,
    From,
    InReplyTo,
    Keywords,
    MessageId,
    OptionalField,
    OrigDate,
    Received,
    References,
    ReplyTo,
    ResentBcc,
    ResentCc,
    ResentDate,
    ResentFrom,
    ResentMessageId,
    ResentSender,
    ResentTo,
    ReturnPath,
    Sender,
    Subject,
    To,
    header_type,
)
from .lexical import CR, LF
from .parse_error import (
    RECOVERABLE,
    EofError,
    ExpectedTypeError,
    InvalidBodyCharError,
    LineTooLongError,
    NotFoundError,
)
from .token import Choice, Token, stream_optional, write
from ..utils.security_validators import MAX_LINE_LENGTH

logger = logging.getLogger(__name__)

CRLF = b"\r\n"


@dataclass(frozen=True)
class Field(Choice):
    """Any ordinary (non-trace) header field, optional fields last"""

    NAME: ClassVar[str] = "Field"
    ALTERNATIVES = (
        OrigDate, From, Sender, ReplyTo, To, Cc, Bcc, MessageId, InReplyTo,
        References, Subject, Comments, Keywords, OptionalField,
    )

    @property
    def field_name(self) -> str:
        return self.value.field_name


@dataclass(frozen=True)
class ResentField(Choice):
    """One of the Resent-* fields that may follow a trace"""

    NAME: ClassVar[str] = "Resent Field"
    ALTERNATIVES = (
        ResentDate, ResentFrom, ResentSender, ResentTo, ResentCc, ResentBcc,
        ResentMessageId,
    )

    @property
    def field_name(self) -> str:
        return self.value.field_name


@dataclass(frozen=True)
class Trace(Token):
    """
    trace = [return] 1*received

    A Return-Path with no Received after it is malformed, not absent.
    """

    return_path: Optional[ReturnPath]
    received: Tuple[Received, ...]
    NAME: ClassVar[str] = "Trace"

    @classmethod
    def parse_at(cls, data: bytes, pos: int) -> Tuple["Trace", int]:
        start = pos
        return_path, pos = ReturnPath.parse_optional(data, pos)
        received = []
        entry, pos = Received.parse_optional(data, pos)
        while entry is not None:
            received.append(entry)
            entry, pos = Received.parse_optional(data, pos)
        if not received:
            if return_path is not None:
                raise ExpectedTypeError("Received field", pos)
            if start >= len(data):
                raise EofError(cls.NAME)
            raise NotFoundError(cls.NAME)
        return cls(return_path, tuple(received)), pos

    def stream(self, w: Any) -> int:
        count = stream_optional(self.return_path, w)
        return count + sum(entry.stream(w) for entry in self.received)


_LONGEST_NAME = max(len(name) for name in HEADER_TYPES)


def _starts_typed_header(data: bytes, pos: int) -> bool:
    """True if a header with its own grammar (trace, resent or ordinary) begins at ``pos``"""
    end = data.find(b":", pos, pos + _LONGEST_NAME + 1)
    if end < 0:
        return False
    return header_type(data[pos:end].decode("ascii", errors="replace")) is not None


@dataclass(frozen=True)
class ResentTraceBlock(Token):
    """trace followed by one or more Resent-* fields"""

    trace: Trace
    fields: Tuple[ResentField, ...]
    NAME: ClassVar[str] = "Resent Trace Block"

    @classmethod
    def parse_at(cls, data: bytes, pos: int) -> Tuple["ResentTraceBlock", int]:
        trace, pos = Trace.parse_at(data, pos)
        return cls.parse_after(trace, data, pos)

    @classmethod
    def parse_after(cls, trace: Trace, data: bytes, pos: int) -> Tuple["ResentTraceBlock", int]:
        """Parse the Resent-* run that follows an already parsed ``trace``"""
        first, pos = ResentField.parse_at(data, pos)
        fields = [first]
        field, pos = ResentField.parse_optional(data, pos)
        while field is not None:
            fields.append(field)
            field, pos = ResentField.parse_optional(data, pos)
        return cls(trace, tuple(fields)), pos

    def stream(self, w: Any) -> int:
        return self.trace.stream(w) + sum(field.stream(w) for field in self.fields)


@dataclass(frozen=True)
class OptionalFieldTraceBlock(Token):
    """
    trace followed by extension fields

    The extension-field run stops at the first header that has its own
    grammar, so ordinary fields such as From or Subject stay typed and are
    picked up by the field list. The run may be empty only when such a
    header follows; a trace followed by a blank line, the end of input or
    anything that is not a header is malformed.
    """

    trace: Trace
    fields: Tuple[OptionalField, ...]
    NAME: ClassVar[str] = "Optional Field Trace Block"

    @classmethod
    def parse_at(cls, data: bytes, pos: int) -> Tuple["OptionalFieldTraceBlock", int]:
        trace, pos = Trace.parse_at(data, pos)
        return cls.parse_after(trace, data, pos)

    @classmethod
    def parse_after(cls, trace: Trace, data: bytes, pos: int) -> Tuple["OptionalFieldTraceBlock", int]:
        """Parse the extension-field run that follows an already parsed ``trace``"""
        fields = []
        while not _starts_typed_header(data, pos):
            field, pos = OptionalField.parse_optional(data, pos)
            if field is None:
                break
            logger.debug(f"Trace extension field: {field.field_name}")
            fields.append(field)
        if not fields and not _starts_typed_header(data, pos):
            raise NotFoundError(cls.NAME)
        return cls(trace, tuple(fields)), pos

    def stream(self, w: Any) -> int:
        return self.trace.stream(w) + sum(field.stream(w) for field in self.fields)


@dataclass(frozen=True)
class TraceBlock(Token):
    """
    A trace plus the fields that belong to it

    The trace is parsed once; Resent fields are tried after it first, then
    extension fields. No trace at all is NotFound, a trace with nothing
    acceptable after it is a hard failure.
    """

    value: Union[ResentTraceBlock, OptionalFieldTraceBlock]
    NAME: ClassVar[str] = "Trace Block"

    @classmethod
    def parse_at(cls, data: bytes, pos: int) -> Tuple["TraceBlock", int]:
        trace, pos = Trace.parse_at(data, pos)
        for alternative in (ResentTraceBlock, OptionalFieldTraceBlock):
            try:
                block, end = alternative.parse_after(trace, data, pos)
            except RECOVERABLE:
                continue
            return cls(block), end
        raise ExpectedTypeError("resent or optional fields after trace", pos)

    def stream(self, w: Any) -> int:
        return self.value.stream(w)

    @property
    def trace(self) -> Trace:
        return self.value.trace

    @property
    def fields(self) -> Tuple[Token, ...]:
        return self.value.fields


@dataclass(frozen=True)
class Fields(Token):
    """fields = *trace-block *field"""

    trace_blocks: Tuple[TraceBlock, ...]
    fields: Tuple[Field, ...]
    NAME: ClassVar[str] = "Fields"

    @classmethod
    def parse_at(cls, data: bytes, pos: int) -> Tuple["Fields", int]:
        trace_blocks = []
        block, pos = TraceBlock.parse_optional(data, pos)
        while block is not None:
            trace_blocks.append(block)
            block, pos = TraceBlock.parse_optional(data, pos)
        fields = []
        field, pos = Field.parse_optional(data, pos)
        while field is not None:
            if isinstance(field.value, OptionalField):
                logger.debug(f"Extension field: {field.field_name}")
            fields.append(field)
            field, pos = Field.parse_optional(data, pos)
        return cls(tuple(trace_blocks), tuple(fields)), pos

    def stream(self, w: Any) -> int:
        count = sum(block.stream(w) for block in self.trace_blocks)
        return count + sum(field.stream(w) for field in self.fields)


def _is_text(c: int) -> bool:
    # text = %d1-9 / %d11 / %d12 / %d14-127
    return 1 <= c <= 127 and c != CR and c != LF


@dataclass(frozen=True)
class Body(Token):
    """
    body = *(*998text CRLF) *998text

    Consumes the rest of the input. The final line may lack its CRLF.
    """

    content: bytes
    NAME: ClassVar[str] = "Body"

    @classmethod
    def parse_at(cls, data: bytes, pos: int) -> Tuple["Body", int]:
        start = pos
        size = len(data)
        line_start = pos
        line_number = 1
        while pos < size:
            c = data[pos]
            if c == CR and pos + 1 < size and data[pos + 1] == LF:
                _check_line(line_number, pos - line_start)
                pos += 2
                line_start = pos
                line_number += 1
            elif _is_text(c):
                pos += 1
            else:
                raise InvalidBodyCharError(c, pos)
        _check_line(line_number, pos - line_start)
        return cls(bytes(data[start:pos])), pos

    def stream(self, w: Any) -> int:
        return write(w, self.content)

    @property
    def lines(self) -> Tuple[bytes, ...]:
        return tuple(self.content.split(CRLF))

    @property
    def text(self) -> str:
        return self.content.decode("ascii")


def _check_line(line_number: int, length: int) -> None:
    if length > MAX_LINE_LENGTH:
        raise LineTooLongError(line_number, length)


@dataclass(frozen=True)
class Message(Token):
    """
    message = fields [CRLF body]

    The blank line is only consumed when a body follows it; a message with a
    blank line and nothing after it has an empty body.
    """

    fields: Fields
    body: Optional[Body]
    NAME: ClassVar[str] = "Message"

    @classmethod
    def parse_at(cls, data: bytes, pos: int) -> Tuple["Message", int]:
        fields, pos = Fields.parse_at(data, pos)
        body = None
        if data.startswith(CRLF, pos):
            body, pos = Body.parse_at(data, pos + 2)
        logger.debug(
            f"Parsed message: {len(fields.trace_blocks)} trace block(s), "
            f"{len(fields.fields)} field(s), "
            f"body {len(body.content) if body is not None else 'absent'}"
        )
        return cls(fields, body), pos

    def stream(self, w: Any) -> int:
        count = self.fields.stream(w)
        if self.body is not None:
            count += write(w, CRLF) + self.body.stream(w)
        return count
