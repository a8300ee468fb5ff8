"""
Parse Error Module
Exception hierarchy shared by every grammar production

PATTERN RECOGNITION: Ordered-choice parsing needs two families of failure.
"This alternative does not start here" (EofError, NotFoundError) lets the
caller try the next alternative. Everything else means a production had
already committed past its opening delimiter, so the input is malformed and
the failure must reach the caller untouched.
"""

from typing import Iterator, Optional


class ParseError(ValueError):
    """Base class for all grammar failures"""

    def chain(self) -> Iterator["ParseError"]:
        """Yield this error followed by every nested cause, outermost first"""
        yield self


class EofError(ParseError):
    """Input was exhausted while a production was required"""

    def __init__(self, production: str):
        self.production = production
        super().__init__(f"End of input while parsing {production}")


class NotFoundError(ParseError):
    """The current position does not start this production"""

    def __init__(self, production: str):
        self.production = production
        super().__init__(f"{production} not found")


class ExpectedError(ParseError):
    """A specific literal was required"""

    def __init__(self, expected: bytes, offset: Optional[int] = None):
        self.expected = expected
        self.offset = offset
        message = f"Expected {expected!r}"
        if offset is not None:
            message += f" at offset {offset}"
        super().__init__(message)


class ExpectedTypeError(ParseError):
    """A category of token was required"""

    def __init__(self, expected: str, offset: Optional[int] = None):
        self.expected = expected
        self.offset = offset
        message = f"Expected {expected}"
        if offset is not None:
            message += f" at offset {offset}"
        super().__init__(message)


class InvalidBodyCharError(ParseError):
    """Body contains a byte outside the 7-bit text range, or a bare CR/LF"""

    def __init__(self, byte: int, offset: int):
        self.byte = byte
        self.offset = offset
        super().__init__(f"Invalid body character 0x{byte:02x} at offset {offset}")


class LineTooLongError(ParseError):
    """Body line exceeds the RFC 5322 ceiling"""

    def __init__(self, line_number: int, length: int):
        self.line_number = line_number
        self.length = length
        super().__init__(f"Body line {line_number} is {length} bytes long (max 998)")


class TrailingInputError(ParseError):
    """A bounded parse succeeded but left unconsumed bytes"""

    def __init__(self, production: str, offset: int):
        self.production = production
        self.offset = offset
        super().__init__(f"Trailing input after {production} at offset {offset}")


class InternalParseError(ParseError):
    """A parser invariant did not hold"""


class NestingTooDeepError(ParseError):
    """Comment nesting exceeded MAX_COMMENT_DEPTH"""

    def __init__(self, limit: int, offset: int):
        self.limit = limit
        self.offset = offset
        super().__init__(f"Comment nesting deeper than {limit} levels at offset {offset}")


class FieldParseError(ParseError):
    """
    Attaches the failing production's name to its cause

    Nested FieldParseErrors form a diagnostic chain from the outermost
    production (e.g. "From") down to the innermost cause.
    """

    def __init__(self, production: str, cause: ParseError):
        self.production = production
        self.cause = cause
        super().__init__(f"{production}: {cause}")

    def chain(self) -> Iterator[ParseError]:
        yield self
        yield from self.cause.chain()

    def root_cause(self) -> ParseError:
        """Return the innermost error of the chain"""
        *_, last = self.chain()
        return last


# Errors an ordered choice may swallow before trying its next alternative
RECOVERABLE = (EofError, NotFoundError)
