"""
Token Module
Parse/stream contracts shared by every RFC 5322 grammar production

PATTERN RECOGNITION: Every production is an immutable value that can only be
created by a successful parse. Parsing works over one immutable buffer with
explicit offsets (``parse_at``), so alternatives can be tried against the same
starting position and the position only advances on success. The public
``parse`` wraps this as ``(value, remainder)`` where the remainder is a slice
of the caller's input.
"""

from dataclasses import dataclass
from typing import Any, Callable, ClassVar, Iterator, List, Optional, Tuple, Type, TypeVar, Union

from .parse_error import (
    RECOVERABLE,
    EofError,
    ExpectedError,
    NestingTooDeepError,
    NotFoundError,
    ParseError,
    TrailingInputError,
)

T = TypeVar("T", bound="Token")

BytesLike = Union[bytes, bytearray, memoryview]


def write(w: Any, data: bytes) -> int:
    """
    Write bytes to a sink and return the count written

    Sinks that do not report a count (some text wrappers return None) are
    assumed to have taken the whole buffer. Write errors propagate.
    """
    count = w.write(data)
    return len(data) if count is None else count


def require(data: bytes, pos: int, literal: bytes) -> int:
    """Consume a literal a committed production cannot do without"""
    if data.startswith(literal, pos):
        return pos + len(literal)
    raise ExpectedError(literal, pos)


def match(data: bytes, pos: int, literal: bytes, production: str) -> int:
    """Consume a literal that decides whether a production starts here"""
    if data.startswith(literal, pos):
        return pos + len(literal)
    if pos >= len(data):
        raise EofError(production)
    raise NotFoundError(production)


def match_name(data: bytes, pos: int, name: bytes, production: str) -> int:
    """Case-insensitive literal match, ``name`` must be given in lower case"""
    end = pos + len(name)
    if data[pos:end].lower() == name:
        return end
    if pos >= len(data):
        raise EofError(production)
    raise NotFoundError(production)


def _as_bytes(data: Any) -> bytes:
    if isinstance(data, bytes):
        return data
    if isinstance(data, str):
        return data.encode("utf-8")
    return bytes(data)


@dataclass(frozen=True)
class Token:
    """Base class of every grammar production"""

    NAME: ClassVar[str] = "Token"

    @classmethod
    def parse_at(cls: Type[T], data: bytes, pos: int) -> Tuple[T, int]:
        """Parse from ``data[pos:]``, returning the value and the new position"""
        raise NotImplementedError

    @classmethod
    def parse(cls: Type[T], data: BytesLike) -> Tuple[T, BytesLike]:
        """
        Parse a value off the beginning of ``data``

        Returns:
            Tuple of (value, remainder) where remainder is ``data[consumed:]``

        Raises:
            ParseError: If the production cannot be parsed
        """
        value, pos = cls.parse_at(_as_bytes(data), 0)
        return value, data[pos:]

    @classmethod
    def parse_exact(cls: Type[T], data: Union[BytesLike, str], production: Optional[str] = None) -> T:
        """
        Parse a value that must consume the entire input

        Raises:
            TrailingInputError: If bytes remain after the value
        """
        buf = _as_bytes(data)
        value, pos = cls.parse_at(buf, 0)
        if pos != len(buf):
            raise TrailingInputError(production or cls.NAME, pos)
        return value

    @classmethod
    def parse_optional(cls: Type[T], data: bytes, pos: int) -> Tuple[Optional[T], int]:
        """Parse if present; recoverable failures yield (None, pos)"""
        try:
            return cls.parse_at(data, pos)
        except RECOVERABLE:
            return None, pos

    def stream(self, w: Any) -> int:
        """Serialize to ``w`` and return the number of bytes written"""
        raise NotImplementedError

    def to_bytes(self) -> bytes:
        parts: List[bytes] = []
        self.stream(_ListSink(parts))
        return b"".join(parts)

    def __bytes__(self) -> bytes:
        return self.to_bytes()


class _ListSink:
    """Collects written chunks without copying them"""

    def __init__(self, parts: List[bytes]):
        self.parts = parts

    def write(self, data: bytes) -> int:
        self.parts.append(data)
        return len(data)


def stream_optional(node: Optional[Token], w: Any) -> int:
    return node.stream(w) if node is not None else 0


@dataclass(frozen=True)
class CharClass(Token):
    """
    A maximal, non-empty run of bytes satisfying ``PREDICATE``

    Subclasses only name the class and supply the predicate.
    """

    chars: bytes
    PREDICATE: ClassVar[Callable[[int], bool]]

    @classmethod
    def parse_at(cls, data: bytes, pos: int) -> Tuple["CharClass", int]:
        if pos >= len(data):
            raise EofError(cls.NAME)
        test = cls.PREDICATE
        end = pos
        size = len(data)
        while end < size and test(data[end]):
            end += 1
        if end == pos:
            raise NotFoundError(cls.NAME)
        return cls(data[pos:end]), end

    def stream(self, w: Any) -> int:
        return write(w, self.chars)

    @property
    def text(self) -> str:
        return self.chars.decode("ascii")


@dataclass(frozen=True)
class Empty(Token):
    """Matches zero bytes; used as the last alternative of a choice"""

    NAME: ClassVar[str] = "Empty"

    @classmethod
    def parse_at(cls, data: bytes, pos: int) -> Tuple["Empty", int]:
        return cls(), pos

    def stream(self, w: Any) -> int:
        return 0


@dataclass(frozen=True)
class Choice(Token):
    """
    Tagged variant resolved by ordered choice

    ``ALTERNATIVES`` are tried in order against the same position; the first
    success wins. Only recoverable failures move on to the next alternative.
    """

    value: Token
    ALTERNATIVES: ClassVar[Tuple[Type[Token], ...]] = ()

    @classmethod
    def parse_at(cls, data: bytes, pos: int):
        for alternative in cls.ALTERNATIVES:
            try:
                value, end = alternative.parse_at(data, pos)
            except RECOVERABLE:
                continue
            return cls(value), end
        if pos >= len(data):
            raise EofError(cls.NAME)
        raise NotFoundError(cls.NAME)

    def stream(self, w: Any) -> int:
        return self.value.stream(w)


@dataclass(frozen=True)
class Repeated(Token):
    """One or more consecutive ``ITEM`` productions with no separator"""

    items: Tuple[Token, ...]
    ITEM: ClassVar[Type[Token]]

    @classmethod
    def parse_at(cls, data: bytes, pos: int):
        first, pos = cls.ITEM.parse_at(data, pos)
        items = [first]
        while True:
            try:
                item, pos = cls.ITEM.parse_at(data, pos)
            except RECOVERABLE:
                break
            items.append(item)
        return cls(tuple(items)), pos

    def stream(self, w: Any) -> int:
        return sum(item.stream(w) for item in self.items)

    def __iter__(self) -> Iterator[Token]:
        return iter(self.items)

    def __len__(self) -> int:
        return len(self.items)

    def __getitem__(self, index: int) -> Token:
        return self.items[index]


@dataclass(frozen=True)
class DelimitedList(Repeated):
    """
    ``ITEM *(DELIMITER ITEM)``

    Only the first element is committed. When any later element fails the
    position rolls back to before its delimiter, so trailing commas and a
    malformed tail such as ", x:" are left in the remainder. Exceeding the
    comment nesting limit still propagates.
    """

    DELIMITER: ClassVar[bytes] = b","

    @classmethod
    def parse_at(cls, data: bytes, pos: int):
        first, pos = cls.ITEM.parse_at(data, pos)
        items = [first]
        delimiter = cls.DELIMITER
        while data.startswith(delimiter, pos):
            try:
                item, end = cls.ITEM.parse_at(data, pos + len(delimiter))
            except NestingTooDeepError:
                raise
            except ParseError:
                break
            items.append(item)
            pos = end
        return cls(tuple(items)), pos

    def stream(self, w: Any) -> int:
        count = 0
        for index, item in enumerate(self.items):
            if index:
                count += write(w, self.DELIMITER)
            count += item.stream(w)
        return count
