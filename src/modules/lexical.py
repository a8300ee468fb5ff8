"""
Lexical Module
RFC 5234 core rules and the RFC 5322 section 3.2.1-3.2.2 lexical layer:
character classes, quoted-pair, folding white space, comments and CFWS.

MAINTENANCE WISDOM: CFWS is semantically insignificant, so it is kept only
as structure (which whitespace was present, which comments) and serialized
as single spaces. Folding line breaks are never reproduced byte-for-byte.
"""

from dataclasses import dataclass
from typing import Any, ClassVar, Tuple

from .parse_error import RECOVERABLE, EofError, NestingTooDeepError, NotFoundError
from .token import CharClass, Choice, Token, require, write
from ..utils.security_validators import MAX_COMMENT_DEPTH

CR = 0x0D
LF = 0x0A
SP = 0x20
HTAB = 0x09
DQUOTE = 0x22
BACKSLASH = 0x5C


# RFC 5234 B.1 core rules

def is_vchar(c: int) -> bool:
    return 0x21 <= c <= 0x7E


def is_wsp(c: int) -> bool:
    return c == SP or c == HTAB


def is_ascii(c: int) -> bool:
    return 1 <= c <= 127


def is_digit(c: int) -> bool:
    return 0x30 <= c <= 0x39


def is_alpha(c: int) -> bool:
    return 0x41 <= c <= 0x5A or 0x61 <= c <= 0x7A


# RFC 5322 character classes

def is_ctext(c: int) -> bool:
    # printable US-ASCII not including "(", ")", or "\"
    return 33 <= c <= 39 or 42 <= c <= 91 or 93 <= c <= 126


_ATEXT_SPECIALS = frozenset(b"!#$%&'*+-/=?^_`{|}~")


def is_atext(c: int) -> bool:
    return is_alpha(c) or is_digit(c) or c in _ATEXT_SPECIALS


def is_qtext(c: int) -> bool:
    # printable US-ASCII not including "\" or the quote character
    return c == 33 or 35 <= c <= 91 or 93 <= c <= 126


def is_dtext(c: int) -> bool:
    # printable US-ASCII not including "[", "]", or "\"
    return 33 <= c <= 90 or 94 <= c <= 126


def is_ftext(c: int) -> bool:
    # printable US-ASCII not including ":"
    return 33 <= c <= 57 or 59 <= c <= 126


class VChar(CharClass):
    NAME = "VChar"
    PREDICATE = staticmethod(is_vchar)


class WSP(CharClass):
    NAME = "WSP"
    PREDICATE = staticmethod(is_wsp)


class ASCII(CharClass):
    NAME = "ASCII"
    PREDICATE = staticmethod(is_ascii)


class Digit(CharClass):
    NAME = "Digit"
    PREDICATE = staticmethod(is_digit)


class Alpha(CharClass):
    NAME = "Alpha"
    PREDICATE = staticmethod(is_alpha)


class CText(CharClass):
    NAME = "CText"
    PREDICATE = staticmethod(is_ctext)


class AText(CharClass):
    NAME = "AText"
    PREDICATE = staticmethod(is_atext)


class QText(CharClass):
    NAME = "QText"
    PREDICATE = staticmethod(is_qtext)


class DText(CharClass):
    NAME = "DText"
    PREDICATE = staticmethod(is_dtext)


class FText(CharClass):
    NAME = "FText"
    PREDICATE = staticmethod(is_ftext)


@dataclass(frozen=True)
class QuotedPair(Token):
    """quoted-pair = "\\" (VCHAR / WSP)"""

    char: int
    NAME: ClassVar[str] = "Quoted Pair"

    @classmethod
    def parse_at(cls, data: bytes, pos: int) -> Tuple["QuotedPair", int]:
        if pos >= len(data):
            raise EofError(cls.NAME)
        if data[pos] != BACKSLASH or pos + 1 >= len(data):
            raise NotFoundError(cls.NAME)
        c = data[pos + 1]
        if is_vchar(c) or is_wsp(c):
            return cls(c), pos + 2
        raise NotFoundError(cls.NAME)

    def stream(self, w: Any) -> int:
        return write(w, bytes((BACKSLASH, self.char)))


def skip_fws(data: bytes, pos: int) -> Tuple[bool, int]:
    """Consume FWS if present; returns (found, new position)"""
    size = len(data)
    start = pos
    while pos < size:
        c = data[pos]
        if is_wsp(c):
            pos += 1
        elif c == CR and pos + 2 < size and data[pos + 1] == LF and is_wsp(data[pos + 2]):
            pos += 3
        else:
            break
    return pos > start, pos


@dataclass(frozen=True)
class FWS(Token):
    """
    FWS = ([*WSP CRLF] 1*WSP)

    Greedily consumes whitespace and CRLF-WSP folds. A CRLF not followed by
    whitespace ends the run.
    """

    NAME: ClassVar[str] = "Folding White Space"

    @classmethod
    def parse_at(cls, data: bytes, pos: int) -> Tuple["FWS", int]:
        if pos >= len(data):
            raise EofError(cls.NAME)
        found, end = skip_fws(data, pos)
        if not found:
            raise NotFoundError(cls.NAME)
        return cls(), end

    def stream(self, w: Any) -> int:
        return write(w, b" ")


@dataclass(frozen=True)
class Comment(Token):
    """
    comment = "(" *([FWS] ccontent) [FWS] ")"

    Each content item records whether whitespace preceded it. Once the
    opening parenthesis is consumed, a missing ")" is a hard failure.
    """

    ccontent: Tuple[Tuple[bool, "CContent"], ...]
    trailing_ws: bool
    NAME: ClassVar[str] = "Comment"

    @classmethod
    def parse_at(cls, data: bytes, pos: int, depth: int = 0) -> Tuple["Comment", int]:
        if pos >= len(data):
            raise EofError(cls.NAME)
        if data[pos] != ord("("):
            raise NotFoundError(cls.NAME)
        if depth >= MAX_COMMENT_DEPTH:
            raise NestingTooDeepError(MAX_COMMENT_DEPTH, pos)
        pos += 1
        ccontent = []
        while True:
            ws, after_ws = skip_fws(data, pos)
            try:
                content, end = CContent.parse_nested(data, after_ws, depth)
            except RECOVERABLE:
                trailing_ws, pos = ws, after_ws
                break
            ccontent.append((ws, content))
            pos = end
        pos = require(data, pos, b")")
        return cls(tuple(ccontent), trailing_ws), pos

    def stream(self, w: Any) -> int:
        count = write(w, b"(")
        for ws, content in self.ccontent:
            if ws:
                count += write(w, b" ")
            count += content.stream(w)
        if self.trailing_ws:
            count += write(w, b" ")
        count += write(w, b")")
        return count


@dataclass(frozen=True)
class CContent(Choice):
    """ccontent = ctext / quoted-pair / comment"""

    NAME: ClassVar[str] = "CContent"

    @classmethod
    def parse_at(cls, data: bytes, pos: int) -> Tuple["CContent", int]:
        return cls.parse_nested(data, pos, 0)

    @classmethod
    def parse_nested(cls, data: bytes, pos: int, depth: int) -> Tuple["CContent", int]:
        if pos >= len(data):
            raise EofError(cls.NAME)
        for alternative in (CText, QuotedPair):
            try:
                value, end = alternative.parse_at(data, pos)
            except RECOVERABLE:
                continue
            return cls(value), end
        value, end = Comment.parse_at(data, pos, depth + 1)
        return cls(value), end


@dataclass(frozen=True)
class CFWS(Token):
    """
    CFWS = (1*([FWS] comment) [FWS]) / FWS

    Serializes every whitespace run as a single space.
    """

    comments: Tuple[Tuple[bool, Comment], ...]
    trailing_ws: bool
    NAME: ClassVar[str] = "CFWS"

    @classmethod
    def parse_at(cls, data: bytes, pos: int) -> Tuple["CFWS", int]:
        if pos >= len(data):
            raise EofError(cls.NAME)
        start = pos
        comments = []
        while True:
            ws, after_ws = skip_fws(data, pos)
            try:
                comment, end = Comment.parse_at(data, after_ws)
            except RECOVERABLE:
                trailing_ws, pos = ws, after_ws
                break
            comments.append((ws, comment))
            pos = end
        if pos == start:
            raise NotFoundError(cls.NAME)
        return cls(tuple(comments), trailing_ws), pos

    def stream(self, w: Any) -> int:
        count = 0
        for ws, comment in self.comments:
            if ws:
                count += write(w, b" ")
            count += comment.stream(w)
        if self.trailing_ws:
            count += write(w, b" ")
        return count
