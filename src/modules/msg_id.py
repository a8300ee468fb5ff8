"""
Message Identifier Productions
RFC 5322 section 3.6.4: msg-id and its parts.
"""

from dataclasses import dataclass
from typing import Any, ClassVar, Optional, Tuple

from .lexical import CFWS, DText
from .parse_error import RECOVERABLE, EofError, ExpectedTypeError, NotFoundError
from .token import Choice, Repeated, Token, require, stream_optional, write
from .words import DotAtomText


@dataclass(frozen=True)
class NoFoldLiteral(Token):
    """no-fold-literal = "[" *dtext "]" (no whitespace allowed inside)"""

    dtext: Optional[DText]
    NAME: ClassVar[str] = "No Fold Literal"

    @classmethod
    def parse_at(cls, data: bytes, pos: int) -> Tuple["NoFoldLiteral", int]:
        if pos >= len(data):
            raise EofError(cls.NAME)
        if data[pos] != ord("["):
            raise NotFoundError(cls.NAME)
        dtext, pos = DText.parse_optional(data, pos + 1)
        pos = require(data, pos, b"]")
        return cls(dtext), pos

    def stream(self, w: Any) -> int:
        return write(w, b"[") + stream_optional(self.dtext, w) + write(w, b"]")


@dataclass(frozen=True)
class IdRight(Choice):
    """id-right = dot-atom-text / no-fold-literal"""

    NAME: ClassVar[str] = "Id Right"
    ALTERNATIVES = (DotAtomText, NoFoldLiteral)


@dataclass(frozen=True)
class MsgId(Token):
    """
    msg-id = [CFWS] "<" id-left "@" id-right ">" [CFWS]

    id-left is a dot-atom-text. The opening "<" commits the production.
    """

    pre_cfws: Optional[CFWS]
    id_left: DotAtomText
    id_right: IdRight
    post_cfws: Optional[CFWS]
    NAME: ClassVar[str] = "Msg Id"

    @classmethod
    def parse_at(cls, data: bytes, pos: int) -> Tuple["MsgId", int]:
        start = pos
        pre_cfws, pos = CFWS.parse_optional(data, pos)
        if not data.startswith(b"<", pos):
            if start >= len(data):
                raise EofError(cls.NAME)
            raise NotFoundError(cls.NAME)
        pos += 1
        try:
            id_left, pos = DotAtomText.parse_at(data, pos)
            pos = require(data, pos, b"@")
            id_right, pos = IdRight.parse_at(data, pos)
        except RECOVERABLE:
            raise ExpectedTypeError('id-left "@" id-right', pos)
        pos = require(data, pos, b">")
        post_cfws, pos = CFWS.parse_optional(data, pos)
        return cls(pre_cfws, id_left, id_right, post_cfws), pos

    def stream(self, w: Any) -> int:
        return (stream_optional(self.pre_cfws, w)
                + write(w, b"<")
                + self.id_left.stream(w)
                + write(w, b"@")
                + self.id_right.stream(w)
                + write(w, b">")
                + stream_optional(self.post_cfws, w))

    @property
    def text(self) -> str:
        """The identifier without surrounding CFWS"""
        right = self.id_right.to_bytes().decode("ascii")
        return f"<{self.id_left.text}@{right}>"


@dataclass(frozen=True)
class MsgIdList(Repeated):
    """1*msg-id, as used by In-Reply-To and References"""

    NAME: ClassVar[str] = "Msg Id List"
    ITEM = MsgId
