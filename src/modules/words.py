"""
Word-Level Productions
RFC 5322 sections 3.2.3-3.2.5: atoms, dot-atoms, quoted strings, words,
phrases and unstructured text.
"""

from dataclasses import dataclass
from typing import Any, ClassVar, Optional, Tuple

from .lexical import CFWS, DQUOTE, AText, QText, QuotedPair, VChar, WSP, skip_fws
from .parse_error import RECOVERABLE, EofError, NotFoundError
from .token import Choice, Repeated, Token, require, stream_optional, write


def _not_found(name: str, data: bytes, pos: int):
    if pos >= len(data):
        return EofError(name)
    return NotFoundError(name)


@dataclass(frozen=True)
class Atom(Token):
    """atom = [CFWS] 1*atext [CFWS]"""

    pre_cfws: Optional[CFWS]
    atext: AText
    post_cfws: Optional[CFWS]
    NAME: ClassVar[str] = "Atom"

    @classmethod
    def parse_at(cls, data: bytes, pos: int) -> Tuple["Atom", int]:
        start = pos
        pre_cfws, pos = CFWS.parse_optional(data, pos)
        atext, pos = AText.parse_optional(data, pos)
        if atext is None:
            raise _not_found(cls.NAME, data, start)
        post_cfws, pos = CFWS.parse_optional(data, pos)
        return cls(pre_cfws, atext, post_cfws), pos

    def stream(self, w: Any) -> int:
        return (stream_optional(self.pre_cfws, w)
                + self.atext.stream(w)
                + stream_optional(self.post_cfws, w))

    @property
    def text(self) -> str:
        return self.atext.text


@dataclass(frozen=True)
class DotAtomText(Token):
    """dot-atom-text = 1*atext *("." 1*atext)"""

    parts: Tuple[AText, ...]
    NAME: ClassVar[str] = "Dot Atom Text"

    @classmethod
    def parse_at(cls, data: bytes, pos: int) -> Tuple["DotAtomText", int]:
        first, pos = AText.parse_at(data, pos)
        parts = [first]
        while data.startswith(b".", pos):
            # a dot with no atext after it is left for the caller
            part, end = AText.parse_optional(data, pos + 1)
            if part is None:
                break
            parts.append(part)
            pos = end
        return cls(tuple(parts)), pos

    def stream(self, w: Any) -> int:
        count = 0
        for index, part in enumerate(self.parts):
            if index:
                count += write(w, b".")
            count += part.stream(w)
        return count

    @property
    def text(self) -> str:
        return ".".join(part.text for part in self.parts)


@dataclass(frozen=True)
class DotAtom(Token):
    """dot-atom = [CFWS] dot-atom-text [CFWS]"""

    pre_cfws: Optional[CFWS]
    dot_atom_text: DotAtomText
    post_cfws: Optional[CFWS]
    NAME: ClassVar[str] = "Dot Atom"

    @classmethod
    def parse_at(cls, data: bytes, pos: int) -> Tuple["DotAtom", int]:
        start = pos
        pre_cfws, pos = CFWS.parse_optional(data, pos)
        dot_atom_text, pos = DotAtomText.parse_optional(data, pos)
        if dot_atom_text is None:
            raise _not_found(cls.NAME, data, start)
        post_cfws, pos = CFWS.parse_optional(data, pos)
        return cls(pre_cfws, dot_atom_text, post_cfws), pos

    def stream(self, w: Any) -> int:
        return (stream_optional(self.pre_cfws, w)
                + self.dot_atom_text.stream(w)
                + stream_optional(self.post_cfws, w))

    @property
    def text(self) -> str:
        return self.dot_atom_text.text


@dataclass(frozen=True)
class QContent(Choice):
    """qcontent = qtext / quoted-pair"""

    NAME: ClassVar[str] = "QContent"
    ALTERNATIVES = (QText, QuotedPair)

    @property
    def text(self) -> str:
        if isinstance(self.value, QuotedPair):
            return chr(self.value.char)
        return self.value.text


@dataclass(frozen=True)
class QuotedString(Token):
    """
    quoted-string = [CFWS] DQUOTE *([FWS] qcontent) [FWS] DQUOTE [CFWS]

    An opening quote commits the production: an unterminated string fails
    instead of being truncated.
    """

    pre_cfws: Optional[CFWS]
    qcontent: Tuple[Tuple[bool, QContent], ...]
    trailing_ws: bool
    post_cfws: Optional[CFWS]
    NAME: ClassVar[str] = "Quoted String"

    @classmethod
    def parse_at(cls, data: bytes, pos: int) -> Tuple["QuotedString", int]:
        start = pos
        pre_cfws, pos = CFWS.parse_optional(data, pos)
        if pos >= len(data) or data[pos] != DQUOTE:
            raise _not_found(cls.NAME, data, start)
        pos += 1
        qcontent = []
        while True:
            ws, after_ws = skip_fws(data, pos)
            try:
                content, end = QContent.parse_at(data, after_ws)
            except RECOVERABLE:
                trailing_ws, pos = ws, after_ws
                break
            qcontent.append((ws, content))
            pos = end
        pos = require(data, pos, b'"')
        post_cfws, pos = CFWS.parse_optional(data, pos)
        return cls(pre_cfws, tuple(qcontent), trailing_ws, post_cfws), pos

    def stream(self, w: Any) -> int:
        count = stream_optional(self.pre_cfws, w)
        count += write(w, b'"')
        for ws, content in self.qcontent:
            if ws:
                count += write(w, b" ")
            count += content.stream(w)
        if self.trailing_ws:
            count += write(w, b" ")
        count += write(w, b'"')
        count += stream_optional(self.post_cfws, w)
        return count

    @property
    def text(self) -> str:
        """Unquoted content with folding reduced to single spaces"""
        pieces = [(" " if ws else "") + content.text for ws, content in self.qcontent]
        if self.trailing_ws:
            pieces.append(" ")
        return "".join(pieces)


@dataclass(frozen=True)
class Word(Choice):
    """word = atom / quoted-string"""

    NAME: ClassVar[str] = "Word"
    ALTERNATIVES = (Atom, QuotedString)

    @property
    def text(self) -> str:
        return self.value.text


@dataclass(frozen=True)
class Phrase(Repeated):
    """phrase = 1*word"""

    NAME: ClassVar[str] = "Phrase"
    ITEM = Word

    @property
    def text(self) -> str:
        return " ".join(word.text for word in self.items)


@dataclass(frozen=True)
class Unstructured(Token):
    """
    unstructured = *([FWS] VCHAR) *WSP

    FWS between runs is only consumed when another visible run follows it,
    so a fold or line break ending the header stays in the remainder.
    """

    leading_ws: bool
    parts: Tuple[VChar, ...]
    trailing_ws: bool
    NAME: ClassVar[str] = "Unstructured"

    @classmethod
    def parse_at(cls, data: bytes, pos: int) -> Tuple["Unstructured", int]:
        leading_ws, pos = skip_fws(data, pos)
        parts = []
        part, after = VChar.parse_optional(data, pos)
        while part is not None:
            parts.append(part)
            pos = after
            _, after_ws = skip_fws(data, pos)
            part, after = VChar.parse_optional(data, after_ws)
        wsp, pos = WSP.parse_optional(data, pos)
        return cls(leading_ws, tuple(parts), wsp is not None), pos

    def stream(self, w: Any) -> int:
        count = write(w, b" ") if self.leading_ws else 0
        for index, part in enumerate(self.parts):
            if index:
                count += write(w, b" ")
            count += part.stream(w)
        if self.trailing_ws:
            count += write(w, b" ")
        return count

    @property
    def text(self) -> str:
        return " ".join(part.text for part in self.parts)
