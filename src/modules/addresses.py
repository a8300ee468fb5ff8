"""
Address Productions
RFC 5322 sections 3.4 and 3.4.1: addr-spec, angle-addr, name-addr, mailbox,
group and their list forms.

PATTERN RECOGNITION: Ambiguity is resolved by the textual order of the RFC
alternatives. Mailbox tries name-addr before addr-spec, Address tries mailbox
before group, Domain and LocalPart try dot-atom first.
"""

from dataclasses import dataclass
from typing import Any, ClassVar, Optional, Tuple

from .lexical import CFWS, DText, skip_fws
from .parse_error import RECOVERABLE, EofError, NotFoundError
from .token import Choice, DelimitedList, Token, match, require, stream_optional, write
from .words import DotAtom, Phrase, QuotedString


@dataclass(frozen=True)
class LocalPart(Choice):
    """local-part = dot-atom / quoted-string"""

    NAME: ClassVar[str] = "Local Part"
    ALTERNATIVES = (DotAtom, QuotedString)

    @property
    def text(self) -> str:
        return self.value.text


@dataclass(frozen=True)
class DomainLiteral(Token):
    """domain-literal = [CFWS] "[" *([FWS] dtext) [FWS] "]" [CFWS]"""

    pre_cfws: Optional[CFWS]
    dtext: Tuple[Tuple[bool, DText], ...]
    trailing_ws: bool
    post_cfws: Optional[CFWS]
    NAME: ClassVar[str] = "Domain Literal"

    @classmethod
    def parse_at(cls, data: bytes, pos: int) -> Tuple["DomainLiteral", int]:
        start = pos
        pre_cfws, pos = CFWS.parse_optional(data, pos)
        if not data.startswith(b"[", pos):
            if start >= len(data):
                raise EofError(cls.NAME)
            raise NotFoundError(cls.NAME)
        pos += 1
        dtext = []
        while True:
            ws, after_ws = skip_fws(data, pos)
            text, end = DText.parse_optional(data, after_ws)
            if text is None:
                trailing_ws, pos = ws, after_ws
                break
            dtext.append((ws, text))
            pos = end
        pos = require(data, pos, b"]")
        post_cfws, pos = CFWS.parse_optional(data, pos)
        return cls(pre_cfws, tuple(dtext), trailing_ws, post_cfws), pos

    def stream(self, w: Any) -> int:
        count = stream_optional(self.pre_cfws, w)
        count += write(w, b"[")
        for ws, text in self.dtext:
            if ws:
                count += write(w, b" ")
            count += text.stream(w)
        if self.trailing_ws:
            count += write(w, b" ")
        count += write(w, b"]")
        count += stream_optional(self.post_cfws, w)
        return count

    @property
    def text(self) -> str:
        return "[" + " ".join(text.text for _, text in self.dtext) + "]"


@dataclass(frozen=True)
class Domain(Choice):
    """domain = dot-atom / domain-literal"""

    NAME: ClassVar[str] = "Domain"
    ALTERNATIVES = (DotAtom, DomainLiteral)

    @property
    def text(self) -> str:
        return self.value.text


@dataclass(frozen=True)
class AddrSpec(Token):
    """
    addr-spec = local-part "@" domain

    There is no partial success: a missing "@" or domain fails the whole
    addr-spec from its starting position.
    """

    local_part: LocalPart
    domain: Domain
    NAME: ClassVar[str] = "Addr Spec"

    @classmethod
    def parse_at(cls, data: bytes, pos: int) -> Tuple["AddrSpec", int]:
        start = pos
        local_part, pos = LocalPart.parse_at(data, pos)
        try:
            pos = match(data, pos, b"@", cls.NAME)
            domain, pos = Domain.parse_at(data, pos)
        except RECOVERABLE:
            raise NotFoundError(cls.NAME) if start < len(data) else EofError(cls.NAME)
        return cls(local_part, domain), pos

    def stream(self, w: Any) -> int:
        return self.local_part.stream(w) + write(w, b"@") + self.domain.stream(w)

    @property
    def text(self) -> str:
        return f"{self.local_part.text}@{self.domain.text}"


@dataclass(frozen=True)
class AngleAddr(Token):
    """angle-addr = [CFWS] "<" addr-spec ">" [CFWS]"""

    pre_cfws: Optional[CFWS]
    addr_spec: AddrSpec
    post_cfws: Optional[CFWS]
    NAME: ClassVar[str] = "Angle Addr"

    @classmethod
    def parse_at(cls, data: bytes, pos: int) -> Tuple["AngleAddr", int]:
        start = pos
        try:
            pre_cfws, pos = CFWS.parse_optional(data, pos)
            pos = match(data, pos, b"<", cls.NAME)
            addr_spec, pos = AddrSpec.parse_at(data, pos)
            pos = match(data, pos, b">", cls.NAME)
        except RECOVERABLE:
            # "<>" and other non-addresses are left for the caller
            raise NotFoundError(cls.NAME) if start < len(data) else EofError(cls.NAME)
        post_cfws, pos = CFWS.parse_optional(data, pos)
        return cls(pre_cfws, addr_spec, post_cfws), pos

    def stream(self, w: Any) -> int:
        return (stream_optional(self.pre_cfws, w)
                + write(w, b"<")
                + self.addr_spec.stream(w)
                + write(w, b">")
                + stream_optional(self.post_cfws, w))


@dataclass(frozen=True)
class NameAddr(Token):
    """name-addr = [display-name] angle-addr"""

    display_name: Optional[Phrase]
    angle_addr: AngleAddr
    NAME: ClassVar[str] = "Name Addr"

    @classmethod
    def parse_at(cls, data: bytes, pos: int) -> Tuple["NameAddr", int]:
        display_name, after = Phrase.parse_optional(data, pos)
        angle_addr, after = AngleAddr.parse_at(data, after)
        return cls(display_name, angle_addr), after

    def stream(self, w: Any) -> int:
        return stream_optional(self.display_name, w) + self.angle_addr.stream(w)


@dataclass(frozen=True)
class Mailbox(Choice):
    """mailbox = name-addr / addr-spec"""

    NAME: ClassVar[str] = "Mailbox"
    ALTERNATIVES = (NameAddr, AddrSpec)

    @property
    def addr_spec(self) -> AddrSpec:
        if isinstance(self.value, NameAddr):
            return self.value.angle_addr.addr_spec
        return self.value

    @property
    def display_name(self) -> Optional[Phrase]:
        if isinstance(self.value, NameAddr):
            return self.value.display_name
        return None


@dataclass(frozen=True)
class MailboxList(DelimitedList):
    """mailbox-list = mailbox *("," mailbox)"""

    NAME: ClassVar[str] = "Mailbox List"
    ITEM = Mailbox


@dataclass(frozen=True)
class GroupList(Choice):
    """group-list = mailbox-list / CFWS"""

    NAME: ClassVar[str] = "Group List"
    ALTERNATIVES = (MailboxList, CFWS)


@dataclass(frozen=True)
class Group(Token):
    """group = display-name ":" [group-list] ";" [CFWS]"""

    display_name: Phrase
    group_list: Optional[GroupList]
    post_cfws: Optional[CFWS]
    NAME: ClassVar[str] = "Group"

    @classmethod
    def parse_at(cls, data: bytes, pos: int) -> Tuple["Group", int]:
        display_name, pos = Phrase.parse_at(data, pos)
        pos = match(data, pos, b":", cls.NAME)
        group_list, pos = GroupList.parse_optional(data, pos)
        pos = require(data, pos, b";")
        post_cfws, pos = CFWS.parse_optional(data, pos)
        return cls(display_name, group_list, post_cfws), pos

    def stream(self, w: Any) -> int:
        return (self.display_name.stream(w)
                + write(w, b":")
                + stream_optional(self.group_list, w)
                + write(w, b";")
                + stream_optional(self.post_cfws, w))


@dataclass(frozen=True)
class Address(Choice):
    """address = mailbox / group"""

    NAME: ClassVar[str] = "Address"
    ALTERNATIVES = (Mailbox, Group)


@dataclass(frozen=True)
class AddressList(DelimitedList):
    """address-list = address *("," address)"""

    NAME: ClassVar[str] = "Address List"
    ITEM = Address
