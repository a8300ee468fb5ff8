"""
Email Address Module
A flattened view of parsed addresses for consumers that do not care about
comments, folding or groups.

PATTERN RECOGNITION: This is a data transfer object, like EmailData in a
mail-ingestion pipeline. The grammar tree keeps every syntactic detail; an
EmailAddress keeps only what a person reading the header would see.
"""

from dataclasses import dataclass
from typing import List, Optional

from .addresses import (
    Address,
    AddressList,
    AddrSpec,
    Group,
    GroupList,
    Mailbox,
    MailboxList,
    NameAddr,
)


@dataclass(frozen=True)
class EmailAddress:
    """
    One mailbox as (display name, local part, domain)

    Group structure is dropped: a group contributes its member mailboxes, and
    an empty group contributes nothing.
    """
    display_name: Optional[str]
    local_part: str
    domain: str

    @property
    def addr_spec(self) -> str:
        return f"{self.local_part}@{self.domain}"

    def __str__(self) -> str:
        if self.display_name:
            return f"{self.display_name} <{self.addr_spec}>"
        return self.addr_spec

    @classmethod
    def from_addresses(cls, address_list: AddressList) -> List["EmailAddress"]:
        output: List[EmailAddress] = []
        for address in address_list:
            output.extend(cls.from_address(address))
        return output

    @classmethod
    def from_address(cls, address: Address) -> List["EmailAddress"]:
        if isinstance(address.value, Group):
            return cls.from_group(address.value)
        return [cls.from_mailbox(address.value)]

    @classmethod
    def from_mailbox(cls, mailbox: Mailbox) -> "EmailAddress":
        if isinstance(mailbox.value, NameAddr):
            return cls.from_name_addr(mailbox.value)
        return cls.from_addr_spec(mailbox.value)

    @classmethod
    def from_name_addr(cls, name_addr: NameAddr) -> "EmailAddress":
        address = cls.from_addr_spec(name_addr.angle_addr.addr_spec)
        if name_addr.display_name is None:
            return address
        return cls(name_addr.display_name.text, address.local_part, address.domain)

    @classmethod
    def from_addr_spec(cls, addr_spec: AddrSpec) -> "EmailAddress":
        return cls(None, addr_spec.local_part.text, addr_spec.domain.text)

    @classmethod
    def from_group(cls, group: Group) -> List["EmailAddress"]:
        if group.group_list is None:
            return []
        return cls.from_group_list(group.group_list)

    @classmethod
    def from_group_list(cls, group_list: GroupList) -> List["EmailAddress"]:
        if isinstance(group_list.value, MailboxList):
            return cls.from_mailbox_list(group_list.value)
        return []

    @classmethod
    def from_mailbox_list(cls, mailbox_list: MailboxList) -> List["EmailAddress"]:
        return [cls.from_mailbox(mailbox) for mailbox in mailbox_list]
