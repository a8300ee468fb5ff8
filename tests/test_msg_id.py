"""
Tests for message identifiers
"""

import pytest

from src.modules.msg_id import MsgId, MsgIdList, NoFoldLiteral
from src.modules.parse_error import ExpectedError, NotFoundError, ParseError


def test_msg_id_round_trip():
    data = b"<950910bae2c7eff8d34297870a93dbb8@a.b.co.nz>"
    msg_id, rem = MsgId.parse(data)
    assert rem == b""
    assert msg_id.to_bytes() == data
    assert msg_id.text == "<950910bae2c7eff8d34297870a93dbb8@a.b.co.nz>"


def test_msg_id_with_no_fold_literal():
    msg_id, rem = MsgId.parse(b"<abc.def@[host-1]>")
    assert rem == b""
    assert isinstance(msg_id.id_right.value, NoFoldLiteral)
    assert msg_id.text == "<abc.def@[host-1]>"


def test_msg_id_surrounding_cfws_is_not_part_of_text():
    msg_id, _ = MsgId.parse(b" (id) <a@b> ")
    assert msg_id.text == "<a@b>"
    assert msg_id.to_bytes() == b" (id) <a@b> "


def test_missing_angle_bracket_is_not_found():
    with pytest.raises(NotFoundError):
        MsgId.parse(b"abc@def")


@pytest.mark.parametrize("data", [b"<abc>", b"<@def>", b"<abc@def", b"<abc@>"])
def test_malformed_msg_id_is_hard_failure(data):
    with pytest.raises(ParseError) as excinfo:
        MsgId.parse(data)
    assert not isinstance(excinfo.value, NotFoundError)


def test_unclosed_msg_id_expects_bracket():
    with pytest.raises(ExpectedError):
        MsgId.parse(b"<abc@def")


def test_msg_id_list():
    ids, rem = MsgIdList.parse(b"<a@b> <c@d>\r\n")
    assert len(ids) == 2
    assert rem == b"\r\n"
    assert [msg_id.text for msg_id in ids] == ["<a@b>", "<c@d>"]
