"""Tests for Message and Notice models."""

import pytest
from pydantic import ValidationError
from rems.models.message import Message
from rems.models.notice import Notice


@pytest.mark.unit
def test_message_requires_receiver():
    with pytest.raises(ValidationError):
        Message(id="m1", property_id="p1", sender_id="u1", receiver_id=None, content="Hi")


@pytest.mark.unit
def test_message_rejects_blank_content():
    with pytest.raises(ValidationError):
        Message(id="m1", property_id="p1", sender_id="u1", receiver_id="a1", content="   ")


@pytest.mark.unit
def test_message_is_between_either_direction():
    message = Message(id="m1", property_id="p1", sender_id="u1", receiver_id="a1", content="Hi")

    assert message.is_between("u1", "a1")
    assert message.is_between("a1", "u1")
    assert not message.is_between("u1", "u2")


@pytest.mark.unit
def test_notice_variants():
    assert Notice.success("Saved").is_error is False
    error = Notice.error("Failed to approve listing")
    assert error.is_error is True
    assert error.title == "Error"
