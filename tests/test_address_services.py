import pytest

from tokenlist.services.address import (
    InvalidAddressError,
    address_to_topic,
    is_valid_address,
    normalize_address,
    topic_to_address,
)

DAI = "0x6B175474E89094C44Da98b954EedeAC495271d0F"


def test_address_validation():
    assert is_valid_address(DAI) is True
    assert is_valid_address(DAI.lower()) is True
    assert is_valid_address(DAI[:-1]) is False
    assert is_valid_address("") is False
    assert is_valid_address(None) is False


def test_normalize_address_checksums_any_case():
    assert normalize_address(DAI.lower()) == DAI
    assert normalize_address(DAI.upper().replace("0X", "0x")) == DAI
    assert normalize_address(f"  {DAI}  ") == DAI


def test_normalize_address_rejects_garbage():
    with pytest.raises(InvalidAddressError):
        normalize_address("0x1234")
    with pytest.raises(ValueError):
        normalize_address("not an address")


def test_topic_round_trip():
    topic = address_to_topic(DAI)
    assert topic == "0x" + "0" * 24 + DAI[2:].lower()
    assert len(topic) == 66
    assert topic_to_address(topic) == DAI


def test_topic_to_address_rejects_short_topic():
    with pytest.raises(InvalidAddressError):
        topic_to_address("0x1234")
