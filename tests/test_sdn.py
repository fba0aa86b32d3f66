import pytest

from novastack.sdn import MAX_ADDR_LEN, SdnController, SdnError


def test_new_controller_is_disconnected():
    controller = SdnController()
    assert controller.connected is False
    with pytest.raises(SdnError):
        controller.control()


def test_control_after_connect_returns_endpoint():
    controller = SdnController()
    controller.connect("10.0.0.1", 6653)
    assert controller.connected is True
    assert controller.control() == ("10.0.0.1", 6653)


def test_long_address_truncated():
    controller = SdnController()
    controller.connect("a" * 100, 1)
    assert len(controller.address) == MAX_ADDR_LEN
    assert controller.control()[0] == "a" * MAX_ADDR_LEN


def test_reconnect_replaces_endpoint():
    controller = SdnController()
    controller.connect("host-one", 1)
    controller.connect("host-two", 2)
    assert controller.control() == ("host-two", 2)