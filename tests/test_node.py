import pytest

from nodectl.errors import BadParameter, PowerError, SetupError, WriteError
from nodectl.node import Node, REBOOT_SETTLE_DELAY
from nodectl.topology import DEFAULT_TOPOLOGY, NodePins

from tests.fakes import GPIO_ROOT


def _value_path(pin):
    return f"{GPIO_ROOT}/gpio{pin}/value"


def _value_writes(surface):
    return [(path, data) for path, data in surface.writes if path.endswith("/value")]


def test_node_configures_three_outputs_and_one_input(gpio, sleeper):
    node = Node(DEFAULT_TOPOLOGY.node(1), gpio, sleep=sleeper)

    assert node.number == 1
    assert [pin.number for pin in node.output_pins] == [0x1FC, 0x1F8, 0x1F3]
    assert [pin.number for pin in node.input_pins] == [0x1F7]


@pytest.mark.parametrize("number", [1, 2, 3, 4])
def test_power_on_touches_only_own_pins(nodes, surface, number):
    node = nodes[number - 1]
    surface.events.clear()

    node.power_on()

    expected = [(_value_path(pin), "1\n") for pin in DEFAULT_TOPOLOGY.node(number).output_pins]
    assert _value_writes(surface) == expected
    assert surface.writes == expected


@pytest.mark.parametrize("number", [1, 2, 3, 4])
def test_power_off_touches_only_own_pins(nodes, surface, number):
    node = nodes[number - 1]
    surface.events.clear()

    node.power_off()

    expected = [(_value_path(pin), "0\n") for pin in DEFAULT_TOPOLOGY.node(number).output_pins]
    assert surface.writes == expected


def test_power_on_stops_at_first_failure(nodes, surface):
    node = nodes[0]
    surface.events.clear()
    surface.fail_writes[_value_path(0x1F8)] = OSError("io")

    with pytest.raises(PowerError) as excinfo:
        node.power_on()

    # First pin stays high, no rollback, third pin never written
    assert surface.writes == [(_value_path(0x1FC), "1\n")]
    assert excinfo.value.node == 1
    assert isinstance(excinfo.value.__cause__, WriteError)


def test_reboot_orders_off_delay_on(nodes, surface, sleeper):
    node = nodes[2]
    surface.events.clear()

    node.reboot()

    pins = DEFAULT_TOPOLOGY.node(3).output_pins
    assert surface.events == (
        [("write", _value_path(pin), "0\n") for pin in pins]
        + [("sleep", REBOOT_SETTLE_DELAY)]
        + [("write", _value_path(pin), "1\n") for pin in pins]
    )


def test_reboot_delay_is_one_second(nodes, sleeper):
    nodes[0].reboot()

    assert REBOOT_SETTLE_DELAY == 1.0
    assert sleeper.calls == [1.0]


def test_reboot_skips_power_on_when_power_off_fails(nodes, surface, sleeper):
    surface.events.clear()
    surface.fail_writes[_value_path(0x1F3)] = OSError("io")

    with pytest.raises(PowerError) as excinfo:
        nodes[0].reboot()

    assert excinfo.value.operation == "reboot"
    assert sleeper.calls == []
    assert all(data == "0\n" for _, data in surface.writes)


def test_reboot_power_on_failure_leaves_node_off(gpio, surface, sleeper):
    def sleep_then_break_pin(seconds):
        sleeper(seconds)
        surface.fail_writes[_value_path(0x1FC)] = OSError("io")

    node = Node(DEFAULT_TOPOLOGY.node(1), gpio, sleep=sleep_then_break_pin)
    surface.events.clear()

    with pytest.raises(PowerError) as excinfo:
        node.reboot()

    assert excinfo.value.operation == "reboot"
    assert sleeper.calls == [REBOOT_SETTLE_DELAY]
    assert [data for _, data in surface.writes] == ["0\n", "0\n", "0\n"]


def test_read_status_returns_raw_input(nodes, surface):
    surface.files[_value_path(0x1F7)] = "1\n"

    assert nodes[0].read_status() == 1


def test_console_parameters(nodes):
    assert [node.tty_device_path for node in nodes] == [
        "/dev/ttyCH343USB1",
        "/dev/ttyCH343USB2",
        "/dev/ttyCH343USB3",
        "/dev/ttyCH343USB0",
    ]
    assert all(node.baud_rate == 1500000 for node in nodes)


def test_failed_pin_setup_returns_no_node(gpio, surface):
    surface.fail_writes[f"{GPIO_ROOT}/gpio{0x1F7}/direction"] = OSError("busy")

    with pytest.raises(SetupError) as excinfo:
        Node(DEFAULT_TOPOLOGY.node(1), gpio)

    assert excinfo.value.node == 1
    assert excinfo.value.pin == 0x1F7


def test_out_of_range_node_number_before_io(gpio, surface):
    pins = NodePins(5, output_pins=(1, 2, 3), input_pins=(4,), serial_port=0)

    with pytest.raises(BadParameter):
        Node(pins, gpio)
    assert surface.writes == []
