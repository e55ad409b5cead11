import pytest

from nodectl.errors import BadParameter, ConfigError
from nodectl.topology import BoardTopology, DEFAULT_TOPOLOGY, NodePins, validate_node_number


def _nodes():
    return (
        NodePins(1, (10, 11, 12), (13,), 1),
        NodePins(2, (20, 21, 22), (23,), 2),
        NodePins(3, (30, 31, 32), (33,), 3),
        NodePins(4, (40, 41, 42), (43,), 0),
    )


def test_default_topology_shape():
    assert len(DEFAULT_TOPOLOGY.nodes) == 4
    for number, pins in enumerate(DEFAULT_TOPOLOGY.nodes, start=1):
        assert pins.number == number
        assert len(pins.output_pins) == 3
        assert len(pins.input_pins) == 1
    assert sorted(pins.serial_port for pins in DEFAULT_TOPOLOGY.nodes) == [0, 1, 2, 3]


def test_default_topology_has_no_shared_pins():
    all_pins = [pin for pins in DEFAULT_TOPOLOGY.nodes for pin in pins.all_pins]
    assert len(all_pins) == len(set(all_pins)) == 16


def test_shared_pin_is_rejected():
    nodes = _nodes()
    shared = NodePins(2, (10, 21, 22), (23,), 2)
    with pytest.raises(ConfigError):
        BoardTopology((nodes[0], shared, nodes[2], nodes[3]))


def test_wrong_node_count_is_rejected():
    with pytest.raises(ConfigError):
        BoardTopology(_nodes()[:3])


def test_non_contiguous_numbers_are_rejected():
    nodes = _nodes()
    with pytest.raises(ConfigError):
        BoardTopology((nodes[1], nodes[0], nodes[2], nodes[3]))


def test_wrong_pin_counts_are_rejected():
    with pytest.raises(ConfigError):
        NodePins(1, (1, 2), (3,), 0)
    with pytest.raises(ConfigError):
        NodePins(1, (1, 2, 3), (), 0)


def test_serial_port_range():
    with pytest.raises(ConfigError):
        NodePins(1, (1, 2, 3), (4,), 4)


def test_duplicate_serial_ports_are_rejected():
    nodes = _nodes()
    duplicate = NodePins(4, (40, 41, 42), (43,), 1)
    with pytest.raises(ConfigError):
        BoardTopology(nodes[:3] + (duplicate,))


@pytest.mark.parametrize("number", [0, 5])
def test_validate_node_number(number):
    with pytest.raises(BadParameter):
        validate_node_number(number)
    with pytest.raises(BadParameter):
        DEFAULT_TOPOLOGY.node(number)
