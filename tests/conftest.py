import pytest

from nodectl.hardware.gpio_controller import GPIOController
from nodectl.hardware.pcie_controller import PCIeController
from nodectl.registry import NodeRegistry
from nodectl.topology import DEFAULT_TOPOLOGY

from tests.fakes import FakeControlSurface, FakeSleep, GPIO_ROOT, PCIE_ROOT, RESCAN_PATH


@pytest.fixture
def surface():
    s = FakeControlSurface()
    s.add_file(f"{GPIO_ROOT}/export")
    s.add_file(RESCAN_PATH)
    s.add_dir(PCIE_ROOT)
    return s


@pytest.fixture
def gpio(surface):
    return GPIOController(surface, GPIO_ROOT)


@pytest.fixture
def pcie(surface):
    return PCIeController(surface, PCIE_ROOT, rescan_path=RESCAN_PATH)


@pytest.fixture
def sleeper(surface):
    return FakeSleep(surface)


@pytest.fixture
def registry(gpio, sleeper):
    return NodeRegistry(DEFAULT_TOPOLOGY, gpio, sleep=sleeper)


@pytest.fixture
def nodes(registry):
    return registry.get_nodes()
