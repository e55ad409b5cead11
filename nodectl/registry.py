#!/usr/bin/env python3
"""
Node registry
Builds the full set of nodes from the board topology
"""

import time
import logging
from typing import Callable, Iterable, List, Optional

from .errors import BadParameter, SetupError
from .hardware.gpio_controller import GPIOController
from .node import Node
from .topology import BoardTopology, DEFAULT_TOPOLOGY, NODE_COUNT, validate_node_number


class NodeRegistry:
    """
    Constructs every node on the board

    Construction is all-or-nothing per call: the first node that fails
    aborts the rest. Pins already exported for earlier nodes stay exported.
    """

    def __init__(self, topology: BoardTopology = DEFAULT_TOPOLOGY,
                 gpio_controller: Optional[GPIOController] = None,
                 sleep: Callable[[float], None] = time.sleep):
        self.logger = logging.getLogger(__name__)
        self.topology = topology
        self.gpio_controller = gpio_controller if gpio_controller is not None else GPIOController()
        self._sleep = sleep

    def get_nodes(self) -> List[Node]:
        """
        Construct nodes 1..4 in order

        Returns:
            List of 4 nodes, index 0 is node 1

        Raises:
            SetupError: naming the first node that failed
        """
        nodes = []
        for pins in self.topology.nodes:
            try:
                nodes.append(Node(pins, self.gpio_controller, sleep=self._sleep))
            except SetupError as e:
                raise SetupError(f"failed to setup node {pins.number}", pin=e.pin, node=pins.number) from e
        self.logger.debug(f"Constructed {len(nodes)} nodes")
        return nodes

    def get_node(self, number: int) -> Node:
        validate_node_number(number)
        return self.get_nodes()[number - 1]

    def select(self, numbers: Iterable[int], all_nodes: bool = False) -> List[int]:
        """
        Resolve a node selection without touching hardware

        Args:
            numbers: Explicitly requested node numbers
            all_nodes: Select every node; explicit numbers are still validated

        Returns:
            Node numbers in request order, without duplicates

        Raises:
            BadParameter: a number is out of range or nothing was selected
        """
        requested = [validate_node_number(number) for number in numbers]
        if all_nodes:
            return list(range(1, NODE_COUNT + 1))
        if not requested:
            raise BadParameter("no nodes selected, pass --all or at least one --node")

        selected = []
        for number in requested:
            if number not in selected:
                selected.append(number)
        return selected
