#!/usr/bin/env python3
"""
Firmware flashing placeholder
The image path is validated, flashing itself is not supported yet
"""

import logging
from pathlib import Path
from typing import Sequence

from .errors import BadParameter, UnsupportedOperation

logger = logging.getLogger(__name__)


def validate_image(path) -> Path:
    image = Path(path)
    try:
        if not image.exists():
            raise BadParameter(f"the file to flash {str(image)!r} does not exist")
        if not image.is_file():
            raise BadParameter("the image file path must point to a regular file")
    except OSError as e:
        raise BadParameter(f"failed to get filesystem info for image file {str(image)!r}") from e
    return image


def flash_nodes(node_numbers: Sequence[int], image_path):
    image = validate_image(image_path)
    logger.warning(f"Flashing {image} to node(s) {list(node_numbers)} requested, flashing is not supported")
    raise UnsupportedOperation(f"this subcommand is not currently supported (nodes {list(node_numbers)})")
