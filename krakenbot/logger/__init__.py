import logging

from .logger import NETWORK, KrakenbotLogger

logging.addLevelName(NETWORK, "NETWORK")

__all__ = [
    "KrakenbotLogger",
    "NETWORK",
]
