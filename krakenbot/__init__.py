import logging

from krakenbot.logger import KrakenbotLogger

logging.setLoggerClass(KrakenbotLogger)

__version__ = "0.1.0"
