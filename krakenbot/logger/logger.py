import logging
from logging import Logger as PythonLogger
from typing import Optional, Type

NETWORK = logging.DEBUG + 6


class KrakenbotLogger(PythonLogger):
    def __init__(self, name: str):
        super().__init__(name)

    @staticmethod
    def logger_name_for_class(model_class: Type) -> str:
        return f"{model_class.__module__}.{model_class.__qualname__}"

    def network(self, log_msg: str, app_warning_msg: Optional[str] = None, *args, **kwargs):
        """
        Logs a connectivity problem at the NETWORK level. When an app warning message is given it is
        also emitted as a WARNING, without the traceback, so that it surfaces in default log setups.
        """
        self.log(NETWORK, log_msg, *args, **kwargs)
        if app_warning_msg is not None:
            self.warning(app_warning_msg)
