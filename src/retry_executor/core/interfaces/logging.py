from abc import ABC, abstractmethod
from typing import Optional


class LoggingPort(ABC):
    @abstractmethod
    def info(self, msg: str):
        pass

    @abstractmethod
    def warning(self, msg: str):
        pass

    @abstractmethod
    def error(self, msg: str, exc: Optional[BaseException] = None):
        pass

    @abstractmethod
    def debug(self, msg: str):
        pass
