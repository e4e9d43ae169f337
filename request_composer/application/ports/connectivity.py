from abc import ABC, abstractmethod


class ConnectivityPort(ABC):
    @abstractmethod
    def is_online(self) -> bool:
        raise NotImplementedError
