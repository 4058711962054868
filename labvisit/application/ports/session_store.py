from abc import ABC, abstractmethod

from labvisit.application.use_cases.wizard import WizardController


class WizardSessionStorePort(ABC):
    @abstractmethod
    def create(self, controller: WizardController) -> str:
        """Register a controller and return its new session id."""
        raise NotImplementedError

    @abstractmethod
    def get(self, session_id: str) -> WizardController | None:
        raise NotImplementedError

    @abstractmethod
    def discard(self, session_id: str) -> None:
        raise NotImplementedError
