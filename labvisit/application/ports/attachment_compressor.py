from __future__ import annotations

from abc import ABC, abstractmethod

from labvisit.domain.entities.booking_draft import Attachment
from labvisit.domain.entities.submission import CompressionResult


class AttachmentCompressorPort(ABC):
    @abstractmethod
    async def compress(self, attachment: Attachment) -> CompressionResult:
        """Encode the attachment for transport. Raises AttachmentError subclasses."""
        raise NotImplementedError
