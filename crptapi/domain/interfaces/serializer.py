"""Interface for turning documents into request bodies."""

import abc
from typing import Any

from ..models.common import Payload


class DocumentSerializer(abc.ABC):
    """Abstract Base Class for document encoders."""

    @abc.abstractmethod
    def serialize(self, document: Any) -> Payload:
        """Encodes a document.

        Raises:
            SerializationError: If the document cannot be encoded.
        """
        pass
