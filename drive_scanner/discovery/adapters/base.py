"""
Adapter contract used by the scanner.
"""

from abc import ABC, abstractmethod
from typing import List

from ..drive import Drive


class Adapter(ABC):
    """Source of Drive entities for one device class"""

    name = "adapter"

    @abstractmethod
    def scan(self) -> List[Drive]:
        """
        List the drives currently visible to this adapter.

        Returns:
            Drives with unique identities

        Raises:
            ListingError: If the underlying lister failed
        """

    def __repr__(self):
        return f"<{self.__class__.__name__} {self.name}>"
