"""Base interface for input scanners.

Scanners turn raw, untrusted text (a properties export, a ``java -version``
transcript, a bare version token) into ordered key/value pairs using the
standard Java system property names.
"""

from abc import ABC, abstractmethod

PropertyEntry = tuple[str, str]


class BaseScanner(ABC):
    """Abstract base class for input scanners.

    Scanners only extract text; they never interpret version numbers.

    Attributes:
        text: The raw input being scanned.
    """

    def __init__(self, text: str) -> None:
        """Initialize the scanner.

        Args:
            text: Raw input text.
        """
        self.text = text

    @abstractmethod
    def scan(self) -> list[PropertyEntry]:
        """Extract property entries from the input.

        Returns:
            List of (key, value) pairs in input order. Keys may repeat.
        """
        ...

    @classmethod
    @abstractmethod
    def can_handle(cls, text: str) -> bool:
        """Check if this scanner recognizes the shape of the given text.

        Args:
            text: Raw input text.

        Returns:
            True if this scanner can process the text, False otherwise.
        """
        ...

    @property
    @abstractmethod
    def source_name(self) -> str:
        """Return a human-readable name for this scanner's input shape.

        Returns:
            Name like "properties", "java -version", etc.
        """
        ...
