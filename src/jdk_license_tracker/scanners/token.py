"""Scanner for a bare version token such as ``17.0.2+8`` or ``1.8.0_301``."""

from jdk_license_tracker.scanners.base import BaseScanner, PropertyEntry


class TokenScanner(BaseScanner):
    """Treats a single whitespace-free token as the ``java.version`` value."""

    @classmethod
    def can_handle(cls, text: str) -> bool:
        token = text.strip()
        return bool(token) and len(token.split()) == 1

    @property
    def source_name(self) -> str:
        return "version token"

    def scan(self) -> list[PropertyEntry]:
        return [("java.version", self.text.strip())]
