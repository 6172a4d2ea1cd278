"""Scanner for ``java -version`` and ``java --version`` transcripts.

Maps the three lines printed by the launcher onto the system property names
the rest of the pipeline understands::

    openjdk version "17.0.2" 2022-01-18
    OpenJDK Runtime Environment Temurin-17.0.2+8 (build 17.0.2+8)
    OpenJDK 64-Bit Server VM Temurin-17.0.2+8 (build 17.0.2+8, mixed mode)

becomes ``java.version``, ``java.version.date``, ``java.runtime.name``,
``java.vendor.version``, ``java.runtime.version``, ``java.vm.name`` and
``java.vm.version``.
"""

import re
from typing import Optional

from jdk_license_tracker.scanners.base import BaseScanner, PropertyEntry

ORACLE_RUNTIME_NAME = "Java(TM) SE Runtime Environment"


class VersionOutputScanner(BaseScanner):
    """Scanner for the launcher's version banner."""

    HEADER_PATTERN = re.compile(
        r'(?P<kind>openjdk|java)(?: version)? "?(?P<version>[^\s"]+)"?'
        r"(?: (?P<date>\d{4}-\d{2}-\d{2}))?",
        re.IGNORECASE,
    )
    BUILD_PATTERN = re.compile(r"\(build (?P<build>[^)\s,]+)")

    RUNTIME_MARKER = "Runtime Environment"
    VM_MARKER = " VM"

    @classmethod
    def can_handle(cls, text: str) -> bool:
        """Check whether any line starts with a launcher version header.

        Args:
            text: Raw input text.

        Returns:
            True if a line looks like ``openjdk version "..."`` or ``java 21 ...``.
        """
        return any(cls._header(line) for line in text.splitlines())

    @classmethod
    def _header(cls, line: str) -> Optional[re.Match]:
        return cls.HEADER_PATTERN.match(line.strip())

    @property
    def source_name(self) -> str:
        return "java -version"

    def scan(self) -> list[PropertyEntry]:
        """Extract version properties from the banner.

        Returns:
            List of (key, value) pairs using Java system property names.
        """
        entries: list[PropertyEntry] = []
        kind = None

        for raw_line in self.text.splitlines():
            line = raw_line.strip()
            if not line:
                continue

            if kind is None:
                header = self._header(line)
                if header is None:
                    # e.g. "Picked up JAVA_TOOL_OPTIONS: ..."
                    continue
                kind = header.group("kind").lower()
                entries.append(("java.version", header.group("version")))
                if header.group("date"):
                    entries.append(("java.version.date", header.group("date")))
                continue

            if self.RUNTIME_MARKER in line:
                entries.extend(self._runtime_entries(line))
            elif self.VM_MARKER in line and "(build" in line:
                entries.extend(self._vm_entries(line))

        if kind == "java" and not any(key == "java.runtime.name" for key, _ in entries):
            entries.append(("java.runtime.name", ORACLE_RUNTIME_NAME))

        return entries

    def _runtime_entries(self, line: str) -> list[PropertyEntry]:
        head, marker, rest = line.partition(self.RUNTIME_MARKER)
        entries = [("java.runtime.name", f"{head}{marker}".strip())]

        tag, _, _ = rest.partition("(build")
        tag = tag.strip(" ()")
        if tag:
            entries.append(("java.vendor.version", tag))

        build = self.BUILD_PATTERN.search(rest)
        if build:
            entries.append(("java.runtime.version", build.group("build")))
        return entries

    def _vm_entries(self, line: str) -> list[PropertyEntry]:
        name, _, _ = line.partition("(build")
        head, marker, _ = name.partition(self.VM_MARKER)
        entries = [("java.vm.name", f"{head}{marker}".strip())]

        build = self.BUILD_PATTERN.search(line)
        if build:
            entries.append(("java.vm.version", build.group("build")))
        return entries
