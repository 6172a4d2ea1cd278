"""Resolvers reading vendor evidence from Java system properties.

Three resolvers cover the properties in decreasing order of specificity:
the vendor version string (``Temurin-17.0.2+8``), the vendor names
(``Eclipse Adoptium``), and the runtime/VM names (``OpenJDK Runtime
Environment``).
"""

from jdk_license_tracker.resolvers.base import PropertyFieldResolver


class VendorVersionResolver(PropertyFieldResolver):
    """Reads ``java.vendor.version``.

    Priority: 20
    """

    fields = ("java.vendor.version",)

    @property
    def name(self) -> str:
        return "vendor-version"

    @property
    def priority(self) -> int:
        return 20


class PropertyVendorResolver(PropertyFieldResolver):
    """Reads ``java.vendor`` and then ``java.vm.vendor``.

    Priority: 30
    """

    fields = ("java.vendor", "java.vm.vendor")

    @property
    def name(self) -> str:
        return "vendor"

    @property
    def priority(self) -> int:
        return 30


class RuntimeNameResolver(PropertyFieldResolver):
    """Reads ``java.runtime.name`` and then ``java.vm.name``.

    Priority: 40
    """

    fields = ("java.runtime.name", "java.vm.name")

    @property
    def name(self) -> str:
        return "runtime-name"

    @property
    def priority(self) -> int:
        return 40
