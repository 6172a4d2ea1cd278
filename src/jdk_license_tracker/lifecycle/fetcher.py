"""Download lifecycle data from endoflife.date.

The fetcher turns the release cycles endoflife.date publishes for each Java
distribution into ``LifecycleRecord``s and writes them as a JSON overlay
that replaces the bundled table on the next run.
"""

import asyncio
import json
import logging
from collections.abc import Iterable, Mapping
from datetime import date
from pathlib import Path
from types import MappingProxyType
from typing import Any, Optional

import aiohttp

from jdk_license_tracker.exceptions import DataFetchError
from jdk_license_tracker.lifecycle.loader import record_to_dict
from jdk_license_tracker.models import LifecycleRecord, Vendor

logger = logging.getLogger(__name__)

ENDOFLIFE_API = "https://endoflife.date/api"

# endoflife.date product id for each distribution
PRODUCTS: Mapping[str, Vendor] = MappingProxyType(
    {
        "oracle-jdk": Vendor.ORACLE,
        "eclipse-temurin": Vendor.TEMURIN,
        "azul-zulu": Vendor.ZULU,
        "amazon-corretto": Vendor.CORRETTO,
        "microsoft-build-of-openjdk": Vendor.MICROSOFT,
        "bellsoft-liberica": Vendor.LIBERICA,
        "sapmachine": Vendor.SAPMACHINE,
        "ibm-semeru-runtime": Vendor.SEMERU,
        "redhat-build-of-openjdk": Vendor.REDHAT,
    }
)


def _as_date(value: Any) -> Optional[date]:
    # endoflife.date uses booleans where no date is known
    if isinstance(value, str):
        try:
            return date.fromisoformat(value)
        except ValueError:
            return None
    return None


def _major(cycle: Any) -> Optional[int]:
    text = str(cycle)
    if text.startswith("1."):
        text = text[2:]
    return int(text) if text.isdigit() else None


def records_from_cycles(vendor: Vendor, cycles: Iterable[Mapping[str, Any]]) -> list[LifecycleRecord]:
    """Convert endoflife.date release cycles to lifecycle records.

    The EOL date is the end of extended support when one is published,
    otherwise the end of security support. Cycles that are marked as ended
    without a date are skipped so the bundled record stays in effect.

    Args:
        vendor: Distribution the cycles belong to.
        cycles: Cycle objects from the API.

    Returns:
        Lifecycle records, one per recognizable cycle.
    """
    records = []
    for cycle in cycles:
        major = _major(cycle.get("cycle"))
        if major is None:
            logger.debug("Skipping %s cycle %r", vendor.value, cycle.get("cycle"))
            continue

        eol = _as_date(cycle.get("eol"))
        extended = _as_date(cycle.get("extendedSupport"))
        if eol is None and extended is None and cycle.get("eol") is True:
            logger.debug("Skipping %s %d: ended without a published date", vendor.value, major)
            continue

        lts = cycle.get("lts")
        records.append(
            LifecycleRecord(
                vendor=vendor,
                major=major,
                lts=bool(lts) if isinstance(lts, bool) else _as_date(lts) is not None,
                eol_date=extended or eol,
                security_support_until=_as_date(cycle.get("support")) or eol,
            )
        )
    return records


def write_overlay(records: Iterable[LifecycleRecord], path: Path) -> None:
    """Write records as the JSON lifecycle overlay.

    Args:
        records: Records to write.
        path: Destination file; parent directories are created.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    payload = {
        "generated": date.today().isoformat(),
        "records": [record_to_dict(record) for record in records],
    }
    with open(path, "w", encoding="utf-8") as f:
        json.dump(payload, f, indent=2)
    logger.info("Wrote lifecycle overlay to %s", path)


class EndOfLifeFetcher:
    """Fetches lifecycle data for every known distribution.

    Manages an aiohttp session for connection reuse across products. Use as
    an async context manager or call close() when done.

    Attributes:
        products: Mapping of endoflife.date product id to vendor.
        base_url: API root URL.
    """

    def __init__(
        self,
        products: Optional[Mapping[str, Vendor]] = None,
        base_url: str = ENDOFLIFE_API,
    ) -> None:
        self.products = products if products is not None else PRODUCTS
        self.base_url = base_url.rstrip("/")
        self._session: Optional[aiohttp.ClientSession] = None

    async def _get_session(self) -> aiohttp.ClientSession:
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(timeout=aiohttp.ClientTimeout(total=10))
        return self._session

    async def close(self) -> None:
        """Close the aiohttp session."""
        if self._session is not None and not self._session.closed:
            await self._session.close()
            self._session = None

    async def __aenter__(self) -> "EndOfLifeFetcher":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()

    async def fetch_product(self, product: str) -> Optional[list[dict[str, Any]]]:
        """Fetch the release cycles of one product.

        Args:
            product: endoflife.date product id.

        Returns:
            List of cycle objects, or None if the request failed.
        """
        url = f"{self.base_url}/{product}.json"
        logger.debug("Fetching lifecycle data from %s", url)

        try:
            session = await self._get_session()
            async with session.get(url) as response:
                if response.status != 200:
                    logger.warning("endoflife.date returned status %d for %s", response.status, product)
                    return None
                data = await response.json()
        except (aiohttp.ClientError, asyncio.TimeoutError, json.JSONDecodeError) as e:
            logger.warning("Failed to fetch lifecycle data for %s: %s", product, e)
            return None

        if not isinstance(data, list):
            logger.warning("Unexpected lifecycle payload for %s", product)
            return None
        return data

    async def fetch_all(self) -> tuple[LifecycleRecord, ...]:
        """Fetch and convert lifecycle data for all products concurrently.

        Returns:
            Records for every product that could be fetched.

        Raises:
            DataFetchError: If no product could be fetched.
        """
        products = list(self.products)
        results = await asyncio.gather(*(self.fetch_product(p) for p in products))

        records: list[LifecycleRecord] = []
        fetched = 0
        for product, cycles in zip(products, results):
            if cycles is None:
                continue
            fetched += 1
            records.extend(records_from_cycles(self.products[product], cycles))

        if not fetched:
            raise DataFetchError("could not fetch lifecycle data for any distribution")

        logger.info("Fetched %d lifecycle records for %d/%d products", len(records), fetched, len(products))
        return tuple(records)
