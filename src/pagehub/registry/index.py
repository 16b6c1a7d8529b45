"""In-memory index of curated content records."""

from __future__ import annotations

import json
import logging
from collections.abc import Iterable, Sequence
from importlib import resources
from pathlib import Path
from typing import Any

from pydantic import ValidationError as PydanticValidationError

from pagehub.config import PageHubSettings
from pagehub.core.addresses import normalize_address
from pagehub.core.models import ContentRecord
from pagehub.core.types import ALL_CHAINS

logger = logging.getLogger(__name__)

DATA_PACKAGE = "pagehub.registry.data"


class RegistryIndex:
    """
    Read-only lookup of known contracts by address and chain.

    Records are loaded once from per-chain JSON lists (`<chain>.json`) and
    never mutated afterwards. The same address may be curated on several
    chains; listing and lookup preserve load order.
    """

    def __init__(
        self,
        records: Iterable[ContentRecord] = (),
        chains: Sequence[str] | None = None,
    ) -> None:
        self._records: list[ContentRecord] = list(records)
        self._chains: list[str] = list(chains) if chains is not None else []
        for record in self._records:
            if record.chain not in self._chains:
                self._chains.append(record.chain)

        self._by_address: dict[str, list[ContentRecord]] = {}
        for record in self._records:
            self._by_address.setdefault(record.normalized_address, []).append(record)

    @classmethod
    def from_directory(cls, path: Path, chains: Sequence[str]) -> RegistryIndex:
        """Load `<chain>.json` files from a directory."""
        records: list[ContentRecord] = []
        for chain in chains:
            file_path = Path(path) / f"{chain}.json"
            try:
                raw = json.loads(file_path.read_text(encoding="utf-8"))
            except (OSError, json.JSONDecodeError) as e:
                logger.warning(f"Could not load registry file {file_path}: {e}")
                continue
            records.extend(_parse_records(raw, chain))
        return cls(records, chains)

    @classmethod
    def from_package(cls, chains: Sequence[str]) -> RegistryIndex:
        """Load the registry data bundled with the package."""
        records: list[ContentRecord] = []
        data_dir = resources.files(DATA_PACKAGE)
        for chain in chains:
            resource = data_dir / f"{chain}.json"
            try:
                raw = json.loads(resource.read_text(encoding="utf-8"))
            except (OSError, json.JSONDecodeError) as e:
                logger.warning(f"Could not load bundled registry for {chain}: {e}")
                continue
            records.extend(_parse_records(raw, chain))
        return cls(records, chains)

    @classmethod
    def from_settings(cls, settings: PageHubSettings) -> RegistryIndex:
        if settings.registry_path is not None:
            index = cls.from_directory(settings.registry_path, settings.supported_chains)
        else:
            index = cls.from_package(settings.supported_chains)
        logger.info(f"Loaded {len(index)} registry records across {len(index.chains)} chains")
        return index

    @property
    def chains(self) -> list[str]:
        return list(self._chains)

    def lookup(self, address: str, chain: str | None = None) -> ContentRecord | None:
        """
        Find the record for an address.

        When `chain` is given and the address is curated on that chain, that
        record is returned; otherwise the first curated record wins.
        """
        candidates = self._by_address.get(normalize_address(address))
        if not candidates:
            return None
        if chain and chain != ALL_CHAINS:
            for record in candidates:
                if record.chain == chain:
                    return record
        return candidates[0]

    def list_by_chain(self, chain: str = ALL_CHAINS) -> list[ContentRecord]:
        if chain == ALL_CHAINS:
            return list(self._records)
        if chain not in self._chains:
            logger.warning(f"Chain '{chain}' not found in registry")
            return []
        return [record for record in self._records if record.chain == chain]

    def get_contracts(self, chain: str = ALL_CHAINS) -> list[dict[str, Any]]:
        """Plain-dict view of `list_by_chain`."""
        return [record.to_dict() for record in self.list_by_chain(chain)]

    def __len__(self) -> int:
        return len(self._records)

    def __contains__(self, address: object) -> bool:
        return isinstance(address, str) and normalize_address(address) in self._by_address


def _parse_records(raw: Any, chain: str) -> list[ContentRecord]:
    """Build records from one chain's JSON list. The file's chain always wins."""
    if not isinstance(raw, list):
        logger.warning(f"Registry data for {chain} is not a list, ignoring")
        return []

    records = []
    for entry in raw:
        if not isinstance(entry, dict):
            continue
        try:
            records.append(ContentRecord.model_validate({**entry, "chain": chain}))
        except PydanticValidationError as e:
            logger.warning(f"Skipping malformed registry entry on {chain}: {e}")
    return records
