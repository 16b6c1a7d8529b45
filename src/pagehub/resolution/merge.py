"""Combining curated registry records with live on-chain data."""

from typing import Any

from pagehub.core.models import ContentRecord, DegradedItem, ResolvedContent

FROM_REGISTRY = "_fromRegistry"
FETCH_ERROR = "_blockchainFetchError"


def merge_content(record: ContentRecord | None, resolved: ResolvedContent) -> dict[str, Any]:
    """
    Merge a registry record with resolved content.

    Identity fields (`address`, `chain`, `type`) come from the registry
    whenever a record exists and from the resolution otherwise. For every
    other field the on-chain value wins if it is set; curated values fill
    the gaps.
    """
    merged: dict[str, Any] = record.to_dict() if record is not None else {}

    for key, value in resolved.collection_info.items():
        if value is not None or key not in merged:
            merged[key] = value

    merged.update(record.identity() if record is not None else resolved.identity())
    return merged


def registry_fallback(record: ContentRecord, error: str) -> dict[str, Any]:
    """Curated fields for a record whose on-chain fetch failed, tagged as such."""
    return {**record.to_dict(), FROM_REGISTRY: True, FETCH_ERROR: error}


def degraded_item(address: str, chain: str | None, error: str) -> dict[str, Any]:
    return DegradedItem(address=address, chain=chain, error=error).to_dict()


def merge_or_degrade(
    address: str,
    record: ContentRecord | None,
    resolved: ResolvedContent | None,
    error: str | None = None,
    chain: str | None = None,
) -> dict[str, Any]:
    """
    The list-item view of one address.

    Resolved content is merged. A failed address degrades: a curated one
    keeps its registry fields next to the `DegradedItem` markers, an
    unknown one is the bare `DegradedItem`.
    """
    if resolved is not None:
        return merge_content(record, resolved)
    message = error or "Content not found on any supported chain"
    if record is not None:
        return {
            **registry_fallback(record, message),
            **DegradedItem(address=record.address, chain=record.chain, error=message).to_dict(),
        }
    return degraded_item(address, chain, message)
