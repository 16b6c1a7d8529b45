"""Collection endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Query

from pagehub.api.dependencies import Content, split_csv
from pagehub.api.schemas import CollectionItemsResponse, Envelope, ObjectResponse, PageResponse
from pagehub.core.types import ALL_CHAINS

router = APIRouter(prefix="/collections", tags=["collections"])


@router.get(
    "",
    response_model=PageResponse,
    operation_id="listCollections",
    summary="List collections",
    description=(
        "Aggregate collections from the registry (or an explicit address list), "
        "featured first then by name. Failed addresses appear as degraded items."
    ),
)
async def list_collections(
    service: Content,
    chain: str = Query(ALL_CHAINS, description="Chain name or 'all'"),
    addresses: str | None = Query(None, description="Comma-separated contract addresses"),
    limit: int | None = Query(None),
    offset: int | None = Query(None),
) -> PageResponse:
    page = await service.list_collections(chain, split_csv(addresses), limit, offset)
    return Envelope(data=page)


@router.get(
    "/{address}",
    response_model=ObjectResponse,
    operation_id="getCollection",
    summary="Collection details",
    description="Resolve a collection by address and merge it with its registry record.",
)
async def get_collection(
    address: str,
    service: Content,
    chain: str | None = Query(None, description="Chain name or 'all'"),
    content_type: str | None = Query(None, alias="type", description="Content type hint"),
) -> ObjectResponse:
    return Envelope(data=await service.get_collection_details(address, chain, content_type))


@router.get(
    "/{address}/items",
    response_model=CollectionItemsResponse,
    operation_id="getCollectionItems",
    summary="Collection items",
    description="Token metadata for one page of the collection's tokens.",
)
async def get_collection_items(
    address: str,
    service: Content,
    chain: str | None = Query(None),
    content_type: str | None = Query(None, alias="type"),
    limit: int | None = Query(None),
    offset: int | None = Query(None),
) -> CollectionItemsResponse:
    page = await service.get_collection_items(address, chain, content_type, limit, offset)
    return Envelope(data=page)
