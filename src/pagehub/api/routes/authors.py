"""Author endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Query

from pagehub.api.dependencies import Content, split_csv
from pagehub.api.schemas import Envelope, ObjectResponse, PageResponse, PublicationsResponse

router = APIRouter(prefix="/authors", tags=["authors"])


@router.get(
    "",
    response_model=PageResponse,
    operation_id="listAuthors",
    summary="List authors",
    description="Merged cross-chain profiles for each address, most recently published first.",
)
async def list_authors(
    service: Content,
    addresses: str | None = Query(None, description="Comma-separated author addresses"),
    limit: int | None = Query(None),
    offset: int | None = Query(None),
) -> PageResponse:
    return Envelope(data=await service.list_authors(split_csv(addresses), limit, offset))


@router.get(
    "/{address}",
    response_model=ObjectResponse,
    operation_id="getAuthor",
    summary="Author details",
)
async def get_author(address: str, service: Content) -> ObjectResponse:
    return Envelope(data=await service.get_author_details(address))


@router.get(
    "/{address}/publications",
    response_model=PublicationsResponse,
    operation_id="getAuthorPublications",
    summary="Author publications",
)
async def get_author_publications(
    address: str,
    service: Content,
    limit: int | None = Query(None),
    offset: int | None = Query(None),
) -> PublicationsResponse:
    return Envelope(data=await service.get_author_publications(address, limit, offset))
