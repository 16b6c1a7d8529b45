"""Book endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Query

from pagehub.api.dependencies import Content, split_csv
from pagehub.api.schemas import Envelope, ObjectResponse, PageResponse

router = APIRouter(prefix="/books", tags=["books"])


@router.get(
    "",
    response_model=PageResponse,
    operation_id="listBooks",
    summary="List books",
    description=(
        "Book details for each address. `chains` is matched to `addresses` by "
        "position; the first chain is the default for the rest."
    ),
)
async def list_books(
    service: Content,
    addresses: str | None = Query(None, description="Comma-separated book contract addresses"),
    chains: str | None = Query(None, description="Comma-separated chain names"),
    limit: int | None = Query(None),
    offset: int | None = Query(None),
) -> PageResponse:
    page = await service.list_books(split_csv(addresses), split_csv(chains), limit, offset)
    return Envelope(data=page)


@router.get(
    "/featured",
    response_model=PageResponse,
    operation_id="listFeaturedBooks",
    summary="Featured books",
)
async def featured_books(
    service: Content,
    featured_addresses: str | None = Query(None, alias="featuredAddresses"),
    chains: str | None = Query(None),
    limit: int | None = Query(None),
) -> PageResponse:
    page = await service.featured_books(split_csv(featured_addresses), split_csv(chains), limit)
    return Envelope(data=page)


@router.get(
    "/{book_id}",
    response_model=ObjectResponse,
    operation_id="getBook",
    summary="Book details",
    description="`book_id` is `chain:address`, or an address with the `chain` query parameter.",
)
async def get_book(
    book_id: str,
    service: Content,
    chain: str | None = Query(None),
) -> ObjectResponse:
    return Envelope(data=await service.get_book_details(book_id, chain))
