"""Raw blockchain read endpoints."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Query

from pagehub.api.dependencies import Content
from pagehub.api.schemas import AnyResponse, Envelope
from pagehub.services.content import BLOCKCHAIN_METHODS, ContentService

router = APIRouter(prefix="/blockchain", tags=["blockchain"])


async def _dispatch(
    service: ContentService,
    chain: str,
    address: str,
    method: str,
    params: str,
    content_type: str | None,
    owner: str | None = None,
    include_ownership: bool = False,
) -> AnyResponse:
    arguments = [part for part in params.split("/") if part]
    data: Any = await service.blockchain_request(
        chain,
        address,
        method,
        arguments,
        content_type,
        owner=owner,
        include_ownership=include_ownership,
    )
    return Envelope(data=data)


@router.get(
    "/{chain}/{address}",
    response_model=AnyResponse,
    operation_id="getContractInfo",
    summary="Contract info",
)
async def contract_info(
    chain: str,
    address: str,
    service: Content,
    content_type: str | None = Query(None, alias="type"),
) -> AnyResponse:
    return await _dispatch(service, chain, address, "info", "", content_type)


@router.get(
    "/{chain}/{address}/{method}",
    response_model=AnyResponse,
    operation_id="callContractMethod",
    summary="Contract read",
    description=f"Methods: {', '.join(BLOCKCHAIN_METHODS)}.",
)
async def contract_method(
    chain: str,
    address: str,
    method: str,
    service: Content,
    content_type: str | None = Query(None, alias="type"),
) -> AnyResponse:
    return await _dispatch(service, chain, address, method, "", content_type)


@router.get(
    "/{chain}/{address}/{method}/{params:path}",
    response_model=AnyResponse,
    operation_id="callContractMethodWithParams",
    summary="Contract read with parameters",
    description=(
        "`batch` takes comma-separated token ids (at most 20 are read) and "
        "`includeOwnership`; `checkOwnership` takes the owner as a second "
        "segment or the `owner` query parameter."
    ),
)
async def contract_method_with_params(
    chain: str,
    address: str,
    method: str,
    params: str,
    service: Content,
    content_type: str | None = Query(None, alias="type"),
    owner: str | None = Query(None, description="Address to check for checkOwnership"),
    include_ownership: bool = Query(False, alias="includeOwnership"),
) -> AnyResponse:
    return await _dispatch(
        service, chain, address, method, params, content_type, owner, include_ownership
    )
