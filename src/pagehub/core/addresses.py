"""Address and content identifier value objects."""

from __future__ import annotations

import re
from typing import ClassVar, Self

from pydantic import BaseModel, Field, field_validator, model_validator


def normalize_address(address: str) -> str:
    """Canonical form used for case-insensitive address comparison."""
    return address.strip().lower()


class EvmAddress(BaseModel):
    """20-byte EVM account or contract address."""

    value: str = Field(..., description="Lowercase 0x-prefixed hex address")

    ADDRESS_PATTERN: ClassVar[re.Pattern[str]] = re.compile(r"^0x[0-9a-f]{40}$")

    @field_validator("value", mode="before")
    @classmethod
    def normalize(cls, v: str) -> str:
        """Strip whitespace, lowercase, add a missing 0x prefix."""
        v = normalize_address(str(v))
        if not v.startswith("0x"):
            v = "0x" + v
        return v

    @model_validator(mode="after")
    def validate_address(self) -> Self:
        if not self.ADDRESS_PATTERN.match(self.value):
            raise ValueError(f"Invalid EVM address: {self.value}")
        return self

    @classmethod
    def parse(cls, value: str) -> EvmAddress:
        return cls(value=value)

    @property
    def word(self) -> str:
        """ABI-encoded 32-byte word (no 0x prefix)."""
        return self.value[2:].rjust(64, "0")

    def __str__(self) -> str:
        return self.value

    def __hash__(self) -> int:
        return hash(self.value)


def is_evm_address(value: str) -> bool:
    """Check whether a string is a well-formed EVM address."""
    try:
        EvmAddress.parse(value)
    except ValueError:
        return False
    return True


class ContentId(BaseModel):
    """A `chain:address` reference, as used by the book detail route."""

    chain: str | None = None
    address: str

    @classmethod
    def parse(cls, value: str, default_chain: str | None = None) -> ContentId:
        """
        Parse `chain:address` or a bare address.

        A bare address takes `default_chain`, which may be None.
        """
        value = value.strip()
        if ":" in value:
            chain, address = value.split(":", 1)
            return cls(chain=chain.strip().lower() or default_chain, address=address.strip())
        return cls(chain=default_chain, address=value)


def parse_token_id(value: str | int) -> int:
    """Parse a decimal or 0x-hex token id."""
    if isinstance(value, int):
        if value < 0:
            raise ValueError(f"Invalid token id: {value}")
        return value
    text = str(value).strip()
    try:
        token_id = int(text, 16) if text.lower().startswith("0x") else int(text, 10)
    except ValueError:
        raise ValueError(f"Invalid token id: {value}") from None
    if token_id < 0:
        raise ValueError(f"Invalid token id: {value}")
    return token_id
