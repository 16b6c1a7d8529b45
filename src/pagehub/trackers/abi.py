"""Minimal ABI encoding for the ERC-721 read calls the trackers make."""

from pagehub.core.addresses import EvmAddress
from pagehub.core.exceptions import TrackerError

WORD_HEX = 64

# Function selectors (first 4 bytes of keccak256 of the signature)
SUPPORTS_INTERFACE = "0x01ffc9a7"
NAME = "0x06fdde03"
SYMBOL = "0x95d89b41"
TOTAL_SUPPLY = "0x18160ddd"
TOKEN_BY_INDEX = "0x4f6ccce7"
TOKEN_URI = "0xc87b56dd"
OWNER_OF = "0x6352211e"
BALANCE_OF = "0x70a08231"
TOKEN_OF_OWNER_BY_INDEX = "0x2f745c59"
ROYALTY_INFO = "0x2a55205a"

# ERC-165 interface ids
ERC721_INTERFACE_ID = "0x80ac58cd"
ERC721_ENUMERABLE_INTERFACE_ID = "0x780e9d63"


class AbiDecodeError(TrackerError):
    """Return data does not match the expected ABI type."""


def encode_uint(value: int) -> str:
    return format(value, "x").rjust(WORD_HEX, "0")


def encode_address(address: str | EvmAddress) -> str:
    if not isinstance(address, EvmAddress):
        address = EvmAddress.parse(address)
    return address.word


def encode_bytes4(value: str) -> str:
    return value.removeprefix("0x").ljust(WORD_HEX, "0")


def encode_call(selector: str, *words: str) -> str:
    """Concatenate a selector with already-encoded 32-byte words."""
    return selector + "".join(words)


def _words(data: str) -> str:
    payload = data.removeprefix("0x")
    if not payload:
        raise AbiDecodeError("Empty return data (no contract at address or call reverted)")
    return payload


def _word(payload: str, index: int) -> str:
    start = index * WORD_HEX
    word = payload[start:start + WORD_HEX]
    if len(word) != WORD_HEX:
        raise AbiDecodeError(f"Return data too short for word {index}")
    return word


def decode_uint(data: str, index: int = 0) -> int:
    return int(_word(_words(data), index), 16)


def decode_bool(data: str) -> bool:
    return decode_uint(data) != 0


def decode_address(data: str, index: int = 0) -> str:
    return "0x" + _word(_words(data), index)[-40:]


def decode_string(data: str) -> str:
    """
    Decode a dynamic `string` return value.

    Contracts that return `bytes32` for name/symbol are accepted too.
    """
    payload = _words(data)
    if len(payload) == WORD_HEX:
        return bytes.fromhex(payload).rstrip(b"\x00").decode("utf-8", errors="replace")

    offset = int(_word(payload, 0), 16) * 2
    length_word = payload[offset:offset + WORD_HEX]
    if len(length_word) != WORD_HEX:
        raise AbiDecodeError("Return data too short for string length")
    length = int(length_word, 16) * 2
    start = offset + WORD_HEX
    raw = payload[start:start + length]
    if len(raw) != length:
        raise AbiDecodeError("Return data too short for string")
    return bytes.fromhex(raw).decode("utf-8", errors="replace")
