"""Signing bids and handing them to the Shio auction."""

from __future__ import annotations

import asyncio
import base64
import hashlib
import logging
from typing import Any

import httpx
from nacl.signing import SigningKey

logger = logging.getLogger(__name__)

SHIO_JSON_RPC_URL = "https://rpc.getshio.com"

_B58_ALPHABET = "123456789ABCDEFGHJKLMNPQRSTUVWXYZabcdefghijkmnopqrstuvwxyz"
# Intent prefix: scope TransactionData, version V0, app id Sui.
_TRANSACTION_INTENT = bytes((0, 0, 0))
_DIGEST_LEN = 32
_SEED_LEN = 32
_U64_LIMIT = 2**64

# (BCS-encoded transaction data, bid amount, digest of the opportunity transaction)
BidAction = tuple[bytes, int, bytes]


def base58_encode(data: bytes) -> str:
    """Encode bytes with the Bitcoin base58 alphabet."""
    data = bytes(data)
    stripped = data.lstrip(b"\x00")
    leading_zeros = len(data) - len(stripped)
    number = int.from_bytes(stripped, "big")
    digits: list[str] = []
    while number:
        number, remainder = divmod(number, 58)
        digits.append(_B58_ALPHABET[remainder])
    return "1" * leading_zeros + "".join(reversed(digits))


def intent_digest(tx_bytes: bytes) -> bytes:
    """Blake2b-256 digest of the transaction-intent message for BCS transaction bytes."""
    return hashlib.blake2b(_TRANSACTION_INTENT + bytes(tx_bytes), digest_size=_DIGEST_LEN).digest()


class Ed25519KeyPair:
    """An Ed25519 key pair producing flagged signatures (flag, signature, public key)."""

    FLAG = 0x00

    def __init__(self, signing_key: SigningKey) -> None:
        self._signing_key = signing_key

    @classmethod
    def from_seed(cls, seed: bytes) -> "Ed25519KeyPair":
        seed = bytes(seed)
        if len(seed) != _SEED_LEN:
            raise ValueError(f"an Ed25519 seed must be {_SEED_LEN} bytes long, got {len(seed)}")
        return cls(SigningKey(seed))

    def public_key(self) -> bytes:
        return bytes(self._signing_key.verify_key)

    def sign(self, message: bytes) -> bytes:
        signature = self._signing_key.sign(bytes(message)).signature
        return bytes((self.FLAG,)) + signature + self.public_key()


def sign_transaction(keypair: Ed25519KeyPair, tx_bytes: bytes) -> str:
    """Sign the intent digest of the transaction; return the signature in base64."""
    return base64.b64encode(keypair.sign(intent_digest(tx_bytes))).decode("ascii")


def _bid_parts(keypair: Ed25519KeyPair, tx_bytes: bytes, bid_amount: int, opp_tx_digest: bytes):
    if isinstance(bid_amount, bool) or not isinstance(bid_amount, int) or not 0 <= bid_amount < _U64_LIMIT:
        raise ValueError("bid amount must be an unsigned 64-bit integer")
    digest = bytes(opp_tx_digest)
    if len(digest) != _DIGEST_LEN:
        raise ValueError(f"a transaction digest must be {_DIGEST_LEN} bytes long")
    tx_bytes = bytes(tx_bytes)
    tx_b64 = base64.b64encode(tx_bytes).decode("ascii")
    return base58_encode(digest), bid_amount, tx_b64, sign_transaction(keypair, tx_bytes)


class ShioExecutor:
    """Signs bids and queues them for the feed connection to send."""

    def __init__(self, keypair: Ed25519KeyPair, bid_sender: asyncio.Queue) -> None:
        self._keypair = keypair
        self._bid_sender = bid_sender

    def name(self) -> str:
        return "ShioExecutor"

    def encode_bid(self, tx_bytes: bytes, bid_amount: int, opp_tx_digest: bytes) -> dict[str, Any]:
        digest, amount, tx_b64, sig = _bid_parts(self._keypair, tx_bytes, bid_amount, opp_tx_digest)
        return {"oppTxDigest": digest, "bidAmount": amount, "txData": tx_b64, "sig": sig}

    async def execute(self, action: BidAction) -> None:
        tx_bytes, bid_amount, opp_tx_digest = action
        await self._bid_sender.put(self.encode_bid(tx_bytes, bid_amount, opp_tx_digest))


class ShioRPCExecutor:
    """Signs bids and submits them over JSON-RPC."""

    def __init__(
        self,
        keypair: Ed25519KeyPair,
        client: httpx.AsyncClient | None = None,
        url: str = SHIO_JSON_RPC_URL,
    ) -> None:
        self._keypair = keypair
        self._client = client if client is not None else httpx.AsyncClient()
        self._url = url

    def name(self) -> str:
        return "ShioRPCExecutor"

    def encode_bid(self, tx_bytes: bytes, bid_amount: int, opp_tx_digest: bytes) -> dict[str, Any]:
        digest, amount, tx_b64, sig = _bid_parts(self._keypair, tx_bytes, bid_amount, opp_tx_digest)
        return {
            "jsonrpc": "2.0",
            "id": 1,
            "method": "shio_submitBid",
            "params": [digest, amount, tx_b64, sig],
        }

    async def execute(self, action: BidAction) -> None:
        tx_bytes, bid_amount, opp_tx_digest = action
        bid = self.encode_bid(tx_bytes, bid_amount, opp_tx_digest)
        logger.warning(">> %s", bid)
        response = await self._client.post(self._url, json=bid)
        logger.warning("<< %s %r", response.status_code, response.text)