import asyncio
import base64
import hashlib
import json

import httpx
import pytest
from nacl.signing import VerifyKey

from mevkit.bid import (
    SHIO_JSON_RPC_URL,
    Ed25519KeyPair,
    ShioExecutor,
    ShioRPCExecutor,
    base58_encode,
    intent_digest,
    sign_transaction,
)

SEED = bytes(range(32))
TX_BYTES = b"\x00\x01\x02transaction-data"
DIGEST = bytes(range(100, 132))


@pytest.fixture
def keypair():
    return Ed25519KeyPair.from_seed(SEED)


def test_base58_empty_and_leading_zeros():
    assert base58_encode(b"") == ""
    assert base58_encode(b"\x00\x00") == "11"


def test_base58_known_vector():
    assert base58_encode(b"Hello World!") == "2NEpo7TZRRrLZSi2U"


def test_base58_uses_only_alphabet_and_keeps_zero_prefix():
    encoded = base58_encode(b"\x00" + DIGEST)
    assert encoded.startswith("1")
    assert not set(encoded) & set("0OIl")


def test_intent_digest_is_32_bytes_and_depends_on_intent():
    digest = intent_digest(TX_BYTES)
    assert len(digest) == 32
    assert digest == intent_digest(TX_BYTES)
    assert digest != hashlib.blake2b(TX_BYTES, digest_size=32).digest()


def test_from_seed_rejects_wrong_length():
    with pytest.raises(ValueError):
        Ed25519KeyPair.from_seed(b"short")


def test_sign_layout_and_verification(keypair):
    message = b"message"
    sig = keypair.sign(message)
    assert len(sig) == 97
    assert sig[0] == 0
    assert sig[65:] == keypair.public_key()
    assert VerifyKey(keypair.public_key()).verify(message, sig[1:65]) == message


def test_sign_transaction_signs_intent_digest(keypair):
    encoded = sign_transaction(keypair, TX_BYTES)
    assert base64.b64decode(encoded) == keypair.sign(intent_digest(TX_BYTES))


def test_executor_encode_bid(keypair):
    executor = ShioExecutor(keypair, asyncio.Queue())
    bid = executor.encode_bid(TX_BYTES, 1234, DIGEST)
    assert set(bid) == {"oppTxDigest", "bidAmount", "txData", "sig"}
    assert bid["oppTxDigest"] == base58_encode(DIGEST)
    assert bid["bidAmount"] == 1234
    assert base64.b64decode(bid["txData"]) == TX_BYTES
    assert bid["sig"] == sign_transaction(keypair, TX_BYTES)
    assert executor.name() == "ShioExecutor"


def test_encode_bid_rejects_bad_digest_and_amount(keypair):
    executor = ShioExecutor(keypair, asyncio.Queue())
    with pytest.raises(ValueError):
        executor.encode_bid(TX_BYTES, 1, b"\x01\x02")
    with pytest.raises(ValueError):
        executor.encode_bid(TX_BYTES, -1, DIGEST)
    with pytest.raises(ValueError):
        executor.encode_bid(TX_BYTES, 2**64, DIGEST)


@pytest.mark.asyncio
async def test_executor_execute_queues_bid(keypair):
    queue = asyncio.Queue()
    executor = ShioExecutor(keypair, queue)
    await executor.execute((TX_BYTES, 77, DIGEST))
    assert queue.get_nowait() == executor.encode_bid(TX_BYTES, 77, DIGEST)
    assert queue.empty()


def test_rpc_encode_bid(keypair):
    executor = ShioRPCExecutor(keypair, client=httpx.AsyncClient())
    bid = executor.encode_bid(TX_BYTES, 5, DIGEST)
    assert bid["jsonrpc"] == "2.0"
    assert bid["id"] == 1
    assert bid["method"] == "shio_submitBid"
    assert bid["params"] == [
        base58_encode(DIGEST),
        5,
        base64.b64encode(TX_BYTES).decode(),
        sign_transaction(keypair, TX_BYTES),
    ]
    assert executor.name() == "ShioRPCExecutor"


@pytest.mark.asyncio
async def test_rpc_execute_posts_bid(keypair):
    seen = []

    def handler(request):
        seen.append(request)
        return httpx.Response(200, json={"jsonrpc": "2.0", "id": 1, "result": None})

    async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
        executor = ShioRPCExecutor(keypair, client=client)
        await executor.execute((TX_BYTES, 9, DIGEST))

    assert len(seen) == 1
    request = seen[0]
    assert request.method == "POST"
    assert request.url.host == httpx.URL(SHIO_JSON_RPC_URL).host
    assert json.loads(request.content) == executor.encode_bid(TX_BYTES, 9, DIGEST)