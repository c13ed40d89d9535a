# mevkit

Building blocks for searchers on the Sui network that take part in Shio
order-flow auctions: reading the auction feed, signing and submitting bids,
and a handful of chain utilities.

## Modules

- **`mevkit.shio_types`** – typed views of the messages on the Shio feed.
  `parse_shio_item` turns a decoded JSON value into an `AuctionStarted`,
  `AuctionEnded` or `Dummy` item; any value that is not a well-formed
  `{"auctionStarted": ...}` or `{"auctionEnded": ...}` object becomes `Dummy`.
  Every `ShioItem` answers `tx_digest()`, `gas_price()`,
  `deadline_timestamp_ms()`, `events()`, `created_mutated_objects()` and
  `type_name()`. The nested records (`SideEffects`, `ShioObject`,
  `ShioObjectContent`, `ShioEvent`, `ShioEventId`) each have a `from_json`
  class method that raises `ShioParseError` on malformed input.
- **`mevkit.shio_conn`** – the websocket connection to the feed
  (`SHIO_FEED_URL` by default). `run_shio_conn` forwards bids from one queue
  and puts parsed items on another, reconnecting after transport errors; it
  raises `ConnectionError` after `num_retries` failed attempts in a row and
  `RuntimeError` when the server sends a close frame or a binary message.
  `new_shio_conn` runs it as a background task and returns the two queues.
  `ShioCollector.get_event_stream()` yields the incoming items and raises
  `RuntimeError` once the connection has stopped.
  `new_shio_collector_and_executor` sets up a collector and a `ShioExecutor`
  sharing one connection. `SHIO_GLOBAL_STATES` lists the Shio global state
  objects with their initial shared versions.
- **`mevkit.bid`** – `Ed25519KeyPair` (built from a 32-byte seed) producing
  flagged signatures, `intent_digest` (Blake2b-256 over the transaction
  intent and the BCS transaction bytes), `sign_transaction` and
  `base58_encode`. Bids are submitted either over the feed connection
  (`ShioExecutor`, which puts the bid on the bid queue) or as a
  `shio_submitBid` JSON-RPC call (`ShioRPCExecutor`, posting to
  `SHIO_JSON_RPC_URL` with an `httpx.AsyncClient`). Both take an action of
  `(tx_bytes, bid_amount, opp_tx_digest)`, where the digest is 32 raw bytes.
- **`mevkit.simulation`** – `SimEpoch`, `SimulateCtx`, `SimulateResult` and
  the abstract `Simulator` interface.
- **`mevkit.move_value`** – `MoveValue` (tagged with a `MoveKind`) and
  `MoveStruct`, with typed field extractors such as
  `extract_u64_from_move_struct` and `extract_struct_array_from_move_struct`
  that raise `MoveExtractError` when a field is missing or has the wrong kind;
  `shared_obj_arg` builds a `SharedObjectArg` from a `SuiObject` (version 0
  for an object that is not shared).
- **`mevkit.coin`** – `Coin`, `filter_coins`, `pick_coin` (raising
  `CoinNotFoundError`), `gas_coin_refs`, `is_native_coin` and
  `format_sui_with_symbol`.
- **`mevkit.links`** – Markdown links to suiscan for transactions, objects,
  accounts, coins and checkpoints.
- **`mevkit.runtime`** – `current_time_ms`, `redact_cmdline` (hides arguments
  longer than 32 characters), `escape_markdown` for Telegram MarkdownV2,
  `set_panic_hook` which logs uncaught exceptions from any thread and passes
  them to `send_panic_to_telegram`, and `start_heartbeat`, a task on the
  running event loop that logs at each interval. Crash reports are only sent
  when the module constants `TELEGRAM_BOT_TOKEN` and `CHAT_MONEY_PRINTER` are
  set; they are empty by default, so nothing is sent.
- **`mevkit.version`** – a build version string taken from git.

## Installation

```
pip install .
```

For running the tests:

```
pip install ".[test]"
pytest
```

## Examples

Reading a feed message:

```python
from mevkit.shio_types import parse_shio_item

item = parse_shio_item({"auctionEnded": {"txDigest": "abc", "winningBidAmount": 42}})
print(item.type_name())   # auctionEnded
print(item.gas_price())   # 0
```

Working with amounts:

```python
from mevkit.coin import format_sui_with_symbol, is_native_coin

print(format_sui_with_symbol(1_500_000_000))  # 1.5 SUI
print(is_native_coin("0x2::sui::SUI"))        # True
```

Signing and encoding a bid:

```python
import asyncio
from mevkit.bid import Ed25519KeyPair, ShioExecutor

keypair = Ed25519KeyPair.from_seed(bytes(32))
executor = ShioExecutor(keypair, asyncio.Queue())
bid = executor.encode_bid(b"\x00\x01\x02", 1_000, bytes(32))
print(sorted(bid))  # ['bidAmount', 'oppTxDigest', 'sig', 'txData']
```

Reading typed fields from a Move struct:

```python
from mevkit.move_value import (
    MoveExtractError, MoveKind, MoveStruct, MoveValue, extract_u64_from_move_struct,
)

pool = MoveStruct("0x2::pool::Pool", [("fee_rate", MoveValue(MoveKind.U64, 30))])
print(extract_u64_from_move_struct(pool, "fee_rate"))  # 30

try:
    extract_u64_from_move_struct(pool, "liquidity")
except MoveExtractError as err:
    print(err)  # field not found
```

## Command line

Print the version string of the git checkout in the current directory
(`<branch>-<commit>[-dirty]@<date>`), or of another one with `--cwd`:

```
mevkit-version
mevkit-version --cwd path/to/checkout
```

## What it does not do

- It has no transaction simulator: `mevkit.simulation` defines the context,
  result and `Simulator` interface only.
- It does not talk to a Sui full node. Coin helpers work on `Coin` lists you
  have fetched yourself, and bids take transaction data that is already
  BCS-encoded.
- It has no trading strategy or bot loop; it supplies the feed, the bid
  submission and the utilities such a program is built from.