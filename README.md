# gnmistream

Building blocks for serving gNMI-style telemetry subscriptions in Python.
The package uses only the standard library.

## Modules

### `gnmistream.value`

This module holds the `TypedValue` model. A value has a `kind`, which is a
`ValueKind` member or `None` for an empty value, and a `value` payload.
`Decimal64` holds a fixed-point decimal as `digits` and `precision`.

- `from_scalar(value)` converts a Python value to a `TypedValue`:
  - `str` becomes `STRING` and `bool` becomes `BOOL`.
  - An `int` becomes `INT` when it fits a signed 64-bit integer, and `UINT`
    when it fits only an unsigned one.
  - `float` becomes `DOUBLE`.
  - `bytes`, `bytearray` and `memoryview` become `BYTES`.
  - A list or tuple becomes `LEAFLIST`, with each element converted in turn.

  Anything else raises `ScalarError`. So do integers outside 64 bits and
  strings that cannot be encoded as UTF-8.
- `to_scalar(tv)` converts a `TypedValue` back to a Python value:
  - A `DECIMAL` value is rounded to single precision.
  - `JSON` and `JSON_IETF` payloads are decoded and wrapped in a
    `DeprecatedScalar`, with JSON numbers returned as floats.
  - `ANY`, `ASCII`, `PROTO_BYTES` and empty values raise `ScalarError`.
- `equal(a, b)` reports whether two values are the same. It handles the
  primitive kinds, `DECIMAL` and `LEAFLIST`. For every other kind, for empty
  values and for `None` it returns `False`.

### `gnmistream.watch`

This module defines the abstract `Watcher` interface and the `FileUpdate`
record that it returns. A `FileUpdate` has `path`, `contents` and `error`,
and its `ok` property is true when `error` is `None`.

A `Watcher` has these methods:

- `read(timeout)` returns the next update.
- `add(path)` starts monitoring a path.
- `remove(path)` stops monitoring a path.
- `close()` stops all watching.

A `Watcher` is also a context manager that closes itself on exit.

### `gnmistream.stats`

`StatsRegistry` is a thread-safe store of three kinds of counters:

- `TypeStats`, one per subscription mode.
- `TargetStats`, one per target.
- `ClientStats`, one per client.

`type_stats`, `target_stats` and `client_stats` return the live record,
creating it on first use. `all_type_stats`, `all_target_stats` and
`all_client_stats` return copies. `remove_client_stats` forgets a client.

### `gnmistream.subscribe`

- `Server(cache, options)` is configured by `ServerOptions`, which has these
  fields:
  - `timeout`, where zero means 60 seconds.
  - `stats`.
  - `no_dup_report`.
  - `acl`.
  - The test hooks `client_stats_hook`, `subscription_enter_hook` and
    `subscription_exit_hook`.
- `Server.make_subscribe_response(notification, dup)` wraps a
  `Notification` in a `SubscribeResponse`:
  - When `dup > 0` and duplicate reporting is on, it sets `duplicates` on a
    copy of the first `Update`.
  - Anything that is not a `Notification` raises `SubscribeError` with code
    `Internal`.
- `Server.track_target(target)` and `Server.track_type(typ)` are context
  managers. They count an active subscription while the block runs.
- `Server.update_client_stats(client, target, dup, queue_size)` records
  coalescing and the queue size for a client.
- `Server.remove_client(client)` drops the statistics of a client.
- `Server.type_stats()`, `target_stats()` and `client_stats()` return
  snapshots, or `None` when statistics are off.
- Access control is described by the abstract classes `ACL` and `RPCACL`.
  `AllowAllACL` permits every target and counts its checks.
- `SubscribeError` carries a status `code` and a `message`. Its string form
  is `rpc error: code = <code> desc = <message>`.

## What it does not do

This package has no network transport and no telemetry cache. It does not
run a Subscribe RPC loop, and it does not match updates to subscriptions.
`Server` stores the cache it is given but never queries it. `Watcher` is
only an interface, and no filesystem implementation is included. There is
no command-line program.

## Installation

```
pip install .
```

To run the test suite:

```
pip install .[test]
pytest
```

## Example

```python
from gnmistream.value import from_scalar, to_scalar, equal
from gnmistream.subscribe import Server, ServerOptions, Notification, Update

tv = from_scalar(["a", 1])
assert to_scalar(tv) == ["a", 1]
assert equal(from_scalar("foo"), from_scalar("foo"))

server = Server(options=ServerOptions(stats=True))
with server.track_target("dev1"), server.track_type("stream"):
    assert server.target_stats()["dev1"].active_subscription_count == 1
resp = server.make_subscribe_response(Notification(update=[Update()]), 3)
assert resp.update.update[0].duplicates == 3
```