# shardflow

Building blocks for a sharded actor runtime, written in plain Python with no
third-party dependencies.

## What is inside

- `shardflow.address`: `MachineInfo` (the shard range of this machine, with
  `is_local` and `global_shard_id`), `Address`, `Scope`, `ScopeBuilder` and
  `Reference`. An address is a shard id followed by nested scopes of
  (type id, id); `ScopeBuilder.build_ref` creates a `Reference` subclass
  addressed under the current scope.
- `shardflow.message`: `MessageType`, `Header` (with `pack`/`unpack`),
  `ActorMessage` (with `serialize`) and the helpers `make_system_message`,
  `make_request_message`, `make_one_way_request_message` and
  `make_response_message`.
- `shardflow.column_batch`: `FixedColumnBatch` for single values and
  `DynamicColumnBatch` for variable-length entries, with the typed variants
  `StringColumnBatch` and `PathColumnBatch`; `Table` and `make_table` dump
  several columns together. `share` gives another view of the same storage,
  `dump_to` moves the contents into a queue and empties the batch.
- `shardflow.path_eos`: `EosStep`, `PathEos` and `PathEosCheckTree`, which
  track end-of-stream markers that fan out along downstream branches and
  report when every branch has finished.
- `shardflow.scheduling`: `SchedulableTaskQueue`, with an urgent lane and an
  optional priority comparator (`comp(a, b)` is true when `a` has lower
  priority than `b`).
- `shardflow.promises`: `PromiseManager`, a pool of reusable
  `concurrent.futures.Future` slots addressed by integer id; slot 0 is
  reserved and released ids are reused most recent first.
- `shardflow.dynamic_queue`: `DynamicQueue`, an unbounded queue whose
  consumers can `await` items with `not_empty` or `pop_eventually`, and which
  can be aborted with an exception.
- `shardflow.timer`: `ActorClock`, a coarse clock that re-reads the time only
  once every `execution_interval` calls to `advance`.
- `shardflow.configs`: `configure(argv)` parses options such as
  `-batch-size=64`, `-dataset=ldbc100` or `-cq-query-policy=dfs` into a
  `Config` and returns it with the arguments it did not recognise. Bad values
  raise `ConfigError`.
- `shardflow.errors`: `ActorMethodError`, `TaskCanceledError`, `GpuError`.

## Example

```python
from shardflow.address import Reference, Scope, ScopeBuilder
from shardflow.path_eos import PathEos, PathEosCheckTree

builder = ScopeBuilder(2)
builder.enter_sub_scope(Scope(type_id=61440, scope_id=7))
ref = builder.build_ref(Reference, 42)
assert ref.addr.shard_id == 2

tree = PathEosCheckTree()
first, second = PathEos(), PathEos()
first.append_step(2, 0)
second.append_step(2, 1)
assert not tree.insert_and_merge(first)
assert tree.insert_and_merge(second)
```

```python
from shardflow.configs import configure

config, remaining = configure(["prog", "-batch-size=128", "--other"])
assert config.batch_size == 128
assert remaining == ["prog", "--other"]
```

## What it does not do

shardflow provides the data structures only. It has no actor engine that
runs actors or delivers messages, no network transport between machines and
no command-line program; `configure` parses options for a program you write.

## Tests

```
pip install -e .[test]
pytest
```