# nftwire

`nftwire` builds and parses the netlink attribute payloads used by the Linux
nftables subsystem: rule expressions, flowtable messages and ruleset
generation messages. It works on bytes only.

## Installation

```
pip install nftwire
```

To run the test suite:

```
pip install "nftwire[test]"
pytest
```

## Netlink attributes

`nftwire.netlink` holds the attribute codec.

- `Attribute(type, data)` is one attribute. Its `kind` property is the type
  with the nested and byte-order flags removed; `nested` tells whether the
  nested flag is set.
- `marshal_attributes(attrs)` packs attributes into bytes, padding each to
  four bytes.
- `parse_attributes(data)` decodes a buffer back into a list of attributes.
- `be_u16`, `be_u32` and `be_u64` encode big-endian integers; `read_u8`,
  `read_u16`, `read_u32` and `read_u64` decode them and insist on the exact
  length. `read_string` decodes a string, dropping one trailing NUL byte.
- `extra_header(family, res_id)` builds the four-byte nfgenmsg header that
  precedes every nftables message body.
- `Message` holds a message type, flags, payload, sequence number and port ID.

Malformed input raises `NetlinkError`, a subclass of `ValueError`.

## Expressions

Each expression is a dataclass in a module of `nftwire.expr`:

| Module | Classes |
| --- | --- |
| `meta` | `Meta`, `MetaKey`, `Masq`, `Cmp`, `CmpOp` |
| `bitwise` | `Bitwise` |
| `byteorder` | `Byteorder`, `ByteorderOp` |
| `connlimit` | `Connlimit` |
| `counter` | `Counter` |
| `ct` | `Ct`, `CtKey`, `CtHelper`, `CtExpect`, `CtTimeout` |
| `dup` | `Dup` |
| `dynset` | `Dynset` |
| `exthdr` | `Exthdr`, `ExthdrOp` |
| `fib` | `Fib` |
| `flow_offload` | `FlowOffload` |
| `hash` | `Hash`, `HashType` |
| `immediate` | `Immediate` |
| `limit` | `Limit`, `LimitType`, `LimitTime` |
| `log` | `Log`, `LogLevel`, `LogFlags` |
| `lookup` | `Lookup` |
| `nat` | `NAT`, `NATType` |
| `notrack` | `Notrack` |
| `numgen` | `Numgen` |
| `objref` | `Objref` |
| `payload` | `Payload`, `PayloadBase`, `PayloadCsumType`, `PayloadOperationType` |
| `queue` | `Queue`, `QueueFlag` |
| `quota` | `Quota` |
| `range` | `Range` |
| `redirect` | `Redir` |
| `reject` | `Reject` |
| `rt` | `Rt`, `RtKey` |
| `secmark` | `SecMark` |
| `socket` | `Socket`, `SocketKey` |
| `synproxy` | `SynProxy` |
| `tproxy` | `TProxy` |
| `verdict` | `Verdict`, `VerdictKind` |

All of them derive from `nftwire.expr.base.Expr` and share three operations:

- `expr.marshal(fam)` gives the full expression: its name attribute followed
  by its nested data attribute.
- `expr.marshal_data(fam)` gives only the data attributes.
- `ExprClass.unmarshal(fam, data)` builds a new expression from those data
  attributes.

```python
from nftwire.expr.meta import Cmp, CmpOp, Meta, MetaKey

meta = Meta(key=MetaKey.IIFNAME, register=1)
cmp = Cmp(op=CmpOp.EQ, register=1, data=b"eth0\x00")

wire = cmp.marshal(0)
again = Cmp.unmarshal(0, cmp.marshal_data(0))
assert again == cmp
```

`nftwire.expr.base` also offers `marshal(fam, expr)` and
`marshal_expr_data(fam, expr)`, which call the matching methods, and
`expr_class_for_name(name)`, which maps a kernel expression name such as
`"payload"` to its class, or returns `None`. `Byteorder`, `Dup`, `Notrack`,
`Rt`, `Socket`, `TProxy` and `Verdict` are not in that registry; they can
still be encoded and decoded directly.

Some encoding details worth knowing:

- `Queue.marshal_data` sets `total` to 1 when it is 0.
- `Numgen.marshal_data` raises `ExprError` for a type other than incremental
  or random.
- `Limit.unmarshal` raises `ExprError` for an unknown unit, type or attribute.
- `CtTimeout` fills states missing from `policy` with the TCP defaults, or the
  UDP defaults when `l4proto` is 17; `effective_policy()` shows the result.
- `Log` encodes only the attributes whose bit `1 << NFTA_LOG_*` is set in
  `key`.
- `Dynset.timeout` is a `datetime.timedelta`, sent in whole milliseconds.

### Decoding a rule's expressions

`nftwire.expr.parsing` decodes expressions by name:

- `parse_expr_msg(fam, data)` decodes a list of expression elements.
- `exprs_from_bytes(fam, data)` decodes one element from the name and data
  attributes it holds. Unknown names are skipped, and an immediate that writes
  nothing into the verdict register is returned as a `Verdict`.
- `exprs_from_name(fam, data, name)` decodes expression data whose name is
  already known, raising `ExprError` for an unknown name.

## Flowtables

`nftwire.flowtable.Flowtable` describes a flowtable by table name, family,
name, hook, priority, devices and `FlowtableFlags`. `add_message()` and
`delete_message()` return the `Message` that creates or deletes it. An unset
hook becomes ingress and an unset priority becomes 0, and both are stored back
on the flowtable. `flowtable_from_message(msg)` decodes a new-flowtable
message and raises `NetlinkError` for any other message type.

## Generation messages

`nftwire.gen.gen_from_message(msg)` decodes a new-generation message into a
`GenMsg` with the generation `id`, `proc_pid` and `proc_comm`. Other message
types and unknown attributes raise `NetlinkError`.

## What it does not do

`nftwire` opens no netlink socket and talks to no kernel: it neither sends
requests nor receives replies, and it has no connection object, no batching
and no acknowledgement handling. It also has no model of tables, chains,
rules, sets or stateful objects beyond the expressions, flowtables and
generation messages described above.