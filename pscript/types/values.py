"""Runtime value model for pscript.

Every value that can sit on the operand stack or in a dictionary is an
instance of one of the closed set of Value variants defined here:

    Number  32-bit signed integer (wrapping)
    Float   32-bit IEEE float
    Bool    boolean
    Key     a literal name (/foo), used as a dictionary key
    Block   deferred procedure holding its raw, unparsed source text
    Mark    array-literal sentinel
    Array   ordered sequence of values
    Dict    name -> value mapping

Equality is structural and variant-sensitive: Number(1) != Float(1.0).

Each variant answers the coercion methods (as_int, as_float, ...). The base
class implementations raise PSTypeCheck naming the expected kind and the
offending value's debug form; variants override only the coercions they
satisfy.
"""

from __future__ import annotations

import math
import struct

from pscript.errors import PSTypeCheck


INT32_MIN = -(1 << 31)
INT32_MAX = (1 << 31) - 1


def wrap_int32(n: int) -> int:
    """Reduce an arbitrary Python int to 32-bit two's complement."""
    return ((n - INT32_MIN) & 0xFFFFFFFF) + INT32_MIN


def to_float32(x: float) -> float:
    """Round a Python float to the nearest float32 (overflow -> signed inf)."""
    try:
        return struct.unpack("f", struct.pack("f", x))[0]
    except OverflowError:
        return math.copysign(math.inf, x)


def format_float32(x: float) -> str:
    """Shortest decimal text that round-trips through float32."""
    if math.isnan(x) or math.isinf(x):
        return str(x)
    for precision in range(1, 10):
        text = f"{x:.{precision}g}"
        if to_float32(float(text)) == x:
            break
    if "e" not in text and "." not in text:
        text += ".0"
    return text


class Value:
    __slots__ = ()

    def as_int(self) -> int:
        raise PSTypeCheck("int", repr(self))

    def as_float(self) -> float:
        raise PSTypeCheck("float", repr(self))

    def as_key(self) -> str:
        raise PSTypeCheck("key", repr(self))

    def as_block(self) -> str:
        raise PSTypeCheck("block", repr(self))

    def as_array(self) -> list[Value]:
        raise PSTypeCheck("array", repr(self))

    def as_bool(self) -> bool:
        raise PSTypeCheck("bool", repr(self))

    def into_dict(self) -> dict[str, Value]:
        raise PSTypeCheck("dict", repr(self))

    def copy(self) -> Value:
        # scalars are immutable
        return self


class Number(Value):
    __slots__ = ("value",)

    def __init__(self, value: int):
        self.value = wrap_int32(int(value))

    def as_int(self) -> int:
        return self.value

    def as_float(self) -> float:
        return to_float32(float(self.value))

    def __eq__(self, other) -> bool:
        return isinstance(other, Number) and self.value == other.value

    def __hash__(self) -> int:
        return hash((Number, self.value))

    def __repr__(self):
        return f"Number({self.value})"


class Float(Value):
    __slots__ = ("value",)

    def __init__(self, value: float):
        self.value = to_float32(float(value))

    def as_float(self) -> float:
        return self.value

    def __eq__(self, other) -> bool:
        # IEEE comparison: NaN is unequal to everything, itself included
        return isinstance(other, Float) and self.value == other.value

    def __hash__(self) -> int:
        return hash((Float, self.value))

    def __repr__(self):
        return f"Float({format_float32(self.value)})"


class Bool(Value):
    __slots__ = ("value",)

    def __init__(self, value: bool):
        self.value = bool(value)

    def as_bool(self) -> bool:
        return self.value

    def __eq__(self, other) -> bool:
        return isinstance(other, Bool) and self.value == other.value

    def __hash__(self) -> int:
        return hash((Bool, self.value))

    def __repr__(self):
        return "Bool(true)" if self.value else "Bool(false)"


class Key(Value):
    __slots__ = ("name",)

    def __init__(self, name: str):
        self.name = name

    def as_key(self) -> str:
        return self.name

    def __eq__(self, other) -> bool:
        return isinstance(other, Key) and self.name == other.name

    def __hash__(self) -> int:
        return hash((Key, self.name))

    def __repr__(self):
        return f"Key({self.name!r})"


class Block(Value):
    __slots__ = ("source",)

    def __init__(self, source: str):
        self.source = source

    def as_block(self) -> str:
        return self.source

    def __eq__(self, other) -> bool:
        return isinstance(other, Block) and self.source == other.source

    def __hash__(self) -> int:
        return hash((Block, self.source))

    def __repr__(self):
        return f"Block({self.source!r})"


class Mark(Value):
    __slots__ = ()

    def __eq__(self, other) -> bool:
        return isinstance(other, Mark)

    def __hash__(self) -> int:
        return hash(Mark)

    def __repr__(self):
        return "Mark"


class Array(Value):
    __slots__ = ("items",)

    def __init__(self, items=()):
        self.items: list[Value] = list(items)

    def as_array(self) -> list[Value]:
        return self.items

    def copy(self) -> Array:
        return Array(item.copy() for item in self.items)

    def __eq__(self, other) -> bool:
        # element-wise so a NaN inside never compares equal by identity
        return (
            isinstance(other, Array)
            and len(self.items) == len(other.items)
            and all(a == b for a, b in zip(self.items, other.items))
        )

    __hash__ = None

    def __len__(self) -> int:
        return len(self.items)

    def __repr__(self):
        return f"Array([{', '.join(repr(item) for item in self.items)}])"


class Dict(Value):
    __slots__ = ("entries",)

    def __init__(self, entries=None):
        self.entries: dict[str, Value] = dict(entries or {})

    def into_dict(self) -> dict[str, Value]:
        return self.entries

    def copy(self) -> Dict:
        return Dict({k: v.copy() for k, v in self.entries.items()})

    def __eq__(self, other) -> bool:
        return (
            isinstance(other, Dict)
            and self.entries.keys() == other.entries.keys()
            and all(v == other.entries[k] for k, v in self.entries.items())
        )

    __hash__ = None

    def __len__(self) -> int:
        return len(self.entries)

    def __repr__(self):
        body = ", ".join(f"{k!r}: {v!r}" for k, v in self.entries.items())
        return f"Dict({{{body}}})"
