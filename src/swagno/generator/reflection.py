"""Reflection over Python types and values.

Every type reachable from an endpoint's body, returns or errors is turned
into one of a small set of descriptors (Primitive, Struct, Slice, Map,
Pointer, Interface, Func, Chan). The schema generators only ever look at
these descriptors, never at raw annotations.
"""

import asyncio
import collections.abc
import dataclasses
import datetime
import decimal
import enum
import queue
import types
import typing
import uuid
from dataclasses import dataclass, field
from typing import Any, ClassVar

from pydantic import BaseModel

from swagno.errors import SchemaGenerationError, UnsupportedTypeError


@dataclass(frozen=True)
class Primitive:
    # "int", "bool", "float64" or "string"
    kind: str
    name: str
    format: str | None = None
    enum: tuple | None = None


@dataclass(frozen=True)
class Struct:
    kind: ClassVar[str] = "struct"

    cls: type
    name: str
    # "date-time", "date" or "duration" for the time types
    well_known: str | None = None
    # (TypeVar, argument) pairs of a parametrised generic, e.g. Page[Product]
    bindings: tuple = ()


@dataclass(frozen=True)
class Slice:
    kind: ClassVar[str] = "slice"

    elem: Any

    @property
    def name(self) -> str:
        return "[]" + self.elem.name


@dataclass(frozen=True)
class Map:
    kind: ClassVar[str] = "map"

    key: Any
    value: Any
    name: str = ""
    # literal payloads keep their entries so the schema can be derived from them
    entries: dict | None = field(default=None, compare=False, hash=False)


@dataclass(frozen=True)
class Pointer:
    kind: ClassVar[str] = "ptr"

    elem: Any

    @property
    def name(self) -> str:
        return "*" + self.elem.name


@dataclass(frozen=True)
class Interface:
    kind: ClassVar[str] = "interface"
    name: ClassVar[str] = "Any"


@dataclass(frozen=True)
class Func:
    kind: ClassVar[str] = "func"
    name: ClassVar[str] = "Callable"


@dataclass(frozen=True)
class Chan:
    kind: ClassVar[str] = "chan"
    name: ClassVar[str] = "Queue"


TypeDescriptor = Primitive | Struct | Slice | Map | Pointer | Interface | Func | Chan

DESCRIPTORS = (Primitive, Struct, Slice, Map, Pointer, Interface, Func, Chan)


@dataclass(frozen=True)
class StructField:
    """One field of a struct type with its tags already normalised."""

    name: str
    type: Any
    # "<json name>[,omitempty]", "-" to skip, "" for embedded structs
    json: str
    example: Any = None
    desc: str = ""
    required: bool = False
    embedded: bool = False


STRING = Primitive("string", "str")

_WELL_KNOWN = {
    datetime.datetime: "date-time",
    datetime.date: "date",
    datetime.timedelta: "duration",
}


def type_name(cls: type) -> str:
    """Definition name for a class: last module segment plus qualified name."""
    module = cls.__module__.rsplit(".", 1)[-1]
    qualname = cls.__qualname__.replace("<locals>.", "")
    return f"{module}.{qualname}"


def is_struct_class(tp: Any) -> bool:
    return isinstance(tp, type) and (
        dataclasses.is_dataclass(tp) or issubclass(tp, BaseModel)
    )


def _is_stdlib(cls: type) -> bool:
    return cls.__module__ in ("builtins", "collections", "collections.abc", "typing")


def _value_kind(value: Any) -> str:
    if isinstance(value, bool):
        return "bool"
    if isinstance(value, int):
        return "int"
    if isinstance(value, float):
        return "float64"
    return "string"


def _describe_generic(tp: Any, origin: Any) -> TypeDescriptor:
    args = typing.get_args(tp)

    if origin is collections.abc.Callable:
        return Func()
    if not isinstance(origin, type):
        raise UnsupportedTypeError(tp)
    if is_struct_class(origin):
        params = getattr(origin, "__parameters__", ())
        arg_names = ", ".join(_arg_name(describe(a)) for a in args)
        return Struct(origin, f"{type_name(origin)}[{arg_names}]", bindings=tuple(zip(params, args)))
    if issubclass(origin, collections.abc.Mapping):
        key = describe(args[0]) if args else STRING
        value = describe(args[1]) if len(args) > 1 else Interface()
        name = "" if _is_stdlib(origin) else type_name(origin)
        return Map(key, value, name)
    if origin is tuple:
        if len(args) == 2 and args[1] is Ellipsis:
            return Slice(describe(args[0]))
        if args and all(a == args[0] for a in args):
            return Slice(describe(args[0]))
        return Slice(Interface())
    if issubclass(origin, (collections.abc.Sequence, collections.abc.Set)) and not issubclass(origin, (str, bytes)):
        return Slice(describe(args[0]) if args else Interface())
    if issubclass(origin, (queue.Queue, asyncio.Queue)):
        return Chan()
    return describe(origin)


def _arg_name(desc: TypeDescriptor) -> str:
    if isinstance(desc, Map) and not desc.name:
        return f"map[{desc.key.name}]{desc.value.name}"
    return desc.name


def _substitute(tp: Any, bindings: dict) -> Any:
    """Replace type variables inside an annotation, e.g. list[T] -> list[Product]."""
    if isinstance(tp, typing.TypeVar):
        return bindings.get(tp, tp)
    origin = typing.get_origin(tp)
    args = typing.get_args(tp)
    if not args or origin in (collections.abc.Callable, typing.Literal):
        return tp
    new_args = tuple(_substitute(a, bindings) for a in args)
    if new_args == args:
        return tp
    if origin is typing.Annotated:
        return typing.Annotated[new_args]
    if origin is typing.Union or origin is types.UnionType:
        return typing.Union[new_args]
    if hasattr(tp, "copy_with"):
        return tp.copy_with(new_args)
    return origin[new_args]


def _describe_class(tp: type) -> TypeDescriptor:
    if issubclass(tp, enum.Enum):
        values = tuple(member.value for member in tp)
        kind = _value_kind(values[0]) if values else "string"
        return Primitive(kind, type_name(tp), enum=values)
    if issubclass(tp, bool):
        return Primitive("bool", "bool")
    if issubclass(tp, int):
        return Primitive("int", "int")
    if issubclass(tp, (float, decimal.Decimal)):
        return Primitive("float64", tp.__name__)
    if issubclass(tp, str):
        return STRING
    if issubclass(tp, (bytes, bytearray)):
        return Primitive("string", "bytes", format="byte")
    if issubclass(tp, uuid.UUID):
        return Primitive("string", "UUID", format="uuid")

    for base, fmt in _WELL_KNOWN.items():
        if issubclass(tp, base):
            return Struct(tp, type_name(tp), well_known=fmt)

    if is_struct_class(tp):
        return Struct(tp, type_name(tp))
    if issubclass(tp, collections.abc.Mapping):
        for base in getattr(tp, "__orig_bases__", ()):
            if typing.get_origin(base) is not None:
                generic = _describe_generic(base, typing.get_origin(base))
                if isinstance(generic, Map):
                    return Map(generic.key, generic.value, type_name(tp))
        return Map(STRING, Interface(), "" if _is_stdlib(tp) else type_name(tp))
    if issubclass(tp, (list, tuple, set, frozenset)):
        return Slice(Interface())
    if issubclass(tp, (queue.Queue, asyncio.Queue)):
        return Chan()
    if issubclass(tp, (types.FunctionType, types.MethodType, types.BuiltinFunctionType)):
        return Func()

    raise UnsupportedTypeError(tp)


def describe(tp: Any) -> TypeDescriptor:
    """Describe a type annotation."""
    if tp is Any or tp is object or isinstance(tp, typing.TypeVar):
        return Interface()
    if tp is None or tp is type(None):
        raise SchemaGenerationError("NoneType has no schema")

    origin = typing.get_origin(tp)
    if origin is typing.Annotated:
        return describe(typing.get_args(tp)[0])
    if origin is typing.Literal:
        values = typing.get_args(tp)
        return Primitive(_value_kind(values[0]), "Literal", enum=values)
    if origin is typing.Union or origin is types.UnionType:
        members = [a for a in typing.get_args(tp) if a is not type(None)]
        inner = describe(members[0]) if len(members) == 1 else Interface()
        if len(members) < len(typing.get_args(tp)):
            return Pointer(inner)
        return inner
    if origin is not None:
        return _describe_generic(tp, origin)
    if isinstance(tp, type):
        return _describe_class(tp)

    raise UnsupportedTypeError(tp)


def _is_type_expression(value: Any) -> bool:
    return (
        isinstance(value, type)
        or typing.get_origin(value) is not None
        or value is Any
    )


def describe_value(value: Any) -> TypeDescriptor:
    """Describe a value: a type, a model instance, or a literal payload."""
    if value is None:
        raise SchemaGenerationError("cannot build a schema from None")
    if isinstance(value, DESCRIPTORS):
        return value
    if _is_type_expression(value):
        return describe(value)
    if isinstance(value, collections.abc.Mapping):
        desc = describe(type(value))
        return dataclasses.replace(desc, entries=dict(value))
    if isinstance(value, (list, tuple, set, frozenset)):
        first = next(iter(value), None)
        return Slice(describe_value(first) if first is not None else Interface())
    # instances created through Page[Product](...) remember their alias
    orig = getattr(value, "__orig_class__", None)
    if orig is not None:
        return describe(orig)
    return describe(type(value))


def _dataclass_fields(cls: type, bindings: dict) -> list[StructField]:
    try:
        hints = typing.get_type_hints(cls, include_extras=True)
    except NameError as err:
        raise SchemaGenerationError(f"cannot resolve annotations of {cls!r}: {err}") from err
    result = []
    for f in dataclasses.fields(cls):
        meta = f.metadata
        embedded = bool(meta.get("embed"))
        json = "" if embedded else meta.get("json", f.name)
        has_default = f.default is not dataclasses.MISSING or f.default_factory is not dataclasses.MISSING
        if has_default and json not in ("", "-") and "omitempty" not in json:
            json += ",omitempty"
        result.append(StructField(
            name=f.name,
            type=describe(_substitute(hints.get(f.name, f.type), bindings)),
            json=json,
            example=meta.get("example"),
            desc=meta.get("desc", ""),
            required=meta.get("required") is True,
            embedded=embedded,
        ))
    return result


def _model_fields(cls: type[BaseModel]) -> list[StructField]:
    result = []
    for name, info in cls.model_fields.items():
        extra = info.json_schema_extra if isinstance(info.json_schema_extra, dict) else {}
        embedded = bool(extra.get("embed"))
        if embedded:
            json = ""
        elif info.exclude is True:
            json = "-"
        else:
            json = info.serialization_alias or info.alias or name
            if not info.is_required():
                json += ",omitempty"
        example = info.examples[0] if info.examples else extra.get("example")
        result.append(StructField(
            name=name,
            type=describe(info.annotation),
            json=json,
            example=example,
            desc=info.description or "",
            required=extra.get("required") is True,
            embedded=embedded,
        ))
    return result


def struct_fields(cls: type, bindings: tuple = ()) -> list[StructField]:
    """Fields of a dataclass or pydantic model, in declaration order.

    bindings are the (TypeVar, argument) pairs of a parametrised generic
    dataclass; pydantic builds concrete subclasses for its own generics.
    """
    if dataclasses.is_dataclass(cls):
        return _dataclass_fields(cls, dict(bindings))
    if isinstance(cls, type) and issubclass(cls, BaseModel):
        return _model_fields(cls)
    return []
