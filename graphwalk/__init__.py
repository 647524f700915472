from .core import (
    dependencies,
    DuplicateType,
    GraphError,
    Injector,
    ResolutionError,
    UnknownType,
    ValidationError,
)
from .dispatcher import RootDispatcher
from .registry import TypeRegistry
from .representations import Args, Object
from .resolvers import attr, constant, getter, key
from .schema import (
    Boolean,
    field,
    Float,
    ID,
    Int,
    ListType,
    NullableType,
    ObjectType,
    param,
    String,
)


__all__ = [
    "dependencies",
    "DuplicateType",
    "GraphError",
    "Injector",
    "ResolutionError",
    "UnknownType",
    "ValidationError",

    "RootDispatcher",

    "TypeRegistry",

    "Args",
    "Object",

    "attr",
    "constant",
    "getter",
    "key",

    "Boolean",
    "field",
    "Float",
    "ID",
    "Int",
    "ListType",
    "NullableType",
    "ObjectType",
    "param",
    "String",
]
