import operator

from . import iterables, resolvers
from .core import GraphError, UnknownType, ValidationError
from .memo import memoize
from .naming import snake_case_to_camel_case
from .representations import Args


_undefined = object()


class ScalarType(object):
    def __init__(self, name, accepts, convert=None):
        self.name = name
        self._accepts = accepts
        self._convert = convert

    def __repr__(self):
        return "ScalarType(name={!r})".format(self.name)

    def __str__(self):
        return self.name

    def coerce(self, value):
        if not self._accepts(value):
            raise GraphError("cannot coerce {!r} to {}".format(value, self.name))
        elif self._convert is None:
            return value
        else:
            return self._convert(value)


_min_int = -2 ** 31
_max_int = 2 ** 31 - 1


def _is_int(value):
    return isinstance(value, int) and not isinstance(value, bool)


def _is_32_bit_int(value):
    return _is_int(value) and _min_int <= value <= _max_int


def _is_float(value):
    return isinstance(value, float) or (_is_int(value) and float(value) == value)


Boolean = ScalarType("Boolean", accepts=lambda value: isinstance(value, bool))
Float = ScalarType("Float", accepts=_is_float, convert=float)
Int = ScalarType("Int", accepts=_is_32_bit_int)
String = ScalarType("String", accepts=lambda value: isinstance(value, str))
ID = ScalarType("ID", accepts=lambda value: isinstance(value, str) or _is_int(value), convert=str)


class _WrapperType(object):
    def __init__(self, element_type):
        self.element_type = element_type

    def __eq__(self, other):
        if type(self) == type(other):
            return self.element_type == other.element_type
        else:
            return NotImplemented

    def __ne__(self, other):
        return not (self == other)

    def __hash__(self):
        return hash((type(self), self.element_type))

    def __repr__(self):
        return "{}(element_type={!r})".format(type(self).__name__, self.element_type)


class ListType(_WrapperType):
    def coerce(self, value):
        if not isinstance(value, (list, tuple)):
            value = [value]

        return [self.element_type.coerce(element) for element in value]


class NullableType(_WrapperType):
    def coerce(self, value):
        if value is None:
            return None
        else:
            return self.element_type.coerce(value)


class ObjectType(object):
    """
    A named object type.

    ``fields`` is either a sequence of fields or a callable returning one.
    The callable is only invoked the first time the fields are needed,
    which lets types refer to each other. An object type created without
    fields is a declaration: ``define`` attaches its fields later.

    Field types may be given as the name of another object type, in which
    case ``type_lookup`` is used to find it.
    """

    def __init__(self, name, fields=None, type_lookup=None):
        self.name = name
        self._type_lookup = type_lookup
        self._field_definitions = None
        self.fields = Fields(name, self._owned_fields)
        if fields is not None:
            self.define(fields)

    @property
    def is_defined(self):
        return self._field_definitions is not None

    def define(self, fields):
        if self.is_defined:
            raise GraphError("fields of {} are already defined".format(self.name))

        self._field_definitions = memoize(fields)

    def _owned_fields(self):
        if not self.is_defined:
            raise UnknownType("{} was declared but never defined".format(self.name))

        return tuple(
            field.with_owner_type(self, resolve_type=self._resolve_type_reference)
            for field in self._field_definitions()
        )

    def _resolve_type_reference(self, type_name):
        if self._type_lookup is None:
            raise UnknownType("cannot resolve type reference {!r} from {}".format(type_name, self.name))
        else:
            return self._type_lookup(type_name)

    def query(self, field_queries):
        return ObjectQuery(self, field_queries=field_queries)

    def __repr__(self):
        return "ObjectType(name={!r})".format(self.name)

    def __str__(self):
        return self.name


class _Members(object):
    _kind = None

    def __init__(self, owner_name, members):
        self._owner_name = owner_name
        self._members = memoize(members)

    def __iter__(self):
        return iter(self._members())

    def __len__(self):
        return len(self._members())

    def __getattr__(self, name):
        if name.startswith("__"):
            raise AttributeError(name)

        member = self.find(name)
        if member is None and name.endswith("_"):
            member = self.find(name[:-1])

        if member is None:
            raise GraphError("{} has no {} {}".format(self._owner_name, self._kind, name))
        else:
            return member

    def find(self, name):
        return iterables.find(lambda member: member.name == name, self._members())

    def find_by_graphql_name(self, graphql_name):
        return iterables.find(lambda member: member.graphql_name == graphql_name, self._members())


class Fields(_Members):
    _kind = "field"


class Params(_Members):
    _kind = "param"

    def with_types(self, resolve_type):
        if resolve_type is None:
            return self
        else:
            return Params(self._owner_name, tuple(
                param.with_type(replace_type_references(param.type, resolve_type))
                for param in self
            ))


def field(name, type, params=None, resolve=None):
    return Field(owner_type=None, name=name, type=type, params=params or (), resolve=resolve)


class Field(object):
    def __init__(self, owner_type, name, type, params, resolve):
        self.owner_type = owner_type
        self.name = name
        self.type = type
        self.params = params if isinstance(params, Params) else Params(name, tuple(params))
        self.resolve = resolve

    @property
    def graphql_name(self):
        return snake_case_to_camel_case(self.name)

    @property
    def has_resolver(self):
        return self.resolve is not None

    @property
    def resolver(self):
        if self.resolve is None:
            return resolvers.default_resolver(self)
        else:
            return self.resolve

    def with_owner_type(self, owner_type, resolve_type=None):
        if resolve_type is None:
            graph_type = self.type
        else:
            graph_type = replace_type_references(self.type, resolve_type)

        return Field(
            owner_type=owner_type,
            name=self.name,
            type=graph_type,
            params=self.params.with_types(resolve_type),
            resolve=self.resolve,
        )

    def bind_args(self, raw_args):
        """
        Validate and coerce the arguments supplied for one occurrence of
        this field.

        ``raw_args`` maps parameter names to supplied values. Raises
        ``ValidationError`` for unknown arguments, missing required
        arguments and values that cannot be coerced to the parameter type.
        """
        unknown_names = [name for name in raw_args if self.params.find(name) is None]
        if unknown_names:
            raise ValidationError("field {} has no argument {}".format(self.graphql_name, unknown_names[0]))

        return Args(
            iterables.to_dict(
                (param.name, self._bind_arg(param, raw_args.get(param.name, param.default)))
                for param in self.params
            ),
            supplied=raw_args.keys(),
        )

    def _bind_arg(self, param, value):
        if value is _undefined:
            raise ValidationError("field {} is missing required argument {}".format(
                self.graphql_name,
                param.graphql_name,
            ))

        try:
            return param.type.coerce(value)
        except GraphError as error:
            raise ValidationError("argument {} of field {}: {}".format(param.graphql_name, self.graphql_name, error))

    def __repr__(self):
        return "Field(name={!r}, type={!r})".format(self.name, self.type)


def param(name, type, default=_undefined):
    return Parameter(name=name, type=type, default=default)


class Parameter(object):
    def __init__(self, name, type, default):
        if default is _undefined and isinstance(type, NullableType):
            default = None

        self.name = name
        self.type = type
        self.default = default

    @property
    def graphql_name(self):
        return snake_case_to_camel_case(self.name)

    @property
    def has_default(self):
        return self.default is not _undefined

    @property
    def is_required(self):
        return not self.has_default

    def with_type(self, type):
        return Parameter(name=self.name, type=type, default=self.default)

    def __repr__(self):
        return "Parameter(name={!r}, type={!r})".format(self.name, self.type)


class ObjectQuery(object):
    def __init__(self, type, field_queries):
        self.type = type
        self.field_queries = tuple(field_queries)

    def __add__(self, other):
        if not isinstance(other, ObjectQuery):
            return NotImplemented

        assert self.type == other.type
        return ObjectQuery(
            type=self.type,
            field_queries=iterables.merge_by_key(
                self.field_queries + other.field_queries,
                key=lambda field_query: field_query.key,
                merge=operator.add,
            ),
        )

    def __repr__(self):
        return "ObjectQuery(type={!r}, field_queries={!r})".format(self.type, self.field_queries)


class FieldQuery(object):
    """
    One occurrence of a field in a document.

    ``args`` holds the raw argument values keyed by parameter name; they
    are only bound when the field is executed so that a bad argument fails
    that field alone. ``object_query`` is the sub-selection for object
    fields and ``None`` for scalars.
    """

    def __init__(self, key, field, args, object_query=None, nodes=()):
        self.key = key
        self.field = field
        self.args = args
        self.object_query = object_query
        self.nodes = tuple(nodes)

    def __add__(self, other):
        if not isinstance(other, FieldQuery):
            return NotImplemented

        assert self.key == other.key
        if self.object_query is None or other.object_query is None:
            object_query = self.object_query or other.object_query
        else:
            object_query = self.object_query + other.object_query

        return FieldQuery(
            key=self.key,
            field=self.field,
            args=self.args,
            object_query=object_query,
            nodes=self.nodes + other.nodes,
        )

    def __repr__(self):
        return "FieldQuery(key={!r}, field={!r}, args={!r})".format(self.key, self.field, self.args)


def to_element_type(graph_type):
    while isinstance(graph_type, _WrapperType):
        graph_type = graph_type.element_type

    return graph_type


def replace_type_references(graph_type, resolve_type):
    if isinstance(graph_type, str):
        return resolve_type(graph_type)
    elif isinstance(graph_type, _WrapperType):
        return type(graph_type)(replace_type_references(graph_type.element_type, resolve_type))
    else:
        return graph_type


typename_field = field("type_name", type=String)
