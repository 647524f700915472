from . import schema
from .core import DuplicateType, GraphError, UnknownType


class TypeRegistry(object):
    """
    Named object types, built in two phases.

    Names are declared first and field maps attached second, so types may
    refer to each other in either order. ``freeze`` forces every field map
    and ends registration: a frozen registry is read-only and can be shared
    between requests.
    """

    def __init__(self):
        self._types = {}
        self._frozen = False

    def declare(self, name):
        self._check_not_frozen()
        if name in self._types:
            raise DuplicateType("type is already registered: {}".format(name))

        graph_type = schema.ObjectType(name, type_lookup=self.lookup)
        self._types[name] = graph_type
        return graph_type

    def define(self, name, fields):
        self._check_not_frozen()
        graph_type = self.lookup(name)
        if graph_type.is_defined:
            raise DuplicateType("type is already defined: {}".format(name))

        graph_type.define(fields)
        return graph_type

    def object_type(self, name, fields):
        graph_type = self.declare(name)
        graph_type.define(fields)
        return graph_type

    def lookup(self, name):
        graph_type = self._types.get(name)
        if graph_type is None:
            raise UnknownType("unknown type: {}".format(name))
        else:
            return graph_type

    def __contains__(self, name):
        return name in self._types

    def __iter__(self):
        return iter(self._types.values())

    @property
    def is_frozen(self):
        return self._frozen

    def freeze(self):
        if not self._frozen:
            for graph_type in self._types.values():
                # Forces the field map, resolving named type references
                tuple(graph_type.fields)
            self._frozen = True

        return tuple(self._types.values())

    def _check_not_frozen(self):
        if self._frozen:
            raise GraphError("cannot register types after the registry is frozen")
