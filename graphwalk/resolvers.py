from collections.abc import Mapping

from .core import ResolutionError
from .naming import snake_case_to_camel_case


_missing = object()


def default_resolver(field):
    graphql_name = snake_case_to_camel_case(field.name)

    def resolve(parent, args):
        if isinstance(parent, Mapping):
            value = parent.get(graphql_name, _missing)
            if value is _missing:
                value = parent.get(field.name, _missing)
        else:
            value = getattr(parent, field.name, _missing)

        if value is _missing:
            raise ResolutionError("{} has no value for field {}".format(
                _describe(parent),
                graphql_name,
            ))
        else:
            return value

    return resolve


def getter(func):
    def resolve(parent, args):
        return func(parent)

    return resolve


def attr(name):
    def resolve(parent, args):
        return getattr(parent, name)

    return resolve


def key(name):
    def resolve(parent, args):
        return parent[name]

    return resolve


def constant(value):
    def resolve(parent, args):
        return value

    return resolve


def _describe(value):
    if value is None:
        return "null"
    else:
        return type(value).__name__
