class Injector(object):
    """
    Hands per-request collaborators to functions that declare them with
    ``@dependencies``.
    """

    def __init__(self, dependencies):
        self._dependencies = dict(dependencies)
        self._dependencies.setdefault(Injector, self)

    def get(self, key):
        if key in self._dependencies:
            return self._dependencies[key]
        else:
            raise GraphError("missing dependency: {!r}".format(key))

    def call_with_dependencies(self, func, *args, **kwargs):
        declared = getattr(func, "dependencies", {})
        for arg_name, key in declared.items():
            kwargs[arg_name] = self.get(key)

        return func(*args, **kwargs)


def dependencies(**kwargs):
    def declare_dependencies(func):
        func.dependencies = dict(getattr(func, "dependencies", {}), **kwargs)
        return func

    return declare_dependencies


class GraphError(Exception):
    pass


class UnknownType(GraphError):
    pass


class DuplicateType(GraphError):
    pass


class ValidationError(GraphError):
    pass


class ResolutionError(GraphError):
    pass
