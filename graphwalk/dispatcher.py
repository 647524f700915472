import structlog

from .core import GraphError, Injector, ValidationError


logger = structlog.get_logger(__name__)


QUERY = "query"
MUTATION = "mutation"


class RootDispatcher(object):
    def __init__(self, query_type, mutation_type=None):
        self.query_type = query_type
        self.mutation_type = mutation_type

        for root_type in filter(None, (query_type, mutation_type)):
            for field in root_type.fields:
                if not field.has_resolver:
                    raise GraphError("root field {}.{} has no resolver".format(root_type.name, field.name))

    def root_type(self, operation):
        if operation == QUERY:
            return self.query_type
        elif operation == MUTATION and self.mutation_type is not None:
            return self.mutation_type
        else:
            raise ValidationError("unsupported operation: {}".format(operation))

    def dispatch(self, operation, field_name, args, injector=None):
        """
        Validate ``args`` against the root field ``field_name`` and invoke
        its resolver once.

        Returns whatever the resolver returns, which may be awaitable. No
        resolver is invoked if validation fails.
        """
        root_type = self.root_type(operation)
        field = root_type.fields.find(field_name) or root_type.fields.find_by_graphql_name(field_name)
        if field is None:
            raise ValidationError("{} has no field {}".format(root_type.name, field_name))

        return self.invoke(field, args, injector=injector)

    def invoke(self, field, args, injector=None):
        if injector is None:
            injector = Injector({})

        bound_args = field.bind_args(args)

        if field.owner_type is self.mutation_type:
            logger.debug("invoking mutation", field=field.graphql_name, args=bound_args.supplied())

        return injector.call_with_dependencies(field.resolve, None, bound_args)
