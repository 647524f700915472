import asyncio
from collections.abc import Iterable, Mapping
import inspect

from graphql import GraphQLError
import structlog

from . import iterables, schema
from .core import GraphError, ResolutionError, ValidationError
from .dispatcher import MUTATION


logger = structlog.get_logger(__name__)


class Execution(object):
    """
    The execution of a single operation.

    Sibling fields and list elements are completed concurrently. A field
    that fails is set to ``None`` and its error recorded with the field's
    path, leaving the rest of the result intact.
    """

    def __init__(self, dispatcher, injector):
        self._dispatcher = dispatcher
        self._injector = injector
        self.errors = []

    async def execute(self, operation, query):
        if operation == MUTATION:
            return await self._execute_object_serially(query)
        else:
            return await self._execute_object(query, parent=None, path=(), is_root=True)

    async def _execute_object_serially(self, query):
        result = {}
        for field_query in query.field_queries:
            result[field_query.key] = await self._execute_field(
                query.type,
                field_query,
                parent=None,
                path=(),
                is_root=True,
            )
        return result

    async def _execute_object(self, query, parent, path, is_root=False):
        values = await asyncio.gather(*(
            self._execute_field(query.type, field_query, parent=parent, path=path, is_root=is_root)
            for field_query in query.field_queries
        ))
        return iterables.to_dict(
            (field_query.key, value)
            for field_query, value in zip(query.field_queries, values)
        )

    async def _execute_field(self, object_type, field_query, parent, path, is_root):
        path = path + (field_query.key, )
        field = field_query.field

        if field is schema.typename_field:
            return object_type.name

        try:
            if is_root:
                value = self._dispatcher.invoke(field, field_query.args, injector=self._injector)
            else:
                args = field.bind_args(field_query.args)
                value = self._injector.call_with_dependencies(field.resolver, parent, args)

            if inspect.isawaitable(value):
                value = await value
        except Exception as error:
            self._add_error(error, field_query, path)
            return None

        return await self._complete_value(field.type, field_query, value, path)

    async def _complete_value(self, graph_type, field_query, value, path):
        try:
            return await self._complete(graph_type, field_query, value, path)
        except Exception as error:
            self._add_error(error, field_query, path)
            return None

    async def _complete(self, graph_type, field_query, value, path):
        if isinstance(graph_type, schema.NullableType):
            if value is None:
                return None
            else:
                return await self._complete(graph_type.element_type, field_query, value, path)

        elif value is None:
            raise ResolutionError("non-nullable field {} resolved to null".format(field_query.field.graphql_name))

        elif isinstance(graph_type, schema.ListType):
            if isinstance(value, (str, bytes, Mapping)) or not isinstance(value, Iterable):
                raise ResolutionError("expected a list for field {} but got {}".format(
                    field_query.field.graphql_name,
                    type(value).__name__,
                ))

            elements = list(value)
            return list(await asyncio.gather(*(
                self._complete_value(graph_type.element_type, field_query, element, path + (index, ))
                for index, element in enumerate(elements)
            )))

        elif isinstance(graph_type, schema.ObjectType):
            return await self._execute_object(field_query.object_query, parent=value, path=path)

        else:
            try:
                return graph_type.coerce(value)
            except GraphError as error:
                raise ResolutionError("field {}: {}".format(field_query.field.graphql_name, error))

    def _add_error(self, error, field_query, path):
        if not isinstance(error, (ResolutionError, ValidationError)):
            cause = error
            error = ResolutionError(str(cause) or type(cause).__name__)
            error.__cause__ = cause

        logger.info(
            "field failed",
            path=list(path),
            error=str(error),
            error_type=type(error).__name__,
        )

        self.errors.append(GraphQLError(
            str(error),
            nodes=list(field_query.nodes) or None,
            path=list(path),
            original_error=error,
        ))
