import asyncio

from graphql import GraphQLError
from graphql.execution import execute as graphql_execute, ExecutionResult
import structlog

from .. import iterables
from ..core import GraphError, Injector, ResolutionError
from ..dispatcher import RootDispatcher
from ..execution import Execution
from . import parser
from .schema import create_graphql_schema


logger = structlog.get_logger(__name__)


def execute(
    document_text,
    *,
    query_type,
    mutation_type=None,
    registry=None,
    types=None,
    timeout=None,
    dependencies=None,
    variables=None,
    operation_name=None,
):
    return executor(
        query_type=query_type,
        mutation_type=mutation_type,
        registry=registry,
        types=types,
        timeout=timeout,
    )(document_text, dependencies=dependencies, variables=variables, operation_name=operation_name)


def executor(*, query_type, mutation_type=None, registry=None, types=None, timeout=None):
    return Executor(
        query_type=query_type,
        mutation_type=mutation_type,
        registry=registry,
        types=types,
        timeout=timeout,
    )


class Executor(object):
    """
    Executes documents against fixed root types.

    When a registry is given it is frozen, root types may be named instead
    of passed directly, and every registered type is exposed to
    introspection. Construction fails if a root field has no resolver.
    """

    def __init__(self, *, query_type, mutation_type=None, registry=None, types=None, timeout=None):
        if types is None:
            types = ()

        if registry is not None:
            types = tuple(types) + registry.freeze()
            query_type = _lookup_type(registry, query_type)
            mutation_type = _lookup_type(registry, mutation_type)

        self._dispatcher = RootDispatcher(query_type=query_type, mutation_type=mutation_type)
        self._graphql_schema = create_graphql_schema(
            query_type=query_type,
            mutation_type=mutation_type,
            types=types,
        )
        self._timeout = timeout

    @property
    def graphql_schema(self):
        return self._graphql_schema.graphql_schema

    def __call__(self, document_text, *, dependencies=None, variables=None, operation_name=None):
        return asyncio.run(self.execute_async(
            document_text,
            dependencies=dependencies,
            variables=variables,
            operation_name=operation_name,
        ))

    async def execute_async(self, document_text, *, dependencies=None, variables=None, operation_name=None):
        execution = self._execute(
            document_text,
            dependencies=dependencies,
            variables=variables,
            operation_name=operation_name,
        )

        if self._timeout is None:
            return await execution

        try:
            return await asyncio.wait_for(execution, timeout=self._timeout)
        except asyncio.TimeoutError:
            logger.warning("execution timed out", timeout=self._timeout)
            message = "execution timed out after {} seconds".format(self._timeout)
            return ExecutionResult(
                data=None,
                errors=[GraphQLError(message, original_error=ResolutionError(message))],
            )

    async def _execute(self, document_text, *, dependencies, variables, operation_name):
        if dependencies is None:
            dependencies = {}

        try:
            query = parser.document_text_to_query(
                document_text=document_text,
                graphql_schema=self._graphql_schema,
                variables=variables,
                operation_name=operation_name,
            )
        except parser.InvalidDocument as error:
            return ExecutionResult(data=None, errors=error.errors)
        except (GraphQLError, GraphError) as error:
            return ExecutionResult(data=None, errors=[_to_graphql_error(error)])

        errors = []

        if query.graph_query is None:
            result = {}
        else:
            execution = Execution(self._dispatcher, Injector(dependencies))
            result = await execution.execute(query.operation, query.graph_query)
            errors += execution.errors

        if query.graphql_schema_document is not None:
            schema_result = graphql_execute(
                self._graphql_schema.graphql_schema,
                query.graphql_schema_document,
                variable_values=variables,
            )
            result.update(schema_result.data or {})
            errors += schema_result.errors or []

        return ExecutionResult(
            data=iterables.to_dict(
                (key, result[key])
                for key in query.response_keys
                if key in result
            ),
            errors=errors or None,
        )


def _lookup_type(registry, graph_type):
    if isinstance(graph_type, str):
        return registry.lookup(graph_type)
    else:
        return graph_type


def _to_graphql_error(error):
    if isinstance(error, GraphQLError):
        return error
    else:
        return GraphQLError(str(error), original_error=error)
