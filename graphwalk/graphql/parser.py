from copy import copy

from graphql import GraphQLError, Undefined
from graphql.execution.values import get_argument_values, get_variable_values
from graphql.language import ast as graphql_ast, parser as graphql_parser
from graphql.type.directives import GraphQLIncludeDirective, GraphQLSkipDirective
from graphql.utilities import get_operation_ast, value_from_ast_untyped
from graphql.validation import validate as graphql_validate

from .. import schema
from ..core import ValidationError
from ..iterables import partition, to_dict


_introspection_fields = ("__schema", "__type")


class GraphQLQuery(object):
    def __init__(self, operation, graph_query, graphql_schema_document, variables, response_keys=()):
        self.operation = operation
        self.response_keys = tuple(response_keys)
        self.graph_query = graph_query
        self.graphql_schema_document = graphql_schema_document
        self.variables = variables


class InvalidDocument(Exception):
    def __init__(self, errors):
        super().__init__(errors[0].message)
        self.errors = errors


def document_text_to_query(document_text, graphql_schema, variables=None, operation_name=None):
    """
    Parse and validate ``document_text``, returning the selected operation
    as an object query on the matching root type.

    Raises ``InvalidDocument`` holding one ``GraphQLError`` per problem
    found when parsing, validating or coercing variables. Each of those
    errors has a ``ValidationError`` as its original error.
    """
    document_ast = _parse(document_text)

    errors = graphql_validate(graphql_schema.graphql_schema, document_ast)
    if errors:
        raise _invalid_document(errors)

    operation = _select_operation(document_ast, operation_name)
    root_type = _root_type(graphql_schema, operation)

    variable_values = get_variable_values(
        graphql_schema.graphql_schema,
        operation.variable_definitions or [],
        variables or {},
    )
    if isinstance(variable_values, list):
        raise _invalid_document(variable_values)

    # TODO: handle introspection fields selected through fragments
    schema_selections, graph_selections = partition(
        lambda selection: isinstance(selection, graphql_ast.FieldNode) and selection.name.value in _introspection_fields,
        operation.selection_set.selections,
    )

    fragments = to_dict(
        (definition.name.value, definition)
        for definition in document_ast.definitions
        if isinstance(definition, graphql_ast.FragmentDefinitionNode)
    )

    if graph_selections:
        reader = SelectionReader(fragments=fragments, variables=variable_values)
        graph_query = reader.read_selections(graph_selections, object_type=root_type)
    else:
        graph_query = None

    return GraphQLQuery(
        operation=operation.operation.value,
        graph_query=graph_query,
        graphql_schema_document=_schema_document(document_ast, operation, schema_selections),
        variables=variable_values,
        response_keys=_response_keys(operation.selection_set.selections, fragments),
    )


def _response_keys(selections, fragments):
    keys = []

    for selection in selections:
        if isinstance(selection, graphql_ast.FieldNode):
            keys.append(selection.alias.value if selection.alias else selection.name.value)
        elif isinstance(selection, graphql_ast.InlineFragmentNode):
            keys += _response_keys(selection.selection_set.selections, fragments)
        else:
            keys += _response_keys(fragments[selection.name.value].selection_set.selections, fragments)

    return list(dict.fromkeys(keys))


def _parse(document_text):
    try:
        return graphql_parser.parse(document_text)
    except GraphQLError as error:
        raise _invalid_document([error])


def _select_operation(document_ast, operation_name):
    operation = get_operation_ast(document_ast, operation_name)
    if operation is not None:
        return operation
    elif operation_name is None:
        raise _invalid_document([GraphQLError("must provide operation name if query contains multiple operations")])
    else:
        raise _invalid_document([GraphQLError("unknown operation named '{}'".format(operation_name))])


def _root_type(graphql_schema, operation):
    if operation.operation == graphql_ast.OperationType.QUERY:
        return graphql_schema.query_type
    elif operation.operation == graphql_ast.OperationType.MUTATION and graphql_schema.mutation_type is not None:
        return graphql_schema.mutation_type
    else:
        raise _invalid_document([GraphQLError(
            "unsupported operation: {}".format(operation.operation.value),
            nodes=[operation],
        )])


def _schema_document(document_ast, operation, schema_selections):
    if not schema_selections:
        return None

    schema_operation = _copy_with(
        operation,
        selection_set=_copy_with(operation.selection_set, selections=tuple(schema_selections)),
    )

    return _copy_with(
        document_ast,
        definitions=tuple(
            schema_operation if definition is operation else definition
            for definition in document_ast.definitions
            if definition is operation or not isinstance(definition, graphql_ast.OperationDefinitionNode)
        ),
    )


class SelectionReader(object):
    def __init__(self, fragments, variables):
        self._fragments = fragments
        self._variables = variables

    def read_selections(self, selections, object_type):
        query = object_type.query(field_queries=())

        for selection in selections:
            if not self._is_included(selection):
                continue
            elif isinstance(selection, graphql_ast.FieldNode):
                query += object_type.query(field_queries=(self._read_field(selection, object_type), ))
            elif isinstance(selection, graphql_ast.InlineFragmentNode):
                query += self.read_selections(selection.selection_set.selections, object_type)
            elif isinstance(selection, graphql_ast.FragmentSpreadNode):
                fragment = self._fragments[selection.name.value]
                query += self.read_selections(fragment.selection_set.selections, object_type)
            else:
                raise ValueError("unhandled selection: {}".format(type(selection).__name__))

        return query

    def _is_included(self, selection):
        for directive in selection.directives:
            if directive.name.value == "include":
                if not get_argument_values(GraphQLIncludeDirective, directive, self._variables)["if"]:
                    return False
            elif directive.name.value == "skip":
                if get_argument_values(GraphQLSkipDirective, directive, self._variables)["if"]:
                    return False
            else:
                raise GraphQLError("unknown directive: {}".format(directive.name.value), nodes=[directive])

        return True

    def _read_field(self, field_node, object_type):
        field = self._find_field(object_type, field_node.name.value)

        if field_node.selection_set is None:
            object_query = None
        else:
            object_query = self.read_selections(
                field_node.selection_set.selections,
                schema.to_element_type(field.type),
            )

        return schema.FieldQuery(
            key=field_node.alias.value if field_node.alias else field_node.name.value,
            field=field,
            args=self._read_args(field, field_node.arguments),
            object_query=object_query,
            nodes=(field_node, ),
        )

    def _find_field(self, object_type, graphql_name):
        if graphql_name == "__typename":
            return schema.typename_field

        field = object_type.fields.find_by_graphql_name(graphql_name)
        if field is None:
            raise ValidationError("{} has no field {}".format(object_type.name, graphql_name))
        else:
            return field

    def _read_args(self, field, argument_nodes):
        args = {}

        for argument_node in argument_nodes:
            value = value_from_ast_untyped(argument_node.value, self._variables)
            # Arguments bound to unset variables are treated as omitted
            if value is not Undefined:
                param = field.params.find_by_graphql_name(argument_node.name.value)
                args[argument_node.name.value if param is None else param.name] = value

        return args


def _invalid_document(errors):
    return InvalidDocument([
        GraphQLError(
            error.message,
            nodes=error.nodes,
            source=error.source,
            positions=error.positions,
            original_error=ValidationError(error.message),
        )
        for error in errors
    ])


def _copy_with(obj, **kwargs):
    result = copy(obj)
    for key, value in kwargs.items():
        setattr(result, key, value)
    return result
