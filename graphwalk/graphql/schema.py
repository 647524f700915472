import graphql

from .. import iterables, schema


_graphql_scalars = {
    schema.Boolean: graphql.GraphQLBoolean,
    schema.Float: graphql.GraphQLFloat,
    schema.ID: graphql.GraphQLID,
    schema.Int: graphql.GraphQLInt,
    schema.String: graphql.GraphQLString,
}


class Schema(object):
    def __init__(self, query_type, mutation_type, graphql_schema):
        self.query_type = query_type
        self.mutation_type = mutation_type
        self.graphql_schema = graphql_schema


def create_graphql_schema(query_type, mutation_type=None, types=None):
    """
    Build the graphql-core schema used to validate documents and answer
    introspection queries.

    Every type is non-null unless wrapped in ``NullableType``, and names are
    exposed in camelCase. ``types`` adds object types that are not
    reachable from the root types.
    """
    converter = _TypeConverter()

    graphql_query_type = converter.to_named_type(query_type)
    if mutation_type is None:
        graphql_mutation_type = None
    else:
        graphql_mutation_type = converter.to_named_type(mutation_type)

    for extra_type in types or ():
        converter.to_named_type(extra_type)

    return Schema(
        query_type=query_type,
        mutation_type=mutation_type,
        graphql_schema=graphql.GraphQLSchema(
            query=graphql_query_type,
            mutation=graphql_mutation_type,
            types=converter.named_types(),
        ),
    )


class _TypeConverter(object):
    def __init__(self):
        self._object_types = {}

    def named_types(self):
        return tuple(self._object_types.values())

    def to_named_type(self, graph_type):
        return graphql.get_named_type(self.to_type(graph_type))

    def to_type(self, graph_type):
        if isinstance(graph_type, schema.NullableType):
            return graphql.get_nullable_type(self.to_type(graph_type.element_type))
        else:
            return graphql.GraphQLNonNull(self._to_nullable_type(graph_type))

    def _to_nullable_type(self, graph_type):
        if graph_type in _graphql_scalars:
            return _graphql_scalars[graph_type]
        elif isinstance(graph_type, schema.ListType):
            return graphql.GraphQLList(self.to_type(graph_type.element_type))
        elif isinstance(graph_type, schema.ObjectType):
            return self._to_object_type(graph_type)
        else:
            raise ValueError("unsupported type: {!r}".format(graph_type))

    def _to_object_type(self, object_type):
        if object_type not in self._object_types:
            self._object_types[object_type] = graphql.GraphQLObjectType(
                name=object_type.name,
                fields=lambda: iterables.to_dict(
                    (field.graphql_name, self._to_field(field))
                    for field in object_type.fields
                ),
            )

        return self._object_types[object_type]

    def _to_field(self, field):
        return graphql.GraphQLField(
            type_=self.to_type(field.type),
            args=iterables.to_dict(
                (param.graphql_name, self._to_argument(param))
                for param in field.params
            ),
        )

    def _to_argument(self, param):
        graphql_type = self.to_type(param.type)
        if param.has_default:
            # Arguments with defaults may be omitted from documents
            graphql_type = graphql.get_nullable_type(graphql_type)

        return graphql.GraphQLArgument(type_=graphql_type)
