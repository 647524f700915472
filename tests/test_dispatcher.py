import asyncio

from precisely import assert_that, equal_to, has_attrs
import pytest

import graphwalk as g
from graphwalk.core import Injector


def _root_types(calls):
    def resolve_user(parent, args):
        calls.append(("user", args.id))
        return {"id": args.id}

    def resolve_add_user(parent, args):
        calls.append(("addUser", args.first_name, args.age))
        return {"id": "1", "firstName": args.first_name, "age": args.age}

    User = g.ObjectType("User", fields=(
        g.field("id", type=g.ID),
        g.field("first_name", type=g.String),
        g.field("age", type=g.Int),
    ))

    Query = g.ObjectType("Query", fields=(
        g.field("user", type=g.NullableType(User), params=(
            g.param("id", type=g.ID),
        ), resolve=resolve_user),
    ))

    Mutation = g.ObjectType("Mutation", fields=(
        g.field("add_user", type=User, params=(
            g.param("first_name", type=g.String),
            g.param("age", type=g.Int),
        ), resolve=resolve_add_user),
    ))

    return Query, Mutation


def test_query_root_field_resolver_is_invoked_with_bound_arguments():
    calls = []
    dispatcher = g.RootDispatcher(*_root_types(calls))

    result = dispatcher.dispatch("query", "user", {"id": 23})

    assert_that(result, equal_to({"id": "23"}))
    assert_that(calls, equal_to([("user", "23")]))


def test_root_fields_can_be_named_using_graphql_names():
    calls = []
    dispatcher = g.RootDispatcher(*_root_types(calls))

    dispatcher.dispatch("mutation", "addUser", {"first_name": "Bob", "age": 42})
    dispatcher.dispatch("mutation", "add_user", {"first_name": "Jim", "age": 24})

    assert_that(calls, equal_to([("addUser", "Bob", 42), ("addUser", "Jim", 24)]))


def test_missing_required_argument_is_rejected_before_resolver_is_invoked():
    calls = []
    dispatcher = g.RootDispatcher(*_root_types(calls))

    error = pytest.raises(
        g.ValidationError,
        lambda: dispatcher.dispatch("mutation", "addUser", {"first_name": "Bob"}),
    )

    assert_that(str(error.value), equal_to("field addUser is missing required argument age"))
    assert_that(calls, equal_to([]))


def test_argument_of_wrong_scalar_type_is_rejected_before_resolver_is_invoked():
    calls = []
    dispatcher = g.RootDispatcher(*_root_types(calls))

    pytest.raises(
        g.ValidationError,
        lambda: dispatcher.dispatch("mutation", "addUser", {"first_name": "Bob", "age": "old"}),
    )

    assert_that(calls, equal_to([]))


def test_unknown_root_field_is_validation_error():
    dispatcher = g.RootDispatcher(*_root_types([]))

    error = pytest.raises(g.ValidationError, lambda: dispatcher.dispatch("query", "company", {}))

    assert_that(str(error.value), equal_to("Query has no field company"))


def test_mutation_is_validation_error_when_there_is_no_mutation_type():
    Query, Mutation = _root_types([])
    dispatcher = g.RootDispatcher(Query)

    error = pytest.raises(g.ValidationError, lambda: dispatcher.dispatch("mutation", "addUser", {}))

    assert_that(str(error.value), equal_to("unsupported operation: mutation"))


def test_root_fields_must_have_resolvers():
    Query = g.ObjectType("Query", fields=(
        g.field("value", type=g.Int),
    ))

    error = pytest.raises(g.GraphError, lambda: g.RootDispatcher(Query))

    assert_that(str(error.value), equal_to("root field Query.value has no resolver"))


def test_resolvers_are_passed_their_dependencies():
    store_key = object()

    @g.dependencies(store=store_key)
    def resolve_value(parent, args, *, store):
        return store["value"]

    Query = g.ObjectType("Query", fields=(
        g.field("value", type=g.Int, resolve=resolve_value),
    ))
    dispatcher = g.RootDispatcher(Query)

    result = dispatcher.dispatch("query", "value", {}, injector=Injector({store_key: {"value": 42}}))

    assert_that(result, equal_to(42))


def test_async_resolver_result_is_returned_as_awaitable():
    async def resolve_value(parent, args):
        return 42

    Query = g.ObjectType("Query", fields=(
        g.field("value", type=g.Int, resolve=resolve_value),
    ))
    dispatcher = g.RootDispatcher(Query)

    result = dispatcher.dispatch("query", "value", {})

    assert_that(asyncio.run(result), equal_to(42))


def test_root_type_is_selected_by_operation():
    Query, Mutation = _root_types([])
    dispatcher = g.RootDispatcher(Query, Mutation)

    assert_that(dispatcher.root_type("query"), equal_to(Query))
    assert_that(dispatcher.root_type("mutation"), has_attrs(name="Mutation"))
