import graphwalk as g
from graphwalk import graphql
from graphwalk.naming import camel_case_keys, snake_case_to_camel_case

from .stores import COMPANIES, USERS


registry = g.TypeRegistry()


User = registry.object_type("User", fields=lambda: (
    g.field("id", type=g.ID),
    g.field("first_name", type=g.String),
    g.field("age", type=g.Int),
    g.field("company", type=g.NullableType("Company"), resolve=resolve_user_company),
))


Company = registry.object_type("Company", fields=lambda: (
    g.field("id", type=g.ID),
    g.field("name", type=g.String),
    g.field("description", type=g.NullableType(g.String)),
    g.field("users", type=g.ListType(User), resolve=resolve_company_users),
))


@g.dependencies(companies=COMPANIES)
async def resolve_user_company(user, args, *, companies):
    company_id = user.get("companyId")
    if company_id is None:
        return None
    else:
        return await companies.find(company_id)


@g.dependencies(users=USERS)
async def resolve_company_users(company, args, *, users):
    return await users.find_all(companyId=company["id"])


Query = registry.object_type("Query", fields=lambda: (
    g.field("user", type=g.NullableType(User), params=(
        g.param("id", type=g.ID),
    ), resolve=resolve_user),
    g.field("users", type=g.ListType(User), resolve=resolve_users),
    g.field("company", type=g.NullableType(Company), params=(
        g.param("id", type=g.ID),
    ), resolve=resolve_company),
    g.field("companies", type=g.ListType(Company), resolve=resolve_companies),
))


@g.dependencies(users=USERS)
async def resolve_user(parent, args, *, users):
    return await users.find(args.id)


@g.dependencies(users=USERS)
async def resolve_users(parent, args, *, users):
    return await users.find_all()


@g.dependencies(companies=COMPANIES)
async def resolve_company(parent, args, *, companies):
    return await companies.find(args.id)


@g.dependencies(companies=COMPANIES)
async def resolve_companies(parent, args, *, companies):
    return await companies.find_all()


Mutation = registry.object_type("Mutation", fields=lambda: (
    g.field("add_user", type=User, params=(
        g.param("first_name", type=g.String),
        g.param("age", type=g.Int),
        g.param("company_id", type=g.NullableType(g.ID)),
    ), resolve=resolve_add_user),
    g.field("delete_user", type=User, params=(
        g.param("id", type=g.ID),
    ), resolve=resolve_delete_user),
    g.field("edit_user", type=User, params=(
        g.param("id", type=g.ID),
        g.param("first_name", type=g.NullableType(g.String)),
        g.param("age", type=g.NullableType(g.Int)),
        g.param("company_id", type=g.NullableType(g.ID)),
    ), resolve=resolve_edit_user),
))


@g.dependencies(users=USERS)
async def resolve_add_user(parent, args, *, users):
    return await users.create(camel_case_keys(args.supplied()))


@g.dependencies(users=USERS)
async def resolve_delete_user(parent, args, *, users):
    # Only the id survives a deletion
    return {"id": await users.delete(args.id)}


_required_user_fields = ("first_name", "age")


@g.dependencies(users=USERS)
async def resolve_edit_user(parent, args, *, users):
    for name in _required_user_fields:
        if args.is_set(name) and getattr(args, name) is None:
            raise g.ValidationError("editUser cannot set {} to null".format(snake_case_to_camel_case(name)))

    partial = camel_case_keys(args.supplied())
    del partial["id"]
    return await users.update(args.id, partial)


def create_executor(timeout=None):
    return graphql.executor(
        registry=registry,
        query_type=Query,
        mutation_type=Mutation,
        timeout=timeout,
    )
