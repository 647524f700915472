import asyncio
import json
import logging
import sys

import flask
from graphql import GraphQLError, parse as graphql_parse
from graphql.utilities import get_operation_ast
import httpx
import structlog

from ..core import ValidationError
from . import graph
from .rest import RestRecordStore
from .stores import COMPANIES, create_demo_stores, USERS


logger = structlog.get_logger(__name__)


default_config = dict(
    GRAPHIQL=True,
    DATA_URL=None,
    TIMEOUT=None,
    PORT=4000,
    DEBUG=False,
)


def create_app(config=None):
    app = flask.Flask(__name__)
    app.config.from_mapping(default_config)
    app.config.from_prefixed_env("GRAPHWALK")
    if config is not None:
        app.config.from_mapping(config)

    execute = graph.create_executor(timeout=app.config["TIMEOUT"])
    data_url = app.config["DATA_URL"]
    demo_stores = create_demo_stores() if data_url is None else None

    async def execute_request(query, variables, operation_name):
        if data_url is None:
            return await execute.execute_async(
                query,
                dependencies=demo_stores,
                variables=variables,
                operation_name=operation_name,
            )
        else:
            async with httpx.AsyncClient(base_url=data_url) as client:
                dependencies = {
                    USERS: RestRecordStore(client, USERS),
                    COMPANIES: RestRecordStore(client, COMPANIES),
                }
                return await execute.execute_async(
                    query,
                    dependencies=dependencies,
                    variables=variables,
                    operation_name=operation_name,
                )

    @app.route("/graphql", methods=["GET", "POST"])
    def graphql():
        request = flask.request

        if request.method == "GET" and "query" not in request.args and app.config["GRAPHIQL"]:
            return flask.Response(graphiql_html, mimetype="text/html")

        try:
            query, variables, operation_name = _read_graphql_params(request)
        except ValueError as error:
            return _error_response(str(error), 400)

        if request.method == "GET" and _operation_type(query, operation_name) == "mutation":
            return _error_response("can only perform a mutation operation from a POST request", 405)

        result = asyncio.run(execute_request(query, variables, operation_name))

        return flask.jsonify(result.formatted), _status_for(result)

    return app


def _status_for(result):
    if result.data is not None:
        return 200
    elif all(isinstance(error.original_error, ValidationError) for error in result.errors):
        return 400
    else:
        return 500


def _read_graphql_params(request):
    if request.method == "GET":
        params = request.args
    else:
        params = request.get_json(silent=True)
        if not isinstance(params, dict):
            raise ValueError("request body must be a JSON object")

    query = params.get("query")
    if not query:
        raise ValueError("must provide query string")

    variables = params.get("variables") or {}
    if isinstance(variables, str):
        try:
            variables = json.loads(variables)
        except ValueError:
            raise ValueError("variables are invalid JSON")
    if not isinstance(variables, dict):
        raise ValueError("variables must be a JSON object")

    return query, variables, params.get("operationName") or None


def _operation_type(query, operation_name):
    try:
        operation = get_operation_ast(graphql_parse(query), operation_name)
    except GraphQLError:
        return None

    if operation is None:
        return None
    else:
        return operation.operation.value


def _error_response(message, status):
    return flask.jsonify({"errors": [{"message": message}]}), status


def configure_logging(debug=False):
    log_level = logging.DEBUG if debug else logging.INFO

    logging.basicConfig(
        level=log_level,
        stream=sys.stdout,
        format="%(message)s",
        force=True,
    )

    if debug:
        renderer = structlog.dev.ConsoleRenderer()
    else:
        renderer = structlog.processors.JSONRenderer()

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="ISO", utc=True),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            renderer,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )


def main():
    app = create_app()
    debug = app.config["DEBUG"]
    configure_logging(debug=debug)

    port = app.config["PORT"]
    logger.info("listening", port=port)
    app.run(port=port, debug=debug)


graphiql_html = """<!DOCTYPE html>
<html>
  <head>
    <title>GraphiQL</title>
    <link href="https://unpkg.com/graphiql/graphiql.min.css" rel="stylesheet" />
  </head>
  <body style="margin: 0;">
    <div id="graphiql" style="height: 100vh;"></div>
    <script crossorigin src="https://unpkg.com/react/umd/react.production.min.js"></script>
    <script crossorigin src="https://unpkg.com/react-dom/umd/react-dom.production.min.js"></script>
    <script crossorigin src="https://unpkg.com/graphiql/graphiql.min.js"></script>
    <script>
      const fetcher = GraphiQL.createFetcher({ url: window.location.href });
      ReactDOM.render(
        React.createElement(GraphiQL, { fetcher: fetcher }),
        document.getElementById("graphiql"),
      );
    </script>
  </body>
</html>
"""


if __name__ == "__main__":
    main()
