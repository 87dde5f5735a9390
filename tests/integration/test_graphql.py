# Integration tests for the GraphQL HTTP endpoint

import pytest
from httpx import AsyncClient

from app.core.config import settings


async def post_graphql(client: AsyncClient, payload: dict):
    return await client.post("/graphql", json=payload)


def assert_json_ok(response):
    assert response.status_code == 200
    assert response.headers["content-type"].startswith("application/json")


# --- Test Cases ---


@pytest.mark.asyncio
async def test_echo_query_via_http(test_client: AsyncClient):
    query = 'query { echo(message: "Hello World") { original reversed length timestamp } }'
    response = await post_graphql(test_client, {"query": query})

    assert_json_ok(response)
    echo = response.json()["data"]["echo"]
    assert echo["original"] == "Hello World"
    assert echo["reversed"] == "dlroW olleH"
    assert echo["length"] == 11
    assert echo["timestamp"]


@pytest.mark.asyncio
async def test_echo_uses_injected_clock(fixed_clock_client: AsyncClient):
    response = await post_graphql(
        fixed_clock_client, {"query": '{ echo(message: "t") { timestamp } }'}
    )

    assert_json_ok(response)
    assert response.json() == {
        "data": {"echo": {"timestamp": "2026-01-02T03:04:05.678901Z"}}
    }


@pytest.mark.asyncio
async def test_ping_query_via_http(test_client: AsyncClient):
    response = await post_graphql(
        test_client, {"query": "query { ping { status latency timestamp } }"}
    )

    assert_json_ok(response)
    ping = response.json()["data"]["ping"]
    assert ping["status"] == "pong"
    assert ping["latency"] >= 0.0
    assert ping["timestamp"]


@pytest.mark.asyncio
async def test_query_with_variables_via_http(test_client: AsyncClient):
    response = await post_graphql(
        test_client,
        {
            "query": "query TestEcho($msg: String!) { echo(message: $msg) { original reversed length } }",
            "variables": {"msg": "Variable Test"},
        },
    )

    assert_json_ok(response)
    assert response.json()["data"]["echo"] == {
        "original": "Variable Test",
        "reversed": "tseT elbairaV",
        "length": 13,
    }


@pytest.mark.asyncio
async def test_null_variables_and_operation_name_are_accepted(test_client: AsyncClient):
    response = await post_graphql(
        test_client,
        {"query": "{ ping { status } }", "variables": None, "operationName": None},
    )

    assert_json_ok(response)
    assert response.json() == {"data": {"ping": {"status": "pong"}}}


@pytest.mark.asyncio
async def test_invalid_query_returns_error(test_client: AsyncClient):
    response = await post_graphql(test_client, {"query": "query { invalidQuery }"})

    assert_json_ok(response)
    body = response.json()
    assert body["errors"]
    assert body["errors"][0]["message"]
    assert "data" not in body


@pytest.mark.asyncio
async def test_missing_required_argument_returns_error(test_client: AsyncClient):
    response = await post_graphql(test_client, {"query": "query { echo { original } }"})

    assert_json_ok(response)
    body = response.json()
    assert body["errors"][0]["message"]
    assert (body.get("data") or {}).get("echo") is None


@pytest.mark.asyncio
async def test_document_syntax_error_is_still_http_ok(test_client: AsyncClient):
    response = await post_graphql(test_client, {"query": "query { ping { status }"})

    assert_json_ok(response)
    body = response.json()
    assert body["errors"][0]["message"].startswith("Syntax Error")
    assert "data" not in body


@pytest.mark.asyncio
async def test_malformed_json_returns_bad_request(test_client: AsyncClient):
    response = await test_client.post(
        "/graphql",
        content='{ "query": "query { ping { status } }"',
        headers={"Content-Type": "application/json"},
    )

    assert response.status_code == 400


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "payload",
    [
        [],
        "query { ping { status } }",
        {},
        {"query": 42},
        {"query": "{ ping { status } }", "variables": ["x"]},
        {"query": "{ ping { status } }", "operationName": 7},
    ],
)
async def test_malformed_envelope_returns_bad_request(test_client: AsyncClient, payload):
    response = await post_graphql(test_client, payload)

    assert response.status_code == 400


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "body",
    [
        r'{"query": "query($m: String!) { echo(message: $m) { original length } }", '
        r'"variables": {"m": "a\ud800b"}}',
        r'{"query": "{ echo(message: \"\udc00\") { original } }"}',
        r'{"query": "query Q { ping { status } }", "operationName": "Q\ud800"}',
        r'{"query": "{ ping { status } }", "variables": {"\ud800": ["x"]}}',
    ],
)
async def test_lone_surrogate_in_envelope_returns_bad_request(
    test_client: AsyncClient, body
):
    response = await test_client.post(
        "/graphql", content=body, headers={"Content-Type": "application/json"}
    )

    assert response.status_code == 400
    assert "not valid UTF-8" in response.json()["detail"]


@pytest.mark.asyncio
async def test_batch_aliases_via_http(test_client: AsyncClient):
    query = (
        'query { echo1: echo(message: "First") { original } '
        'echo2: echo(message: "Second") { original } ping { status } }'
    )
    response = await post_graphql(test_client, {"query": query})

    assert_json_ok(response)
    data = response.json()["data"]
    assert data["echo1"]["original"] == "First"
    assert data["echo2"]["original"] == "Second"
    assert data["ping"]["status"] == "pong"


@pytest.mark.asyncio
async def test_query_with_operation_name_runs_only_that_operation(test_client: AsyncClient):
    response = await post_graphql(
        test_client,
        {
            "query": 'query GetEcho { echo(message: "Operation Name Test") { original } } '
            "query GetPing { ping { status } }",
            "operationName": "GetEcho",
        },
    )

    assert_json_ok(response)
    data = response.json()["data"]
    assert data["echo"]["original"] == "Operation Name Test"
    assert "ping" not in data


@pytest.mark.asyncio
async def test_schema_introspection_via_http(test_client: AsyncClient):
    response = await post_graphql(test_client, {"query": "{ __schema { types { name } } }"})

    assert_json_ok(response)
    names = {t["name"] for t in response.json()["data"]["__schema"]["types"]}
    assert {"Query", "EchoResponse", "PingResponse"} <= names


@pytest.mark.asyncio
async def test_type_introspection_via_http(test_client: AsyncClient):
    response = await post_graphql(
        test_client,
        {"query": '{ __type(name: "EchoResponse") { name fields { name type { name } } } }'},
    )

    assert_json_ok(response)
    echo_type = response.json()["data"]["__type"]
    assert echo_type["name"] == "EchoResponse"
    assert {f["name"] for f in echo_type["fields"]} == {
        "original",
        "reversed",
        "length",
        "timestamp",
    }


@pytest.mark.asyncio
async def test_rate_limit_rejects_requests_over_the_quota(test_client: AsyncClient):
    quota = int(settings.GRAPHQL_RATE_LIMIT.split("/")[0])
    payload = {"query": "{ ping { status } }"}
    statuses = [
        (await post_graphql(test_client, payload)).status_code
        for _ in range(quota + 1)
    ]

    assert statuses[:quota] == [200] * quota
    assert statuses[quota] == 429


@pytest.mark.asyncio
async def test_rate_limit_counters_start_fresh_per_test(test_client: AsyncClient):
    response = await post_graphql(test_client, {"query": "{ ping { status } }"})

    assert_json_ok(response)
