"""Unit tests for the PostgREST client, using httpx.MockTransport."""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import httpx
import pytest
from app.services.backend_client import BackendClient, BackendError, build_params


def make_client(handler):
    return BackendClient("https://example.test/rest/v1", {"apikey": "k"}, transport=httpx.MockTransport(handler))


class TestBuildParams:
    def test_filters_order_and_paging(self):
        params = build_params(
            "id, zona",
            filters=[("activa", "eq", True), ("mesa_id", "is", None), ("estado", "in", ("a", "b"))],
            order=[("fecha", False), ("hora", True)],
            limit=10, offset=20,
        )
        assert params == [
            ("select", "id,zona"),
            ("activa", "eq.true"),
            ("mesa_id", "is.null"),
            ("estado", 'in.("a","b")'),
            ("order", "fecha.desc,hora.asc"),
            ("limit", "10"),
            ("offset", "20"),
        ]

    def test_unknown_operator(self):
        with pytest.raises(ValueError):
            build_params(filters=[("x", "like", "y")])


class TestBackendClient:
    @pytest.mark.asyncio
    async def test_select_returns_rows(self):
        seen = {}

        def handler(request):
            seen["url"] = request.url
            seen["apikey"] = request.headers.get("apikey")
            return httpx.Response(200, json=[{"id": "m1"}])

        client = make_client(handler)
        rows = await client.select("mesas", filters=[("activa", "eq", True)])
        await client.close()

        assert rows == [{"id": "m1"}]
        assert seen["url"].path == "/rest/v1/mesas"
        assert seen["url"].params["activa"] == "eq.true"
        assert seen["apikey"] == "k"

    @pytest.mark.asyncio
    async def test_single_sets_object_accept(self):
        def handler(request):
            assert request.headers["accept"] == "application/vnd.pgrst.object+json"
            return httpx.Response(200, json={"id": "r1"})

        client = make_client(handler)
        assert await client.select("reservas", filters=[("id", "eq", "r1")], single=True) == {"id": "r1"}
        await client.close()

    @pytest.mark.asyncio
    async def test_rpc_posts_params(self):
        def handler(request):
            assert request.method == "POST"
            assert request.url.path == "/rest/v1/rpc/verificar_disponibilidad_mesa"
            return httpx.Response(200, json=True)

        client = make_client(handler)
        assert await client.rpc("verificar_disponibilidad_mesa", {"p_fecha": "2026-10-19"}) is True
        await client.close()

    @pytest.mark.asyncio
    async def test_error_body_becomes_backend_error(self):
        def handler(request):
            return httpx.Response(409, json={"code": "23505", "message": "duplicate key value",
                                             "details": "Key (email) exists", "hint": None})

        client = make_client(handler)
        with pytest.raises(BackendError) as exc_info:
            await client.insert("contacts", {"email": "a@x.es"})
        await client.close()

        err = exc_info.value
        assert err.code == "23505"
        assert err.status_code == 409
        assert err.details == "Key (email) exists"
        assert err.friendly_message == "A record with these details already exists"

    @pytest.mark.asyncio
    async def test_network_failure_becomes_backend_error(self):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        client = make_client(handler)
        with pytest.raises(BackendError):
            await client.select("mesas")
        assert await client.ping() is False
        await client.close()

    @pytest.mark.asyncio
    async def test_delete_no_content(self):
        client = make_client(lambda request: httpx.Response(204))
        assert await client.delete("reservas", [("id", "eq", "r1")]) is None
        await client.close()
