"""可观测性测试

测试内容：
1. HTTP 请求含 X-Request-ID 响应头
2. 不同请求的 request_id 互不相同
3. 身份接口返回稳定值
"""

from httpx import AsyncClient


class TestObservability:
    async def test_request_id_in_response_header(self, client: AsyncClient):
        """每个请求响应包含 X-Request-ID"""
        resp = await client.get("/api/tasks")
        assert resp.status_code == 200
        assert "x-request-id" in resp.headers
        # ULID 格式：26 字符
        assert len(resp.headers["x-request-id"]) == 26

    async def test_request_ids_are_unique(self, client: AsyncClient):
        """不同请求有不同的 request_id"""
        ids = set()
        for _ in range(3):
            resp = await client.get("/health")
            ids.add(resp.headers["x-request-id"])
        assert len(ids) == 3

    async def test_error_response_has_request_id(self, client: AsyncClient):
        resp = await client.delete("/api/tasks/missing")
        assert resp.status_code == 404
        assert "x-request-id" in resp.headers

    async def test_identity_is_stable(self, client: AsyncClient):
        first = (await client.get("/api/identity")).json()["user_id"]
        second = (await client.get("/api/identity")).json()["user_id"]
        assert first
        assert first == second
