# tests/unit/sources/test_unit_github_source.py - v1
"""Tests for sources/github_source.py - GitHub REST source over httpx.MockTransport."""

from __future__ import annotations

import base64

import httpx
import pytest

from docsync.core.errors import ContentFetchError, ContentFetchKind
from docsync.core.models import RepoRef
from docsync.sources.github_source import GitHubSource, map_http_error

REPO = RepoRef(owner="octo", repo="hello")
SOURCE = "print('héllo')\n"


def _contents_payload(text: str = SOURCE, sha: str = "abc123") -> dict:
    encoded = base64.b64encode(text.encode("utf-8")).decode("ascii")
    # GitHub wraps base64 at 60 columns.
    wrapped = "\n".join(encoded[i : i + 60] for i in range(0, len(encoded), 60))
    return {"type": "file", "sha": sha, "encoding": "base64", "content": wrapped}


def _source(handler, **kwargs) -> GitHubSource:
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return GitHubSource(REPO, client=client, **kwargs)


class TestListFiles:
    @pytest.mark.asyncio
    async def test_resolves_default_branch_and_maps_tree(self):
        seen: list[str] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request.url.path)
            if request.url.path == "/repos/octo/hello":
                return httpx.Response(200, json={"default_branch": "develop"})
            assert request.url.params["recursive"] == "1"
            return httpx.Response(
                200,
                json={
                    "tree": [
                        {"path": "src", "type": "tree", "sha": "t1"},
                        {"path": "src/app.py", "type": "blob", "sha": "b1"},
                        {"path": "", "type": "blob"},
                    ]
                },
            )

        source = _source(handler)
        nodes = await source.list_files()
        assert seen == ["/repos/octo/hello", "/repos/octo/hello/git/trees/develop"]
        assert [(n.path, n.type, n.sha) for n in nodes] == [("src", "dir", "t1"), ("src/app.py", "file", "b1")]
        assert nodes[1].name == "app.py"

    @pytest.mark.asyncio
    async def test_explicit_branch_skips_lookup(self):
        def handler(request: httpx.Request) -> httpx.Response:
            assert request.url.path == "/repos/octo/hello/git/trees/main"
            return httpx.Response(200, json={"tree": [], "truncated": True})

        assert await _source(handler, branch="main").list_files() == []

    @pytest.mark.asyncio
    async def test_missing_default_branch_falls_back_to_main(self):
        source = _source(lambda request: httpx.Response(200, json={}))
        assert await source.resolve_branch() == "main"


class TestFetchFile:
    @pytest.mark.asyncio
    async def test_fingerprint_is_blob_sha(self):
        def handler(request: httpx.Request) -> httpx.Response:
            assert request.url.path == "/repos/octo/hello/contents/src/app.py"
            assert "ref" not in request.url.params
            return httpx.Response(200, json=_contents_payload(sha="deadbeef"))

        assert await _source(handler).fetch_fingerprint("src/app.py") == "deadbeef"

    @pytest.mark.asyncio
    async def test_content_decoded(self):
        source = _source(lambda request: httpx.Response(200, json=_contents_payload()))
        assert await source.fetch_content("/src/app.py") == SOURCE

    @pytest.mark.asyncio
    async def test_branch_sent_as_ref(self):
        def handler(request: httpx.Request) -> httpx.Response:
            assert request.url.params["ref"] == "feature"
            return httpx.Response(200, json=_contents_payload())

        await _source(handler, branch="feature").fetch_content("src/app.py")

    @pytest.mark.asyncio
    async def test_token_header(self):
        def handler(request: httpx.Request) -> httpx.Response:
            assert request.headers["Authorization"] == "Bearer ghp_x"
            return httpx.Response(200, json=_contents_payload())

        await _source(handler, token="ghp_x").fetch_fingerprint("a.py")

    @pytest.mark.asyncio
    async def test_directory_is_not_found(self):
        source = _source(lambda request: httpx.Response(200, json=[{"name": "a.py"}]))
        with pytest.raises(ContentFetchError) as exc_info:
            await source.fetch_content("src")
        assert exc_info.value.kind is ContentFetchKind.NOT_FOUND

    @pytest.mark.asyncio
    async def test_unsupported_encoding(self):
        payload = {"type": "file", "sha": "x", "encoding": "none", "content": ""}
        source = _source(lambda request: httpx.Response(200, json=payload))
        with pytest.raises(ContentFetchError) as exc_info:
            await source.fetch_content("big.bin")
        assert exc_info.value.kind is ContentFetchKind.UNAVAILABLE

    @pytest.mark.asyncio
    async def test_transport_error(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        with pytest.raises(ContentFetchError) as exc_info:
            await _source(handler).fetch_fingerprint("a.py")
        assert exc_info.value.kind is ContentFetchKind.UNAVAILABLE
        assert exc_info.value.path == "a.py"

    @pytest.mark.asyncio
    async def test_http_error_mapped(self):
        source = _source(lambda request: httpx.Response(404, json={"message": "Not Found"}))
        with pytest.raises(ContentFetchError) as exc_info:
            await source.fetch_fingerprint("missing.py")
        assert exc_info.value.kind is ContentFetchKind.NOT_FOUND


class TestMapHttpError:
    @pytest.mark.parametrize(
        "status,headers,body,kind",
        [
            (429, {}, {}, ContentFetchKind.RATE_LIMITED),
            (403, {"x-ratelimit-remaining": "0"}, {}, ContentFetchKind.RATE_LIMITED),
            (403, {}, {"message": "API rate limit exceeded for 1.2.3.4"}, ContentFetchKind.RATE_LIMITED),
            (403, {"x-ratelimit-remaining": "42"}, {"message": "Resource not accessible"}, ContentFetchKind.UNAUTHORIZED),
            (401, {}, {"message": "Bad credentials"}, ContentFetchKind.UNAUTHORIZED),
            (404, {}, {"message": "Not Found"}, ContentFetchKind.NOT_FOUND),
            (500, {}, {}, ContentFetchKind.UNAVAILABLE),
            (502, {}, None, ContentFetchKind.UNAVAILABLE),
        ],
    )
    def test_mapping(self, status, headers, body, kind):
        kwargs = {"json": body} if body is not None else {"content": b"<html>bad gateway</html>"}
        response = httpx.Response(status, headers=headers, **kwargs)
        error = map_http_error(response, "src/a.py")
        assert error.kind is kind
        assert error.path == "src/a.py"

    def test_unauthorized_uses_api_message(self):
        error = map_http_error(httpx.Response(401, json={"message": "Bad credentials"}), "x")
        assert error.message == "Bad credentials"


class TestLifecycle:
    @pytest.mark.asyncio
    async def test_injected_client_not_closed(self):
        client = httpx.AsyncClient(transport=httpx.MockTransport(lambda r: httpx.Response(200, json={})))
        async with GitHubSource(REPO, client=client) as source:
            assert source.name == "octo/hello"
        assert not client.is_closed
        await client.aclose()

    @pytest.mark.asyncio
    async def test_owned_client_closed(self):
        source = GitHubSource(REPO)
        await source.aclose()
        assert source._client.is_closed
