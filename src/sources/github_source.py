# src/sources/github_source.py - v1
"""GitHub REST API content source (httpx).

Uses the recursive git tree endpoint for listings (one request for the
whole repository) and the contents endpoint for per-file fingerprints
(blob SHA) and base64 content. HTTP failures are mapped onto
ContentFetchError kinds; a 403 caused by an exhausted quota is reported
as RATE_LIMITED so the caller can suggest adding a token.
"""

from __future__ import annotations

import base64
import binascii
import logging
from typing import Any

import httpx

from docsync.core.errors import ContentFetchError, ContentFetchKind
from docsync.core.models import FileNode, Fingerprint, RepoRef
from docsync.sources.base_source import ContentSource

logger = logging.getLogger(__name__)

GITHUB_API_BASE = "https://api.github.com"

_RATE_LIMIT_MESSAGE = (
    "GitHub API rate limit exceeded. Add a token to raise the limit "
    "(60 -> 5000 requests/hour)."
)


class GitHubSource(ContentSource):
    """Files of one GitHub repository branch.

    Args:
        repo: Owner/repository.
        token: Optional personal access token.
        branch: Branch to read; the repository's default branch when None.
        api_base: API root (override for GitHub Enterprise).
        timeout_s: Per-request timeout.
        client: Pre-built httpx.AsyncClient (tests inject a MockTransport).
    """

    def __init__(
        self,
        repo: RepoRef,
        token: str = "",
        branch: str | None = None,
        api_base: str = GITHUB_API_BASE,
        timeout_s: float = 30.0,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self._repo = repo
        self._branch = branch
        self._api_base = api_base.rstrip("/")
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(timeout=timeout_s)
        self._headers = {
            "Accept": "application/vnd.github.v3+json",
            "X-GitHub-Api-Version": "2022-11-28",
        }
        if token:
            self._headers["Authorization"] = f"Bearer {token}"

    @property
    def name(self) -> str:
        return self._repo.slug

    async def __aenter__(self) -> GitHubSource:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    # ------------------------------------------------------------------
    # Repository level
    # ------------------------------------------------------------------

    async def fetch_repo_details(self) -> dict[str, Any]:
        """GET /repos/{owner}/{repo}."""
        return await self._get_json(f"/repos/{self._repo.slug}", target=self._repo.slug)

    async def resolve_branch(self) -> str:
        """Return the configured branch, looking up the default branch once."""
        if self._branch is None:
            details = await self.fetch_repo_details()
            self._branch = details.get("default_branch") or "main"
            logger.debug("Default branch of %s is %s", self._repo.slug, self._branch)
        return self._branch

    async def list_files(self) -> list[FileNode]:
        branch = await self.resolve_branch()
        data = await self._get_json(
            f"/repos/{self._repo.slug}/git/trees/{branch}",
            params={"recursive": "1"},
            target=self._repo.slug,
        )
        tree = data.get("tree")
        if not isinstance(tree, list):
            return []
        if data.get("truncated"):
            logger.warning("Tree listing for %s was truncated by GitHub", self._repo.slug)

        nodes = []
        for item in tree:
            path = item.get("path", "")
            if not path:
                continue
            nodes.append(
                FileNode(
                    name=path.rsplit("/", 1)[-1],
                    path=path,
                    type="file" if item.get("type") == "blob" else "dir",
                    sha=item.get("sha", ""),
                )
            )
        return nodes

    # ------------------------------------------------------------------
    # File level
    # ------------------------------------------------------------------

    async def fetch_fingerprint(self, path: str) -> Fingerprint:
        data = await self._get_file_payload(path)
        sha = data.get("sha")
        if not sha:
            raise ContentFetchError(
                ContentFetchKind.UNAVAILABLE, "contents response carried no sha", path=path,
            )
        return sha

    async def fetch_content(self, path: str) -> str:
        data = await self._get_file_payload(path)
        if data.get("encoding") != "base64" or "content" not in data:
            raise ContentFetchError(
                ContentFetchKind.UNAVAILABLE,
                "could not decode file content: encoding not supported or content missing",
                path=path,
            )
        try:
            raw = base64.b64decode(data["content"].replace("\n", ""))
        except (binascii.Error, ValueError) as exc:
            raise ContentFetchError(
                ContentFetchKind.UNAVAILABLE, f"invalid base64 content: {exc}", path=path,
            ) from exc
        return raw.decode("utf-8", errors="replace")

    async def _get_file_payload(self, path: str) -> dict[str, Any]:
        params = {"ref": self._branch} if self._branch else None
        data = await self._get_json(
            f"/repos/{self._repo.slug}/contents/{path.lstrip('/')}",
            params=params,
            target=path,
        )
        if not isinstance(data, dict) or data.get("type", "file") != "file":
            raise ContentFetchError(ContentFetchKind.NOT_FOUND, "path is not a file", path=path)
        return data

    # ------------------------------------------------------------------
    # HTTP
    # ------------------------------------------------------------------

    async def _get_json(
        self,
        endpoint: str,
        target: str,
        params: dict[str, str] | None = None,
    ) -> Any:
        url = f"{self._api_base}{endpoint}"
        try:
            response = await self._client.get(url, headers=self._headers, params=params)
        except httpx.HTTPError as exc:
            logger.warning("GitHub request failed for %s: %s", target, exc)
            raise ContentFetchError(
                ContentFetchKind.UNAVAILABLE, f"request failed: {exc}", path=target,
            ) from exc

        if response.status_code >= 400:
            raise map_http_error(response, target)

        try:
            return response.json()
        except ValueError as exc:
            raise ContentFetchError(
                ContentFetchKind.UNAVAILABLE, "response was not JSON", path=target,
            ) from exc


def map_http_error(response: httpx.Response, target: str) -> ContentFetchError:
    """Translate a failed GitHub response into a ContentFetchError."""
    status = response.status_code
    message = f"GitHub API error: {status} {response.reason_phrase}"
    try:
        api_message = response.json().get("message", "")
    except (ValueError, AttributeError):
        api_message = ""

    if status == 429 or (
        status == 403
        and (
            response.headers.get("x-ratelimit-remaining") == "0"
            or "rate limit" in api_message.lower()
        )
    ):
        return ContentFetchError(ContentFetchKind.RATE_LIMITED, _RATE_LIMIT_MESSAGE, path=target)
    if status == 404:
        return ContentFetchError(
            ContentFetchKind.NOT_FOUND,
            "repository or file not found; check the URL and that the repository is public",
            path=target,
        )
    if status in (401, 403):
        return ContentFetchError(
            ContentFetchKind.UNAUTHORIZED,
            api_message or "unauthorized; check the token permissions",
            path=target,
        )
    return ContentFetchError(ContentFetchKind.UNAVAILABLE, api_message or message, path=target)
