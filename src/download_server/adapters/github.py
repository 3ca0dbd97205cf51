"""GitHub contents API client - the transport under the GitHub document store."""
import base64
import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional

import requests

from download_server.errors import RevisionConflictError, UpstreamError

logger = logging.getLogger(__name__)

DEFAULT_API_URL = "https://api.github.com"


@dataclass
class RemoteContent:
    """Decoded body of a repository file plus its blob sha (the revision token)."""
    data: bytes
    sha: str


class GitHubContentsClient:
    """Thin `requests` wrapper around `/repos/{owner}/{repo}/contents/{path}`."""

    def __init__(
        self,
        owner: str,
        repo: str,
        token: Optional[str] = None,
        api_url: str = DEFAULT_API_URL,
        branch: Optional[str] = None,
        timeout: float = 30.0,
        session: Optional[requests.Session] = None,
    ):
        """Initialize the client.

        Args:
            owner: Repository owner (user or organisation)
            repo: Repository name
            token: Access token; requests are anonymous without one
            api_url: API base URL, overridable for GitHub Enterprise
            branch: Branch to read from and commit to (repository default if None)
            timeout: Request timeout in seconds
            session: Optional pre-built session, mainly for tests
        """
        self.owner = owner
        self.repo = repo
        self.branch = branch
        self.timeout = timeout
        self.base_url = f"{api_url.rstrip('/')}/repos/{owner}/{repo}/contents"
        self.session = session or requests.Session()
        self.session.headers.update({
            "Accept": "application/vnd.github.v3+json",
            "Content-Type": "application/json",
        })
        if token:
            self.session.headers["Authorization"] = f"token {token}"

        logger.info(f"GitHubContentsClient initialized for {owner}/{repo}")

    def _url(self, path: str) -> str:
        return f"{self.base_url}/{path.lstrip('/')}"

    def _request(self, method: str, path: str, **kwargs) -> requests.Response:
        try:
            return self.session.request(method, self._url(path), timeout=self.timeout, **kwargs)
        except requests.RequestException as e:
            logger.error(f"{method} {path} failed: {e}")
            raise UpstreamError(f"Cannot reach GitHub: {e}", error=str(e)) from e

    @staticmethod
    def _error_text(response: requests.Response) -> str:
        try:
            return response.json().get("message", response.text)
        except ValueError:
            return response.text

    def _fetch(self, path: str) -> Optional[Dict[str, Any]]:
        params = {"ref": self.branch} if self.branch else None
        response = self._request("GET", path, params=params)
        if response.status_code == 404:
            return None
        if not response.ok:
            text = self._error_text(response)
            logger.error(f"Reading {path} failed with {response.status_code}: {text}")
            raise UpstreamError(
                f"GitHub returned {response.status_code} for {path}",
                error=f"Request failed with status code {response.status_code}: {text}",
            )
        return response.json()

    def get_content(self, path: str) -> Optional[RemoteContent]:
        """Fetch and base64-decode a file. Returns None when it does not exist."""
        payload = self._fetch(path)
        if payload is None:
            logger.debug(f"{path} does not exist in {self.owner}/{self.repo}")
            return None
        if isinstance(payload, list):
            raise UpstreamError(f"{path} is a directory, not a file")
        data = base64.b64decode(payload.get("content") or "")
        return RemoteContent(data=data, sha=payload["sha"])

    def get_revision(self, path: str) -> Optional[str]:
        """Current blob sha of a file, or None when it does not exist."""
        payload = self._fetch(path)
        if payload is None or isinstance(payload, list):
            return None
        return payload.get("sha")

    def put_content(self, path: str, data: bytes, revision: Optional[str], message: str) -> str:
        """Create or update a file.

        With `revision` set, GitHub only accepts the write if the file is still at
        that sha. Without it, the file must not exist yet.

        Returns:
            The sha of the newly written blob
        """
        body: Dict[str, Any] = {
            "message": message,
            "content": base64.b64encode(data).decode("ascii"),
        }
        if revision:
            body["sha"] = revision
        if self.branch:
            body["branch"] = self.branch

        response = self._request("PUT", path, json=body)
        if response.ok:
            return response.json()["content"]["sha"]

        text = self._error_text(response)
        logger.error(f"Writing {path} failed with {response.status_code}: {text}")
        error = f"Request failed with status code {response.status_code}: {text}"
        if response.status_code == 409 or (response.status_code == 422 and "sha" in text):
            raise RevisionConflictError(f"{path} was modified concurrently", error=error)
        raise UpstreamError(f"GitHub rejected the write to {path}", error=error)
