import base64
import logging
import requests
from typing import Any, Dict, Optional, Tuple

from api_clients.exceptions import PublishError

logger = logging.getLogger(__name__)

BASE_URL = "https://api.github.com"


class GitHubContentsClient:
    """
    Minimal client for the GitHub repository contents API.
    Used to create or update a single file with one commit.
    """

    def __init__(self, token: str, repo: str, branch: str = "main", timeout: float = 30):
        self.token = token
        self.repo = repo
        self.branch = branch
        self.timeout = timeout

    @property
    def headers(self) -> Dict[str, str]:
        return {
            'Authorization': f"token {self.token}",
            'User-Agent': 'Votion-Snapshot-Bot',
            'Accept': 'application/vnd.github.v3+json',
            'Content-Type': 'application/json',
        }

    def contents_url(self, path: str) -> str:
        return f"{BASE_URL}/repos/{self.repo}/contents/{path}"

    def _request(self, method: str, path: str, body: Optional[Dict[str, Any]] = None) -> Tuple[int, Dict[str, Any]]:
        try:
            response = requests.request(method, self.contents_url(path), headers=self.headers, json=body, timeout=self.timeout)
        except requests.exceptions.RequestException as e:
            raise PublishError(f"GitHub {method} {path} failed: {e}") from e
        try:
            data = response.json() if response.content else {}
        except ValueError:
            data = {}
        return response.status_code, data if isinstance(data, dict) else {}

    def get_sha(self, path: str) -> Optional[str]:
        """Blob sha of the existing file at ``path``, or None if it does not exist yet."""
        status, data = self._request('GET', path)
        if status == 200:
            return data.get('sha')
        return None

    def put_file(self, path: str, content: str, message: str) -> int:
        """Create or update ``path``; the existing sha is sent when the file is already present."""
        body = {
            'message': message,
            'content': base64.b64encode(content.encode('utf-8')).decode('ascii'),
            'branch': self.branch,
        }
        sha = self.get_sha(path)
        if sha:
            body['sha'] = sha

        status, data = self._request('PUT', path, body)
        if status not in (200, 201):
            raise PublishError(f"GitHub push failed: {status} {data.get('message', '')}".strip())
        logger.info(f"✅ Pushed to GitHub: {path}")
        return status
