import logging
import os
import shutil
import subprocess
from typing import Callable, List, Optional

from api_clients.exceptions import PublishError
from api_clients.github_client import GitHubContentsClient

logger = logging.getLogger(__name__)

BOT_EMAIL = "bot@alliancedao.com"
BOT_NAME = "Alliance DAO Bot"

# Paths staged on every pool snapshot commit
STAGED_PATTERNS = [
    "day-*.csv",
    "6-day-avg.csv",
    "data/*_backup/",
    "data/weekly-avg/",
    "data/monthly-avg/",
    "*-yearly.csv",
]


class GitPublisher:
    """
    Bulk publisher: commits the snapshot files in the data root and pushes
    them to a GitHub repository with the git CLI.

    Without a token every method logs and returns without touching git.
    """

    def __init__(self, token: Optional[str], repo: str, branch: str = "main", workdir: str = ".",
                 runner: Callable[..., subprocess.CompletedProcess] = subprocess.run):
        self.token = token
        self.repo = repo
        self.branch = branch
        self.workdir = workdir
        self._runner = runner

    @property
    def enabled(self) -> bool:
        return bool(self.token)

    @property
    def remote_url(self) -> str:
        return f"https://{self.token}@github.com/{self.repo}.git"

    def _redact(self, text: str) -> str:
        return text.replace(self.token, "***") if self.token else text

    def run(self, cmd: List[str], ignore_error: bool = False, cwd: Optional[str] = None) -> str:
        logger.info(f"> {self._redact(' '.join(cmd))}")
        try:
            result = self._runner(cmd, cwd=cwd or self.workdir, capture_output=True, text=True, check=True)
        except subprocess.CalledProcessError as e:
            message = self._redact((e.stderr or e.stdout or str(e)).strip())
            if ignore_error:
                logger.info(f"  (ignored: {message})")
                return ""
            raise PublishError(message) from e
        output = (result.stdout or "").strip()
        if output:
            logger.info(self._redact(output))
        return output

    def prepare(self) -> bool:
        """Sync the data root with the remote repository before a run writes into it."""
        if not self.enabled:
            logger.info("No GITHUB_TOKEN - running in local mode")
            return False

        logger.info(f"Setting up git for repo: {self.repo}")
        self.run(["git", "config", "--global", "user.email", BOT_EMAIL], ignore_error=True)
        self.run(["git", "config", "--global", "user.name", BOT_NAME], ignore_error=True)

        git_dir = os.path.join(self.workdir, ".git")
        if os.path.exists(git_dir):
            logger.info("Removing existing .git directory...")
            shutil.rmtree(git_dir, ignore_errors=True)

        clone_dir = os.path.join(self.workdir, "temp_repo")
        logger.info("Cloning repository...")
        try:
            self.run(["git", "clone", self.remote_url, "temp_repo"])
            shutil.copytree(clone_dir, self.workdir, dirs_exist_ok=True)
            logger.info("Repository cloned and files synced")
        except (PublishError, OSError) as e:
            logger.info(f"Clone failed ({e}), initializing new repo...")
            try:
                self.run(["git", "init"], ignore_error=True)
                self.run(["git", "remote", "add", "origin", self.remote_url])
                self.run(["git", "checkout", "-b", self.branch], ignore_error=True)
            except PublishError as init_error:
                logger.error(f"Git setup failed ({init_error}), continuing in local mode")
                return False
        finally:
            shutil.rmtree(clone_dir, ignore_errors=True)

        slots = [f for f in os.listdir(self.workdir) if f.startswith("day-") and f.endswith(".csv")]
        if slots:
            logger.info(f"Found {len(slots)} existing daily files")

        logger.info("Git setup complete")
        return True

    def publish(self, message: str) -> bool:
        """
        Stage, commit and push. Returns True when something was pushed.
        Publishing failures are logged and never raised.
        """
        if not self.enabled:
            logger.info("No GITHUB_TOKEN - skipping push")
            return False

        try:
            for pattern in STAGED_PATTERNS:
                self.run(["git", "add", "-f", pattern], ignore_error=True)

            try:
                self.run(["git", "commit", "-m", message])
            except PublishError:
                logger.info("Nothing new to commit")
                return False

            logger.info("Pushing to GitHub...")
            try:
                self.run(["git", "push", "origin", self.branch])
                logger.info("✓ Successfully pushed to GitHub!")
            except PublishError:
                logger.info("Normal push failed, trying force push...")
                self.run(["git", "push", "origin", self.branch, "--force"])
                logger.info("✓ Force pushed to GitHub!")
            return True
        except PublishError as e:
            logger.error(f"Git error: {e}")
            return False


class GitHubContentsPublisher:
    """Single-file publisher backed by the GitHub contents API."""

    def __init__(self, client: Optional[GitHubContentsClient]):
        self.client = client

    @property
    def enabled(self) -> bool:
        return self.client is not None and bool(self.client.token)

    def publish_file(self, path: str, content: str, message: str) -> bool:
        if not self.enabled:
            logger.info("GITHUB_TOKEN not set - skipping push")
            return False
        try:
            self.client.put_file(path, content, message)
            return True
        except PublishError as e:
            logger.error(f"❌ {e}")
            return False
