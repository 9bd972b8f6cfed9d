import os
from dataclasses import dataclass, field
from typing import Optional, Tuple
from dotenv import load_dotenv

# Load .env file only in development environment
if os.getenv("ENVIRONMENT", "development") == "development":
    load_dotenv()  # Load environment variables from .env file

# API endpoints
POOLS_API_URL = os.getenv("POOLS_API_URL", "https://dex.warlock.backbonelabs.io/api/pools/phoenix-1")
VOTION_API_BASE = os.getenv("VOTION_API_BASE", "https://backend.erisprotocol.com/votion/liquidity-alliance")

# GitHub publishing
GITHUB_TOKEN = os.getenv("GITHUB_TOKEN")
GITHUB_REPO = os.getenv("GITHUB_REPO", "defipatriot/ss-pool-data_2026")
VOTION_GITHUB_REPO = os.getenv("VOTION_GITHUB_REPO", os.getenv("GITHUB_REPO", "defipatriot/tla-ext_json_storage"))
GITHUB_BRANCH = os.getenv("GITHUB_BRANCH", "main")

# Other Configurations
DATA_ROOT = os.getenv("DATA_ROOT", ".")
HTTP_TIMEOUT = float(os.getenv("HTTP_TIMEOUT", "30"))
LOG_FORMAT = os.getenv("LOG_FORMAT", "json")


@dataclass(frozen=True)
class Lockup:
    id: str
    type: str
    duration: str
    multiplier: int


LOCKUPS: Tuple[Lockup, ...] = (
    Lockup("arbluna-max", "arbLUNA", "Max", 10),
    Lockup("ampluna-max", "ampLUNA", "Max", 10),
    Lockup("arbluna-12", "arbLUNA", "3mo", 2),
    Lockup("ampluna-12", "ampLUNA", "3mo", 2),
    Lockup("arbluna-1", "arbLUNA", "1wk", 1),
    Lockup("ampluna-1", "ampLUNA", "1wk", 1),
)


@dataclass(frozen=True)
class Settings:
    """Process-wide configuration, built once at startup and passed to every driver."""
    pools_api_url: str = POOLS_API_URL
    votion_api_base: str = VOTION_API_BASE
    github_token: Optional[str] = None
    github_repo: str = GITHUB_REPO
    votion_github_repo: str = VOTION_GITHUB_REPO
    github_branch: str = GITHUB_BRANCH
    data_root: str = DATA_ROOT
    http_timeout: float = HTTP_TIMEOUT
    log_format: str = LOG_FORMAT
    lockups: Tuple[Lockup, ...] = field(default=LOCKUPS)


def load_settings() -> Settings:
    return Settings(
        pools_api_url=POOLS_API_URL,
        votion_api_base=VOTION_API_BASE,
        github_token=GITHUB_TOKEN or None,
        github_repo=GITHUB_REPO,
        votion_github_repo=VOTION_GITHUB_REPO,
        github_branch=GITHUB_BRANCH,
        data_root=DATA_ROOT,
        http_timeout=HTTP_TIMEOUT,
        log_format=LOG_FORMAT,
        lockups=LOCKUPS,
    )
