"""
Credential providers.

The server never implements a login flow of its own. A provider hands back
a bearer token obtained from an already-authenticated source; the API client
only consumes the result.
"""
import logging
import subprocess
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional

from .config import Settings, settings

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Credential:
    token: str
    authenticated: bool


class CredentialProvider(ABC):
    """A single trust source for GitHub tokens."""

    method: str = "unknown"
    login_hint: str = "Please configure a GitHub credential."

    @abstractmethod
    def get_credential(self) -> Optional[Credential]:
        """Return the current credential, or None when the source is unavailable."""


class GitHubCLICredentialProvider(CredentialProvider):
    """Delegates to the `gh` CLI (`gh auth token`)."""

    method = "github-cli"
    login_hint = "GitHub CLI is not authenticated. Please run: gh auth login"

    def __init__(self, gh_path: str = "gh", hostname: str = "github.com", timeout: float = 10.0):
        self.gh_path = gh_path
        self.hostname = hostname
        self.timeout = timeout

    def get_credential(self) -> Optional[Credential]:
        cmd = [self.gh_path, "auth", "token", "--hostname", self.hostname]
        try:
            proc = subprocess.run(
                cmd,
                capture_output=True,
                text=True,
                timeout=self.timeout,
                check=False,
            )
        except FileNotFoundError:
            logger.warning("GitHub CLI not found at %r", self.gh_path)
            return None
        except subprocess.TimeoutExpired:
            logger.warning("GitHub CLI timed out after %.0fs", self.timeout)
            return None

        token = (proc.stdout or "").strip()
        if proc.returncode != 0 or not token:
            logger.debug("gh auth token failed (exit %s): %s", proc.returncode, (proc.stderr or "").strip())
            return Credential(token="", authenticated=False)

        return Credential(token=token, authenticated=True)


class EnvCredentialProvider(CredentialProvider):
    """Token taken verbatim from configuration (GITHUB_TOKEN)."""

    method = "env"
    login_hint = "GITHUB_TOKEN is not set."

    def __init__(self, token: Optional[str] = None, config: Optional[Settings] = None):
        self._token = token if token is not None else (config or settings).github_token

    def get_credential(self) -> Optional[Credential]:
        token = self._token or ""
        return Credential(token=token, authenticated=bool(token))


def get_credential_provider(config: Optional[Settings] = None) -> CredentialProvider:
    """Build the provider selected by `credential_source`."""
    config = config or settings
    if config.credential_source == "env":
        return EnvCredentialProvider(config=config)
    return GitHubCLICredentialProvider(gh_path=config.gh_path, hostname=config.gh_hostname)
