"""Tests for credential providers."""
import subprocess
from unittest.mock import MagicMock, patch

from mcp_github.auth import (
    Credential,
    EnvCredentialProvider,
    GitHubCLICredentialProvider,
    get_credential_provider,
)
from mcp_github.config import Settings


def _completed(returncode=0, stdout="", stderr=""):
    proc = MagicMock(spec=subprocess.CompletedProcess)
    proc.returncode = returncode
    proc.stdout = stdout
    proc.stderr = stderr
    return proc


class TestGitHubCLICredentialProvider:
    def test_token_from_gh(self):
        with patch("mcp_github.auth.subprocess.run", return_value=_completed(stdout="gho_abc123\n")) as run:
            cred = GitHubCLICredentialProvider(gh_path="/usr/bin/gh").get_credential()

        assert cred == Credential(token="gho_abc123", authenticated=True)
        cmd = run.call_args.args[0]
        assert cmd == ["/usr/bin/gh", "auth", "token", "--hostname", "github.com"]

    def test_not_logged_in(self):
        proc = _completed(returncode=1, stderr="no oauth token found")
        with patch("mcp_github.auth.subprocess.run", return_value=proc):
            cred = GitHubCLICredentialProvider().get_credential()
        assert cred == Credential(token="", authenticated=False)

    def test_empty_output_is_unauthenticated(self):
        with patch("mcp_github.auth.subprocess.run", return_value=_completed(stdout="  \n")):
            assert GitHubCLICredentialProvider().get_credential().authenticated is False

    def test_gh_missing(self):
        with patch("mcp_github.auth.subprocess.run", side_effect=FileNotFoundError("gh")):
            assert GitHubCLICredentialProvider().get_credential() is None

    def test_gh_timeout(self):
        with patch(
            "mcp_github.auth.subprocess.run",
            side_effect=subprocess.TimeoutExpired(cmd="gh", timeout=10),
        ):
            assert GitHubCLICredentialProvider().get_credential() is None


class TestEnvCredentialProvider:
    def test_explicit_token(self):
        assert EnvCredentialProvider("tok").get_credential() == Credential("tok", True)

    def test_empty_token(self):
        assert EnvCredentialProvider("").get_credential().authenticated is False

    def test_token_from_given_config(self):
        provider = EnvCredentialProvider(config=Settings(github_token="from-config"))
        assert provider.get_credential() == Credential("from-config", True)

    def test_missing_token_is_unauthenticated(self):
        provider = EnvCredentialProvider(config=Settings(github_token=""))
        assert provider.get_credential() == Credential("", False)


class TestProviderSelection:
    def test_default_is_gh_cli(self):
        provider = get_credential_provider(Settings(credential_source="gh-cli", gh_hostname="ghe.example"))
        assert isinstance(provider, GitHubCLICredentialProvider)
        assert provider.hostname == "ghe.example"

    def test_env_source(self):
        provider = get_credential_provider(Settings(credential_source="env", github_token="t"))
        assert isinstance(provider, EnvCredentialProvider)
        assert provider.get_credential().token == "t"
