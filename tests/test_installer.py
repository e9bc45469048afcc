"""
Tests for the tool installer: consent, install flow, failures and the
package manager bootstrap.
"""

import pytest

from src.adapters.mock import MockPackageManager
from src.adapters.registry import PackageManagerRegistry
from src.adapters.shell.command import CommandResult
from src.core.data.tools import HOMEBREW_INSTALL_URL, TOOL_REQUIREMENTS
from src.core.errors import InstallationError, MissingDependencyError
from src.core.services.installer import bootstrap_package_manager, ensure_tools, install_tool
from src.core.services.prompts import ConsentPolicy, is_affirmative, make_confirm


def yes(message: str) -> bool:
    return True


def no(message: str) -> bool:
    return False


class Recorder:
    """A confirm callable that remembers every question."""

    def __init__(self, answer: bool):
        self.answer = answer
        self.questions: list[str] = []

    def __call__(self, message: str) -> bool:
        self.questions.append(message)
        return self.answer


def _registry(*managers) -> PackageManagerRegistry:
    registry = PackageManagerRegistry()
    for manager in managers:
        registry.register(manager)
    return registry


# ── Prompts ──────────────────────────────────────────────────────────


class TestConsent:
    @pytest.mark.parametrize("answer", ["y", "Y", "yes", " YES "])
    def test_affirmative(self, answer):
        assert is_affirmative(answer)

    @pytest.mark.parametrize("answer", ["", "n", "no", "yep", "sure", None])
    def test_everything_else_declines(self, answer):
        assert not is_affirmative(answer)

    def test_unattended_policies(self):
        assert make_confirm(ConsentPolicy.ACCEPT)("Install git?") is True
        assert make_confirm(ConsentPolicy.DECLINE)("Install git?") is False


# ── install_tool ─────────────────────────────────────────────────────


class TestInstallTool:
    def test_present_does_nothing(self, fake_system):
        fake_system.add("git")
        manager = MockPackageManager("apt")
        confirm = Recorder(True)
        outcome = install_tool(TOOL_REQUIREMENTS["git"], manager, confirm)
        assert outcome.status == "present"
        assert outcome.path == "/usr/bin/git"
        assert confirm.questions == []
        assert manager.call_count == 0

    def test_declined(self, fake_system):
        manager = MockPackageManager("apt")
        outcome = install_tool(TOOL_REQUIREMENTS["zsh"], manager, no)
        assert outcome.status == "declined"
        assert not outcome.satisfied
        assert manager.call_count == 0

    def test_installed_after_consent(self, fake_system):
        manager = MockPackageManager("apt", on_install=lambda pkg: fake_system.add(pkg))
        confirm = Recorder(True)
        outcome = install_tool(TOOL_REQUIREMENTS["zsh"], manager, confirm)
        assert outcome.status == "installed"
        assert manager.installed == ["zsh"]
        assert confirm.questions == ["Install Zsh with apt?"]

    def test_still_missing_after_install_fails(self, fake_system):
        manager = MockPackageManager("apt")
        outcome = install_tool(TOOL_REQUIREMENTS["git"], manager, yes)
        assert outcome.status == "failed"
        assert "still not found" in outcome.reason
        assert outcome.remediation == TOOL_REQUIREMENTS["git"].docs_url

    def test_install_command_failure(self, fake_system):
        manager = MockPackageManager("apt")
        manager.set_failure("git", "E: Unable to locate package git")
        outcome = install_tool(TOOL_REQUIREMENTS["git"], manager, yes)
        assert outcome.status == "failed"
        assert outcome.reason == "E: Unable to locate package git"

    def test_no_manager_is_unavailable_without_prompt(self, fake_system):
        confirm = Recorder(True)
        outcome = install_tool(TOOL_REQUIREMENTS["git"], None, confirm)
        assert outcome.status == "unavailable"
        assert confirm.questions == []

    def test_installed_next_to_manager(self, fake_system):
        # A user-level manager's bin dir is not on PATH yet
        manager = MockPackageManager("brew", on_install=lambda pkg: fake_system.add(pkg, "/mock/bin"))
        outcome = install_tool(TOOL_REQUIREMENTS["zsh"], manager, yes)
        assert outcome.status == "installed"
        assert outcome.path == "/mock/bin/zsh"


# ── bootstrap_package_manager ────────────────────────────────────────


class TestBootstrapPackageManager:
    req = TOOL_REQUIREMENTS["package-manager"]

    def test_fetches_over_https_and_runs(self, fake_system):
        curl = fake_system.add("curl")
        bash = fake_system.add("bash", "/bin")
        fake_system.on(["curl"], stdout="#!/bin/bash\necho installing\n")
        brew = MockPackageManager("brew", available=False)

        def installed(argv):
            brew._available = True
            return CommandResult(argv, 0)

        fake_system.on(["bash", "-c"], installed)

        outcome, manager = bootstrap_package_manager(self.req, _registry(brew), yes)

        assert outcome.status == "installed"
        assert manager is brew
        assert fake_system.calls[0] == [
            curl, "--proto", "=https", "--tlsv1.2", "-fsSL", HOMEBREW_INSTALL_URL,
        ]
        assert fake_system.calls[1] == [bash, "-c", "#!/bin/bash\necho installing\n"]

    def test_declined(self, fake_system):
        fake_system.add("curl")
        outcome, manager = bootstrap_package_manager(
            self.req, _registry(MockPackageManager("brew", available=False)), no,
        )
        assert outcome.status == "declined"
        assert manager is None
        assert fake_system.calls == []

    def test_requires_curl(self, fake_system):
        confirm = Recorder(True)
        outcome, _ = bootstrap_package_manager(
            self.req, _registry(MockPackageManager("brew", available=False)), confirm,
        )
        assert outcome.status == "unavailable"
        assert "curl" in outcome.reason
        assert confirm.questions == []

    def test_download_failure_not_retried(self, fake_system):
        fake_system.add("curl")
        fake_system.on(["curl"], returncode=22, stderr="curl: (22) 404")
        outcome, _ = bootstrap_package_manager(
            self.req, _registry(MockPackageManager("brew", available=False)), yes,
        )
        assert outcome.status == "failed"
        assert "404" in outcome.reason
        assert len(fake_system.calls) == 1

    def test_installer_failure(self, fake_system):
        fake_system.add("curl")
        fake_system.on(["curl"], stdout="exit 1\n")
        fake_system.on(["bash"], returncode=1)
        outcome, manager = bootstrap_package_manager(
            self.req, _registry(MockPackageManager("brew", available=False)), yes,
        )
        assert outcome.status == "failed"
        assert manager is None
        assert "code 1" in outcome.reason


# ── ensure_tools ─────────────────────────────────────────────────────


class TestEnsureTools:
    def test_all_present(self, fake_system, make_settings):
        for name in ("curl", "git", "zsh"):
            fake_system.add(name)
        report = ensure_tools(
            make_settings(package_managers=["apt"]), _registry(MockPackageManager("apt")), no,
        )
        assert report.manager == "apt"
        assert [o.status for o in report.outcomes] == ["present"] * 4
        assert all(r.skipped for r in report.receipts)

    def test_decline_everything_reports_each_tool(self, fake_system, make_settings):
        with pytest.raises(MissingDependencyError) as exc_info:
            ensure_tools(
                make_settings(package_managers=["apt"]), _registry(MockPackageManager("apt")), no,
            )
        error = exc_info.value
        assert set(error.missing) == {"curl", "git", "zsh"}
        assert error.kind == "missing-dependency"
        assert "git: installation declined" in str(error)
        assert len(error.receipts) == 4

    def test_installs_in_order(self, fake_system, make_settings):
        apt = MockPackageManager("apt", on_install=lambda pkg: fake_system.add(pkg))
        report = ensure_tools(make_settings(package_managers=["apt"]), _registry(apt), yes)
        assert apt.installed == ["curl", "git", "zsh"]
        assert report.missing == {}

    def test_failed_install_is_installation_error(self, fake_system, make_settings):
        fake_system.add("curl")
        fake_system.add("zsh")
        apt = MockPackageManager("apt")
        apt.set_failure("git", "E: broken")
        with pytest.raises(InstallationError) as exc_info:
            ensure_tools(make_settings(package_managers=["apt"]), _registry(apt), yes)
        assert exc_info.value.kind == "installation-failure"
        assert "git" in str(exc_info.value)
        assert exc_info.value.remediation == TOOL_REQUIREMENTS["git"].docs_url

    def test_no_manager_declined_bootstrap(self, fake_system, make_settings):
        fake_system.add("curl")
        with pytest.raises(MissingDependencyError) as exc_info:
            ensure_tools(
                make_settings(package_managers=["brew"]),
                _registry(MockPackageManager("brew", available=False)),
                no,
            )
        missing = exc_info.value.missing
        assert missing["package-manager"] == "installation declined"
        assert "no supported package manager" in missing["git"]

    def test_bootstrapped_manager_installs_the_rest(self, fake_system, make_settings):
        fake_system.add("curl")
        fake_system.on(["curl"], stdout="echo brew\n")
        brew = MockPackageManager(
            "brew", available=False, on_install=lambda pkg: fake_system.add(pkg, "/mock/bin"),
        )

        def installed(argv):
            brew._available = True
            return CommandResult(argv, 0)

        fake_system.on(["bash"], installed)

        report = ensure_tools(make_settings(package_managers=["brew"]), _registry(brew), yes)

        assert report.manager == "brew"
        assert brew.installed == ["git", "zsh"]
        assert [o.status for o in report.outcomes] == ["present", "installed", "installed", "installed"]
