"""
Tests for detection: package manager choice, tool presence and versions.
"""

import logging

from src.adapters.mock import MockPackageManager
from src.adapters.registry import PackageManagerRegistry
from src.core.data.tools import TOOL_REQUIREMENTS
from src.core.services.detection import (
    detect_environment,
    detect_package_manager,
    find_executable,
    find_tool,
    get_tool_version,
    manager_bin_dir,
)
from src.core.use_cases.detect import run_detect


def _registry(*managers) -> PackageManagerRegistry:
    registry = PackageManagerRegistry()
    for manager in managers:
        registry.register(manager)
    return registry


class TestDetectPackageManager:
    def test_first_available(self):
        registry = _registry(
            MockPackageManager("brew", available=False),
            MockPackageManager("apt"),
        )
        assert detect_package_manager(registry, ["brew", "apt"]).name == "apt"

    def test_none_logs_warning(self, caplog):
        caplog.set_level(logging.WARNING)
        registry = _registry(MockPackageManager("apt", available=False))
        assert detect_package_manager(registry, ["apt"]) is None
        assert "No supported package manager" in caplog.text


class TestFindExecutable:
    def test_on_path(self, fake_system):
        fake_system.add("git")
        assert find_executable("git") == "/usr/bin/git"

    def test_absent(self, fake_system):
        assert find_executable("git") is None

    def test_falls_back_to_manager_bin_dir(self, fake_system):
        fake_system.add("zsh", "/mock/bin")
        assert find_executable("zsh", MockPackageManager()) == "/mock/bin/zsh"

    def test_manager_bin_dir(self):
        assert manager_bin_dir(MockPackageManager()) == "/mock/bin"
        assert manager_bin_dir(None) is None


class TestFindTool:
    def test_package_manager_requirement(self):
        req = TOOL_REQUIREMENTS["package-manager"]
        assert find_tool(req, MockPackageManager("apt")) == "/mock/bin/apt"
        assert find_tool(req, None) is None


class TestGetToolVersion:
    def test_parses_version(self, fake_system):
        fake_system.on(["git", "--version"], stdout="git version 2.43.0\n")
        assert get_tool_version(TOOL_REQUIREMENTS["git"], "/usr/bin/git") == "2.43.0"
        assert fake_system.calls == [["/usr/bin/git", "--version"]]

    def test_zsh_version(self, fake_system):
        fake_system.on(["zsh", "--version"], stdout="zsh 5.9 (x86_64-pc-linux-gnu)\n")
        assert get_tool_version(TOOL_REQUIREMENTS["zsh"], "/bin/zsh") == "5.9"

    def test_unparseable(self, fake_system):
        fake_system.on(["curl", "--version"], stdout="who knows\n")
        assert get_tool_version(TOOL_REQUIREMENTS["curl"], "/usr/bin/curl") is None

    def test_package_manager_version(self):
        req = TOOL_REQUIREMENTS["package-manager"]
        assert get_tool_version(req, None, MockPackageManager()) == "0.0.0-mock"


class TestDetectEnvironment:
    def test_report(self, fake_system, make_settings):
        fake_system.add("curl")
        fake_system.add("git")
        fake_system.on(["git", "--version"], stdout="git version 2.43.0\n")
        registry = _registry(MockPackageManager("apt"))

        report = detect_environment(make_settings(package_managers=["apt"]), registry)

        assert report.package_manager == "apt"
        assert report.missing == ["zsh"]
        git = next(t for t in report.tools if t.name == "git")
        assert git.present and git.version == "2.43.0"

    def test_nothing_installs(self, fake_system, make_settings):
        registry = _registry(MockPackageManager("apt"))
        detect_environment(make_settings(package_managers=["apt"]), registry)
        assert registry.get("apt").call_count == 0

    def test_run_detect_reports_links(self, fake_system, make_settings):
        result = run_detect(make_settings(package_managers=["apt"]), _registry(MockPackageManager("apt")))
        data = result.to_dict()
        assert data["detection"]["package_manager"] == "apt"
        assert list(data["links"].values()) == [False]

    def test_run_detect_without_manager(self, fake_system, make_settings):
        result = run_detect(make_settings(package_managers=["apt"]), PackageManagerRegistry())
        assert result.detection.package_manager is None
        assert set(result.to_dict()) == {"checkout", "links", "detection"}
