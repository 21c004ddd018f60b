"""Unit tests for the runtime resolver."""

import logging
import subprocess
from unittest.mock import MagicMock, patch

import pytest

from omo_installer.runtime import (
    MANAGER_PREFERENCE,
    MIN_NODE_VERSION,
    Arch,
    Decision,
    PackageManager,
    Platform,
    ResolutionFailure,
    RuntimeProbe,
    RuntimeResolver,
    decide,
    describe_remediation,
    parse_major_version,
)
from omo_installer.runtime.specs import BUN, NODE, NODE_GATED_MANAGERS


class TestParseMajorVersion:
    """Test version string parsing."""

    @pytest.mark.parametrize(
        "text, expected",
        [
            ("v20.11.0", 20),
            ("18.19.1", 18),
            ("v22", 22),
            ("  v16.20.2\n", 16),
        ],
    )
    def test_valid_versions(self, text, expected):
        """Should take the numeric prefix before the first dot."""
        assert parse_major_version(text) == expected

    @pytest.mark.parametrize(
        "text",
        ["", None, "garbage", "vX.1.2", "node: not found", "-1.2.3", "v².1.0", "١٢.0"],
    )
    def test_malformed_versions_yield_zero(self, text):
        """Should return 0 instead of raising on malformed input."""
        assert parse_major_version(text) == 0


class TestManagerPreference:
    """Test the per-platform preference table."""

    def test_posix_platforms_prefer_bun(self):
        for platform in (Platform.LINUX, Platform.MACOS, Platform.UNKNOWN):
            assert MANAGER_PREFERENCE[platform][0] is PackageManager.BUN

    def test_windows_prefers_npm_and_puts_bun_last(self):
        order = MANAGER_PREFERENCE[Platform.WINDOWS]
        assert order[0] is PackageManager.NPM
        assert order[-1] is PackageManager.BUN

    def test_every_platform_has_an_order(self):
        assert set(MANAGER_PREFERENCE) == set(Platform)

    def test_only_bun_skips_the_node_gate(self):
        for order in MANAGER_PREFERENCE.values():
            ungated = [manager for manager in order if manager not in NODE_GATED_MANAGERS]
            assert ungated == [PackageManager.BUN]


class TestDecideNonWindows:
    """Test decisions on Linux and macOS."""

    @pytest.mark.parametrize("platform", [Platform.LINUX, Platform.MACOS])
    @pytest.mark.parametrize(
        "has_node, node_major",
        [(False, 0), (True, 12), (True, 20)],
    )
    def test_bun_selected_regardless_of_node(self, make_probe, platform, has_node, node_major):
        """Bun should win on non-Windows platforms whatever node looks like."""
        probe = make_probe(
            has_node=has_node,
            node_major_version=node_major,
            has_bun=True,
            platform=platform,
        )

        decision = decide(probe, platform)

        assert decision.selected_manager is PackageManager.BUN
        assert decision.resolved

    def test_npm_at_minimum_version(self, make_probe):
        """Node 18 with npm should select npm."""
        probe = make_probe(node_major_version=MIN_NODE_VERSION, managers=[PackageManager.NPM])

        decision = decide(probe, Platform.LINUX)

        assert decision.selected_manager is PackageManager.NPM
        assert decision.meets_minimum_version is True
        assert decision.failure is None

    def test_first_present_manager_wins(self, make_probe):
        """Without bun, the first of npm, pnpm, yarn should be picked."""
        probe = make_probe(managers=[PackageManager.YARN, PackageManager.PNPM])

        decision = decide(probe, Platform.MACOS)

        assert decision.selected_manager is PackageManager.PNPM

    def test_node_below_minimum(self, make_probe):
        """Old node without bun should be unresolved with a version reason."""
        probe = make_probe(node_major_version=16, managers=[PackageManager.NPM])

        decision = decide(probe, Platform.LINUX)

        assert decision.selected_manager is PackageManager.NONE
        assert decision.meets_minimum_version is False
        assert decision.reason == "node version 16 below minimum 18"
        assert decision.failure is ResolutionFailure.VERSION_BELOW_MINIMUM

    def test_no_runtime(self, make_probe):
        probe = make_probe(has_node=False, managers=[])

        decision = decide(probe, Platform.LINUX)

        assert decision.selected_manager is PackageManager.NONE
        assert decision.failure is ResolutionFailure.NO_RUNTIME
        assert "no JavaScript runtime" in decision.reason

    def test_no_runtime_takes_priority_over_missing_manager(self, make_probe):
        """A stray npm without node still reports the missing runtime."""
        probe = make_probe(has_node=False, managers=[PackageManager.NPM])

        decision = decide(probe, Platform.LINUX)

        assert decision.failure is ResolutionFailure.NO_RUNTIME

    def test_no_manager(self, make_probe):
        probe = make_probe(node_major_version=20, managers=[])

        decision = decide(probe, Platform.LINUX)

        assert decision.selected_manager is PackageManager.NONE
        assert decision.failure is ResolutionFailure.NO_MANAGER
        assert decision.reason == "no package manager found"
        assert decision.meets_minimum_version is True

    def test_platform_defaults_to_probe_platform(self, make_probe):
        probe = make_probe(has_bun=True, platform=Platform.WINDOWS)

        assert decide(probe).selected_manager is PackageManager.NPM


class TestDecideWindows:
    """Test decisions on Windows."""

    def test_npm_preferred_over_bun(self):
        """Preference order comes from the platform, not the probe order."""
        probe = RuntimeProbe(
            has_node=True,
            node_major_version=20,
            has_bun=True,
            bun_version="1.1.0",
            available_managers=(PackageManager.BUN, PackageManager.YARN, PackageManager.NPM),
            platform=Platform.WINDOWS,
            arch=Arch.X64,
        )

        decision = decide(probe, Platform.WINDOWS)

        assert decision.selected_manager is PackageManager.NPM

    def test_pnpm_then_yarn(self, make_probe):
        probe = make_probe(
            managers=[PackageManager.YARN, PackageManager.PNPM],
            platform=Platform.WINDOWS,
        )

        assert decide(probe, Platform.WINDOWS).selected_manager is PackageManager.PNPM

    def test_bun_last_resort_with_caution(self, make_probe):
        probe = make_probe(has_node=False, has_bun=True, managers=[], platform=Platform.WINDOWS)

        decision = decide(probe, Platform.WINDOWS)

        assert decision.selected_manager is PackageManager.BUN
        assert "caution" in decision.reason

    def test_bun_not_version_gated(self, make_probe):
        """Old node should fall through npm to bun on Windows."""
        probe = make_probe(
            node_major_version=16,
            has_bun=True,
            managers=[PackageManager.NPM],
            platform=Platform.WINDOWS,
        )

        decision = decide(probe, Platform.WINDOWS)

        assert decision.selected_manager is PackageManager.BUN

    def test_node_below_minimum_without_bun(self, make_probe):
        probe = make_probe(
            node_major_version=14,
            managers=[PackageManager.NPM],
            platform=Platform.WINDOWS,
        )

        decision = decide(probe, Platform.WINDOWS)

        assert decision.selected_manager is PackageManager.NONE
        assert decision.failure is ResolutionFailure.VERSION_BELOW_MINIMUM

    def test_platform_argument_overrides_probe(self, make_probe):
        """The orchestrator's platform decides the preference order."""
        probe = make_probe(has_bun=True, platform=Platform.LINUX)

        assert decide(probe, "windows").selected_manager is PackageManager.NPM


class TestDecisionInvariants:
    """Properties that must hold for every decision."""

    @pytest.mark.parametrize("platform", list(Platform))
    @pytest.mark.parametrize("has_bun", [True, False])
    @pytest.mark.parametrize("node_major", [0, 16, 18, 22])
    @pytest.mark.parametrize(
        "managers",
        [
            [],
            [PackageManager.NPM],
            [PackageManager.YARN],
            [PackageManager.NPM, PackageManager.PNPM, PackageManager.YARN],
        ],
    )
    def test_selection_is_justified(self, make_probe, platform, has_bun, node_major, managers):
        probe = make_probe(
            has_node=node_major > 0,
            node_major_version=node_major,
            has_bun=has_bun,
            managers=managers,
            platform=platform,
        )

        decision = decide(probe, platform)

        if decision.resolved:
            bun_choice = probe.has_bun and decision.selected_manager is PackageManager.BUN
            node_choice = (
                probe.has_node
                and probe.node_major_version >= MIN_NODE_VERSION
                and decision.selected_manager in probe.available_managers
            )
            assert bun_choice or node_choice
        else:
            assert decision.failure is not None
            assert not has_bun

    def test_decide_is_idempotent(self, make_probe):
        probe = make_probe(node_major_version=16, managers=[PackageManager.NPM])

        first = decide(probe, Platform.LINUX)
        second = decide(probe, Platform.LINUX)

        assert first == second
        assert repr(first) == repr(second)

    def test_decision_is_immutable(self):
        decision = Decision(PackageManager.NPM, True, "ok")

        with pytest.raises(AttributeError):
            decision.selected_manager = PackageManager.BUN


class TestDescribeRemediation:
    """Test remediation text."""

    def test_resolved_decision_has_no_remediation(self):
        decision = Decision(PackageManager.NPM, True, "ok")

        assert describe_remediation(decision, Platform.LINUX) == []

    def test_linux_scenario(self, make_probe):
        """Node 16 on Linux should suggest nvm and distro packages."""
        probe = make_probe(node_major_version=16, managers=[PackageManager.NPM])
        decision = decide(probe, Platform.LINUX)

        lines = describe_remediation(decision, Platform.LINUX)
        text = "\n".join(lines)

        assert "node version 16 below minimum 18" in text
        assert "nvm install --lts" in text
        assert "sudo apt install nodejs npm" in text
        assert lines[-1].startswith("After installing")

    def test_macos_suggests_homebrew(self):
        decision = decide(
            RuntimeProbe(False, 0, False, "", (), Platform.MACOS, Arch.ARM64),
            Platform.MACOS,
        )

        text = "\n".join(describe_remediation(decision, Platform.MACOS))

        assert "brew install node" in text
        assert "nvm" not in text

    def test_windows_suggests_winget(self):
        decision = decide(
            RuntimeProbe(False, 0, False, "", (), Platform.WINDOWS, Arch.X64),
            Platform.WINDOWS,
        )

        text = "\n".join(describe_remediation(decision, "windows"))

        assert "winget install OpenJS.NodeJS.LTS" in text
        assert "bun.sh/install.ps1" in text

    def test_missing_manager_explains_npm(self, make_probe):
        decision = decide(make_probe(managers=[]), Platform.LINUX)

        text = "\n".join(describe_remediation(decision, Platform.LINUX))

        assert "npm ships with Node.js" in text


class TestRuntimeResolverProbe:
    """Test host probing with a fake PATH."""

    def test_probe_with_nothing_installed(self, make_which):
        resolver = RuntimeResolver(which=make_which())

        probe = resolver.probe(platform=Platform.LINUX, arch=Arch.X64)

        assert probe.has_node is False
        assert probe.node_major_version == 0
        assert probe.has_bun is False
        assert probe.bun_version == ""
        assert probe.available_managers == ()

    def test_probe_orders_managers_by_platform(self, make_which):
        resolver = RuntimeResolver(which=make_which("node", "bun", "npm", "yarn"))

        versions = {"node": "v20.11.0", "bun": "1.1.38"}
        with patch.object(
            resolver,
            "_get_version",
            side_effect=lambda exe, tool: versions[tool.executable],
        ):
            linux = resolver.probe(platform=Platform.LINUX, arch=Arch.X64)
            windows = resolver.probe(platform=Platform.WINDOWS, arch=Arch.X64)

        assert linux.available_managers == (
            PackageManager.BUN,
            PackageManager.NPM,
            PackageManager.YARN,
        )
        assert windows.available_managers == (
            PackageManager.NPM,
            PackageManager.YARN,
            PackageManager.BUN,
        )
        assert linux.node_major_version == 20
        assert linux.node_version == "20.11.0"
        assert linux.bun_version == "1.1.38"

    def test_probe_tolerates_garbage_version(self, make_which):
        resolver = RuntimeResolver(which=make_which("node", "bun"))

        with patch.object(resolver, "_get_version", return_value="not a version"):
            probe = resolver.probe(platform=Platform.LINUX, arch=Arch.X64)

        assert probe.has_node is True
        assert probe.node_major_version == 0
        assert probe.node_version == ""
        assert probe.bun_version == ""

    def test_probe_detects_host_when_not_given(self, make_which):
        resolver = RuntimeResolver(which=make_which())

        with patch(
            "omo_installer.runtime.resolver.detect_platform", return_value=Platform.MACOS
        ), patch("omo_installer.runtime.resolver.detect_arch", return_value=Arch.ARM64):
            probe = resolver.probe()

        assert probe.platform is Platform.MACOS
        assert probe.arch is Arch.ARM64

    def test_probe_then_decide_with_old_node(self, make_which):
        resolver = RuntimeResolver(which=make_which("node", "npm"))

        with patch.object(resolver, "_get_version", return_value="v16.20.2"):
            decision = decide(resolver.probe(platform=Platform.LINUX), Platform.LINUX)

        assert decision.selected_manager is PackageManager.NONE
        assert decision.reason == "node version 16 below minimum 18"

    @patch("subprocess.run")
    def test_get_version_success(self, mock_run):
        """Should return the first line of version output."""
        mock_run.return_value = MagicMock(stdout="v20.11.0\n", stderr="")
        resolver = RuntimeResolver(timeout=1.5)

        version = resolver._get_version("/usr/bin/node", NODE)

        assert version == "v20.11.0"
        assert mock_run.call_args.kwargs["timeout"] == 1.5

    @patch("subprocess.run")
    def test_get_version_timeout(self, mock_run):
        """Should return None if the version check times out."""
        mock_run.side_effect = subprocess.TimeoutExpired(cmd="node", timeout=2)

        assert RuntimeResolver()._get_version("/usr/bin/node", NODE) is None

    @patch("subprocess.run")
    def test_get_version_timeout_is_reported(self, mock_run, caplog):
        """A slow node should be visible without --verbose."""
        mock_run.side_effect = subprocess.TimeoutExpired(cmd="node", timeout=2)

        with caplog.at_level(logging.WARNING, logger="omo_installer.runtime.resolver"):
            RuntimeResolver(timeout=2.0)._get_version("/usr/bin/node", NODE)

        assert [record.levelno for record in caplog.records] == [logging.WARNING]
        assert "node --version did not answer within 2.0s" in caplog.text

    @patch("subprocess.run")
    def test_get_version_missing_executable(self, mock_run):
        mock_run.side_effect = FileNotFoundError("node")

        assert RuntimeResolver()._get_version("/usr/bin/node", NODE) is None

    @patch("subprocess.run")
    def test_get_version_empty_output(self, mock_run):
        mock_run.return_value = MagicMock(stdout="", stderr="")

        assert RuntimeResolver()._get_version("/usr/bin/bun", BUN) is None
