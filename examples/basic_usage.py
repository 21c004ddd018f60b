#!/usr/bin/env python3
"""
Example: Runtime Resolution Without Installing Anything

This demonstrates the read-only half of the installer:
- Probe the host for node, bun and package managers
- Decide which package manager the installer would use
- Compare the decision across platforms
- Show install hints when nothing usable is found

Usage:
    python examples/basic_usage.py
"""

from omo_installer.runtime import Platform, RuntimeResolver, decide, describe_remediation


def main():
    resolver = RuntimeResolver()

    print("🔍 Probing host...")
    probe = resolver.probe()
    print(f"   {probe!r}")

    print("\n" + "=" * 70)
    print("📦 DECISION PER PLATFORM PREFERENCE ORDER")
    print("=" * 70)
    for platform in (Platform.LINUX, Platform.MACOS, Platform.WINDOWS):
        decision = decide(probe, platform)
        print(f"{platform.value:>8}: {decision.selected_manager.value:<5} {decision.reason}")

    decision = decide(probe, probe.platform)
    if not decision.resolved:
        print("\n⚠️  Nothing usable on this host. Suggested fixes:\n")
        for line in describe_remediation(decision, probe.platform):
            print(f"  {line}")


if __name__ == "__main__":
    main()
