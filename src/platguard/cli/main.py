"""
Main CLI entrypoint for platguard.

Usage:
    platguard --version
    platguard detect [--json]
    platguard check <platform>
    platguard --simulate web check web
"""

import argparse
import json
import platform
import sys

from platguard import __version__
from platguard.config import GuardConfig, load_config
from platguard.context import GuardContext
from platguard.errors import ExitCode, PlatguardError
from platguard.platform import Platform, detect_platform
from platguard.platform.resolver import assert_platform, get_current_platform


def get_version_string() -> str:
    """Generate a detailed version string."""
    python_version = platform.python_version()
    os_info = f"{platform.system()} {platform.release()}"
    return (
        f"platguard {__version__}\n"
        f"  python: {python_version}\n"
        f"  os: {os_info}\n"
        f"  detected platform: {detect_platform()}"
    )


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser for platguard."""
    parser = argparse.ArgumentParser(
        prog="platguard",
        description="Inspect and assert the platform guards see",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  platguard detect
  platguard detect --json
  platguard check node
  platguard --simulate web check node
        """,
    )

    parser.add_argument(
        "--version",
        action="version",
        version=get_version_string(),
    )

    parser.add_argument(
        "-c", "--config",
        dest="config",
        default=None,
        help="YAML guard configuration file",
    )

    parser.add_argument(
        "--simulate",
        dest="simulate",
        choices=[p.value for p in Platform],
        default=None,
        help="Simulate a platform instead of detecting it",
    )

    subparsers = parser.add_subparsers(dest="command")

    detect = subparsers.add_parser("detect", help="Print the current platform")
    detect.add_argument(
        "--json",
        action="store_true",
        help="Output as JSON",
    )

    check = subparsers.add_parser(
        "check",
        help="Exit non-zero unless the current platform matches",
    )
    check.add_argument(
        "platform",
        choices=[Platform.WEB.value, Platform.NODE.value],
        help="Expected platform",
    )
    check.add_argument(
        "-m", "--message",
        dest="message",
        default=None,
        help="Failure message (default: the configured assert message)",
    )

    return parser


def build_context(parsed: argparse.Namespace) -> GuardContext:
    """Build the guard context from the environment and CLI options."""
    config = load_config(parsed.config) if parsed.config else GuardConfig.from_env()
    context = GuardContext(config)
    if parsed.simulate:
        context.simulate(parsed.simulate)
    return context


def cmd_detect(context: GuardContext, as_json: bool) -> int:
    current = get_current_platform(context)
    if as_json:
        data = {
            "platform": current.value,
            "simulated": context.simulated_platform is not None,
            "detected": detect_platform().value,
            "enabled": context.config.enabled,
        }
        print(json.dumps(data, indent=2))
    else:
        print(current.value)
    return ExitCode.SUCCESS


def cmd_check(context: GuardContext, target: str, message: str | None) -> int:
    assert_platform(target, message, context=context)
    print(f"ok: {get_current_platform(context)}")
    return ExitCode.SUCCESS


def main(args: list[str] | None = None) -> int:
    """Main entrypoint for platguard CLI."""
    parser = create_parser()
    parsed = parser.parse_args(args)

    if parsed.command is None:
        parser.print_help()
        return ExitCode.SUCCESS

    try:
        context = build_context(parsed)
        if parsed.command == "detect":
            return cmd_detect(context, parsed.json)
        return cmd_check(context, parsed.platform, parsed.message)
    except PlatguardError as e:
        print(f"[platguard] {e}", file=sys.stderr)
        return e.exit_code
    except KeyboardInterrupt:
        return ExitCode.KEYBOARD_INTERRUPT


if __name__ == "__main__":
    sys.exit(main())
