"""
Main entry point for Aria Labels.
"""

import sys
import json
import argparse
import logging
from pathlib import Path
from typing import Optional, List

from .core.blocks import Block, BlockAttributes
from .core.editor_settings import EditorSettings, get_editor_settings, block_attribute_schema
from .core.hooks import HookRegistry
from .core.release import UpdateCheck
from .core.release_client import ReleaseClient
from .core.updater import Updater
from .database.models import init_db
from .database.plugin_states import PluginStates
from .database.transients import DatabaseTransientStore
from .plugin import register
from .utils.config import AppConfig, load_config
from .utils.constants import APP_NAME, APP_VERSION, Hook
from .utils.logger import setup_logging, get_logger, log_exception


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        prog="aria-labels",
        description="Add ARIA attributes to rendered blocks and keep the plugin updated",
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"{APP_NAME} {APP_VERSION}",
    )

    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug logging",
    )

    parser.add_argument(
        "--config",
        type=Path,
        metavar="FILE",
        help="JSON configuration file",
    )

    parser.add_argument(
        "--database",
        type=Path,
        metavar="FILE",
        help="SQLite database holding the release cache and plugin state",
    )

    commands = parser.add_subparsers(dest="command", required=True)

    render = commands.add_parser("render", help="Add ARIA attributes to block markup")
    render.add_argument("file", nargs="?", type=Path, help="Markup file (stdin if omitted)")
    render.add_argument("--block", metavar="JSON", help="Parsed block as JSON")
    render.add_argument("--block-name", default="", help="Block type, e.g. core/button")
    render.add_argument("--label", default="", help="aria-label to set")
    render.add_argument("--hidden", action="store_true", help="Set aria-hidden")
    render.add_argument("--alt", default=None, help="Declared alt text of an image block")

    commands.add_parser("settings", help="Print the editor settings as JSON")

    schema = commands.add_parser("schema", help="Print the attributes added to a block type")
    schema.add_argument("block_name", help="Block type, e.g. core/button")
    schema.add_argument(
        "--native-label",
        action="store_true",
        help="The block type declares native aria-label support",
    )

    check = commands.add_parser("check-update", help="Check the release feed for an update")
    check.add_argument("--installed", default=APP_VERSION, help="Installed version")
    check.add_argument("--force", action="store_true", help="Bypass the release cache")

    info = commands.add_parser("plugin-info", help="Print plugin information as JSON")
    info.add_argument("--force", action="store_true", help="Bypass the release cache")

    upgrade = commands.add_parser("upgrade", help="Download and install the latest release")
    upgrade.add_argument("--plugins-dir", type=Path, required=True, help="Plugins directory")
    upgrade.add_argument("--installed", default=APP_VERSION, help="Installed version")
    upgrade.add_argument("--force", action="store_true", help="Bypass the release cache")

    return parser.parse_args(argv)


def build_block(args: argparse.Namespace) -> Block:
    """Block descriptor from either --block JSON or the individual options."""
    if args.block:
        return Block.from_dict(json.loads(args.block))
    return Block(
        name=args.block_name,
        attrs=BlockAttributes(
            aria_hidden=args.hidden,
            aria_label=args.label,
            alt=args.alt,
        ),
    )


def run_render(args: argparse.Namespace) -> int:
    logger = get_logger(__name__)

    try:
        block = build_block(args)
    except (ValueError, AttributeError) as e:
        logger.error(f"Invalid block JSON: {e}")
        return 1

    try:
        if args.file:
            markup = args.file.read_text(encoding="utf-8")
        else:
            markup = sys.stdin.read()
    except OSError as e:
        logger.error(f"Cannot read markup: {e}")
        return 1

    plugin = register()
    sys.stdout.write(plugin.hooks.apply_filters(Hook.RENDER_BLOCK, markup, block))
    return 0


def run_settings(config: AppConfig) -> int:
    defaults = EditorSettings(
        move_to_advanced=config.move_to_advanced,
        allowed_blocks=config.allowed_blocks,
    )
    settings = get_editor_settings(HookRegistry(), defaults)
    print(json.dumps(settings.to_dict(), indent=2))
    return 0


def run_schema(args: argparse.Namespace, config: AppConfig) -> int:
    settings = EditorSettings(
        move_to_advanced=config.move_to_advanced,
        allowed_blocks=config.allowed_blocks,
    )
    supports = {"ariaLabel": True} if args.native_label else {}
    print(json.dumps(block_attribute_schema(args.block_name, supports, settings), indent=2))
    return 0


def build_updater(config: AppConfig, database: Optional[Path]) -> Updater:
    init_db(database)
    return Updater(
        config=config.updater,
        cache=DatabaseTransientStore(),
        client=ReleaseClient(config.updater),
        plugin_states=PluginStates(),
    )


def run_check_update(args: argparse.Namespace, updater: Updater) -> int:
    plugin_file = updater.config.plugin_file
    check = UpdateCheck(checked={plugin_file: args.installed})

    if args.force:
        updater.get_repository_info(force_check=True)

    check = updater.modify_transient(check)
    offer = check.response.get(plugin_file)

    if offer is None:
        print(f"{APP_NAME} {args.installed} is up to date")
    else:
        print(f"Update available: {args.installed} -> {offer.new_version}")
        print(f"Package: {offer.package}")
    return 0


def run_plugin_info(args: argparse.Namespace, updater: Updater) -> int:
    logger = get_logger(__name__)

    if args.force:
        updater.get_repository_info(force_check=True)

    info = updater.plugin_popup(None, "plugin_information", {"slug": updater.config.basename})
    if info is None:
        logger.error("No release information available")
        return 1

    print(json.dumps(info.to_dict(), indent=2))
    return 0


def run_upgrade(args: argparse.Namespace, updater: Updater) -> int:
    logger = get_logger(__name__)

    if not args.plugins_dir.is_dir():
        logger.error(f"Plugins directory not found: {args.plugins_dir}")
        return 1

    try:
        release = updater.upgrade(args.plugins_dir, args.installed, args.force)
    except Exception as e:
        log_exception(logger, e, "Upgrade failed")
        return 1

    if release is not None:
        print(f"Installed {release.tag_name}")
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    """
    Main application entry point.

    Returns:
        Exit code
    """
    args = parse_args(argv)

    level = logging.DEBUG if args.debug else logging.WARNING
    setup_logging(level=level, log_to_file=args.command in ("check-update", "upgrade"))

    config = load_config(args.config)

    if args.command == "render":
        return run_render(args)
    if args.command == "settings":
        return run_settings(config)
    if args.command == "schema":
        return run_schema(args, config)

    updater = build_updater(config, args.database)
    try:
        if args.command == "check-update":
            return run_check_update(args, updater)
        if args.command == "plugin-info":
            return run_plugin_info(args, updater)
        return run_upgrade(args, updater)
    finally:
        updater.client.close()


if __name__ == "__main__":
    sys.exit(main())
