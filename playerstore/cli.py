"""Admin command line for the profile store."""

import argparse
import asyncio
import sys
from typing import List, Optional
from uuid import UUID

from .commands.base import BufferedSender
from .config import Settings, settings
from .exceptions import PlayerNotFoundError, PlayerStoreError
from .logger import logger
from .plugin import ProfilePlugin


async def ensure_indexes(plugin: ProfilePlugin) -> int:
    await plugin.start()
    return 0 if plugin.indexes_ready else 1


async def run_command(plugin: ProfilePlugin, name: str, tokens: List[str]) -> int:
    await plugin.start()
    sender = BufferedSender("CONSOLE")
    success = await plugin.commands.dispatch(sender, name, tokens)
    for message in sender.messages:
        print(message)
    return 0 if success else 1


async def show_player(plugin: ProfilePlugin, player: str) -> int:
    await plugin.start()
    try:
        data = await plugin.repository.resolve(player)
    except PlayerNotFoundError as e:
        print(e, file=sys.stderr)
        return 1
    print(data.model_dump_json(indent=2))
    return 0


async def delete_player(plugin: ProfilePlugin, player_id: UUID) -> int:
    await plugin.start()
    await plugin.repository.delete(player_id)
    logger.info(f"Deleted profile {player_id}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="playerstore")
    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("ensure-indexes", help="create missing lookup indexes")

    run_parser = subparsers.add_parser("run", help="run a chat command as CONSOLE")
    run_parser.add_argument("name", help="command name, e.g. credit")
    run_parser.add_argument("tokens", nargs=argparse.REMAINDER)

    show_parser = subparsers.add_parser("show", help="print a stored profile")
    show_parser.add_argument("player", help="player name or id")

    delete_parser = subparsers.add_parser("delete", help="delete a stored profile")
    delete_parser.add_argument("player_id", type=UUID)

    serve_parser = subparsers.add_parser("serve", help="start the HTTP API")
    serve_parser.add_argument("--host", default=None)
    serve_parser.add_argument("--port", type=int, default=None)
    return parser


async def _run(args: argparse.Namespace, app_settings: Settings) -> int:
    plugin = ProfilePlugin(app_settings)
    try:
        if args.command == "ensure-indexes":
            return await ensure_indexes(plugin)
        if args.command == "run":
            return await run_command(plugin, args.name, args.tokens)
        if args.command == "show":
            return await show_player(plugin, args.player)
        return await delete_player(plugin, args.player_id)
    except PlayerStoreError as e:
        logger.error(f"playerstore {args.command} failed: {e}", exc_info=True)
        print(f"Error: {e}", file=sys.stderr)
        return 1
    finally:
        await plugin.stop()


def main(argv: Optional[List[str]] = None, app_settings: Optional[Settings] = None) -> int:
    args = build_parser().parse_args(argv)
    app_settings = app_settings or settings

    if args.command == "serve":
        import uvicorn

        from .main import create_app

        uvicorn.run(
            create_app(app_settings),
            host=args.host or app_settings.host,
            port=args.port or app_settings.port,
        )
        return 0

    return asyncio.run(_run(args, app_settings))


if __name__ == "__main__":
    sys.exit(main())
