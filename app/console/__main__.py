import argparse
import asyncio
import logging
import time
from pathlib import Path
from app.console.session import ConsoleSession
from app.console.store import UploadStatus
from app.console.view import ProgressView
from app.core.config import settings

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger("upload_console")

def print_line(line):
    print(line.text, flush=True)

async def watch(session: ConsoleSession) -> None:
    print(session.panel.info_text)
    while True:
        await asyncio.sleep(3600)

async def upload(session: ConsoleSession, paths, wait: float) -> int:
    print(session.panel.info_text)
    # Events emitted before the feed is connected are never delivered
    for _ in range(50):
        if session.feed.connected:
            break
        await asyncio.sleep(0.1)
    outcome = await session.upload_paths(paths)
    if not outcome.ok:
        return 1

    names = [Path(p).name for p in paths]
    deadline = time.monotonic() + wait
    while time.monotonic() < deadline:
        entries = [session.store.get(name) for name in names]
        if all(entry is not None and entry.status is UploadStatus.DONE for entry in entries):
            return 0
        await asyncio.sleep(0.1)
    logger.warning("Timed out waiting for the server to report completion")
    return 1

async def show_info(session: ConsoleSession) -> int:
    outcome = await session.configurator.fetch_info()
    if outcome.ok:
        print(session.panel.info_text)
        print(f"Directory: {session.panel.dir_input}")
    return 0 if outcome.ok else 1

async def set_dir(session: ConsoleSession, path: str) -> int:
    outcome = await session.set_directory(path)
    print(f"Directory: {session.panel.dir_input}")
    return 0 if outcome.ok else 1

async def main(args) -> int:
    if args.command in ("info", "set-dir"):
        session = ConsoleSession(args.server)
        try:
            if args.command == "info":
                return await show_info(session)
            return await set_dir(session, args.path)
        finally:
            await session.close()

    async with ConsoleSession(args.server, view=ProgressView(on_change=print_line)) as session:
        if args.command == "watch":
            await watch(session)
            return 0
        return await upload(session, args.files, args.wait)

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="python -m app.console", description="Upload console for the local upload server")
    parser.add_argument("--server", default=settings.CONSOLE_SERVER_URL, help="Base URL of the upload server")
    commands = parser.add_subparsers(dest="command", required=True)

    commands.add_parser("watch", help="Show live upload progress")

    upload_cmd = commands.add_parser("upload", help="Upload files and follow their progress")
    upload_cmd.add_argument("files", nargs="+")
    upload_cmd.add_argument("--wait", type=float, default=60.0, help="Seconds to wait for completion")

    commands.add_parser("info", help="Show server addresses and upload directory")

    set_dir_cmd = commands.add_parser("set-dir", help="Change the server's upload directory")
    set_dir_cmd.add_argument("path")
    return parser

if __name__ == "__main__":
    try:
        raise SystemExit(asyncio.run(main(build_parser().parse_args())))
    except KeyboardInterrupt:
        pass
