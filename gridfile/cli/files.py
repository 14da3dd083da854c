# gridfile/cli/files.py
"""
CLI commands for files stored in GridFS.

Usage:
    python -m gridfile.cli.files put ./report.pdf --filename report.pdf --content-type application/pdf
    python -m gridfile.cli.files get report.pdf --output ./report.pdf
    python -m gridfile.cli.files get 65f1c0ffee0000000000abcd
    python -m gridfile.cli.files rm report.pdf
"""

import argparse
import asyncio
import os
import sys

from dotenv import load_dotenv

load_dotenv()

from gridfile.errors import GridFileError  # noqa: E402
from gridfile.registry.options import WriteMode  # noqa: E402
from gridfile.registry.registry import FileRegistry  # noqa: E402


def get_file_registry() -> FileRegistry:
    """Build a registry on the configured database."""
    from gridfile.database import get_database

    return FileRegistry(get_database())


async def cmd_put(args, registry: FileRegistry) -> None:
    """Store a local file."""
    options = {
        "filename": args.filename or os.path.basename(args.path),
        "content_type": args.content_type,
        "mode": WriteMode.OVERWRITE if args.overwrite else WriteMode.WRITE,
    }
    record = await registry.write(args.path, options)

    print(f"Stored: {record.filename}")
    print(f"  ID: {record.id}")
    print(f"  Length: {record.length} bytes")
    print(f"  Chunk size: {record.chunk_size}")
    if record.content_type:
        print(f"  Content type: {record.content_type}")


async def cmd_get(args, registry: FileRegistry) -> None:
    """Fetch a file by id or filename, to --output or stdout."""
    record = await registry.read(args.selector)

    async with record.stream as stream:
        if args.output:
            with open(args.output, "wb") as fh:
                async for block in stream:
                    fh.write(block)
            print(f"Wrote {record.length} bytes to {args.output}")
        else:
            async for block in stream:
                sys.stdout.buffer.write(block)
            sys.stdout.buffer.flush()


async def cmd_rm(args, registry: FileRegistry) -> None:
    """Remove a file by id, or every revision of a filename."""
    await registry.remove(args.selector)
    print(f"Removed: {args.selector}")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="GridFS file registry CLI",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Store a file under its own name
  python -m gridfile.cli.files put ./notes.txt

  # Replace every earlier revision of report.pdf
  python -m gridfile.cli.files put ./out.pdf --filename report.pdf --overwrite

  # Print a file to stdout
  python -m gridfile.cli.files get notes.txt

  # Remove by id
  python -m gridfile.cli.files rm 65f1c0ffee0000000000abcd
        """,
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    # put command
    put_parser = subparsers.add_parser("put", help="Store a local file")
    put_parser.add_argument("path", help="Path of the file to store")
    put_parser.add_argument("--filename", help="Stored filename (default: basename of path)")
    put_parser.add_argument("--content-type", help="MIME type to record")
    put_parser.add_argument("--overwrite", action="store_true", help="Delete older revisions with the same filename")
    put_parser.set_defaults(func=cmd_put)

    # get command
    get_parser = subparsers.add_parser("get", help="Fetch a file")
    get_parser.add_argument("selector", help="File id or filename")
    get_parser.add_argument("--output", "-o", help="Write to this path instead of stdout")
    get_parser.set_defaults(func=cmd_get)

    # rm command
    rm_parser = subparsers.add_parser("rm", help="Remove a file")
    rm_parser.add_argument("selector", help="File id or filename")
    rm_parser.set_defaults(func=cmd_rm)

    return parser


async def run(args, registry: FileRegistry) -> int:
    """Run a parsed command. Returns the process exit code."""
    try:
        await args.func(args, registry)
    except (GridFileError, OSError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    return 0


async def _main(args) -> int:
    from gridfile.config import get_settings
    from gridfile.database import close_client
    from gridfile.logging_config import configure_logging

    settings = get_settings()
    # stdout may carry file content, so logs go to stderr
    configure_logging(json_format=settings.LOG_JSON, level=settings.LOG_LEVEL, stream=sys.stderr)

    try:
        return await run(args, get_file_registry())
    finally:
        await close_client()


def main(argv=None):
    args = build_parser().parse_args(argv)
    sys.exit(asyncio.run(_main(args)))


if __name__ == "__main__":
    main()
