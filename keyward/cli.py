"""
Keyward CLI: entry point for all operations.

Usage:
    keyward show                    # Print collected entries (masked)
    keyward env                     # Print a sourceable shell script
    keyward export json             # Export as env, dotenv, yaml or json
    keyward run --redact -- cmd     # Run cmd with secrets in its environment
    keyward redact --in log.txt     # Redact a file (or stdin) to stdout
    keyward scan [PATH]             # Look for secrets in clear text
    keyward drift [PROVIDER...]     # Compare source/sink tagged entries
    keyward mirror-drift --source A --target B
    keyward put K=V --providers A   # Write values into providers
    keyward copy --from A --to B    # Copy all values between providers
    keyward delete K --providers A  # Remove keys from providers
    keyward providers               # List built-in providers
    keyward version                 # Show version
"""

from __future__ import annotations

import argparse
import contextlib
import logging
import sys
import time

from keyward.errors import KeywardError


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        prog="keyward",
        description="Keyward: resolve secrets from many backends, detect drift, redact output.",
    )
    parser.add_argument("--version", action="store_true", help="Show version and exit")
    parser.add_argument("--config", "-c", type=str, help="Mapping file (default: .keyward.yml)")
    parser.add_argument("--verbose", "-v", action="store_true", help="Debug logging to stderr")

    subparsers = parser.add_subparsers(dest="command")

    subparsers.add_parser("show", help="Print collected entries with masked values")
    subparsers.add_parser("env", help="Print entries as a sourceable shell script")

    export_parser = subparsers.add_parser("export", help="Export entries")
    export_parser.add_argument("format", choices=["env", "dotenv", "yaml", "json"])

    # run
    run_parser = subparsers.add_parser("run", help="Run a command with secrets injected")
    run_parser.add_argument("--redact", action="store_true", help="Redact the command's output")
    run_parser.add_argument("cmd", nargs=argparse.REMAINDER, help="Command (after --)")

    # redact
    redact_parser = subparsers.add_parser("redact", help="Redact secrets from a stream")
    redact_parser.add_argument("--in", dest="infile", type=str, help="Input file (default: stdin)")
    redact_parser.add_argument("--out", dest="outfile", type=str, help="Output file (default: stdout)")

    # scan
    scan_parser = subparsers.add_parser("scan", help="Scan files for secret values")
    scan_parser.add_argument("path", nargs="?", default=".", help="File or directory")
    scan_parser.add_argument("--silent", action="store_true", help="Only set the exit code")

    # drift
    drift_parser = subparsers.add_parser("drift", help="Detect drift between source and sink tags")
    drift_parser.add_argument("providers", nargs="*", help="Limit to these providers")

    mirror_parser = subparsers.add_parser("mirror-drift", help="Compare two providers key by key")
    mirror_parser.add_argument("--source", required=True)
    mirror_parser.add_argument("--target", required=True)

    # writes
    put_parser = subparsers.add_parser("put", help="Write values into providers")
    put_parser.add_argument("kvs", nargs="+", metavar="KEY=VALUE")
    put_parser.add_argument("--providers", nargs="+", required=True)
    put_parser.add_argument("--sync", action="store_true", help="Write all values to the env_sync path")
    put_parser.add_argument("--path", default="", help="Write to this path instead of the mapping")

    copy_parser = subparsers.add_parser("copy", help="Copy values from one provider to others")
    copy_parser.add_argument("--from", dest="source", required=True)
    copy_parser.add_argument("--to", dest="targets", nargs="+", required=True)
    copy_parser.add_argument("--sync", action="store_true")

    delete_parser = subparsers.add_parser("delete", help="Delete keys from providers")
    delete_parser.add_argument("keys", nargs="*")
    delete_parser.add_argument("--providers", nargs="+", required=True)
    delete_parser.add_argument("--path", default="", help="Delete at this path instead of the mapping")
    delete_parser.add_argument("--all-keys", action="store_true", help="Delete everything under --path")

    subparsers.add_parser("providers", help="List available providers")
    subparsers.add_parser("version", help="Show version")

    args = parser.parse_args(argv)

    if args.version or args.command == "version":
        from keyward import __version__

        print(f"keyward {__version__}")
        return 0

    _setup_logging(args.verbose)

    handlers = {
        "show": _cmd_show,
        "env": _cmd_env,
        "export": _cmd_export,
        "run": _cmd_run,
        "redact": _cmd_redact,
        "scan": _cmd_scan,
        "drift": _cmd_drift,
        "mirror-drift": _cmd_mirror_drift,
        "put": _cmd_put,
        "copy": _cmd_copy,
        "delete": _cmd_delete,
        "providers": _cmd_providers,
    }
    handler = handlers.get(args.command)
    if handler is None:
        parser.print_help()
        return 0

    try:
        return handler(args)
    except KeywardError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


def _setup_logging(verbose: bool) -> None:
    from keyward.config import get_config

    level = logging.DEBUG if verbose else get_config().log_level_number
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(name)s] %(levelname)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        stream=sys.stderr,
    )


def _collector(args: argparse.Namespace):
    from keyward.collect import Collector
    from keyward.config import get_config
    from keyward.mappingfile import load_mapping_file
    from keyward.providers import default_registry

    path = args.config or get_config().mapping_file
    return Collector(load_mapping_file(path), default_registry())


def _cmd_show(args: argparse.Namespace) -> int:
    from keyward.porcelain import Porcelain

    collector = _collector(args)
    entries = collector.collect()
    porcelain = Porcelain()
    porcelain.print_context(collector.mapping.project, collector.mapping.loaded_from)
    porcelain.vspace()
    porcelain.print_entries(sorted(entries, key=lambda e: e.provider_name))
    return 0


def _cmd_env(args: argparse.Namespace) -> int:
    from keyward.export import export_env

    sys.stdout.write(export_env(_collector(args).collect()))
    return 0


def _cmd_export(args: argparse.Namespace) -> int:
    from keyward.export import export

    text = export(_collector(args).collect(), args.format)
    sys.stdout.write(text if text.endswith("\n") else text + "\n")
    return 0


def _cmd_run(args: argparse.Namespace) -> int:
    from keyward.config import get_config
    from keyward.runner import run_command

    cmd = list(args.cmd)
    if cmd and cmd[0] == "--":
        cmd = cmd[1:]
    if not cmd:
        print("Error: no command given", file=sys.stderr)
        return 1

    collector = _collector(args)
    entries = collector.collect()
    return run_command(
        cmd,
        entries,
        carry_env=collector.mapping.carry_env,
        redact=args.redact,
        max_line_bytes=get_config().max_line_bytes,
    )


def _cmd_redact(args: argparse.Namespace) -> int:
    from keyward.config import get_config
    from keyward.redactor import Redactor, redact_stream

    redactor = Redactor(_collector(args).collect())
    limit = get_config().max_line_bytes
    with contextlib.ExitStack() as stack:
        try:
            reader = stack.enter_context(open(args.infile, "rb")) if args.infile else sys.stdin.buffer
            writer = stack.enter_context(open(args.outfile, "wb")) if args.outfile else sys.stdout.buffer
        except OSError as e:
            print(f"Error: {e}", file=sys.stderr)
            return 1
        redact_stream(reader, writer, redactor, limit)
    return 0


def _cmd_scan(args: argparse.Namespace) -> int:
    from keyward.config import get_config
    from keyward.porcelain import Porcelain
    from keyward.scan import scan

    entries = _collector(args).collect()
    started = time.monotonic()
    matches = scan(args.path, entries, get_config().max_line_bytes)
    if not args.silent:
        porcelain = Porcelain()
        porcelain.print_matches(matches)
        porcelain.print_match_summary(matches, entries, time.monotonic() - started)
    return 1 if matches else 0


def _cmd_drift(args: argparse.Namespace) -> int:
    from keyward.drift import drift
    from keyward.porcelain import Porcelain

    drifts = drift(_collector(args).collect(), args.providers)
    if drifts:
        Porcelain().print_drift(drifts)
        return 1
    return 0


def _cmd_mirror_drift(args: argparse.Namespace) -> int:
    from keyward.drift import mirror_drift
    from keyward.porcelain import Porcelain

    drifts = mirror_drift(_collector(args), args.source, args.target)
    if drifts:
        Porcelain().print_drift(drifts)
        return 1
    return 0


def _parse_kvs(pairs: list[str]) -> dict[str, str]:
    kvmap = {}
    for pair in pairs:
        key, sep, value = pair.partition("=")
        if not sep or not key:
            raise KeywardError(f"expected KEY=VALUE, got '{pair}'")
        kvmap[key] = value
    return kvmap


def _cmd_put(args: argparse.Namespace) -> int:
    from keyward import writes

    writes.put(_collector(args), _parse_kvs(args.kvs), args.providers, sync=args.sync, direct_path=args.path)
    return 0


def _cmd_copy(args: argparse.Namespace) -> int:
    from keyward import writes

    writes.sync(_collector(args), args.source, args.targets, sync=args.sync)
    return 0


def _cmd_delete(args: argparse.Namespace) -> int:
    from keyward import writes

    writes.delete(
        _collector(args),
        args.keys,
        args.providers,
        direct_path=args.path,
        all_keys=args.all_keys,
    )
    return 0


def _cmd_providers(args: argparse.Namespace) -> int:
    from keyward.providers import default_registry

    registry = default_registry()
    for name in registry.names():
        meta = registry.meta(name)
        print(f"  {name:<16} {meta.description}")
        print(f"  {'':<16} ops: {', '.join(meta.ops)}")
        print(f"  {'':<16} auth: {meta.authentication}")
    return 0
