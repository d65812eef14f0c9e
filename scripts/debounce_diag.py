"""debounce diagnostics CLI."""

from __future__ import annotations

import argparse
import json

from pydantic import ValidationError

from debounce_cli.command import IdentityError, fingerprint
from debounce_cli.config import DebounceSettings
from debounce_cli.storage import MarkerStore, Sweeper


def load_store(settings: DebounceSettings) -> MarkerStore:
    try:
        return MarkerStore(settings.resolved_state_dir())
    except RuntimeError as exc:
        print(f"State directory unavailable: {exc}")
        raise SystemExit(1)


def describe_markers(store: MarkerStore) -> list[dict[str, object]]:
    now = store.now()
    markers: list[dict[str, object]] = []
    for entry in store.list_entries():
        if entry.is_dir():
            continue
        last_success = store.read(entry.name)
        record: dict[str, object] = {
            "fingerprint": entry.name,
            "last_success": last_success.isoformat(),
        }
        try:
            payload = store.read_payload(entry.name)
        except (OSError, ValidationError) as exc:
            record["error"] = str(exc).splitlines()[0]
        else:
            record.update(
                {
                    "command": payload.command,
                    "cooldown_seconds": payload.cooldown.total_seconds(),
                    "expired": now - last_success > payload.cooldown,
                }
            )
        markers.append(record)
    return markers


def cmd_markers(args: argparse.Namespace) -> None:
    settings = DebounceSettings()
    store = load_store(settings)
    try:
        markers = describe_markers(store)
    except FileNotFoundError:
        markers = []
    except OSError as exc:
        print(f"Cannot read {store.root}: {exc}")
        raise SystemExit(1)
    if args.json:
        print(json.dumps(markers, indent=2))
        return
    for marker in markers:
        if "error" in marker:
            print(f"{marker['fingerprint'][:12]} [unreadable] {marker['error']}")
            continue
        state = "expired" if marker["expired"] else "cooling"
        command = " ".join(marker["command"])
        print(f"{marker['fingerprint'][:12]} [{state}] {marker['last_success']} -> {command}")


def cmd_sweep(args: argparse.Namespace) -> None:
    settings = DebounceSettings()
    store = load_store(settings)
    threshold = 0 if args.force else settings.sweep_threshold
    report = Sweeper(store, threshold=threshold).sweep()
    print(
        json.dumps(
            {
                "store": str(store.root),
                "threshold": threshold,
                "scanned": report.scanned,
                "removed": report.removed,
                "skipped": report.skipped,
            },
            indent=2,
        )
    )


def cmd_forget(args: argparse.Namespace) -> None:
    settings = DebounceSettings()
    store = load_store(settings)
    try:
        name = fingerprint(args.command)
    except IdentityError as exc:
        print(f"Cannot identify command: {exc}")
        raise SystemExit(1)
    try:
        store.remove(name)
    except FileNotFoundError:
        print(f"No marker for {' '.join(args.command)}")
        return
    except OSError as exc:
        print(f"Cannot delete marker {name}: {exc}")
        raise SystemExit(1)
    print(f"Forgot {name}")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="debounce diagnostics")
    sub = parser.add_subparsers(dest="cmd")

    p_markers = sub.add_parser("markers", help="List stored cooldown markers")
    p_markers.add_argument("--json", action="store_true", help="Output JSON")
    p_markers.set_defaults(func=cmd_markers)

    p_sweep = sub.add_parser("sweep", help="Delete markers whose cooldown has elapsed")
    p_sweep.add_argument(
        "--force",
        action="store_true",
        help="Sweep even when the store holds fewer entries than the threshold",
    )
    p_sweep.set_defaults(func=cmd_sweep)

    p_forget = sub.add_parser("forget", help="Delete the marker for a command line")
    p_forget.add_argument("command", nargs=argparse.REMAINDER)
    p_forget.set_defaults(func=cmd_forget)

    return parser


def main(argv: list[str] | None = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)
    if not hasattr(args, "func"):
        parser.print_help()
        return
    args.func(args)


if __name__ == "__main__":
    main()
