#!/usr/bin/env python3
"""
Event Registration CLI
Registers participants (with optional photo) and exports the registration
table (registrations.pdf, A4) and bulk ID cards (idcards.pdf, A3, 25 per page).
"""

from __future__ import annotations

import sys
from pathlib import Path
from typing import List, Optional

from config import ASSET_ROOT, REGISTRATIONS_CSV
from data_loaders import load_registrations
from exports import ExportError, ExportResult, export_idcards_pdf, export_registrations_pdf
from registry import RegistrationStore


def _store(args) -> RegistrationStore:
    return RegistrationStore(args.data, args.assets)


def _write_export(result: ExportResult, output: Optional[str]) -> Path:
    # Only called after the whole document was rendered in memory.
    out = Path(output) if output else Path(result.filename)
    if out.is_dir():
        out = out / result.filename
    out.parent.mkdir(parents=True, exist_ok=True)
    out.write_bytes(result.content)
    return out


def cmd_register(args) -> int:
    photo_bytes = None
    if args.photo:
        photo_bytes = Path(args.photo).read_bytes()
    record = _store(args).register(
        args.name,
        args.cluster,
        args.unit,
        args.designations,
        photo_bytes=photo_bytes,
        photo_filename=args.photo,
    )
    print(f"Registration successful: {record.name} ({record.id})")
    return 0


def cmd_list(args) -> int:
    records = _store(args).list_records()
    for i, r in enumerate(records, 1):
        photo = r.photo_path or "-"
        print(f"{i:>4}  {r.id}  {r.name} | {r.cluster} | {r.unit} | {r.designations_text} | {photo}")
    print(f"{len(records)} registration(s)")
    return 0


def cmd_update(args) -> int:
    changes = {
        k: v
        for k, v in (
            ("name", args.name),
            ("cluster", args.cluster),
            ("unit", args.unit),
            ("designations", args.designations),
        )
        if v is not None
    }
    updated = _store(args).update(args.id, **changes)
    if updated is None:
        print(f"Registration {args.id} not found")
        return 1
    print(f"Registration updated: {updated.name} ({updated.id})")
    return 0


def cmd_delete(args) -> int:
    deleted = _store(args).delete(args.id)
    if deleted is None:
        print(f"Registration {args.id} not found")
        return 1
    print(f"Registration deleted: {deleted.name} ({deleted.id})")
    return 0


def cmd_import(args) -> int:
    records = load_registrations(args.source, sheet=args.sheet)
    count = _store(args).add_many(records)
    print(f"Imported {count} registration(s) from {args.source}")
    return 0


def cmd_export(args) -> int:
    exporter = export_registrations_pdf if args.command == "export-table" else export_idcards_pdf
    store = _store(args)
    try:
        result = exporter(store.list_records, asset_root=args.assets)
    except ExportError as e:
        print(f"Error: {e}")
        return 1
    out = _write_export(result, args.output)
    print(f"Exported {result.record_count} registration(s) to {out}")
    return 0


def build_parser():
    import argparse

    parser = argparse.ArgumentParser(description="Event registration and PDF exports")
    parser.add_argument("--data", default=str(REGISTRATIONS_CSV), help=f"Registrations CSV (default: {REGISTRATIONS_CSV})")
    parser.add_argument("--assets", default=str(ASSET_ROOT), help="Directory that stored photo paths are relative to")
    sub = parser.add_subparsers(dest="command", required=True)

    p = sub.add_parser("register", help="Add a registration")
    p.add_argument("name")
    p.add_argument("cluster")
    p.add_argument("unit")
    p.add_argument("designations", help='Comma separated, e.g. "President, Secretary"')
    p.add_argument("--photo", help="Path to a photo to upload")
    p.set_defaults(func=cmd_register)

    p = sub.add_parser("list", help="List registrations")
    p.set_defaults(func=cmd_list)

    p = sub.add_parser("update", help="Update a registration")
    p.add_argument("id")
    p.add_argument("--name")
    p.add_argument("--cluster")
    p.add_argument("--unit")
    p.add_argument("--designations")
    p.set_defaults(func=cmd_update)

    p = sub.add_parser("delete", help="Delete a registration")
    p.add_argument("id")
    p.set_defaults(func=cmd_delete)

    p = sub.add_parser("import", help="Import registrations from Excel (.xlsx) or CSV")
    p.add_argument("source")
    p.add_argument("--sheet", default="Sheet1")
    p.set_defaults(func=cmd_import)

    for name, default in (("export-table", "registrations.pdf"), ("export-cards", "idcards.pdf")):
        p = sub.add_parser(name, help=f"Export {default}")
        p.add_argument("-o", "--output", help=f"Output file or directory (default: ./{default})")
        p.set_defaults(func=cmd_export)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    args = build_parser().parse_args(argv)
    try:
        return args.func(args)
    except (ValueError, OSError) as e:
        print(f"Error: {e}")
        return 1


if __name__ == '__main__':
    sys.exit(main())
