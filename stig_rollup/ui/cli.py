"""Command-line interface and main entry point."""

from __future__ import annotations
from datetime import datetime
from typing import Any, Dict, List, Optional
from pathlib import Path
import argparse
import sys
import json
import gc

from stig_rollup.checklist.models import StoredChecklist
from stig_rollup.checklist.parser import parse
from stig_rollup.compliance.aggregator import aggregate
from stig_rollup.compliance.catalog import ControlCatalog
from stig_rollup.core.config import Cfg
from stig_rollup.core.constants import APP_NAME, VERSION, ImpactLevel
from stig_rollup.core.deps import Deps
from stig_rollup.core.logging import LOG
from stig_rollup.core.state import GLOBAL_STATE
from stig_rollup.io.file_ops import FO
from stig_rollup.processor.canonicalizer import canonicalize
from stig_rollup.processor.updater import apply_checklist_update
from stig_rollup.scan.loader import parse_scan_results
from stig_rollup.scan.merger import generate_checklist, merge_into_checklist
from stig_rollup.templates.store import DirectoryTemplateStore


def summarize(path: str) -> Dict[str, Any]:
    """Parse one checklist and describe it."""
    checklist = parse(FO.read(path))
    counts: Dict[str, int] = {}
    for finding in checklist.findings:
        counts[finding.status.value] = counts.get(finding.status.value, 0) + 1
    return {
        "file": str(path),
        "host_name": checklist.asset.host_name,
        "title": checklist.title,
        "version": checklist.version,
        "release_info": checklist.release_info,
        "findings": len(checklist.findings),
        "usable": sum(1 for f in checklist.findings if f.is_usable()),
        "status": counts,
    }


def load_stored(path: str) -> StoredChecklist:
    """Read a checklist file as a stored checklist keyed by its file name."""
    p = Path(path)
    raw = FO.read(p)
    return StoredChecklist(
        id=p.name,
        checklist=parse(raw),
        updated_on=datetime.fromtimestamp(p.stat().st_mtime),
        raw=raw,
    )


def run_scan(scan_path: str, out: str, checklist: Optional[str], templates: Optional[str]) -> Dict[str, Any]:
    results = parse_scan_results(FO.read(scan_path))
    if not results.has_title:
        return {"ok": False, "error": "Scan result has no benchmark title", "file": scan_path}

    if checklist:
        document = merge_into_checklist(results, FO.read(checklist), False)
    else:
        document = generate_checklist(results, DirectoryTemplateStore(templates))
        if not document:
            return {"ok": False, "error": f"No template for '{results.title}'", "file": scan_path}

    FO.write_text(out, document)
    return {
        "ok": True,
        "output": str(out),
        "title": results.title,
        "host_name": results.hostname,
        "dialect": results.dialect,
        "rule_results": len(results.rule_results),
    }


def run_compliance(args: argparse.Namespace) -> Dict[str, Any]:
    catalog = ControlCatalog.load_json(args.catalog, args.controls)
    stored = [load_stored(path) for path in args.compliance]
    records = aggregate(
        stored,
        catalog,
        args.impact,
        args.major_control,
        pii=args.pii,
    )
    return {
        "checklists": len(stored),
        "impact": args.impact,
        "controls": [r.to_dict() for r in records],
    }


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="stig-rollup",
        description=f"{APP_NAME} v{VERSION}",
        formatter_class=argparse.RawTextHelpFormatter,
    )
    parser.add_argument("--version", action="version", version=VERSION)
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable verbose logging")

    ckl_group = parser.add_argument_group("Checklists")
    ckl_group.add_argument("--parse", metavar="CKL", help="Parse a checklist and print a summary")
    ckl_group.add_argument("--canonicalize", metavar="CKL", help="Rewrite a checklist in canonical field order")
    ckl_group.add_argument("--out", help="Output CKL path")

    scan_group = parser.add_argument_group("Import SCAP Results")
    scan_group.add_argument("--scan", metavar="XML", help="DISA SCC or Nessus SCAP result file")
    scan_group.add_argument("--checklist", help="Existing checklist to merge into (default: new from template)")
    scan_group.add_argument("--templates", help="Template directory (default: ~/.stig_rollup/templates)")

    update_group = parser.add_argument_group("Update Checklist")
    update_group.add_argument("--update", nargs=2, metavar=("STORED", "INCOMING"),
                              help="Carry results from INCOMING into STORED")
    update_group.add_argument("--from-scan", action="store_true",
                              help="INCOMING was seeded from a scan (carry Open/NotAFinding only)")

    comp_group = parser.add_argument_group("NIST Compliance")
    comp_group.add_argument("--compliance", nargs="+", metavar="CKL", help="Checklists of one system")
    comp_group.add_argument("--catalog", help="CCI catalog JSON")
    comp_group.add_argument("--controls", help="NIST control definitions JSON")
    comp_group.add_argument("--impact", choices=[lvl.value for lvl in ImpactLevel],
                            help="Baseline filter (default: all controls)")
    comp_group.add_argument("--pii", action="store_true", help="Include privacy controls")
    comp_group.add_argument("--major-control", help="Limit to one control family, e.g. AC-2")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """
    Main CLI entry point.

    Args:
        argv: Command-line arguments (None = sys.argv)

    Returns:
        Exit code (0 = success, 1 = error, 130 = interrupted)
    """
    ok, err_list = Cfg.check()
    if not ok:
        for err in err_list:
            print(f"ERROR: {err}", file=sys.stderr)
        return 1
    Deps.warn_if_unsafe()

    parser = build_parser()
    args = parser.parse_args(argv)

    if args.verbose:
        LOG.set_verbose()

    GLOBAL_STATE.install_signals()

    try:
        if args.parse:
            print(json.dumps(summarize(args.parse), indent=2, ensure_ascii=False))
            return 0

        if args.canonicalize:
            if not args.out:
                parser.error("--canonicalize requires --out")
            raw = FO.read(args.canonicalize)
            document = canonicalize(raw)
            FO.write_text(args.out, document)
            result = {"ok": True, "output": str(args.out), "rebuilt": document != raw}
            print(json.dumps(result, indent=2, ensure_ascii=False))
            return 0

        if args.scan:
            if not args.out:
                parser.error("--scan requires --out")
            result = run_scan(args.scan, args.out, args.checklist, args.templates)
            print(json.dumps(result, indent=2, ensure_ascii=False))
            return 0 if result["ok"] else 1

        if args.update:
            if not args.out:
                parser.error("--update requires --out")
            stored, incoming = args.update
            document = apply_checklist_update(FO.read(stored), FO.read(incoming), args.from_scan)
            FO.write_text(args.out, document)
            print(json.dumps({"ok": True, "output": str(args.out)}, indent=2, ensure_ascii=False))
            return 0

        if args.compliance:
            if not (args.catalog and args.controls):
                parser.error("--compliance requires --catalog and --controls")
            print(json.dumps(run_compliance(args), indent=2, ensure_ascii=False))
            return 0

        parser.print_help()
        return 0

    except KeyboardInterrupt:
        print("\nOperation cancelled by user", file=sys.stderr)
        return 130
    except InterruptedError as exc:
        print(f"\nOperation cancelled: {exc}", file=sys.stderr)
        return 130
    except Exception as exc:
        LOG.e(f"Fatal error: {exc}", exc=True)
        print(f"ERROR: {exc}", file=sys.stderr)
        return 1
    finally:
        GLOBAL_STATE.cleanup()
        gc.collect()


if __name__ == "__main__":
    sys.exit(main())
