# -*- coding: utf-8 -*-
"""LV Distribution Planner entrypoint.

Intentionally minimal:
- bootstrap (logging, settings overrides)
- read meter groups (JSON file or built-in sample)
- run the engine and print a summary
- optionally write the JSON snapshot
"""
from __future__ import annotations

import argparse
import json
import logging
import sys
from dataclasses import fields, replace
from pathlib import Path
from typing import Any, List, Mapping, Optional, Sequence

log = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_FAILED = 1
EXIT_BAD_INPUT = 2


def _build_parser() -> argparse.ArgumentParser:
    from lvplan.version import __version__

    p = argparse.ArgumentParser(prog="lvplan", description="Balance LV meters over transformers and breakers.")
    p.add_argument("input", nargs="?", help="JSON file: a list of meter rows or {\"meter_groups\": [...]}")
    p.add_argument("--sample", action="store_true", help="use the built-in sample meter groups")
    p.add_argument("--consolidate", action="store_true", help="enable cross-breaker consolidation")
    p.add_argument("--out", help="write the JSON snapshot to this file")
    p.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return p


def groups_from_payload(data: Any) -> List:
    """Accept rows (``type``, ``count``, ``capacity``) or fully computed meter groups."""
    from core.models.distribution import MeterGroup
    from domain.meter_catalog import build_meter_groups

    if isinstance(data, Mapping):
        data = data.get("meter_groups")
    if not isinstance(data, list):
        raise TypeError("expected a list of meter groups")

    names = [f.name for f in fields(MeterGroup)]
    if data and all(isinstance(row, Mapping) and "total_cdl" in row for row in data):
        return [MeterGroup(**{n: row[n] for n in names}) for row in data]
    return build_meter_groups(data)


def format_summary(results, connections, config=None) -> str:
    from core.config import DEFAULT_CONFIG
    from domain.planner import plan_transformers

    s = results.summary
    upfront = plan_transformers(s.total_load, (config or DEFAULT_CONFIG).transformer_types)
    lines = [
        f"Transformers: {s.total_transformers} ({s.transformer_details or '-'})",
        f"Breakers: {s.total_breakers}  distribution entries: {s.distribution_entries}",
        f"Meters: {s.total_meters}  load: {s.total_load:.1f} A / {s.total_load_kva:.1f} kVA",
        f"Utilization: min {s.min_utilization:.1f}%  avg {s.avg_utilization:.1f}%  max {s.max_utilization:.1f}%",
        f"Balance score: {s.balance_score:.1f}  efficiency: {s.efficiency:.1f}%",
        f"Upfront sizing for the total load: {' + '.join(t.name for t in upfront)}",
    ]
    if s.overloaded_breakers or s.overloaded_transformers:
        lines.append(f"Overloaded: {s.overloaded_breakers} breaker(s), {s.overloaded_transformers} transformer(s)")
    lines.append("")
    lines.append("Connections:")
    for c in connections:
        cfg = c.configuration
        outlet = f" outlet {c.dp_outlet_number}" if c.dp_outlet_number else ""
        lines.append(
            f"  {c.transformer_name} breaker {c.breaker_number}{outlet}: "
            f"{len(c.meters)} meter(s), {c.total_cdl:.1f} A via {cfg.source.value} "
            f"{cfg.customer_cable_count}x {cfg.customer_cable_size}, {cfg.fuses} fuse(s), {c.meter_boxes}"
        )
    return "\n".join(lines)


def main(argv: Optional[Sequence[str]] = None) -> int:
    from app.bootstrap import bootstrap
    from core.types import AllocationError
    from domain.meter_catalog import sample_meter_groups
    from services.distribution_service import DistributionService

    args = _build_parser().parse_args(argv)
    config = bootstrap()
    if args.consolidate:
        config = replace(config, consolidate=True)

    if args.sample:
        groups = sample_meter_groups()
    elif args.input:
        try:
            payload = json.loads(Path(args.input).read_text(encoding="utf-8"))
            groups = groups_from_payload(payload)
        except (OSError, TypeError, KeyError) as exc:
            log.error("Cannot read %s: %s", args.input, exc)
            return EXIT_BAD_INPUT
        except ValueError as exc:
            # json.JSONDecodeError is a ValueError too
            code = EXIT_BAD_INPUT if isinstance(exc, json.JSONDecodeError) else EXIT_FAILED
            log.error("Invalid input %s: %s", args.input, exc)
            return code
    else:
        print("lvplan: give an input file or --sample", file=sys.stderr)
        return EXIT_BAD_INPUT

    service = DistributionService(config)
    try:
        results, connections, issues = service.run(groups)
    except (ValueError, AllocationError) as exc:
        log.error("Distribution failed: %s", exc)
        return EXIT_FAILED

    print(format_summary(results, connections, config))
    if args.out:
        snapshot = service.snapshot(results, connections, issues)
        Path(args.out).write_text(json.dumps(snapshot, ensure_ascii=False, indent=2), encoding="utf-8")
        log.info("Snapshot written to %s", args.out)
    return EXIT_OK


if __name__ == "__main__":
    raise SystemExit(main())
