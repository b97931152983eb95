"""Write the subtype query classes of a schema file to an output directory."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Iterable, List, Optional

# ---- sys.path bootstrap ----
PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))
# ----------------------------

from stiquery.core.config import LANGUAGES, GeneratorSettings  # noqa: E402
from stiquery.core.generators import BuildError, GeneratedUnit, QueryInheritanceBuilder  # noqa: E402
from stiquery.core.schema import SchemaError, load_database  # noqa: E402

log = logging.getLogger("stiquery.tools")


def _target_path(out_dir: Path, unit: GeneratedUnit) -> Path:
    return out_dir / unit.relative_path


def write_units(units: Iterable[GeneratedUnit], out_dir: Path) -> List[Path]:
    written: List[Path] = []
    for unit in units:
        path = _target_path(out_dir, unit)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(unit.source, encoding="utf-8")
        written.append(path)
    return written


def check_units(units: Iterable[GeneratedUnit], out_dir: Path) -> List[str]:
    """Relative paths whose file is missing or differs from the generated source."""
    drift: List[str] = []
    for unit in units:
        path = _target_path(out_dir, unit)
        if not path.exists() or path.read_text(encoding="utf-8") != unit.source:
            drift.append(unit.relative_path)
    return drift


def main(argv: Optional[List[str]] = None) -> int:
    ap = argparse.ArgumentParser(description=__doc__)
    ap.add_argument("--schema", required=True, help="Schema file (YAML or JSON)")
    ap.add_argument("--out", default="build/generated", help="Output directory (default build/generated)")
    ap.add_argument("--language", choices=LANGUAGES, help="Target language (default from STIQUERY_TARGET_LANGUAGE)")
    ap.add_argument("--table", help="Only generate the subtypes of this table")
    ap.add_argument("--timestamp", action="store_true", help="Add the generation timestamp to class headers")
    ap.add_argument("--check", action="store_true", help="Fail if generated files are missing or differ")
    args = ap.parse_args(argv)

    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")

    overrides = {"language": args.language, "add_timestamp": True if args.timestamp else None}
    settings = GeneratorSettings.from_env().with_payload(overrides)
    builder = QueryInheritanceBuilder(settings)

    try:
        database = load_database(args.schema)
        if args.table:
            table = database.get_table(args.table)
            if table is None:
                print(f"ERROR: unknown table {args.table}", file=sys.stderr)
                return 2
            units = builder.build_table(table)
        else:
            units = builder.build_database(database)
    except (SchemaError, BuildError) as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return 2

    out_dir = Path(args.out)
    if args.check:
        drift = check_units(units, out_dir)
        for rel in drift:
            print(f"DRIFT: {rel}")
        return 1 if drift else 0

    for path in write_units(units, out_dir):
        log.info("Wrote %s", path)
    print(f"OK: {len(units)} units written to {out_dir}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
