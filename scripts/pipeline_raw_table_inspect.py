import argparse
import json
import sys
from pathlib import Path

# Add project root to Python path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from src.configs.sources import SOURCES
from src.raw_table_inspector.inspector import dataframe_to_markdown, inspect_dtypes, missing_counts
from src.table_builder.reader import read

def inspect_all_sources(names: list[str], base_path: Path | None = None) -> dict:
    results = {}
    for name in names:
        try:
            df = read(name, base_path=base_path)
            report = inspect_dtypes(df).merge(missing_counts(df), on="column", how="left")
            results[name] = report
        except (FileNotFoundError, KeyError, ValueError) as e:
            results[name] = type(e).__name__ + ": " + str(e)
    return results


def inspect_to_markdown(results: dict) -> str:
    blocks = []
    for name, value in results.items():
        blocks.append(f"## {name}")
        if isinstance(value, str):
            blocks.append(f"`{value}`")
        else:
            blocks.append(dataframe_to_markdown(value))
    return "\n\n".join(blocks)


def results_to_json(results: dict) -> dict:
    """Convert inspection results to a JSON-serializable dict."""
    out = {}
    for name, value in results.items():
        if isinstance(value, str):
            out[name] = {"error": value}
        else:
            out[name] = value.to_dict(orient="records")  # list of {"column", "dtype", "missing", "missing_pct"}
    return out

def main():
    parser = argparse.ArgumentParser(
        description="Inspect the county source tables and report dtypes and missing values."
    )
    parser.add_argument(
        "--which",
        choices=list(SOURCES) + ["all"],
        default="all",
        help="Which source table to inspect.",
    )
    parser.add_argument(
        "--out",
        type=str,
        default="",
        help="Output file path. Use .json for JSON or .md for markdown; if empty, print to stdout.",
    )
    parser.add_argument(
        "--base-path",
        type=str,
        default=None,
        help="Project root for resolving relative paths (default: script's parent parent).",
    )
    args = parser.parse_args()

    base_path = Path(args.base_path) if args.base_path else project_root
    names = list(SOURCES) if args.which == "all" else [args.which]

    results = inspect_all_sources(names, base_path=base_path)
    as_json = args.out.lower().endswith(".json") if args.out else False

    if args.out:
        out_path = Path(args.out)
        out_path.parent.mkdir(parents=True, exist_ok=True)
        if as_json:
            payload = results_to_json(results)
            out_path.write_text(json.dumps(payload, indent=2), encoding="utf-8")
        else:
            out_path.write_text(inspect_to_markdown(results), encoding="utf-8")
        print(f"Wrote dtype report to: {out_path}")
    else:
        if as_json:
            print(json.dumps(results_to_json(results), indent=2))
        else:
            print(inspect_to_markdown(results))

if __name__ == "__main__":
    main()
