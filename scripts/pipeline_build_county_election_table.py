"""
Pipeline: Build the county election analysis table from sources.py.

Inputs (paths in src/configs/sources.py, relative to the data root):
- county_characteristics (anchor)
- party_registration (Nov 2016 snapshot)
- election_results (2016 presidential)

Registration and results are left-joined onto the county characteristics on
(State, County); derived proportions and flags are appended in the order of
src/configs/derived.py.

The data root is --base-path, else $COUNTY_DATA_ROOT (.env supported), else
the project root.

Output: data/processed_data/county_election_table.csv
Optional: descriptive statistics summary (--summary, .md or .csv)
"""

import argparse
import logging
import os
import sys
from pathlib import Path

from dotenv import load_dotenv

project_root = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(project_root))

from src.raw_table_inspector.inspector import (
    check_population_consistency,
    check_unmatched_keys,
    dataframe_to_markdown,
    describe_table,
)
from src.table_builder.builder import build_county_election_table
from src.table_builder.reader import read

load_dotenv()

logging.basicConfig(level=logging.INFO, format="%(levelname)s: %(message)s")
logger = logging.getLogger(__name__)

DEFAULT_OUTPUT = "data/processed_data/county_election_table.csv"


def main():
    parser = argparse.ArgumentParser(
        description="Build the county election table (characteristics + registration + 2016 results)."
    )
    parser.add_argument(
        "--output",
        type=str,
        default=DEFAULT_OUTPUT,
        help=f"Output CSV path, relative to the data root (default: {DEFAULT_OUTPUT})",
    )
    parser.add_argument(
        "--base-path",
        type=str,
        default=None,
        help="Data root (default: $COUNTY_DATA_ROOT or project root)",
    )
    parser.add_argument(
        "--summary",
        type=str,
        default="",
        help="Optional descriptive statistics output, relative to the data root (.md for markdown, otherwise CSV).",
    )
    args = parser.parse_args()

    base_arg = args.base_path or os.getenv("COUNTY_DATA_ROOT")
    base_path = Path(base_arg) if base_arg else project_root
    output_path = base_path / args.output
    output_path.parent.mkdir(parents=True, exist_ok=True)

    characteristics = read("county_characteristics", base_path)
    registration = read("party_registration", base_path)
    results = read("election_results", base_path)
    for name, df in (
        ("county_characteristics", characteristics),
        ("party_registration", registration),
        ("election_results", results),
    ):
        logger.info(f"{name}: {len(df)} rows, {len(df.columns)} columns")

    check_population_consistency(characteristics)
    check_unmatched_keys(characteristics, registration, "party_registration")
    check_unmatched_keys(characteristics, results, "election_results")

    print("Building county election table...")
    df = build_county_election_table(characteristics, registration, results)
    df.to_csv(output_path, index=False)
    print(f"Saved {len(df)} rows to {output_path}")

    if args.summary:
        summary = describe_table(df)
        summary_path = base_path / args.summary
        summary_path.parent.mkdir(parents=True, exist_ok=True)
        if summary_path.suffix.lower() == ".md":
            summary_path.write_text(dataframe_to_markdown(summary), encoding="utf-8")
        else:
            summary.to_csv(summary_path, index=False)
        print(f"Wrote descriptive statistics to: {summary_path}")


if __name__ == "__main__":
    main()
    sys.exit(0)
