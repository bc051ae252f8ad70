from __future__ import annotations

import argparse
from datetime import date
from pathlib import Path

import requests


# ---------------------------------------------------------------------------
# Paths & URLs
# ---------------------------------------------------------------------------

PACKAGE_DIR = Path(__file__).resolve().parent
RAW_DIR = PACKAGE_DIR / "data" / "raw"

SOC_API_URL = "https://sis.rutgers.edu/soc/api/courses.json"

VALID_TERMS = {
    "0": "Winter",
    "1": "Spring",
    "7": "Summer",
    "9": "Fall",
}


# ---------------------------------------------------------------------------
# Core logic
# ---------------------------------------------------------------------------


def raw_file_path(year: str, term: str, campus: str, raw_dir: Path = RAW_DIR) -> Path:
    return Path(raw_dir) / f"courses_{year}_{term}_{campus}.json"


def fetch_courses(
    year: str,
    term: str,
    campus: str = "NB",
    refresh: bool = False,
    raw_dir: Path = RAW_DIR,
) -> Path:
    """
    Download the full course list for one term and cache it as raw JSON.

    Returns the path of the cached file.
    """
    term = term.strip()
    if term not in VALID_TERMS:
        raise ValueError(f"Invalid term {term!r}. Must be 0 (Winter), 1 (Spring), 7 (Summer), or 9 (Fall)")

    out_file = raw_file_path(year, term, campus, raw_dir)
    if out_file.exists() and not refresh:
        print(f"SKIP  {out_file.name} (cached)")
        return out_file

    out_file.parent.mkdir(parents=True, exist_ok=True)

    print(f"Fetching {VALID_TERMS[term]} {year} ({campus})")
    params = {"year": year, "term": term, "campus": campus}
    resp = requests.get(
        SOC_API_URL,
        params=params,
        headers={"Accept": "application/json", "Cache-Control": "no-cache"},
        timeout=30,
    )
    resp.raise_for_status()

    out_file.write_text(resp.text, encoding="utf-8")
    print(f"Saved {out_file.name}")
    return out_file


# ---------------------------------------------------------------------------
# CLI entry
# ---------------------------------------------------------------------------


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="courseplanner.fetch", description="Download the course catalog (cache JSON)")
    p.add_argument("--year", "-y", type=str, default=str(date.today().year), help="Catalog year (e.g., 2026)")
    p.add_argument("--term", "-t", type=str, default="9", help="0=Winter, 1=Spring, 7=Summer, 9=Fall")
    p.add_argument("--campus", "-c", type=str, default="NB", help="Campus code (NB, NK, CM)")
    p.add_argument("--refresh", action="store_true", help="Re-fetch and overwrite an existing download")
    return p


def main(argv: list[str] | None = None) -> None:
    args = build_parser().parse_args(argv)
    fetch_courses(args.year.strip(), args.term, campus=args.campus.strip(), refresh=args.refresh)


if __name__ == "__main__":
    main()
