# dexsearch/ingest.py
"""Turn saved PokeAPI detail payloads into the catalog JSONL the search reads.

Input files are ``pokemon*.json`` under a data folder, each holding one
``/pokemon/{id}`` payload, a list of them, or ``{"results": [...]}``.
"""

import argparse
import glob
import json
import os
from typing import Any, Dict, List, Optional

import pandas as pd

from dexsearch.catalog import Record
from dexsearch.utils import setup_logger

logger = setup_logger("dexsearch.ingest")

STAT_NAMES = ("hp", "attack", "defense", "speed")
COLUMNS = ["name", "height", "weight", "types", "stats", "searchText"]


def _base_stat(raw_stats: List[Dict[str, Any]], name: str) -> int:
    for s in raw_stats or []:
        if (s.get("stat") or {}).get("name") == name:
            return int(s.get("base_stat") or 0)
    return 0


def _type_names(raw_types: List[Any]) -> List[str]:
    """Type names in slot order; accepts PokeAPI entries or plain strings."""
    entries = sorted(raw_types or [], key=lambda t: t.get("slot", 0) if isinstance(t, dict) else 0)
    names = []
    for t in entries:
        name = (t.get("type") or {}).get("name") if isinstance(t, dict) else t
        name = str(name or "").strip().lower()
        if name and name not in names:
            names.append(name)
    return names


def process_record(rec: Dict[str, Any], stats: Dict[str, int], drops: Dict[str, List[str]]) -> Optional[Dict[str, Any]]:
    """One payload -> one catalog row, or None when it cannot be used."""
    name = str(rec.get("name") or "").strip().lower()
    if not name:
        stats["drop_no_name"] += 1
        if len(drops["no_name"]) < 5:
            drops["no_name"].append(f"id={rec.get('id')!r}")
        return None

    types = _type_names(rec.get("types"))
    raw_stats = rec.get("stats") or []
    return {
        "name": name,
        "height": rec.get("height"),
        "weight": rec.get("weight"),
        "types": types,
        "stats": {s: _base_stat(raw_stats, s) for s in STAT_NAMES},
        "searchText": Record.derive_search_text(name, types),
    }


def _items(data: Any) -> List[Dict[str, Any]]:
    if isinstance(data, dict):
        if "results" in data:
            return data.get("results") or []
        return [data]
    return data or []


def run(data_dir: str, out_path: str, out_report: str) -> pd.DataFrame:
    files = sorted(glob.glob(os.path.join(data_dir, "pokemon*.json")))
    if not files:
        raise FileNotFoundError(f"No files matched {data_dir}/pokemon*.json")

    for p in (out_path, out_report):
        if os.path.dirname(p):
            os.makedirs(os.path.dirname(p), exist_ok=True)

    stats = {"payloads": 0, "drop_no_name": 0, "drop_dup": 0, "skipped_files": 0}
    drops: Dict[str, List[str]] = {"no_name": [], "dup": []}
    rows: List[Dict[str, Any]] = []

    for fp in files:
        try:
            with open(fp, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            logger.warning("Skip %s: cannot read json (%s)", fp, e)
            stats["skipped_files"] += 1
            continue

        for rec in _items(data):
            if not isinstance(rec, dict):
                continue
            stats["payloads"] += 1
            row = process_record(rec, stats, drops)
            if row is not None:
                rows.append(row)

    df = pd.DataFrame(rows, columns=COLUMNS)

    # names are the catalog identity; first payload wins
    dup_mask = df["name"].duplicated(keep="first")
    stats["drop_dup"] = int(dup_mask.sum())
    drops["dup"] = df.loc[dup_mask, "name"].head(5).tolist()
    df = df.loc[~dup_mask].reset_index(drop=True)

    df.to_json(out_path, orient="records", lines=True, force_ascii=False)

    with open(out_report, "w", encoding="utf-8") as w:
        w.write("# Ingest Report\n\n")
        w.write(f"- Source files: {len(files)} (unreadable: {stats['skipped_files']})\n")
        w.write(f"- Payloads: {stats['payloads']}\n")
        w.write(f"- Records kept: {len(df)}\n")
        w.write(f"- Dropped (no name): {stats['drop_no_name']}\n")
        w.write(f"- Dropped (duplicate name): {stats['drop_dup']}\n\n")
        if drops["no_name"]:
            w.write("## Examples: no name\n")
            for x in drops["no_name"]:
                w.write(f"- {x}\n")
            w.write("\n")
        if drops["dup"]:
            w.write("## Examples: duplicate name\n")
            for x in drops["dup"]:
                w.write(f"- {x}\n")
            w.write("\n")
        w.write("## Schema\n")
        w.write(" | ".join(COLUMNS) + "\n")

    logger.info("Saved %s records -> %s (report: %s)", len(df), out_path, out_report)
    return df


if __name__ == "__main__":
    ap = argparse.ArgumentParser()
    ap.add_argument("--data", required=True, help="folder containing pokemon*.json payloads")
    ap.add_argument("--out", default="./cache/pokemon.jsonl", help="catalog jsonl path")
    ap.add_argument("--report", default="./notes/ingest_report.md", help="report markdown path")
    args = ap.parse_args()
    run(args.data, args.out, args.report)
