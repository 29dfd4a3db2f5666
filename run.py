"""CLI entrypoint."""
from __future__ import annotations

import argparse
import dataclasses
import json
import logging
import sys
from typing import Optional

from placefinder import config
from placefinder.geocoder import GeocodeError
from placefinder.http import RequestMetrics
from placefinder.reporting import write_json_object
from placefinder.search import PageOutOfRangeError, ValidationError, build_place_search


def parse_args(argv: Optional[list[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Search, rank and paginate places using Google Maps")
    parser.add_argument("query", nargs="?", default=None, help="Free-text place search")
    parser.add_argument("--top-n", type=int, default=config.DEFAULT_PAGE_SIZE, help="Results per page")
    parser.add_argument("--page", type=int, default=config.DEFAULT_PAGE, help="Page number (1-based)")
    parser.add_argument("--rewrite", action="store_true", help="Rewrite the query with the LLM first")
    parser.add_argument("--anchor", type=str, default=None, help="Anchor location for distance ranking")
    parser.add_argument("--no-anchor", action="store_true", help="Disable distance ranking")
    parser.add_argument("--out", type=str, default=None, help="Also write the JSON result to this path")
    parser.add_argument("--preflight", action="store_true", help="Check configuration and exit")
    return parser.parse_args(argv)


def settings_from_args(args: argparse.Namespace, settings: config.Settings) -> config.Settings:
    if args.no_anchor:
        return dataclasses.replace(settings, use_anchor=False)
    if args.anchor:
        return dataclasses.replace(settings, anchor_location=args.anchor.strip(), use_anchor=True)
    return settings


def run_preflight(settings: config.Settings) -> int:
    ok = True
    if settings.google_maps_api_key:
        print("GOOGLE_MAPS_API_KEY: OK")
    else:
        print("GOOGLE_MAPS_API_KEY: MISSING")
        ok = False
    print("DEEPSEEK_API_KEY: " + ("OK" if settings.deepseek_api_key else "MISSING (rewrite disabled)"))

    if settings.anchor_enabled and settings.google_maps_api_key:
        search = build_place_search(settings)
        try:
            coord = search.geocoder.resolve(settings.anchor_location or "")
            print(f"Anchor: OK ({coord.latitude:.5f},{coord.longitude:.5f})")
        except GeocodeError as exc:
            print(f"Anchor: FAIL ({exc})")
            ok = False
    elif settings.anchor_location:
        print("Anchor: SKIPPED")
    else:
        print("Anchor: none (rating-only ranking)")

    print("Preflight: PASS" if ok else "Preflight: FAIL")
    return 0 if ok else 1


def main(argv: Optional[list[str]] = None) -> int:
    config.load_env()
    args = parse_args(argv)
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")
    settings = settings_from_args(args, config.Settings.from_env())

    if args.preflight:
        return run_preflight(settings)

    if not settings.google_maps_api_key:
        print("Missing GOOGLE_MAPS_API_KEY in environment", file=sys.stderr)
        return 1
    if not args.query:
        print("A query is required", file=sys.stderr)
        return 2

    metrics = RequestMetrics()
    search = build_place_search(settings, metrics=metrics)
    try:
        if args.rewrite:
            result = search.search_with_rewrite(args.query, args.top_n, args.page)
        else:
            result = search.search(args.query, args.top_n, args.page)
    except (ValidationError, PageOutOfRangeError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 2

    payload = result.to_dict()
    print(json.dumps(payload, ensure_ascii=False, indent=2))
    if args.out:
        write_json_object(args.out, payload)
        print(f"Results written to {args.out}", file=sys.stderr)
    logging.getLogger(__name__).info(
        "Network requests: %s (places=%s geocode=%s)",
        metrics.total,
        metrics.network_places,
        metrics.network_geocode,
    )
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
