#!/usr/bin/env python3
# Generate one round of synthetic climate layers for a place and write them to disk.
import argparse
import asyncio
import sys
from dataclasses import replace
from pathlib import Path

from loguru import logger

from resilient_cities.config import load_settings
from resilient_cities.coordinator import DataCoordinator, RefreshFailed
from resilient_cities.export import write_dataset
from resilient_cities.geocoding import NominatimResolver, StaticLocationResolver


def main():
    ap = argparse.ArgumentParser()
    ap.add_argument("--location", default="new york", help="Place name (demo city or free text with --nominatim)")
    ap.add_argument("--nominatim", action="store_true", help="Resolve the place through OpenStreetMap Nominatim")
    ap.add_argument("--margin", type=float, default=None, help="Half-width of the viewport box in degrees")
    ap.add_argument("--zoom", type=int, default=None)
    ap.add_argument("--out", default="data/processed/viewport")
    ap.add_argument("--verbose", action="store_true")
    args = ap.parse_args()

    logger.remove()
    logger.add(sys.stderr, level="DEBUG" if args.verbose else "WARNING")

    settings = load_settings()
    if args.margin is not None:
        settings = replace(settings, bounds_margin=args.margin)

    resolver = NominatimResolver() if args.nominatim else StaticLocationResolver()
    matches = resolver.search(args.location)
    if not matches:
        raise SystemExit(f"No location found for {args.location!r}.")
    location = matches[0]
    print(f"[gen] {location.name} ({location.lat:.4f}, {location.lng:.4f}), margin={settings.bounds_margin}")

    coordinator = DataCoordinator(settings=settings)
    try:
        dataset = asyncio.run(coordinator.select_location(location, zoom=args.zoom))
    except RefreshFailed as e:
        raise SystemExit(f"Generation failed: {e}")

    for label, value in coordinator.summary.display().items():
        print(f"[gen] {label}: {value}")

    paths = write_dataset(dataset, coordinator.summary, Path(args.out))
    print(f"[gen] wrote {', '.join(str(p) for p in paths)}")


if __name__ == "__main__":
    main()
