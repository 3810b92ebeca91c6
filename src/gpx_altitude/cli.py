"""Command line entry point.

Run directly:
    python -m gpx_altitude.cli trace.gpx [out.json] [--key=API_KEY] [--out-gpx=FILE]
        [--mode=element|attribute] [--no-json]
"""

import argparse
import logging
import sys
from collections.abc import Sequence

from gpx_altitude.config import Settings
from gpx_altitude.enrichment.injector import InjectionMode
from gpx_altitude.enrichment.service import AltitudeService, EnrichmentRequest
from gpx_altitude.exceptions import AppError

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="gpx-altitude",
        description="Add altitudes from the Google Elevation API to a GPX/PGX track.",
    )
    parser.add_argument("input", help="GPX or PGX file to enrich")
    parser.add_argument(
        "output_json",
        nargs="?",
        default=None,
        help="JSON point list destination (default: <base>_with_alt.json)",
    )
    parser.add_argument("--key", default=None, help="API key (default: $GOOGLE_MAPS_API_KEY)")
    parser.add_argument(
        "--out-gpx",
        default=None,
        help="rewritten GPX destination (default: <base>_with_alt.gpx)",
    )
    parser.add_argument(
        "--mode",
        type=InjectionMode,
        default=InjectionMode.ELEMENT,
        help="store altitude as an <ele> child (element, ele) or an alt attribute (attribute, attr)",
    )
    parser.add_argument("--no-json", action="store_true", help="do not write the JSON point list")
    parser.add_argument("--verbose", "-v", action="store_true", help="enable debug logging")
    return parser


def _report(exc: AppError) -> int:
    logger.debug("Enrichment failed", exc_info=True)
    print(f"error [{exc.code}]: {exc}", file=sys.stderr)
    return 1


def main(argv: Sequence[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s [%(levelname)s] %(name)s - %(message)s",
    )

    try:
        settings = Settings.from_env().with_api_key(args.key)
    except AppError as exc:
        return _report(exc)

    request = EnrichmentRequest(
        input_path=args.input,
        output_path=args.out_gpx,
        json_path=args.output_json,
        skip_json=args.no_json,
        mode=args.mode,
    )

    service = AltitudeService(settings)
    try:
        result = service.run(request)
    except AppError as exc:
        return _report(exc)
    finally:
        service.shutdown()

    if result.json_path:
        print(f"JSON: {result.points_processed} points written to {result.json_path}")
    print(f"GPX: {result.nodes_updated} trackpoints updated -> {result.output_path}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
