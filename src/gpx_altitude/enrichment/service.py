"""Track enrichment service: parse, collect, fetch, inject, serialize."""

import json
import logging
import os
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass

from gpx_altitude.config import Settings
from gpx_altitude.enrichment.collector import TrackpointRef, collect
from gpx_altitude.enrichment.fetcher import ElevationFetcher
from gpx_altitude.enrichment.injector import InjectionMode, inject
from gpx_altitude.enrichment.schemas import EnrichedPoint
from gpx_altitude.exceptions import InputFileError, MissingCredentialError, OutputFileError
from gpx_altitude.files import derive_output_path, write_text_atomic
from gpx_altitude.markup.parser import parse
from gpx_altitude.markup.serializer import serialize

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class EnrichmentRequest:
    """One pipeline run: where to read, where to write, and how to inject."""

    input_path: str
    output_path: str | None = None
    json_path: str | None = None
    skip_json: bool = False
    mode: InjectionMode = InjectionMode.ELEMENT

    @property
    def resolved_output_path(self) -> str:
        return self.output_path or derive_output_path(self.input_path, ".gpx")

    @property
    def resolved_json_path(self) -> str:
        return self.json_path or derive_output_path(self.input_path, ".json")


@dataclass(frozen=True, slots=True)
class EnrichmentResult:
    points_processed: int
    nodes_updated: int
    output_path: str
    json_path: str | None


def enriched_points(
    points: list[TrackpointRef], altitudes: list[float | None]
) -> list[EnrichedPoint]:
    return [
        EnrichedPoint(lat=point.lat, lon=point.lon, alt=altitude)
        for point, altitude in zip(points, altitudes, strict=True)
    ]


def _write_outputs(outputs: list[tuple[str, str]]) -> None:
    """Write every output or none: a failed write removes the ones before it."""
    written: list[str] = []
    for path, text in outputs:
        try:
            write_text_atomic(path, text)
        except OSError as exc:
            for done in written:
                os.remove(done)
            raise OutputFileError(path, str(exc)) from exc
        written.append(path)


class AltitudeService:
    """Runs the enrichment pipeline for track files.

    Holds the settings and a thread pool so async callers can run the
    blocking pipeline off the event loop. Nothing is written unless every
    stage succeeds.
    """

    def __init__(self, settings: Settings, *, fetcher: ElevationFetcher | None = None) -> None:
        self._settings = settings
        self._fetcher = fetcher or ElevationFetcher(settings)
        self._executor = ThreadPoolExecutor(max_workers=settings.max_workers)

    @property
    def executor(self) -> ThreadPoolExecutor:
        """Thread pool executor for running blocking pipeline runs in async contexts."""
        return self._executor

    def run(self, request: EnrichmentRequest) -> EnrichmentResult:
        """Enrich one track file with altitudes.

        Args:
            request: Input and output locations plus the injection mode.

        Returns:
            Counts of processed points and updated nodes, and the paths written.

        Raises:
            MissingCredentialError: If no API key is configured.
            InputFileError: If the input file cannot be read.
            ParseError: If the input is not well-formed markup.
            NoTrackpointsError: If the input has no usable coordinate nodes.
            LookupFailure: If an elevation batch exhausts its retries.
            ResultCardinalityMismatch: If the service returns a wrong result count.
            OutputFileError: If an output file cannot be written; files written
                earlier in the same run are removed.
        """
        if not self._settings.api_key:
            raise MissingCredentialError()

        try:
            with open(request.input_path, "rb") as file_handle:
                content = file_handle.read()
        except OSError as exc:
            raise InputFileError(request.input_path, str(exc)) from exc

        tree = parse(content)
        points = collect(tree)
        altitudes = self._fetcher.fetch_all(points)
        updated = inject(tree, points, altitudes, request.mode)

        output_path = request.resolved_output_path
        outputs = [(output_path, serialize(tree))]
        json_path = None
        if not request.skip_json:
            json_path = request.resolved_json_path
            payload = [point.model_dump() for point in enriched_points(points, altitudes)]
            outputs.append((json_path, json.dumps(payload, indent=2)))
        _write_outputs(outputs)

        logger.info(
            "Track enriched",
            extra={"path": output_path, "points": len(points), "updated": updated},
        )
        return EnrichmentResult(
            points_processed=len(points),
            nodes_updated=updated,
            output_path=output_path,
            json_path=json_path,
        )

    def shutdown(self) -> None:
        """Shut down the thread pool executor."""
        self._executor.shutdown(wait=False)
