"""API routes for track enrichment."""

import asyncio
import logging
import os
import re
import tempfile
from typing import Annotated

from fastapi import APIRouter, Depends, File, Form, HTTPException, Request, Response, UploadFile, status

from gpx_altitude.enrichment.injector import InjectionMode
from gpx_altitude.enrichment.service import AltitudeService, EnrichmentRequest
from gpx_altitude.exceptions import (
    InputFileError,
    LookupFailure,
    MissingCredentialError,
    NoTrackpointsError,
    OutputFileError,
    ParseError,
    ResultCardinalityMismatch,
)
from gpx_altitude.files import output_stem

logger = logging.getLogger(__name__)

router = APIRouter(tags=["enrichment"])

GPX_MEDIA_TYPE = "application/gpx+xml; charset=utf-8"
_UNSAFE_HEADER_CHARS = re.compile(r"[\"\\\x00-\x1f\x7f]")


def get_altitude_service(request: Request) -> AltitudeService:
    """FastAPI dependency that retrieves the AltitudeService from app state."""
    service: AltitudeService = request.app.state.altitude_service
    return service


def content_disposition(upload_name: str) -> str:
    """Inline disposition naming the enriched file after the upload."""
    filename = _UNSAFE_HEADER_CHARS.sub("", output_stem(upload_name))
    return f'inline; filename="{filename}.gpx"'


@router.post("/gpx-to-alt", summary="Add altitudes to an uploaded GPX file")
async def gpx_to_alt(
    file: Annotated[UploadFile, File(...)],
    service: Annotated[AltitudeService, Depends(get_altitude_service)],
    mode: Annotated[str, Form()] = "ele",
) -> Response:
    """Enrich an uploaded track and return the rewritten GPX.

    Args:
        file: The uploaded GPX/PGX file.
        service: Injected AltitudeService instance.
        mode: 'attr' stores altitudes as an ``alt`` attribute, anything else
            as an ``<ele>`` child.

    Returns:
        The rewritten GPX document.
    """
    injection_mode = InjectionMode.ATTRIBUTE if mode == "attr" else InjectionMode.ELEMENT
    filename = os.path.basename(file.filename or "track.gpx")
    content = await file.read()

    with tempfile.TemporaryDirectory(prefix="gpx-to-alt-") as workdir:
        input_path = os.path.join(workdir, "input.gpx")
        with open(input_path, "wb") as file_handle:
            file_handle.write(content)
        enrichment = EnrichmentRequest(
            input_path=input_path,
            output_path=os.path.join(workdir, "output.gpx"),
            skip_json=True,
            mode=injection_mode,
        )

        loop = asyncio.get_running_loop()
        try:
            result = await loop.run_in_executor(service.executor, service.run, enrichment)
        except (InputFileError, ParseError, NoTrackpointsError) as exc:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=str(exc),
            ) from exc
        except MissingCredentialError as exc:
            logger.error("Server missing elevation API key")
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Server missing GOOGLE_MAPS_API_KEY",
            ) from exc
        except OutputFileError as exc:
            logger.error("Could not write enriched track", extra={"error": str(exc)})
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Could not write enriched track",
            ) from exc
        except (LookupFailure, ResultCardinalityMismatch) as exc:
            logger.error("Elevation lookup failed", extra={"upload": filename, "error": str(exc)})
            raise HTTPException(
                status_code=status.HTTP_502_BAD_GATEWAY,
                detail=str(exc),
            ) from exc

        with open(result.output_path, encoding="utf-8") as file_handle:
            document = file_handle.read()

    logger.info(
        "Served enriched track",
        extra={"upload": filename, "points": result.points_processed, "updated": result.nodes_updated},
    )
    return Response(
        content=document,
        media_type=GPX_MEDIA_TYPE,
        headers={"Content-Disposition": content_disposition(filename)},
    )
