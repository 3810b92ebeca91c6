"""Output file naming and atomic writes."""

import logging
import os
import re
import tempfile

logger = logging.getLogger(__name__)

OUTPUT_SUFFIX = "_with_alt"
_TRACK_EXTENSION = re.compile(r"\.(gpx|pgx)$", re.IGNORECASE)


def output_stem(filename: str) -> str:
    """Return the base name without a .gpx/.pgx extension, plus the output suffix."""
    base = os.path.basename(filename)
    return _TRACK_EXTENSION.sub("", base) + OUTPUT_SUFFIX


def derive_output_path(input_path: str, extension: str) -> str:
    """Derive an output path next to the input file.

    Example:
        >>> derive_output_path("/tracks/ride.GPX", ".json")
        '/tracks/ride_with_alt.json'
    """
    directory = os.path.dirname(input_path)
    return os.path.join(directory, output_stem(input_path) + extension)


def write_text_atomic(path: str, text: str) -> None:
    """Write UTF-8 text so that ``path`` is either untouched or complete.

    The content goes to a temporary file in the destination directory which
    then replaces ``path`` in a single rename.
    """
    directory = os.path.dirname(os.path.abspath(path))
    fd, tmp_path = tempfile.mkstemp(
        dir=directory, prefix=f".{os.path.basename(path)}.", suffix=".tmp"
    )
    try:
        with os.fdopen(fd, "w", encoding="utf-8", newline="") as file_handle:
            file_handle.write(text)
            file_handle.flush()
            os.fsync(file_handle.fileno())
        os.replace(tmp_path, path)
    except BaseException:
        if os.path.exists(tmp_path):
            os.remove(tmp_path)
        raise
    logger.info("Wrote output file", extra={"path": path, "bytes": len(text.encode("utf-8"))})
