"""JSON serialization of the conditions document and atomic local writes."""

import json
import logging
import os
import tempfile
from pathlib import Path

from ski_conditions.models import ConditionsDocument

logger = logging.getLogger(__name__)


def document_to_dict(document: ConditionsDocument) -> dict:
    """Convert the document to its published (wire-name) JSON structure."""
    return document.model_dump(mode="json", by_alias=True)


def render_json(document: ConditionsDocument) -> str:
    """Pretty-printed JSON text of the document."""
    return json.dumps(document_to_dict(document), indent=2)


def write_json_atomic(path: Path, document: ConditionsDocument) -> None:
    """
    Write the document as JSON atomically using temp file + rename.

    Args:
        path: Target path
        document: Document to write
    """
    path.parent.mkdir(parents=True, exist_ok=True)

    # Write to temp file in same directory (for atomic rename)
    fd, temp_path = tempfile.mkstemp(
        dir=path.parent,
        prefix=f".{path.stem}_",
        suffix=".tmp"
    )

    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(render_json(document))
            f.write("\n")

        # Atomic rename
        os.replace(temp_path, path)
        logger.info(f"Wrote {path}")

    except Exception:
        # Clean up temp file on error
        try:
            os.unlink(temp_path)
        except OSError:
            pass
        raise
