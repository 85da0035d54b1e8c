"""
Loading of repository records produced by the acquisition layer.

The acquisition layer writes its finished batch as JSON, either as a
bare list of repository objects or wrapped together with the
organization name.
"""

import json
import logging
from pathlib import Path
from typing import Any, List, Optional, Tuple

from orgscan.core.exceptions import InputContractViolation, RecordLoadError
from orgscan.records.repository import RepositoryRecord

logger = logging.getLogger(__name__)


def parse_records(data: Any) -> Tuple[Optional[str], List[RepositoryRecord]]:
    """
    Build records from decoded JSON.

    Args:
        data: A list of repository objects, or an object with a
            ``repositories`` list and an optional ``organization``.

    Returns:
        Tuple of (organization or None, records in file order).

    Raises:
        RecordLoadError: If the document has the wrong shape.
        InputContractViolation: If a repository object is malformed.
    """
    organization = None

    if isinstance(data, dict):
        organization = data.get("organization")
        entries = data.get("repositories")
        if not isinstance(entries, list):
            raise RecordLoadError(
                "Expected a 'repositories' list in the records document",
                details={"keys": sorted(data.keys())},
            )
    elif isinstance(data, list):
        entries = data
    else:
        raise RecordLoadError(
            f"Unsupported records document: {type(data).__name__}"
        )

    records = []
    for position, entry in enumerate(entries):
        try:
            records.append(RepositoryRecord.from_dict(entry))
        except InputContractViolation as e:
            e.details.setdefault("position", position)
            raise

    return organization, records


def load_records(path: Path) -> Tuple[Optional[str], List[RepositoryRecord]]:
    """
    Read a records file written by the acquisition layer.

    Args:
        path: Path to the JSON document.

    Returns:
        Tuple of (organization or None, records in file order).

    Raises:
        RecordLoadError: If the file is missing or not valid JSON.
    """
    path = Path(path)
    if not path.exists():
        raise RecordLoadError(f"Records file not found: {path}", details={"path": str(path)})

    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        raise RecordLoadError(
            f"Invalid JSON in records file: {e}", details={"path": str(path)}
        ) from e

    organization, records = parse_records(data)
    logger.info(f"Loaded {len(records)} repository records from {path}")
    return organization, records
