"""
Batch validation for repository records.

Every detector and grouping builder keys on repository names, so a
batch is checked once, up front, and rejected as a whole when it breaks
the input contract.
"""

import logging
from collections import defaultdict
from typing import Any, Dict, List, Sequence, Tuple

from orgscan.core.exceptions import DuplicateRepositoryError, InputContractViolation
from orgscan.core.pipeline import PipelineStage, PipelineState
from orgscan.records.repository import RepositoryRecord

logger = logging.getLogger(__name__)


def find_duplicate_names(records: Sequence[RepositoryRecord]) -> Dict[str, List[int]]:
    """
    Find names used by more than one record.

    Args:
        records: The record batch.

    Returns:
        Mapping of each duplicated name to the batch positions using it.
    """
    positions: Dict[str, List[int]] = defaultdict(list)
    for index, record in enumerate(records):
        positions[record.name].append(index)
    return {name: found for name, found in positions.items() if len(found) > 1}


def _is_count(value) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def validate_record(record: RepositoryRecord) -> None:
    """
    Check a single record against the input contract.

    Raises:
        InputContractViolation: On a blank name, a non-string topic, a
            language byte count or star/fork count that is not a
            non-negative integer.
    """
    if not isinstance(record, RepositoryRecord):
        raise InputContractViolation(
            f"Expected RepositoryRecord, got {type(record).__name__}"
        )

    if not isinstance(record.name, str) or not record.name.strip():
        raise InputContractViolation("Repository record is missing its name")

    for topic in record.topics:
        if not isinstance(topic, str):
            raise InputContractViolation(
                f"Topic of {record.name} is not a string: {topic!r}",
                details={"repository": record.name, "topic": repr(topic)},
            )

    if not isinstance(record.languages, dict):
        raise InputContractViolation(
            f"Languages of {record.name} must be a mapping",
            details={"repository": record.name},
        )

    for language, size in record.languages.items():
        if not _is_count(size) or size < 0:
            raise InputContractViolation(
                f"Invalid byte count for {language} in {record.name}: {size!r}",
                details={"repository": record.name, "language": language, "bytes": size},
            )

    for metric in ("stars", "forks"):
        value = getattr(record, metric)
        if value is None:
            continue
        if not _is_count(value) or value < 0:
            raise InputContractViolation(
                f"Invalid {metric} count in {record.name}: {value!r}",
                details={"repository": record.name, metric: value},
            )


def validate_batch(records: Sequence[RepositoryRecord]) -> None:
    """
    Check a whole batch before any computation runs.

    An empty batch is valid.

    Raises:
        InputContractViolation: If any record is malformed.
        DuplicateRepositoryError: If two records share a name.
    """
    for record in records:
        validate_record(record)

    duplicates = find_duplicate_names(records)
    if duplicates:
        name, positions = next(iter(duplicates.items()))
        logger.error(f"Rejecting batch with duplicate names: {sorted(duplicates)}")
        raise DuplicateRepositoryError(name, positions)


class ValidationStage(PipelineStage):
    """Pipeline stage rejecting malformed batches before any computation."""

    @property
    def name(self) -> str:
        return "validation"

    def execute(self, state: PipelineState) -> Tuple[Dict[str, Any], Dict[str, Any]]:
        validate_batch(state.records)

        if not state.records:
            self.logger.info("Empty batch, summary will carry zero aggregates")

        return {"records": state.records}, {"record_count": len(state.records)}
