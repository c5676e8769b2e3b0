"""Re-run response normalisation over stored analysis records."""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Mapping

from response_parser import (
    STATUS_EMPTY,
    STATUS_SUCCESS,
    STATUS_TEXT_ONLY,
    CanonicalAnalysis,
    normalize_with_status,
)

logger = logging.getLogger(__name__)

SUCCESS_STATUSES = {STATUS_SUCCESS, STATUS_TEXT_ONLY}
SKIPPED_STATUSES = {STATUS_EMPTY}

PARSED_FIELDS = ("parsedSkills", "parsedWorkHistory", "parsedRedFlags")


@dataclass
class RecordOutcome:
    record_id: Any
    status: str
    analysis: CanonicalAnalysis

    def to_dict(self) -> Dict[str, Any]:
        return {"id": self.record_id, "status": self.status, "analysis": self.analysis.to_dict()}


@dataclass
class BatchResult:
    successful: int = 0
    failed: int = 0
    skipped: int = 0
    total: int = 0
    processed_ids: List[Any] = field(default_factory=list)
    failed_ids: List[Any] = field(default_factory=list)
    skipped_ids: List[Any] = field(default_factory=list)
    results: List[RecordOutcome] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "successful": self.successful,
            "failed": self.failed,
            "skipped": self.skipped,
            "total": self.total,
            "processedIds": list(self.processed_ids),
            "failedIds": list(self.failed_ids),
            "skippedIds": list(self.skipped_ids),
            "results": [outcome.to_dict() for outcome in self.results],
        }


def unprocessed_records(records: Iterable[Mapping[str, Any]], payload_key: str = "rawResponse") -> List[Mapping[str, Any]]:
    """Records that carry a raw response but none of the parsed fields yet."""
    return [
        record
        for record in records
        if record.get(payload_key) is not None
        and all(record.get(name) is None for name in PARSED_FIELDS)
    ]


def _page(records: List[Mapping[str, Any]], limit: int, offset: int) -> List[Mapping[str, Any]]:
    if offset > 0:
        records = records[offset:]
    if limit > 0:
        records = records[:limit]
    return records


def process_records(
    records: Iterable[Mapping[str, Any]],
    limit: int = 0,
    offset: int = 0,
    id_key: str = "id",
    payload_key: str = "rawResponse",
) -> BatchResult:
    """Normalise the raw response of every record in the requested page.

    ``limit`` and ``offset`` of 0 mean "no limit" and "from the start".
    """
    page = _page(list(records), limit, offset)
    batch = BatchResult(total=len(page))

    for position, record in enumerate(page):
        record_id = record.get(id_key, offset + position)
        analysis, status = normalize_with_status(record.get(payload_key))
        batch.results.append(RecordOutcome(record_id=record_id, status=status, analysis=analysis))

        if status in SUCCESS_STATUSES:
            batch.successful += 1
            batch.processed_ids.append(record_id)
        elif status in SKIPPED_STATUSES:
            batch.skipped += 1
            batch.skipped_ids.append(record_id)
        else:
            batch.failed += 1
            batch.failed_ids.append(record_id)
            logger.warning("Analysis record %s could not be parsed (status=%s)", record_id, status)

    logger.info(
        "Processed %d analysis records (offset=%d, limit=%d): %d successful, %d skipped, %d failed",
        batch.total,
        offset,
        limit,
        batch.successful,
        batch.skipped,
        batch.failed,
    )
    return batch


def apply_outcome(record: Mapping[str, Any], outcome: RecordOutcome) -> Dict[str, Any]:
    """Return a copy of ``record`` with the parsed fields filled from ``outcome``."""
    analysis = outcome.analysis
    updated = dict(record)
    updated.update(
        {
            "parsedSkills": list(analysis.skills),
            "parsedWorkHistory": list(analysis.work_history),
            "parsedRedFlags": list(analysis.red_flags),
            "parsedSummary": analysis.summary,
            "overallScore": analysis.score,
            "parsingStatus": outcome.status,
        }
    )
    return updated
