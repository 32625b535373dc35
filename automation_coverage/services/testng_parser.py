"""Parser for TestNG ``testng-results.xml`` report documents.

A build may archive several reports (parallel executions); every
``<test-method>`` in every readable document becomes one record, in document
order. Configuration methods (``is-config="true"``) are not tests and are left
out. Unreadable documents are logged and skipped.
"""

from typing import Iterable, List, Optional, Union
from xml.etree import ElementTree as ET
import structlog
from automation_coverage.models.schemas import StatusCounts, TestCaseRecordData, TestRecordStatus

logger = structlog.get_logger()

ReportDocument = Union[str, bytes]

STATUS_MAP = {
    "PASS": TestRecordStatus.PASSED,
    "PASSED": TestRecordStatus.PASSED,
    "FAIL": TestRecordStatus.FAILED,
    "FAILED": TestRecordStatus.FAILED,
    "SKIP": TestRecordStatus.SKIPPED,
    "SKIPPED": TestRecordStatus.SKIPPED,
}


def _duration_seconds(value: Optional[str]) -> float:
    if not value:
        return 0.0
    try:
        return float(value) / 1000.0
    except ValueError:
        return 0.0


def parse_report(document: ReportDocument) -> List[TestCaseRecordData]:
    """Records of one report; raises ``ET.ParseError`` on malformed XML and
    ``LookupError`` when the declared encoding is unknown
    """
    root = ET.fromstring(document)
    records: List[TestCaseRecordData] = []

    for class_node in root.iter("class"):
        class_name = class_node.get("name", "")
        for method in class_node.findall("test-method"):
            if (method.get("is-config") or "").lower() == "true":
                continue
            status = STATUS_MAP.get((method.get("status") or "").upper())
            if status is None:
                logger.debug("Skipping test method with unknown status", method=method.get("name"), status=method.get("status"))
                continue
            records.append(
                TestCaseRecordData(
                    class_name=class_name,
                    test_name=method.get("name", ""),
                    status=status,
                    duration=_duration_seconds(method.get("duration-ms")),
                )
            )

    return records


def parse_reports(documents: Iterable[Optional[ReportDocument]]) -> List[TestCaseRecordData]:
    records: List[TestCaseRecordData] = []
    for index, document in enumerate(documents):
        if not document:
            logger.warning("Skipping empty result report", document_index=index)
            continue
        try:
            parsed = parse_report(document)
        except (ET.ParseError, LookupError, ValueError) as e:
            logger.warning("Skipping unparseable result report", document_index=index, error=str(e))
            continue
        logger.info("Parsed result report", document_index=index, records=len(parsed))
        records.extend(parsed)
    return records


def count_by_status(records: Iterable[TestCaseRecordData]) -> StatusCounts:
    counts = StatusCounts()
    for record in records:
        counts.total += 1
        if record.status == TestRecordStatus.PASSED:
            counts.passed += 1
        elif record.status == TestRecordStatus.FAILED:
            counts.failed += 1
        else:
            counts.skipped += 1
    return counts
