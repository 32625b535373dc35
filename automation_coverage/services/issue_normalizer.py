import re
from typing import Any, Dict, Optional
import structlog
from automation_coverage.config.settings import settings
from automation_coverage.models.schemas import NormalizedIssue
from automation_coverage.services.linked_artifacts import extract_linked_test_cases
from automation_coverage.services.rich_text import flatten_rich_text

logger = structlog.get_logger()

# Server-side sprint descriptors look like
# "com.atlassian.greenhopper.service.sprint.Sprint@1a2b[id=123,name=Sprint 1,...]"
SPRINT_NAME_PATTERN = re.compile(r"name=([^,\]]+)")


def _name_of(value: Any) -> Optional[str]:
    if isinstance(value, dict):
        name = value.get("name")
        return str(name) if name is not None else None
    return None


def extract_sprint_name(descriptor: Any, board_id: Optional[str] = None) -> str:
    """Sprint name out of a sprint descriptor, or a synthetic name from the board id."""
    if isinstance(descriptor, dict) and descriptor.get("name"):
        return str(descriptor["name"])
    if isinstance(descriptor, str):
        match = SPRINT_NAME_PATTERN.search(descriptor)
        if match:
            return match.group(1).strip()
    logger.debug("Could not extract sprint name", descriptor=str(descriptor)[:200])
    fallback_board = board_id if board_id is not None else settings.jira_board_id
    return f"Sprint {fallback_board}"


def _pick_sprint_descriptor(sprint_field: Any, sprint_id: Optional[str]) -> Any:
    if not isinstance(sprint_field, list) or not sprint_field:
        return None
    if sprint_id is not None:
        for descriptor in sprint_field:
            if isinstance(descriptor, dict) and str(descriptor.get("id")) == str(sprint_id):
                return descriptor
    return sprint_field[0]


def normalize_issue(
    raw: Dict[str, Any],
    sprint_id: Optional[str] = None,
    board_id: Optional[str] = None,
    sprint_field: Optional[str] = None,
) -> NormalizedIssue:
    """Map one raw search-result issue to a NormalizedIssue.

    Raises ``ValueError`` when the payload has no key; callers skip such records.
    """
    key = raw.get("key") if isinstance(raw, dict) else None
    if not key:
        raise ValueError("issue payload has no key")

    fields = raw.get("fields") or {}
    description = flatten_rich_text(fields.get("description"))

    assignee = fields.get("assignee")
    assignee_id = None
    assignee_display_name = None
    if isinstance(assignee, dict):
        assignee_id = assignee.get("name") or assignee.get("accountId")
        assignee_display_name = assignee.get("displayName")

    sprint_name = None
    descriptor = _pick_sprint_descriptor(fields.get(sprint_field or settings.jira_sprint_field), sprint_id)
    if descriptor is not None:
        sprint_name = extract_sprint_name(descriptor, board_id)

    return NormalizedIssue(
        jira_key=str(key),
        summary=fields.get("summary") or "",
        description=description,
        sprint_id=str(sprint_id) if sprint_id is not None else None,
        sprint_name=sprint_name,
        issue_type=_name_of(fields.get("issuetype")) or "",
        status=_name_of(fields.get("status")) or "",
        priority=_name_of(fields.get("priority")),
        assignee=assignee_id,
        assignee_display_name=assignee_display_name,
        linked_test_case_titles=extract_linked_test_cases(description),
    )
