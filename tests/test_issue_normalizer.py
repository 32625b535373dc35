import pytest
from automation_coverage.services.issue_normalizer import extract_sprint_name, normalize_issue

SPRINT_FIELD = "customfield_10020"


def _raw_issue(**fields):
    base = {
        "summary": "Checkout redesign",
        "issuetype": {"name": "Story"},
        "status": {"name": "In Progress"},
    }
    base.update(fields)
    return {"key": "QA-101", "fields": base}


def test_core_fields_are_copied():
    issue = normalize_issue(_raw_issue(), sprint_id="7", board_id="42", sprint_field=SPRINT_FIELD)

    assert issue.jira_key == "QA-101"
    assert issue.summary == "Checkout redesign"
    assert issue.issue_type == "Story"
    assert issue.status == "In Progress"
    assert issue.sprint_id == "7"


def test_optional_fields_may_be_absent():
    issue = normalize_issue(_raw_issue(), sprint_field=SPRINT_FIELD)

    assert issue.priority is None
    assert issue.assignee is None
    assert issue.assignee_display_name is None
    assert issue.sprint_name is None
    assert issue.description == ""
    assert issue.linked_test_case_titles == []


def test_priority_and_assignee_are_extracted_when_present():
    raw = _raw_issue(
        priority={"name": "High"},
        assignee={"accountId": "5b10a2844c20165700ede21g", "displayName": "Alex Kim"},
    )

    issue = normalize_issue(raw, sprint_field=SPRINT_FIELD)

    assert issue.priority == "High"
    assert issue.assignee == "5b10a2844c20165700ede21g"
    assert issue.assignee_display_name == "Alex Kim"


def test_description_is_flattened_and_mined_for_test_cases():
    description = {
        "type": "doc",
        "content": [{"type": "paragraph", "content": [{"type": "text", "text": "QTest: Verify guest checkout"}]}],
    }

    issue = normalize_issue(_raw_issue(description=description), sprint_field=SPRINT_FIELD)

    assert issue.description == "QTest: Verify guest checkout"
    assert issue.linked_test_case_titles == ["Verify guest checkout"]


def test_sprint_name_comes_from_descriptor_string():
    descriptor = "com.atlassian.greenhopper.service.sprint.Sprint@1f[id=7,rapidViewId=42,state=ACTIVE,name=Sprint 7 - Payments,startDate=2024-01-01]"

    issue = normalize_issue(_raw_issue(**{SPRINT_FIELD: [descriptor]}), sprint_id="7", board_id="42", sprint_field=SPRINT_FIELD)

    assert issue.sprint_name == "Sprint 7 - Payments"


def test_sprint_descriptor_matching_the_sprint_id_is_preferred():
    descriptors = [{"id": 6, "name": "Sprint 6"}, {"id": 7, "name": "Sprint 7"}]

    issue = normalize_issue(_raw_issue(**{SPRINT_FIELD: descriptors}), sprint_id="7", sprint_field=SPRINT_FIELD)

    assert issue.sprint_name == "Sprint 7"


def test_unmatched_descriptor_falls_back_to_board_name():
    assert extract_sprint_name("garbage without a name", board_id="42") == "Sprint 42"


def test_missing_key_is_rejected():
    with pytest.raises(ValueError):
        normalize_issue({"fields": {"summary": "no key"}})
