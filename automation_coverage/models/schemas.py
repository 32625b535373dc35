from pydantic import BaseModel, Field
from typing import List, Optional
from datetime import datetime
from enum import Enum


class AutomationStatus(str, Enum):
    PENDING = "PENDING"
    CAN_AUTOMATE = "CAN_AUTOMATE"
    CANNOT_AUTOMATE = "CANNOT_AUTOMATE"


class CandidateStatus(str, Enum):
    READY_TO_AUTOMATE = "READY_TO_AUTOMATE"
    IN_PROGRESS = "IN_PROGRESS"
    AUTOMATED = "AUTOMATED"
    COMPLETED = "COMPLETED"


class BuildStatus(str, Enum):
    SUCCESS = "SUCCESS"
    FAILURE = "FAILURE"
    UNSTABLE = "UNSTABLE"
    ABORTED = "ABORTED"


class TestRecordStatus(str, Enum):
    PASSED = "PASSED"
    FAILED = "FAILED"
    SKIPPED = "SKIPPED"


# --- Issue tracker -----------------------------------------------------------


class NormalizedIssue(BaseModel):
    """Canonical issue produced from one raw issue-tracker payload"""

    jira_key: str
    summary: str = ""
    description: str = ""
    sprint_id: Optional[str] = None
    sprint_name: Optional[str] = None
    issue_type: str = ""
    status: str = ""
    priority: Optional[str] = None
    assignee: Optional[str] = None
    assignee_display_name: Optional[str] = None
    linked_test_case_titles: List[str] = Field(default_factory=list)


class LinkedTestCase(BaseModel):
    id: int
    jira_issue_id: int
    qtest_title: str
    qtest_id: Optional[str] = None
    can_be_automated: bool = False
    cannot_be_automated: bool = False
    automation_status: AutomationStatus = AutomationStatus.PENDING
    project_id: Optional[int] = None
    project_name: Optional[str] = None
    assigned_tester_id: Optional[int] = None
    assigned_tester_name: Optional[str] = None
    domain_mapped: Optional[str] = None
    notes: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class JiraIssue(BaseModel):
    id: int
    jira_key: str
    summary: Optional[str] = None
    description: Optional[str] = None
    sprint_id: Optional[str] = None
    sprint_name: Optional[str] = None
    issue_type: Optional[str] = None
    status: Optional[str] = None
    priority: Optional[str] = None
    assignee: Optional[str] = None
    assignee_display_name: Optional[str] = None
    search_keyword: Optional[str] = None
    keyword_count: int = 0
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    linked_test_cases: List[LinkedTestCase] = Field(default_factory=list)

    class Config:
        from_attributes = True


class Sprint(BaseModel):
    id: str
    name: str = ""
    state: str = ""
    startDate: Optional[str] = None
    endDate: Optional[str] = None


class AutomationFlagsRequest(BaseModel):
    canBeAutomated: bool = False
    cannotBeAutomated: bool = False


class TestCaseMappingRequest(BaseModel):
    projectId: Optional[int] = None
    testerId: Optional[int] = None


class KeywordSearchRequest(BaseModel):
    keyword: str = ""


class GlobalKeywordSearchRequest(BaseModel):
    keyword: str = ""
    jiraProjectKey: Optional[str] = None


class MatchingIssue(BaseModel):
    key: str
    summary: str = ""
    issueType: str = ""
    status: str = ""
    priority: Optional[str] = None


class GlobalKeywordSearchResponse(BaseModel):
    keyword: Optional[str] = None
    totalCount: int = 0
    matchingIssues: List[MatchingIssue] = Field(default_factory=list)
    searchDate: datetime


# --- Reference data ----------------------------------------------------------


class Domain(BaseModel):
    id: int
    name: str
    description: Optional[str] = None
    status: Optional[str] = None

    class Config:
        from_attributes = True


class Project(BaseModel):
    id: int
    name: str
    description: Optional[str] = None
    status: Optional[str] = None
    domain_id: Optional[int] = None

    class Config:
        from_attributes = True


class Tester(BaseModel):
    id: int
    name: str
    email: Optional[str] = None
    role: Optional[str] = None
    experience: Optional[int] = None

    class Config:
        from_attributes = True


class AutomationCandidate(BaseModel):
    id: int
    title: str
    description: Optional[str] = None
    test_steps: Optional[str] = None
    expected_result: Optional[str] = None
    priority: Optional[str] = None
    status: CandidateStatus = CandidateStatus.READY_TO_AUTOMATE
    project_id: Optional[int] = None
    tester_id: Optional[int] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


# --- CI server ---------------------------------------------------------------


class BuildSummary(BaseModel):
    """Build header normalized from the CI server"""

    job_name: str
    build_number: str
    build_status: BuildStatus
    total_tests: int = 0
    passed_tests: int = 0
    failed_tests: int = 0
    skipped_tests: int = 0
    build_url: Optional[str] = None
    build_timestamp: Optional[datetime] = None


class TestCaseRecordData(BaseModel):
    class_name: str
    test_name: str
    status: TestRecordStatus
    duration: float = 0.0


class TestCaseRecord(TestCaseRecordData):
    id: int
    build_result_id: int

    class Config:
        from_attributes = True


class BuildResult(BaseModel):
    id: int
    job_name: str
    build_number: str
    build_status: BuildStatus
    total_tests: int = 0
    passed_tests: int = 0
    failed_tests: int = 0
    skipped_tests: int = 0
    build_url: Optional[str] = None
    build_timestamp: Optional[datetime] = None
    notes: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class NotesUpdateRequest(BaseModel):
    notes: Optional[str] = None


class StatusCounts(BaseModel):
    total: int = 0
    passed: int = 0
    failed: int = 0
    skipped: int = 0


class DetailedTestCasesResponse(BaseModel):
    jobName: str
    buildNumber: str
    testCases: List[TestCaseRecordData] = Field(default_factory=list)
    totalCount: int = 0
    passedCount: int = 0
    failedCount: int = 0
    skippedCount: int = 0
    summaryCounts: Optional[StatusCounts] = None
    countsMatchSummary: bool = True
    source: str = "stored"
