from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    Enum,
    Float,
    ForeignKey,
    Integer,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import declarative_base
from sqlalchemy.sql import func
from automation_coverage.models.schemas import (
    AutomationStatus,
    BuildStatus,
    CandidateStatus,
    TestRecordStatus,
)

Base = declarative_base()


class DomainModel(Base):
    __tablename__ = "domains"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False, unique=True)
    description = Column(Text, nullable=True)
    status = Column(String(50), nullable=True)


class ProjectModel(Base):
    __tablename__ = "projects"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False, index=True)
    description = Column(Text, nullable=True)
    status = Column(String(50), nullable=True)
    domain_id = Column(Integer, ForeignKey("domains.id"), nullable=True)


class TesterModel(Base):
    __tablename__ = "testers"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False)
    email = Column(String(255), nullable=True)
    role = Column(String(100), nullable=True)
    experience = Column(Integer, nullable=True)


class JiraIssueModel(Base):
    __tablename__ = "jira_issues"

    id = Column(Integer, primary_key=True, index=True)
    jira_key = Column(String(50), nullable=False, unique=True, index=True)
    summary = Column(Text, nullable=True)
    description = Column(Text, nullable=True)
    sprint_id = Column(String(50), nullable=True, index=True)
    sprint_name = Column(String(255), nullable=True)
    issue_type = Column(String(100), nullable=True)
    status = Column(String(100), nullable=True)
    priority = Column(String(50), nullable=True)
    assignee = Column(String(255), nullable=True)
    assignee_display_name = Column(String(255), nullable=True)
    search_keyword = Column(String(255), nullable=True)
    keyword_count = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    def __repr__(self):
        return f"<JiraIssue(id={self.id}, key='{self.jira_key}', status='{self.status}')>"


class TestCaseLinkModel(Base):
    __tablename__ = "jira_test_cases"
    __table_args__ = (UniqueConstraint("jira_issue_id", "qtest_title", name="uq_issue_title"),)

    id = Column(Integer, primary_key=True, index=True)
    jira_issue_id = Column(Integer, ForeignKey("jira_issues.id", ondelete="CASCADE"), nullable=False, index=True)
    qtest_title = Column(String(500), nullable=False)
    qtest_id = Column(String(100), nullable=True)
    can_be_automated = Column(Boolean, nullable=False, default=False)
    cannot_be_automated = Column(Boolean, nullable=False, default=False)
    automation_status = Column(Enum(AutomationStatus), nullable=False, default=AutomationStatus.PENDING)
    project_id = Column(Integer, ForeignKey("projects.id"), nullable=True)
    assigned_tester_id = Column(Integer, ForeignKey("testers.id"), nullable=True)
    domain_mapped = Column(String(255), nullable=True)
    notes = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    def __repr__(self):
        return f"<TestCaseLink(id={self.id}, title='{self.qtest_title}', status='{self.automation_status}')>"


class AutomationCandidateModel(Base):
    __tablename__ = "automation_test_cases"

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String(500), nullable=False, index=True)
    description = Column(Text, nullable=True)
    test_steps = Column(Text, nullable=True)
    expected_result = Column(Text, nullable=True)
    priority = Column(String(50), nullable=True)
    status = Column(Enum(CandidateStatus), nullable=False, default=CandidateStatus.READY_TO_AUTOMATE)
    project_id = Column(Integer, ForeignKey("projects.id"), nullable=True)
    tester_id = Column(Integer, ForeignKey("testers.id"), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())


class BuildResultModel(Base):
    __tablename__ = "jenkins_results"
    __table_args__ = (UniqueConstraint("job_name", "build_number", name="uq_job_build"),)

    id = Column(Integer, primary_key=True, index=True)
    job_name = Column(String(255), nullable=False, index=True)
    build_number = Column(String(50), nullable=False)
    build_status = Column(Enum(BuildStatus), nullable=False)
    total_tests = Column(Integer, nullable=False, default=0)
    passed_tests = Column(Integer, nullable=False, default=0)
    failed_tests = Column(Integer, nullable=False, default=0)
    skipped_tests = Column(Integer, nullable=False, default=0)
    build_url = Column(String(1000), nullable=True)
    build_timestamp = Column(DateTime(timezone=True), nullable=True)
    notes = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    def __repr__(self):
        return f"<BuildResult(id={self.id}, job='{self.job_name}', build='{self.build_number}')>"


class TestCaseRecordModel(Base):
    __tablename__ = "jenkins_test_cases"

    id = Column(Integer, primary_key=True, index=True)
    build_result_id = Column(Integer, ForeignKey("jenkins_results.id", ondelete="CASCADE"), nullable=False, index=True)
    class_name = Column(String(500), nullable=False)
    test_name = Column(String(500), nullable=False)
    status = Column(Enum(TestRecordStatus), nullable=False)
    duration = Column(Float, nullable=False, default=0.0)
