from functools import lru_cache
from fastapi import Depends
from sqlalchemy.orm import Session
from automation_coverage.repositories.interfaces.issue_repository import IJiraIssueRepository
from automation_coverage.repositories.interfaces.test_case_link_repository import ITestCaseLinkRepository
from automation_coverage.repositories.interfaces.reference_repository import IReferenceDataRepository
from automation_coverage.repositories.interfaces.automation_candidate_repository import IAutomationCandidateRepository
from automation_coverage.repositories.interfaces.build_result_repository import IBuildResultRepository
from automation_coverage.repositories.interfaces.jira_service import IJiraService
from automation_coverage.repositories.interfaces.jenkins_service import IJenkinsService
from automation_coverage.repositories.interfaces.qtest_service import IQTestService

from automation_coverage.repositories.implementations.sql_issue_repository import SQLJiraIssueRepository
from automation_coverage.repositories.implementations.sql_test_case_link_repository import SQLTestCaseLinkRepository
from automation_coverage.repositories.implementations.sql_reference_repository import SQLReferenceDataRepository
from automation_coverage.repositories.implementations.sql_automation_candidate_repository import SQLAutomationCandidateRepository
from automation_coverage.repositories.implementations.sql_build_result_repository import SQLBuildResultRepository
from automation_coverage.repositories.implementations.jira_service import AtlassianJiraService
from automation_coverage.repositories.implementations.jenkins_service import JenkinsService
from automation_coverage.repositories.implementations.qtest_service import QTestService

from automation_coverage.services.automation_workflow import AutomationReadinessWorkflow
from automation_coverage.services.build_result_service import BuildResultSyncCoordinator
from automation_coverage.services.manual_page_service import ManualPageService
from automation_coverage.services.qtest_session import QTestSessionManager
from automation_coverage.core.database import get_database


class Container:
    """Dependency injection container"""

    def __init__(self):
        self._jira_service = None
        self._jenkins_service = None
        self._qtest_session_manager = None
        self._qtest_service = None

    def issue_repository(self, db: Session) -> IJiraIssueRepository:
        return SQLJiraIssueRepository(db)

    def link_repository(self, db: Session) -> ITestCaseLinkRepository:
        return SQLTestCaseLinkRepository(db)

    def reference_repository(self, db: Session) -> IReferenceDataRepository:
        return SQLReferenceDataRepository(db)

    def candidate_repository(self, db: Session) -> IAutomationCandidateRepository:
        return SQLAutomationCandidateRepository(db)

    def build_result_repository(self, db: Session) -> IBuildResultRepository:
        return SQLBuildResultRepository(db)

    @lru_cache()
    def jira_service(self) -> IJiraService:
        """Get JIRA service instance (singleton)"""
        if self._jira_service is None:
            self._jira_service = AtlassianJiraService()
        return self._jira_service

    @lru_cache()
    def jenkins_service(self) -> IJenkinsService:
        """Get Jenkins service instance (singleton)"""
        if self._jenkins_service is None:
            self._jenkins_service = JenkinsService()
        return self._jenkins_service

    @lru_cache()
    def qtest_session_manager(self) -> QTestSessionManager:
        """Get the qTest session manager (singleton, holds the bearer token)"""
        if self._qtest_session_manager is None:
            self._qtest_session_manager = QTestSessionManager()
        return self._qtest_session_manager

    @lru_cache()
    def qtest_service(self) -> IQTestService:
        """Get qTest service instance (singleton)"""
        if self._qtest_service is None:
            self._qtest_service = QTestService(session_manager=self.qtest_session_manager())
        return self._qtest_service

    def automation_workflow(self, db: Session) -> AutomationReadinessWorkflow:
        return AutomationReadinessWorkflow(
            link_repository=self.link_repository(db),
            candidate_repository=self.candidate_repository(db),
            reference_repository=self.reference_repository(db),
            issue_repository=self.issue_repository(db),
        )

    def manual_page_service(self, db: Session) -> ManualPageService:
        """Get manual page service instance"""
        return ManualPageService(
            jira_service=self.jira_service(),
            issue_repository=self.issue_repository(db),
            link_repository=self.link_repository(db),
            reference_repository=self.reference_repository(db),
            workflow=self.automation_workflow(db),
        )

    def build_result_coordinator(self, db: Session) -> BuildResultSyncCoordinator:
        """Get build result coordinator instance"""
        return BuildResultSyncCoordinator(
            jenkins_service=self.jenkins_service(),
            build_result_repository=self.build_result_repository(db),
        )


# Global container instance
container = Container()


# Dependency providers for FastAPI
def get_jira_service() -> IJiraService:
    """FastAPI dependency for JIRA service"""
    return container.jira_service()


def get_jenkins_service() -> IJenkinsService:
    """FastAPI dependency for Jenkins service"""
    return container.jenkins_service()


def get_qtest_service() -> IQTestService:
    """FastAPI dependency for qTest service"""
    return container.qtest_service()


def get_manual_page_service(db: Session = Depends(get_database)) -> ManualPageService:
    """FastAPI dependency for manual page service"""
    return container.manual_page_service(db)


def get_build_result_coordinator(db: Session = Depends(get_database)) -> BuildResultSyncCoordinator:
    """FastAPI dependency for build result coordinator"""
    return container.build_result_coordinator(db)
