from pydantic_settings import BaseSettings
from typing import Optional


class Settings(BaseSettings):
    # API Configuration
    debug: bool = False
    environment: str = "development"
    api_host: str = "0.0.0.0"
    api_port: int = 8080
    api_prefix: str = "/api"

    # JIRA Integration (configure via environment)
    jira_base_url: Optional[str] = None
    jira_username: Optional[str] = None
    jira_api_token: Optional[str] = None
    jira_project_key: Optional[str] = None
    jira_board_id: Optional[str] = None
    # Custom field carrying the sprint descriptor on issues
    jira_sprint_field: str = "customfield_10020"
    jira_sprint_page_size: int = 50
    jira_issue_page_size: int = 100

    # Jenkins Integration (configure via environment)
    jenkins_base_url: Optional[str] = None
    jenkins_username: Optional[str] = None
    jenkins_api_token: Optional[str] = None
    # Artifacts whose file name contains this fragment are treated as result reports
    jenkins_report_pattern: str = "testng-results"

    # qTest Integration (configure via environment)
    qtest_base_url: Optional[str] = None
    qtest_username: Optional[str] = None
    qtest_password: Optional[str] = None
    qtest_project_id: Optional[str] = None
    # Tokens live for an hour; refresh ahead of that
    qtest_token_refresh_minutes: int = 50

    # Outbound HTTP
    http_short_timeout: float = 10.0
    http_comment_timeout: float = 15.0
    http_long_timeout: float = 30.0
    http_retry_attempts: int = 3

    # Database Configuration
    database_url: str = "sqlite:///./data/automation_coverage.db"

    # Logging
    log_level: str = "INFO"

    class Config:
        env_file = ".env"
        case_sensitive = False

    @property
    def jira_configured(self) -> bool:
        return bool(self.jira_base_url and self.jira_username and self.jira_api_token)

    @property
    def jenkins_configured(self) -> bool:
        return bool(self.jenkins_base_url and self.jenkins_username and self.jenkins_api_token)

    @property
    def qtest_configured(self) -> bool:
        return bool(
            self.qtest_base_url
            and self.qtest_username
            and self.qtest_password
            and self.qtest_project_id
        )


# Global settings instance
settings = Settings()
