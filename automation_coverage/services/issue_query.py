from typing import Optional
from urllib.parse import quote, urlencode
from automation_coverage.config.settings import settings

SEARCH_PATH = "/rest/api/2/search"
KEYWORD_SEARCH_FIELDS = "key,summary,issuetype,status,priority"
KEYWORD_SEARCH_MAX_RESULTS = 1000


def resolve_project_key(project_key: Optional[str], default_project_key: Optional[str] = None) -> Optional[str]:
    if project_key and project_key.strip():
        return project_key.strip()
    return default_project_key if default_project_key is not None else settings.jira_project_key


def build_sprint_issue_query(
    sprint_id: str,
    project_key: Optional[str] = None,
    start_at: int = 0,
    max_results: Optional[int] = None,
    default_project_key: Optional[str] = None,
) -> str:
    """Search URL (path + query) for every issue of one sprint within a project."""
    project = resolve_project_key(project_key, default_project_key)
    jql = f"sprint = {sprint_id}"
    if project:
        jql += f" AND project = {project}"
    params = {
        "jql": jql,
        "startAt": start_at,
        "maxResults": max_results or settings.jira_issue_page_size,
        "expand": "changelog",
    }
    return f"{SEARCH_PATH}?{urlencode(params, quote_via=quote)}"


def build_keyword_search_query(
    keyword: str,
    project_key: Optional[str] = None,
    default_project_key: Optional[str] = None,
) -> str:
    """Full-text search URL across summary, description and comments."""
    project = resolve_project_key(project_key, default_project_key)
    term = keyword.strip().replace("\\", "\\\\").replace('"', '\\"')
    jql = f'(summary ~ "{term}" OR description ~ "{term}" OR comment ~ "{term}")'
    if project:
        jql = f"project = {project} AND {jql}"
    params = {
        "jql": jql,
        "maxResults": KEYWORD_SEARCH_MAX_RESULTS,
        "fields": KEYWORD_SEARCH_FIELDS,
    }
    return f"{SEARCH_PATH}?{urlencode(params, quote_via=quote)}"
