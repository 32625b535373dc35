from urllib.parse import parse_qs, urlsplit
from automation_coverage.services.issue_query import (
    build_keyword_search_query,
    build_sprint_issue_query,
    resolve_project_key,
)


def _params(url):
    return {key: values[0] for key, values in parse_qs(urlsplit(url).query).items()}


def test_sprint_query_combines_sprint_and_project():
    url = build_sprint_issue_query("314", "QA", start_at=100, max_results=50)
    params = _params(url)

    assert url.startswith("/rest/api/2/search?")
    assert params["jql"] == "sprint = 314 AND project = QA"
    assert params["startAt"] == "100"
    assert params["maxResults"] == "50"
    assert params["expand"] == "changelog"


def test_sprint_query_is_percent_encoded():
    url = build_sprint_issue_query("314", "QA")

    assert " " not in url
    assert "sprint%20%3D%20314" in url


def test_sprint_query_falls_back_to_default_project():
    params = _params(build_sprint_issue_query("9", None, default_project_key="CORE"))

    assert params["jql"] == "sprint = 9 AND project = CORE"


def test_sprint_query_is_deterministic():
    assert build_sprint_issue_query("1", "QA", 0, 10) == build_sprint_issue_query("1", "QA", 0, 10)


def test_blank_project_key_uses_default():
    assert resolve_project_key("  ", "CORE") == "CORE"
    assert resolve_project_key(" QA ", "CORE") == "QA"


def test_keyword_query_searches_text_fields_and_escapes_quotes():
    params = _params(build_keyword_search_query('say "hi"', "QA"))

    assert params["jql"] == (
        'project = QA AND (summary ~ "say \\"hi\\"" OR description ~ "say \\"hi\\"" '
        'OR comment ~ "say \\"hi\\"")'
    )
    assert params["fields"] == "key,summary,issuetype,status,priority"
    assert params["maxResults"] == "1000"


def test_queries_without_any_project_key_have_no_project_clause():
    sprint = _params(build_sprint_issue_query("9", None, default_project_key=""))
    keyword = _params(build_keyword_search_query("refund", None, default_project_key=""))

    assert sprint["jql"] == "sprint = 9"
    assert keyword["jql"] == '(summary ~ "refund" OR description ~ "refund" OR comment ~ "refund")'
