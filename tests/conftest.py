"""
Shared fixtures: settings and an in-memory Jira + Tempo served through
`httpx.MockTransport`.
"""
import base64
import json
from datetime import date
from typing import Any, Dict, List, Optional, Set

import httpx
import pytest

from core.config import load_settings

JIRA_HOST = "acme.atlassian.test"
TEMPO_HOST = "api.tempo.test"
USER = {
    "accountId": "acc-123",
    "emailAddress": "dev@acme.test",
    "displayName": "Dev Eloper",
}


class FakeBackend:
    """Just enough of Jira REST v2 and Tempo core/3 for the timesheet flow."""

    def __init__(self) -> None:
        self.issues: List[Dict[str, Any]] = []
        self.worklogs: List[Dict[str, Any]] = []
        self.requests: List[httpx.Request] = []
        self.reject_summaries: Set[str] = set()
        self.reject_worklogs_for: Set[str] = set()
        self.user: Dict[str, Any] = dict(USER)
        self.jira_token = "jira-token"
        self.tempo_token = "tempo-token"

    # ---- helpers -----------------------------------------------------------

    def add_issue(self, summary: str, assignee: str = USER["accountId"], project: str = "TS") -> Dict[str, Any]:
        number = len(self.issues) + 1
        issue = {
            "id": str(10000 + number),
            "key": f"{project}-{number}",
            "self": f"https://{JIRA_HOST}/rest/api/2/issue/{10000 + number}",
            "summary": summary,
            "assignee": assignee,
            "project": project,
        }
        self.issues.append(issue)
        return issue

    def worklogs_for(self, key: str) -> List[Dict[str, Any]]:
        return [w for w in self.worklogs if w["issueKey"] == key]

    def last_json(self, method: str, path_suffix: str) -> Any:
        for request in reversed(self.requests):
            if request.method == method and request.url.path.endswith(path_suffix):
                return json.loads(request.content)
        raise AssertionError(f"no {method} {path_suffix} request")

    def _search_identity(self) -> str:
        return self.user.get("emailAddress") or self.user["accountId"]

    # ---- transport ---------------------------------------------------------

    def handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if request.url.host == JIRA_HOST:
            return self._jira(request)
        if request.url.host == TEMPO_HOST:
            return self._tempo(request)
        return httpx.Response(404, json={"error": "unknown host"})

    def _jira(self, request: httpx.Request) -> httpx.Response:
        expected = "Basic " + base64.b64encode(f"{USER['emailAddress']}:{self.jira_token}".encode()).decode()
        if request.headers.get("Authorization") != expected:
            return httpx.Response(401, json={"errorMessages": ["Unauthorized"]})

        path = request.url.path
        if request.method == "GET" and path == "/rest/api/2/myself":
            return httpx.Response(200, json=self.user)

        if request.method == "POST" and path == "/rest/api/2/issue":
            fields = json.loads(request.content)["fields"]
            if fields["summary"] in self.reject_summaries:
                return httpx.Response(400, json={"errors": {"summary": "rejected by workflow"}})
            issue = self.add_issue(
                fields["summary"],
                assignee=fields["assignee"]["accountId"],
                project=fields["project"]["key"],
            )
            return httpx.Response(201, json={"id": issue["id"], "key": issue["key"], "self": issue["self"]})

        if request.method == "GET" and path == "/rest/api/2/search":
            jql = request.url.params["jql"]
            matches = [
                issue
                for issue in self.issues
                if f'summary ~ "{issue["summary"]}"' in jql
                and f'project = "{issue["project"]}"' in jql
                and issue["assignee"] == self.user["accountId"]
                and f'assignee = "{self._search_identity()}"' in jql
            ]
            return httpx.Response(
                200,
                json={
                    "total": len(matches),
                    "issues": [
                        {
                            "key": issue["key"],
                            "self": issue["self"],
                            "fields": {
                                "summary": issue["summary"],
                                "assignee": {"accountId": issue["assignee"]},
                            },
                        }
                        for issue in matches
                    ],
                },
            )
        return httpx.Response(404, json={"errorMessages": ["not found"]})

    def _tempo(self, request: httpx.Request) -> httpx.Response:
        if request.headers.get("Authorization") != f"Bearer {self.tempo_token}":
            return httpx.Response(401, json={"errors": [{"message": "invalid token"}]})

        if request.url.path != "/core/3/worklogs":
            return httpx.Response(404, json={"errors": [{"message": "not found"}]})

        if request.method == "POST":
            body = json.loads(request.content)
            if body["issueKey"] in self.reject_worklogs_for:
                return httpx.Response(400, json={"errors": [{"message": "Issue is closed"}]})
            body["tempoWorklogId"] = len(self.worklogs) + 1
            self.worklogs.append(body)
            return httpx.Response(200, json=self._as_response(body))

        if request.method == "GET":
            key = request.url.params.get("issue")
            results = [self._as_response(w) for w in self.worklogs_for(key)]
            return httpx.Response(
                200,
                json={
                    "self": str(request.url),
                    "metadata": {"count": len(results), "offset": 0, "limit": 50},
                    "results": results,
                },
            )
        return httpx.Response(405)

    @staticmethod
    def _as_response(body: Dict[str, Any]) -> Dict[str, Any]:
        return {
            "tempoWorklogId": body["tempoWorklogId"],
            "issue": {"key": body["issueKey"], "id": 1},
            "timeSpentSeconds": body["timeSpentSeconds"],
            "billableSeconds": body["billableSeconds"],
            "startDate": body["startDate"],
            "startTime": body["startTime"],
            "description": body["description"],
            "createdAt": "2024-03-04T10:00:00Z",
            "author": {"accountId": body["authorAccountId"]},
        }


@pytest.fixture
def backend() -> FakeBackend:
    return FakeBackend()


@pytest.fixture
def transport(backend) -> httpx.MockTransport:
    return httpx.MockTransport(backend.handle)


@pytest.fixture
def overrides() -> Dict[str, Optional[str]]:
    return {
        "jira_url": f"https://{JIRA_HOST}",
        "jira_project_key": "TS",
        "jira_username": USER["emailAddress"],
        "jira_token": "jira-token",
        "tempo_token": "tempo-token",
        "tempo_api_url": f"https://{TEMPO_HOST}/core/3",
    }


@pytest.fixture
def settings(overrides):
    return load_settings(overrides, use_env_files=False)


@pytest.fixture
def monday() -> date:
    return date(2024, 3, 4)
