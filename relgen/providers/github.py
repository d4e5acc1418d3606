"""GitHub REST API v3 pull request source."""

import re
from collections.abc import Iterator

import httpx

from relgen.models import GitHubUser, PullRequest, RepoIdentifier
from relgen.providers.base import PullRequestSource

BASE_URL = "https://api.github.com"
PER_PAGE = 100

# Squash and merge-queue commits end their subject with "(#1234)"
_PR_REFERENCE = re.compile(r"\(#(\d+)\)\s*$")


class GitHubClient(PullRequestSource):
    def __init__(self, token: str, repo: RepoIdentifier) -> None:
        self._repo = repo
        self._headers = {
            "Authorization": f"Bearer {token}",
            "Accept": "application/vnd.github+json",
            "X-GitHub-Api-Version": "2022-11-28",
        }

    def _get(self, path: str, params: dict | None = None) -> dict | list:
        response = httpx.get(
            f"{BASE_URL}{path}",
            headers=self._headers,
            params=params or {},
            timeout=30,
        )
        if response.status_code == 401:
            raise RuntimeError("GitHub API returned 401. Check that GITHUB_TOKEN is valid and not expired.")
        response.raise_for_status()
        return response.json()

    def compare_commits(self, from_ref: str, to_ref: str) -> Iterator[dict]:
        """Yield the commits reachable from ``to_ref`` but not ``from_ref``, oldest first."""
        page = 1
        while True:
            data = self._get(
                f"/repos/{self._repo}/compare/{from_ref}...{to_ref}",
                params={"per_page": str(PER_PAGE), "page": str(page)},
            )
            commits = data.get("commits", [])  # type: ignore[union-attr]
            yield from commits
            if len(commits) < PER_PAGE:
                return
            page += 1

    def _pr_numbers(self, commit: dict) -> list[int]:
        message = commit.get("commit", {}).get("message", "")
        subject = message.splitlines()[0] if message else ""
        match = _PR_REFERENCE.search(subject)
        if match:
            return [int(match.group(1))]
        # Plain merge commits: ask GitHub which PR introduced the commit
        pulls = self._get(f"/repos/{self._repo}/commits/{commit['sha']}/pulls")
        return [pull["number"] for pull in pulls if pull.get("merged_at")]  # type: ignore[union-attr]

    def _pull_request_from_node(self, node: dict) -> PullRequest:
        return PullRequest(
            number=node["number"],
            title=node["title"],
            body=node.get("body"),
            closed_at=node.get("closed_at") or "",
            user=GitHubUser(login=node["user"]["login"], id=node["user"]["id"]),
            labels=[label["name"] for label in node.get("labels", [])],
        )

    def merged_pull_requests(
        self,
        from_ref: str,
        to_ref: str,
        label: str | None = None,
    ) -> Iterator[PullRequest]:
        seen: set[int] = set()
        for commit in self.compare_commits(from_ref, to_ref):
            for number in self._pr_numbers(commit):
                if number in seen:
                    continue
                seen.add(number)
                node = self._get(f"/repos/{self._repo}/issues/{number}")
                if not (node.get("pull_request") or {}).get("merged_at"):  # type: ignore[union-attr]
                    continue
                pr = self._pull_request_from_node(node)  # type: ignore[arg-type]
                if label is not None and label not in pr.labels:
                    continue
                yield pr
