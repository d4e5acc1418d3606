"""Abstract base class for pull request sources."""

from abc import ABC, abstractmethod
from collections.abc import Iterator

from relgen.models import PullRequest


class PullRequestSource(ABC):
    @abstractmethod
    def merged_pull_requests(
        self,
        from_ref: str,
        to_ref: str,
        label: str | None = None,
    ) -> Iterator[PullRequest]:
        """Lazily yield PRs merged between ``from_ref`` and ``to_ref``, oldest first."""
