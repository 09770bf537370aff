from dataclasses import dataclass, field
from datetime import datetime


@dataclass
class Issue:
    """
    One numbered entry within a collection.

    Ownership and condition rating are independent: an unowned issue
    may still carry a rating.
    """

    id: int
    collection_id: int
    issue_number: str
    is_owned: bool = False
    name: str | None = None
    cover_url: str | None = None
    cover_color: str | None = None
    condition_rating: int | None = None


@dataclass
class Collection:
    """A comic series tracked by a single user."""

    id: int
    user_id: str
    title: str
    publisher: str
    start_year: int | None = None
    cover_url: str | None = None
    created_at: datetime | None = None
    issues: list[Issue] = field(default_factory=list)

    def owned_count(self) -> int:
        """Number of issues marked as owned."""
        return sum(1 for issue in self.issues if issue.is_owned)

    def total_count(self) -> int:
        """Number of issues tracked."""
        return len(self.issues)

    def completion_percentage(self) -> float:
        """Share of tracked issues owned, 0-100."""
        if not self.issues:
            return 0.0
        return round(self.owned_count() * 100.0 / self.total_count(), 1)
