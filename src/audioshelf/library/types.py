# ABOUTME: Core data structure for audiobook records flowing through ingestion.
# ABOUTME: AudiobookRecord is the interchange format between normalizer, reconciler, and catalog.

from dataclasses import dataclass


@dataclass
class AudiobookRecord:
    """A single audiobook, either imported from an export or synthesized.

    Real records come from a library export and are always owned. Placeholder
    records stand in for books missing from a numbered series: they have no
    external ID, are never owned, and carry only series, position, title, and
    author.
    """

    title: str
    external_id: str | None = None
    series_name: str | None = None
    series_position: float | None = None
    author: str | None = None
    narrator: str | None = None
    owned: bool = False
    listened: bool = False
    release_date: str | None = None
    purchase_date: str | None = None
    length_minutes: int | None = None
    rating: float | None = None
    categories: str | None = None

    @classmethod
    def placeholder(
        cls, series_name: str, position: int, author: str | None = None,
    ) -> "AudiobookRecord":
        """Build an unowned stand-in for a missing series entry."""
        return cls(
            title=f"{series_name} Book {position}",
            series_name=series_name,
            series_position=float(position),
            author=author,
            owned=False,
            listened=False,
        )

    @property
    def is_placeholder(self) -> bool:
        """Whether this record is a synthesized missing-book entry."""
        return not self.owned and self.external_id is None

    @property
    def series_key(self) -> tuple[str, float] | None:
        """(series_name, series_position), or None if either is missing."""
        if self.series_name is None or self.series_position is None:
            return None
        return self.series_name, self.series_position
