from __future__ import annotations

from datetime import date


class BookNote:
    """A single read book with its rating and free-text notes."""

    def __init__(self, title: str, author: str, rating: int, date_read: date | str,
                 notes: str | None = None, id: int | None = None) -> None:
        self.id = id
        self.title = title.strip()
        self.author = author.strip()
        self.notes = notes
        self.rating = int(rating)
        # SQLite hands dates back as ISO text
        if isinstance(date_read, str):
            date_read = date.fromisoformat(date_read)
        self.date_read = date_read

    def __str__(self) -> str:  # pragma: no cover - string formatting trivial
        return f"{self.title} by {self.author} ({self.rating}/10)"

    def __repr__(self) -> str:  # pragma: no cover
        return f"BookNote(id={self.id!r}, title={self.title!r}, author={self.author!r})"

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "title": self.title,
            "author": self.author,
            "notes": self.notes,
            "rating": self.rating,
            "date_read": self.date_read.isoformat(),
        }

    @staticmethod
    def from_dict(data: dict) -> "BookNote":
        return BookNote(
            id=data.get("id"),
            title=data["title"],
            author=data["author"],
            notes=data.get("notes"),
            rating=data["rating"],
            date_read=data["date_read"],
        )
