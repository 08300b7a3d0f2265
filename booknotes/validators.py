from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import date
from typing import Optional

RATING_MIN = 1
RATING_MAX = 10

TITLE_REQUIRED = "Please enter a book title."
AUTHOR_REQUIRED = "Please enter the author name."
RATING_OUT_OF_RANGE = "Rating must be between 1 and 10."
DATE_REQUIRED = "Please select the date read."

# ASCII digits only; int() alone would take "1_0" and other scripts' digits
WHOLE_NUMBER_PATTERN = re.compile(r"^[+-]?[0-9]+\Z")


class ValidationError(ValueError):
    """User-correctable form input. The message is shown on the page as is."""
    pass


@dataclass
class NewNote:
    title: str
    author: str
    notes: Optional[str]
    rating: int
    date_read: date


class NoteValidator:
    """Checks for the add and edit forms."""

    @staticmethod
    def clean_text(text: Optional[str]) -> Optional[str]:
        if text is None:
            return None
        return text.strip()

    @staticmethod
    def parse_whole_number(raw: Optional[str]) -> Optional[int]:
        if raw is None:
            return None
        text = str(raw).strip()
        if not WHOLE_NUMBER_PATTERN.match(text):
            return None
        return int(text)

    @staticmethod
    def parse_rating(raw: Optional[str]) -> Optional[int]:
        """Whole number within the rating range, or None."""
        rating = NoteValidator.parse_whole_number(raw)
        if rating is None:
            return None
        if rating < RATING_MIN or rating > RATING_MAX:
            return None
        return rating

    @staticmethod
    def parse_date(raw: Optional[str]) -> Optional[date]:
        """ISO date (YYYY-MM-DD) as sent by an <input type="date">, or None."""
        if not raw or not raw.strip():
            return None
        try:
            return date.fromisoformat(raw.strip())
        except ValueError:
            return None

    @staticmethod
    def validate_new_note(title: Optional[str], author: Optional[str], notes: Optional[str],
                          rating: Optional[str], date_read: Optional[str]) -> NewNote:
        """Run the add-form checks in order and stop at the first failure."""
        title = NoteValidator.clean_text(title)
        if not title:
            raise ValidationError(TITLE_REQUIRED)

        author = NoteValidator.clean_text(author)
        if not author:
            raise ValidationError(AUTHOR_REQUIRED)

        parsed_rating = NoteValidator.parse_rating(rating)
        if parsed_rating is None:
            raise ValidationError(RATING_OUT_OF_RANGE)

        parsed_date = NoteValidator.parse_date(date_read)
        if parsed_date is None:
            raise ValidationError(DATE_REQUIRED)

        return NewNote(
            title=title,
            author=author,
            notes=NoteValidator.clean_text(notes),
            rating=parsed_rating,
            date_read=parsed_date,
        )
