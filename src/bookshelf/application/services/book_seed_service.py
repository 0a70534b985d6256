"""Seed an empty shelf with the sample reading list."""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum

from bookshelf.application.ports.book_repository_port import BookCreateInput, BookRepositoryPort
from bookshelf.domain.books.book_status import BookStatus

SAMPLE_BOOKS: tuple[BookCreateInput, ...] = (
    BookCreateInput(
        title="Sapiens: A Brief History of Humankind",
        author="Yuval Noah Harari",
        status=BookStatus.READ,
        cover="./assets/sapiens.jpg",
        summary=(
            "A survey of the history of the human species, from the appearance of "
            "Homo sapiens to the present, through the cognitive, agricultural and "
            "scientific revolutions."
        ),
    ),
    BookCreateInput(
        title="Antifragile: Things That Gain from Disorder",
        author="Nassim Nicholas Taleb",
        status=BookStatus.TO_READ,
        cover="./assets/antifragile.jpg",
        summary=(
            "An exploration of systems that do not merely withstand shocks and "
            "volatility but improve because of them."
        ),
    ),
    BookCreateInput(
        title="Meditations",
        author="Marcus Aurelius",
        status=BookStatus.PENDING,
        cover="./assets/meditations.jpg",
        summary=(
            "Private reflections of the Roman emperor and Stoic philosopher, written "
            "as spiritual exercises on virtue, mortality and reason."
        ),
    ),
)


class BookSeedOutcome(StrEnum):
    """Outcome states for one seeding attempt."""

    CREATED = "created"
    SKIPPED_BOOKS_PRESENT = "skipped_books_present"


@dataclass(frozen=True)
class BookSeedResult:
    """Result model for one seeding attempt."""

    outcome: BookSeedOutcome
    created_count: int


async def seed_sample_books(
    *,
    books: BookRepositoryPort,
    samples: tuple[BookCreateInput, ...] = SAMPLE_BOOKS,
) -> BookSeedResult:
    """Insert sample books only when the shelf is empty."""

    if await books.count_books() > 0:
        return BookSeedResult(outcome=BookSeedOutcome.SKIPPED_BOOKS_PRESENT, created_count=0)

    for sample in samples:
        await books.create_book(sample)
    return BookSeedResult(outcome=BookSeedOutcome.CREATED, created_count=len(samples))
