"""Starter catalog inserted by the seed operation."""

from book_catalog.entities.service.book import BookFields

SAMPLE_BOOKS: tuple[BookFields, ...] = (
    BookFields(
        title="Clean Code",
        author="Robert C. Martin",
        genre="Programming",
        year=2008,
        cover="/covers/clean-code.jpg",
    ),
    BookFields(
        title="Harry Potter and the Sorcerer's Stone",
        author="J.K. Rowling",
        genre="Fantasy",
        year=1997,
        cover="/covers/harry-potter.jpg",
    ),
    BookFields(
        title="The Hobbit",
        author="J.R.R. Tolkien",
        genre="Fantasy",
        year=1937,
        cover="/covers/hobbit.jpg",
    ),
    BookFields(
        title="The Pragmatic Programmer",
        author="Andrew Hunt",
        genre="Programming",
        year=1999,
        cover="/covers/pragmatic-programmer.jpg",
    ),
    BookFields(
        title="1984",
        author="George Orwell",
        genre="Dystopian",
        year=1949,
        cover="/covers/1984.jpg",
    ),
    BookFields(
        title="To Kill a Mockingbird",
        author="Harper Lee",
        genre="Classic",
        year=1960,
        cover="/covers/to-kill-a-mockingbird.jpg",
    ),
    BookFields(
        title="The Great Gatsby",
        author="F. Scott Fitzgerald",
        genre="Classic",
        year=1925,
        cover="/covers/great-gatsby.jpg",
    ),
    BookFields(
        title="Clean Architecture",
        author="Robert C. Martin",
        genre="Programming",
        year=2017,
        cover="/covers/clean-architecture.jpg",
    ),
    BookFields(
        title="Brave New World",
        author="Aldous Huxley",
        genre="Dystopian",
        year=1932,
        cover="/covers/brave-new-world.jpg",
    ),
)
