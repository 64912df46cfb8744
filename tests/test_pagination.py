from __future__ import annotations

import pytest

from contactbook.core.contracts import Contact
from contactbook.core import pagination as p


def _contacts(*names: str) -> list[Contact]:
    return [
        Contact(
            id=f"id{i}",
            name=name,
            email=f"c{i}@example.com",
            created_at="2025-01-01T00:00:00.000Z",
            updated_at="2025-01-01T00:00:00.000Z",
        )
        for i, name in enumerate(names)
    ]


def test_sort_is_case_insensitive_and_stable() -> None:
    contacts = _contacts("john Doe", "Bob Johnson", "Jane Smith", "bob johnson")

    ordered = p.sort_contacts(contacts)

    assert [c.id for c in ordered] == ["id1", "id3", "id2", "id0"]
    # Original list untouched.
    assert [c.id for c in contacts] == ["id0", "id1", "id2", "id3"]


def test_example_three_contacts_display_order() -> None:
    view = p.paginate(_contacts("John Doe", "Jane Smith", "Bob Johnson"), page=1)

    assert [c.name for c in view.items] == ["Bob Johnson", "Jane Smith", "John Doe"]
    assert not view.show_controls


def test_six_contacts_two_pages_info_text() -> None:
    contacts = _contacts("A", "B", "C", "D", "E", "F")

    first = p.paginate(contacts, page=1, page_size=5)
    second = p.paginate(contacts, page=2, page_size=5)

    assert first.info_text == "Showing 1-5 of 6 contacts"
    assert [c.name for c in first.items] == ["A", "B", "C", "D", "E"]
    assert second.info_text == "Showing 6-6 of 6 contacts"
    assert [c.name for c in second.items] == ["F"]
    assert first.show_controls and second.show_controls
    assert not first.has_previous and first.has_next
    assert second.has_previous and not second.has_next


@pytest.mark.parametrize("n", [0, 1, 4, 5, 6, 10, 11, 23])
def test_every_item_on_exactly_one_page(n: int) -> None:
    contacts = _contacts(*[f"Name {i:02d}" for i in range(n)])
    pages = p.total_pages(n, 5)

    seen: list[str] = []
    for page in range(1, pages + 1):
        seen.extend(c.id for c in p.paginate(contacts, page, 5).items)

    assert len(seen) == n
    assert len(set(seen)) == n


def test_empty_collection_is_single_empty_page() -> None:
    view = p.paginate([], page=4)

    assert view.page == 1
    assert view.total_pages == 1
    assert view.is_empty
    assert not view.show_controls
    assert view.items == ()
    assert view.info_text == p.EMPTY_MESSAGE


@pytest.mark.parametrize("requested,expected", [(-3, 1), (0, 1), (2, 2), (99, 3)])
def test_requested_page_is_clamped(requested: int, expected: int) -> None:
    contacts = _contacts(*[f"N{i}" for i in range(12)])

    assert p.paginate(contacts, requested, 5).page == expected


def test_total_pages_rejects_non_positive_page_size() -> None:
    with pytest.raises(ValueError):
        p.total_pages(3, 0)


def test_transitions() -> None:
    assert p.page_after_create(6, 5) == 2
    assert p.page_after_create(1, 5) == 1
    # Deleting the only record on page 2 of 6 leaves 5 records on one page.
    assert p.page_after_delete(2, 5, 5) == 1
    assert p.page_after_delete(1, 0, 5) == 1
    assert p.page_after_delete(2, 7, 5) == 2
    assert p.page_after_update(3) == 3


def test_go_to_page_ignores_out_of_range() -> None:
    assert p.go_to_page(2, count=6, current=1, page_size=5) == 2
    assert p.go_to_page(3, count=6, current=1, page_size=5) == 1
    assert p.go_to_page(0, count=6, current=2, page_size=5) == 2


@pytest.mark.parametrize(
    "current,pages,expected",
    [
        (1, 3, [1, 2, 3]),
        (1, 10, [1, 2, 3, 4, 5, None, 10]),
        (5, 10, [1, None, 3, 4, 5, 6, 7, None, 10]),
        (10, 10, [1, None, 6, 7, 8, 9, 10]),
        (4, 7, [1, 2, 3, 4, 5, 6, 7]),
    ],
)
def test_page_window(current: int, pages: int, expected: list) -> None:
    assert p.page_window(current, pages, max_visible=5) == expected
