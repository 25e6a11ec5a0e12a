from __future__ import annotations

from .pagination import GAP, build_pagination, page_sequence


def test_small_totals_show_every_page() -> None:
    assert page_sequence(1, 0) == []
    assert page_sequence(1, 1) == [1]
    assert page_sequence(4, 7) == [1, 2, 3, 4, 5, 6, 7]


def test_window_in_the_middle_has_two_gaps() -> None:
    assert page_sequence(5, 10) == [1, GAP, 4, 5, 6, GAP, 10]
    assert page_sequence(10, 20) == [1, GAP, 9, 10, 11, GAP, 20]


def test_window_at_the_start() -> None:
    assert page_sequence(1, 20) == [1, 2, 3, 4, GAP, 20]
    assert page_sequence(2, 20) == [1, 2, 3, 4, GAP, 20]
    assert page_sequence(3, 20) == [1, 2, 3, 4, GAP, 20]


def test_window_at_the_end() -> None:
    assert page_sequence(20, 20) == [1, GAP, 17, 18, 19, 20]
    assert page_sequence(18, 20) == [1, GAP, 17, 18, 19, 20]


def test_numbers_strictly_increase_and_always_include_ends() -> None:
    for total in range(8, 30):
        for current in range(1, total + 1):
            seq = page_sequence(current, total)
            numbers = [p for p in seq if p is not GAP]
            assert numbers == sorted(set(numbers))
            assert numbers[0] == 1 and numbers[-1] == total
            assert current in numbers
            # no two gaps in a row
            assert all(not (a is GAP and b is GAP) for a, b in zip(seq, seq[1:]))


def test_pager_hidden_for_single_page() -> None:
    assert not build_pagination(1, 1).visible
    model = build_pagination(2, 3)
    assert model.visible
    assert model.has_previous and model.has_next
    assert not build_pagination(3, 3).has_next
