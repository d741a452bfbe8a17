import pytest

from nicegrid.grid.paginator import Paginator, total_pages


def test_total_pages_rounds_up_and_is_at_least_one() -> None:
    assert total_pages(95, 30) == 4
    assert total_pages(90, 30) == 3
    assert total_pages(0, 30) == 1


def test_total_pages_rejects_non_positive_page_length() -> None:
    with pytest.raises(ValueError):
        total_pages(10, 0)
    with pytest.raises(ValueError):
        Paginator(page_length=-1)


def test_set_page_clamps() -> None:
    pager = Paginator(total_rows=95, page_length=30)
    assert pager.set_page(10)
    assert pager.current_page == 4
    assert not pager.set_page(99)
    assert pager.set_page(0)
    assert pager.current_page == 1


def test_next_and_previous_are_noops_at_bounds() -> None:
    pager = Paginator(total_rows=40, page_length=30)
    assert not pager.previous_page()
    assert not pager.has_previous
    assert pager.next_page()
    assert pager.current_page == 2
    assert not pager.has_next
    assert not pager.next_page()


def test_update_total_rows_reclamps_current_page() -> None:
    pager = Paginator(total_rows=95, page_length=30)
    pager.set_page(4)
    assert pager.update_total_rows(35)
    assert pager.current_page == 2
    assert not pager.update_total_rows(50)


def test_page_bounds() -> None:
    pager = Paginator(total_rows=95, page_length=30)
    pager.set_page(4)
    assert pager.page_bounds() == (90, 95)
