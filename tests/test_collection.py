from __future__ import annotations

import itertools

import pytest

from collection import (
    category_ids,
    filter_by_category,
    index_of,
    missing_descriptions,
    move_before,
    with_description,
)
from models import LinkRecord


def _link(link_id: str, description: str | None = None, category_id: str = "dev") -> LinkRecord:
    return LinkRecord(
        id=link_id,
        title=f"Site {link_id}",
        url=f"https://{link_id.lower()}.example.com",
        category_id=category_id,
        description=description,
    )


_LINKS = [_link("A"), _link("B"), _link("C"), _link("D")]


def _ids(links: list[LinkRecord]) -> list[str]:
    return [link.id for link in links]


def test_index_of_present_and_absent() -> None:
    assert index_of(_LINKS, "C") == 2
    assert index_of(_LINKS, "Z") == -1


def test_move_before_moves_up() -> None:
    assert _ids(move_before(_LINKS, "D", "B")) == ["A", "D", "B", "C"]


def test_move_before_moves_down() -> None:
    assert _ids(move_before(_LINKS, "A", "D")) == ["B", "C", "A", "D"]


def test_move_before_does_not_mutate_input() -> None:
    original = list(_LINKS)
    move_before(_LINKS, "D", "A")
    assert _LINKS == original


@pytest.mark.parametrize(("moved", "target"), [("B", "B"), ("Z", "B"), ("B", "Z"), ("Y", "Z")])
def test_move_before_no_op_cases(moved: str, target: str) -> None:
    assert move_before(_LINKS, moved, target) == _LINKS


@pytest.mark.parametrize(("moved", "target"), list(itertools.permutations("ABCD", 2)))
def test_move_before_is_permutation_placing_moved_before_target(moved: str, target: str) -> None:
    result = _ids(move_before(_LINKS, moved, target))

    assert sorted(result) == sorted(_ids(_LINKS))
    assert result.index(moved) == result.index(target) - 1
    others_before = [i for i in _ids(_LINKS) if i != moved]
    assert [i for i in result if i != moved] == others_before


def test_move_before_twice_same_target_is_stable() -> None:
    once = move_before(_LINKS, "A", "C")
    twice = move_before(once, "A", "C")
    assert twice == once


def test_missing_descriptions_keeps_order_and_treats_empty_as_missing() -> None:
    links = [_link("X"), _link("Z", description="Has one"), _link("Y", description="")]
    assert _ids(missing_descriptions(links)) == ["X", "Y"]


def test_with_description_matches_by_id() -> None:
    updated = with_description(_LINKS, "C", "A search engine.")

    assert updated[2].description == "A search engine."
    assert all(link.description is None for link in updated if link.id != "C")
    assert _LINKS[2].description is None


def test_filter_by_category() -> None:
    links = [_link("A", category_id="dev"), _link("B", category_id="news"), _link("C", category_id="dev")]

    assert _ids(filter_by_category(links, "dev")) == ["A", "C"]
    assert _ids(filter_by_category(links, "all")) == ["A", "B", "C"]
    assert _ids(filter_by_category(links, None)) == ["A", "B", "C"]
    assert filter_by_category(links, "missing") == []


def test_category_ids_first_seen_order() -> None:
    links = [_link("A", category_id="news"), _link("B", category_id="dev"), _link("C", category_id="news")]
    assert category_ids(links) == ["news", "dev"]
