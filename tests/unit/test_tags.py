import pytest

from symbol_vault.utils.tags import normalize_tags

pytestmark = pytest.mark.unit


def test_trims_and_dedupes_keeping_first_occurrence():
    assert normalize_tags("pso2, pso2 , meme,  ") == ["pso2", "meme"]


def test_none_and_blank_give_empty_list():
    assert normalize_tags(None) == []
    assert normalize_tags("") == []
    assert normalize_tags(" , ,, ") == []


def test_list_items_may_contain_commas():
    assert normalize_tags(["drake meme", "meme, pso2", "pso2"]) == [
        "drake meme",
        "meme",
        "pso2",
    ]


def test_case_is_preserved():
    assert normalize_tags("PSO2, pso2") == ["PSO2", "pso2"]


def test_inner_whitespace_is_kept():
    assert normalize_tags("  drake   meme ,x") == ["drake   meme", "x"]
