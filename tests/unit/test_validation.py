import pytest

from symbol_vault.exceptions import InvalidRequest
from symbol_vault.schemas import PostContent
from symbol_vault.utils.validation import (
    build_model,
    describe_validation_errors,
    parse_identity,
    parse_offset,
)

pytestmark = pytest.mark.unit


@pytest.mark.parametrize("value", ["1", "42", " 7 ", 2147483647, "2147483647"])
def test_parse_identity_accepts_positive_32_bit(value):
    assert parse_identity(value) == int(str(value).strip())


@pytest.mark.parametrize(
    "value",
    [
        "0",
        0,
        "-1",
        -1,
        "2147483648",
        "abc",
        "",
        "1.5",
        "1e3",
        True,
        "\u00b2",
        "1\u00b2",
        "\u0661\u0662",
        "00000000001",
        "9" * 5000,
    ],
)
def test_parse_identity_rejects(value):
    with pytest.raises(InvalidRequest):
        parse_identity(value)


def test_parse_identity_names_the_field():
    with pytest.raises(InvalidRequest) as exc_info:
        parse_identity("abc", "post id")
    assert exc_info.value.message.startswith("post id")
    assert exc_info.value.status_code == 400


@pytest.mark.parametrize("value,expected", [("0", 0), ("20", 20), (" 40", 40)])
def test_parse_offset_accepts_non_negative(value, expected):
    assert parse_offset(value) == expected


@pytest.mark.parametrize(
    "value", ["-1", "x", "", "2147483648", False, "\u00b2", "4\u00b2", "9" * 5000]
)
def test_parse_offset_rejects(value):
    with pytest.raises(InvalidRequest):
        parse_offset(value)


def test_build_model_wraps_validation_errors():
    with pytest.raises(InvalidRequest) as exc_info:
        build_model(PostContent, title="   ")
    assert "title" in exc_info.value.message


def test_build_model_returns_instance():
    content = build_model(PostContent, title="Rappy", tags="a,b")
    assert content.tags == ["a", "b"]


def test_describe_validation_errors_drops_body_prefix():
    errors = [
        {"loc": ("body", "title"), "msg": "Field required"},
        {"loc": ("query", "q"), "msg": "bad"},
    ]
    assert describe_validation_errors(errors) == "title: Field required; query.q: bad"
    assert describe_validation_errors([]) == "invalid request"
