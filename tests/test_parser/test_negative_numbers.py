import math

import pytest

from verbtree.exceptions import UserInputError
from verbtree.parser import ArgumentDef, OptionDef, VerbDef, parse_tokens
from verbtree.parser.engine import is_option_token
from verbtree.parser.resolvers import floating, integer, string


@pytest.mark.parametrize("token", ["-5", "-0.5", "-.5", "-1e3", "-", "5", "x"])
def test_non_option_tokens(token):
    assert not is_option_token(token)


@pytest.mark.parametrize("token", ["-v", "--verbose", "--", "-5x", "-abc"])
def test_option_tokens(token):
    assert is_option_token(token)


def test_digit_short_option_claims_negative_numbers():
    options = [OptionDef("one", names=("-1",))]
    assert is_option_token("-1", options)
    assert is_option_token("-5", options)


def test_negative_positionals():
    verb = VerbDef(
        id="move",
        args=[ArgumentDef("dx", integer()), ArgumentDef("dy", floating())],
        options=[OptionDef("verbose", names=("-v",))],
    )
    result = parse_tokens(verb, ["-5", "-v", "-0.25"])
    assert result["dx"] == -5
    assert result["dy"] == -0.25
    assert result["verbose"] == 1


def test_negative_option_argument():
    verb = VerbDef(
        id="root",
        options=[
            OptionDef("offset", names=("--offset",), args=[ArgumentDef("n", integer())])
        ],
    )
    assert parse_tokens(verb, ["--offset", "-3"])["n"] == -3


def test_bare_dash_is_a_positional():
    verb = VerbDef(id="cat", args=[ArgumentDef("file", string())])
    assert parse_tokens(verb, ["-"])["file"] == "-"


def test_digit_option_in_scope():
    verb = VerbDef(
        id="root",
        args=[ArgumentDef("n", integer(), optional=True)],
        options=[OptionDef("one", names=("-1",))],
    )
    result = parse_tokens(verb, ["-1", "7"])
    assert result["one"] == 1
    assert result["n"] == 7
    with pytest.raises(UserInputError, match="unknown option: -5"):
        parse_tokens(verb, ["-5"])


def test_digit_option_is_not_taken_as_optional_argument():
    verb = VerbDef(
        id="root",
        options=[
            OptionDef(
                "repeat",
                names=("--repeat",),
                args=[ArgumentDef("n", integer(), optional=True, default=2)],
            ),
            OptionDef("one", names=("-1",)),
        ],
    )
    result = parse_tokens(verb, ["--repeat", "-1"])
    assert result["repeat"] == 1
    assert result["n"] == 2
    assert result["one"] == 1

    plain = VerbDef(id="root", options=verb.options[:1])
    result = parse_tokens(plain, ["--repeat", "-1"])
    assert result["n"] == -1


def test_negative_float_specials_are_positionals():
    assert not is_option_token("-inf")
    assert not is_option_token("-nan")
    verb = VerbDef(id="root", args=[ArgumentDef("x", floating())])
    assert parse_tokens(verb, ["-inf"])["x"] == -math.inf
    assert math.isnan(parse_tokens(verb, ["-nan"])["x"])


def test_float_specials_yield_to_short_options():
    options = [OptionDef("interactive", names=("-i",))]
    assert is_option_token("-inf", options)
    assert not is_option_token("-nan", options)
