import pytest

from verbtree.exceptions import UserInputError
from verbtree.parser import (
    ArgumentDef,
    OptionDef,
    ParseResult,
    TokenStream,
    VerbDef,
    parse_tokens,
)
from verbtree.parser.engine import parse_option_arguments
from verbtree.parser.resolvers import integer, string


def build_tool() -> VerbDef:
    return VerbDef(
        id="tool",
        name="tool",
        args=[ArgumentDef("target", string(), optional=True)],
        options=[
            OptionDef("verbose", names=("--verbose", "-v")),
            OptionDef(
                "level", names=("--level", "-l"), args=[ArgumentDef("value", integer())]
            ),
            OptionDef(
                "output", names=("--output", "-o"), args=[ArgumentDef("path", string())]
            ),
            OptionDef(
                "color",
                names=("--color",),
                args=[ArgumentDef("name", string(), optional=True, default="auto")],
            ),
            OptionDef(
                "range",
                names=("--range", "-r"),
                args=[
                    ArgumentDef("lo", integer(), optional=True, default=0),
                    ArgumentDef("hi", integer(), optional=True, default=10),
                ],
            ),
        ],
    )


def parse(*tokens: str) -> ParseResult:
    return parse_tokens(build_tool(), list(tokens))


def test_absent_options_are_bound_with_defaults():
    assert parse() == {
        "target": None,
        "verbose": 0,
        "level": 0,
        "value": None,
        "output": 0,
        "path": None,
        "color": 0,
        "name": "auto",
        "range": 0,
        "lo": 0,
        "hi": 10,
        "tool": True,
    }


def test_long_and_short_names_share_a_counter():
    assert parse("-v", "--verbose", "-v")["verbose"] == 3


def test_option_argument_separate_token():
    result = parse("--level", "7", "file")
    assert result["value"] == 7
    assert result["target"] == "file"


def test_adjacent_short_value():
    assert parse("-l5")["value"] == 5
    assert parse("-o/tmp/out")["path"] == "/tmp/out"


def test_adjacent_value_must_parse():
    """An adjacent value is mandatory and is never skipped."""
    with pytest.raises(UserInputError, match="invalid integer: v"):
        parse("-lv")


def test_adjacent_empty_value_is_forced():
    result = parse("--color=")
    assert result["name"] == ""


def test_adjacent_forces_optional_argument():
    with pytest.raises(UserInputError, match="invalid integer: x"):
        parse("--range=x")


def test_flag_rejects_adjacent_value():
    with pytest.raises(UserInputError, match="does not need any argument"):
        parse("--verbose=1")


def test_unknown_options():
    with pytest.raises(UserInputError, match="unknown option: --nope"):
        parse("--nope")
    with pytest.raises(UserInputError, match="unknown option: -x"):
        parse("-x")
    with pytest.raises(UserInputError, match="unknown option: -x"):
        parse("-vx")


def test_required_option_argument_at_end():
    with pytest.raises(UserInputError, match="insufficient arguments"):
        parse("-o")


def test_optional_option_argument_defaults_at_end():
    assert parse("--color")["name"] == "auto"
    assert parse("--color", "red")["name"] == "red"


def test_optional_option_argument_skips_options():
    result = parse("--color", "-v")
    assert result["name"] == "auto"
    assert result["verbose"] == 1


def test_failed_optional_argument_rolls_back():
    """A failed optional argument leaves its token for the verb."""
    result = parse("--range", "3", "x")
    assert (result["lo"], result["hi"]) == (3, 10)
    assert result["target"] == "x"


def test_all_optional_option_arguments_default():
    result = parse("-r")
    assert result["range"] == 1
    assert (result["lo"], result["hi"]) == (0, 10)


def test_double_dash_stops_option_recognition():
    result = parse("--", "-v")
    assert result["target"] == "-v"
    assert result["verbose"] == 0


def test_double_dash_is_consumed_once():
    with pytest.raises(UserInputError, match="too many arguments: --"):
        parse("--", "a", "--")


def test_too_many_arguments():
    with pytest.raises(UserInputError, match="too many arguments: b"):
        parse("a", "b")


def test_options_interleave_with_positionals():
    result = parse("a", "-v", "--level=2")
    assert result["target"] == "a"
    assert result["verbose"] == 1
    assert result["value"] == 2


def test_parse_option_arguments_without_args():
    stream = TokenStream(["value"])
    with pytest.raises(UserInputError, match="option -q does not need any argument"):
        parse_option_arguments(
            [], stream, ParseResult(), adjacent=True, option_name="-q"
        )
    parse_option_arguments([], stream, ParseResult())
    assert stream.current == "value"


def test_short_cluster_counts_flags_then_takes_value():
    """-abc counts each flag; the first option with arguments ends the cluster."""
    result = parse("-vvl", "3")
    assert result["verbose"] == 2
    assert result["level"] == 1
    assert result["value"] == 3

    result = parse("-vl42")
    assert result["verbose"] == 1
    assert result["value"] == 42


@pytest.mark.parametrize(
    "attached, separate",
    [
        (["--level=5"], ["--level", "5"]),
        (["-l5"], ["-l", "5"]),
        (["--output=/tmp/x", "a"], ["--output", "/tmp/x", "a"]),
        (["-o/tmp/x"], ["-o", "/tmp/x"]),
        (["--color=red"], ["--color", "red"]),
    ],
)
def test_attached_value_matches_separate_token(attached, separate):
    assert parse(*attached) == parse(*separate)
