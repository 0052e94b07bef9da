from pathlib import Path

import pytest

from verbtree.config import load_config, load_grammar
from verbtree.exceptions import GrammarDefinitionError, UserInputError

YAML_GRAMMAR = """
settings:
  max_trials: 32
commands:
  - id: mv
    name: mv
    aliases: [move]
    args:
      - {id: src}
      - {id: dst}
    options:
      - id: force
        names: ["--force", "-f"]
  - id: calc
    name: calc
    subverbs:
      - id: add
        name: add
        args:
          - {id: values, type: variadic, of: float}
      - id: number
        args:
          - {id: value, type: float}
  - id: paint
    name: paint
    args:
      - id: color
        type: choice
        choices: [red, green]
        optional: true
        default: red
"""

TOML_GRAMMAR = """
[settings]
max_trials = 8

[[commands]]
id = "sleep"
name = "sleep"

[[commands.args]]
id = "seconds"
type = "int"

[[commands.options]]
id = "quiet"
names = ["--quiet", "-q"]
"""


def write(tmp_path: Path, name: str, content: str) -> Path:
    path = tmp_path / name
    path.write_text(content, encoding="UTF-8")
    return path


def test_load_yaml_grammar(tmp_path):
    registry = load_grammar(write(tmp_path, "grammar.yaml", YAML_GRAMMAR))
    assert registry.names() == ["calc", "move", "mv", "paint"]
    assert registry.get("mv").max_trials == 32

    _, result = registry.parse(["move", "-f", "a", "b"])
    assert result == {"src": "a", "dst": "b", "force": 1, "mv": True}

    _, result = registry.parse(["calc", "add", "1", "2"])
    assert result["add"]["values"] == [1.0, 2.0]
    _, result = registry.parse(["calc", "2.5"])
    assert result["number"]["value"] == 2.5

    _, result = registry.parse(["paint"])
    assert result["color"] == "red"
    with pytest.raises(UserInputError, match="expected one of"):
        registry.parse(["paint", "blue"])


def test_load_toml_grammar(tmp_path):
    registry = load_grammar(write(tmp_path, "grammar.toml", TOML_GRAMMAR))
    assert registry.get("sleep").max_trials == 8
    _, result = registry.parse(["sleep", "-q", "5"])
    assert result == {"seconds": 5, "quiet": 1, "sleep": True}


def test_load_grammar_file_errors(tmp_path):
    with pytest.raises(FileNotFoundError, match="No such grammar file"):
        load_grammar(tmp_path / "missing.yaml")
    with pytest.raises(ValueError, match="Unsupported grammar format"):
        load_grammar(write(tmp_path, "grammar.json", "{}"))
    with pytest.raises(TypeError):
        load_grammar(42)


def test_config_must_be_a_mapping():
    with pytest.raises(GrammarDefinitionError, match="must contain a mapping"):
        load_config(["mv"])
    with pytest.raises(GrammarDefinitionError, match="must contain a mapping"):
        load_config(None)


@pytest.mark.parametrize(
    "argument",
    [
        {"id": "x", "type": "choice"},
        {"id": "x", "choices": ["a"]},
        {"id": "x", "of": "int"},
        {"id": "x", "unexpected": True},
    ],
)
def test_invalid_argument_records(argument):
    raw = {"commands": [{"id": "cmd", "name": "cmd", "args": [argument]}]}
    with pytest.raises(GrammarDefinitionError, match="Invalid grammar definition"):
        load_config(raw)


def test_invalid_settings():
    with pytest.raises(GrammarDefinitionError):
        load_config({"settings": {"max_trials": 0}})


def test_unknown_argument_type():
    argument = {"id": "x", "type": "uuid"}
    raw = {"commands": [{"id": "cmd", "name": "cmd", "args": [argument]}]}
    with pytest.raises(GrammarDefinitionError, match="Unknown argument type"):
        load_config(raw).to_registry()


def test_grammar_defects_surface_on_load():
    raw = {
        "commands": [
            {
                "id": "cmd",
                "name": "cmd",
                "options": [
                    {"id": "a", "names": ["-x"]},
                    {"id": "b", "names": ["-x"]},
                ],
            }
        ]
    }
    with pytest.raises(GrammarDefinitionError, match="already used by option 'a'"):
        load_config(raw).to_registry()


def test_malformed_files_are_grammar_errors(tmp_path):
    with pytest.raises(GrammarDefinitionError, match="Could not read grammar file"):
        load_grammar(write(tmp_path, "bad.yaml", "commands: [\n  - id: mv\n"))
    with pytest.raises(GrammarDefinitionError, match="Could not read grammar file"):
        load_grammar(write(tmp_path, "bad.toml", "[[commands]\nid = \n"))
