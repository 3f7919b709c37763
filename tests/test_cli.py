import json

from click.testing import CliRunner

from argtok.cli import main


def test_cli_default():
    result = CliRunner().invoke(main, [])
    assert result.exit_code == 0
    assert result.output.splitlines()[-2:] == ["foo", "bar"]


def test_cli_tokens():
    result = CliRunner().invoke(main, ['"foo bar" baz'])
    assert result.exit_code == 0
    assert result.output.splitlines() == [
        "List of parsed tokens:",
        "----------------------",
        "foo bar",
        "baz",
    ]


def test_cli_json():
    result = CliRunner().invoke(main, ["--json", "a 'b c'"])
    assert result.exit_code == 0
    assert json.loads(result.stdout) == ["a", "b c"]


def test_cli_invalid_input():
    result = CliRunner().invoke(main, ['"unterminated'])
    assert result.exit_code == 1
    assert "Unable to transition" in result.output

    result = CliRunner().invoke(main, ["\\q"])
    assert result.exit_code == 1
    assert "not a valid escape character" in result.output
