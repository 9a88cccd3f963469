from pathlib import Path
from types import SimpleNamespace

import pytest

from relaychat.conversation import Agent
from relaychat.slash import (
    CommandRegistry,
    ParsedCommand,
    Severity,
    SlashCommand,
    SlashOutcome,
    parse,
    parse_agent,
    resolve,
    resolve_with_skills,
)

Kind = SlashOutcome.Kind


class _Skills:
    def __init__(self, names):
        self._skills = {n: SimpleNamespace(name=n) for n in names}

    def find(self, name):
        return self._skills.get(name)


def test_parse_name_only():
    p = parse("/help")
    assert p == ParsedCommand(name="help", args="")


def test_parse_name_with_args():
    p = parse("/handoff gpt")
    assert p.name == "handoff"
    assert p.args == "gpt"


def test_parse_trims_inner_whitespace():
    p = parse("/handoff    claude   ")
    assert p.name == "handoff"
    assert p.args == "claude"


def test_parse_preserves_multiword_args():
    p = parse("/foo bar baz")
    assert p.name == "foo"
    assert p.args == "bar baz"


def test_parse_lowercases_name():
    assert parse("/HELP").name == "help"


@pytest.mark.parametrize("text", ["/", "/ ", "/\t"])
def test_parse_rejects_bare_slash(text):
    assert parse(text) is None


def test_parse_rejects_leading_whitespace():
    assert parse(" /help") is None


@pytest.mark.parametrize("text", ["help", ""])
def test_parse_rejects_no_slash(text):
    assert parse(text) is None


@pytest.mark.parametrize("text", ["/foo/bar", "/foo.bar", "/foo!"])
def test_parse_rejects_invalid_name_chars(text):
    assert parse(text) is None


def test_parse_accepts_hyphens_and_digits():
    assert parse("/gpt-4").name == "gpt-4"
    p = parse("/do-thing-2 x")
    assert p.name == "do-thing-2"
    assert p.args == "x"


def test_parse_question_mark_aliases_to_help():
    assert parse("/?") == ParsedCommand(name="help", args="")


def test_registry_finds_builtins_case_insensitive():
    reg = CommandRegistry.builtins()
    assert reg.find("help").kind is SlashCommand.HELP
    assert reg.find("HELP").kind is SlashCommand.HELP
    assert reg.find("Compact").kind is SlashCommand.COMPACT


def test_registry_returns_none_for_unknown():
    assert CommandRegistry.builtins().find("nope") is None


def test_registry_entries_in_display_order():
    names = [e.name for e in CommandRegistry.builtins().entries()]
    assert names == [
        "help", "hotkeys", "new", "resume", "compact", "copy", "export",
        "handoff", "focus", "skills", "quit",
    ]


def test_resolve_known_commands():
    reg = CommandRegistry.builtins()
    assert resolve(ParsedCommand("help", ""), reg) == SlashOutcome.simple(Kind.SHOW_HELP)
    assert resolve(ParsedCommand("quit", ""), reg) == SlashOutcome.simple(Kind.QUIT)
    assert resolve(ParsedCommand("new", ""), reg) == SlashOutcome.simple(
        Kind.CLEAR_CONVERSATION
    )


def test_resolve_unknown_produces_error_message():
    out = resolve(ParsedCommand("nonesuch", ""), CommandRegistry.builtins())
    assert out.kind is Kind.SHOW_MESSAGE
    assert "/nonesuch" in out.message
    assert "unknown" in out.message
    assert out.severity is Severity.ERROR


@pytest.mark.parametrize(
    "text, expected",
    [
        ("claude", Agent.CLAUDE),
        ("gpt", Agent.GPT),
        ("codex", Agent.CODEX),
        ("  GPT  ", Agent.GPT),
    ],
)
def test_resolve_handoff_parses_agents(text, expected):
    out = resolve(ParsedCommand("handoff", text), CommandRegistry.builtins())
    assert out == SlashOutcome.handoff(expected)


def test_resolve_focus_parses_agents():
    out = resolve(ParsedCommand("focus", "codex"), CommandRegistry.builtins())
    assert out == SlashOutcome.focus(Agent.CODEX)


def test_resolve_handoff_missing_arg_is_error():
    out = resolve(ParsedCommand("handoff", ""), CommandRegistry.builtins())
    assert out.kind is Kind.SHOW_MESSAGE
    assert out.severity is Severity.ERROR
    assert "missing agent" in out.message or "available" in out.message


def test_resolve_handoff_unknown_agent_is_error():
    out = resolve(ParsedCommand("handoff", "frobnicator"), CommandRegistry.builtins())
    assert out.kind is Kind.SHOW_MESSAGE
    assert out.severity is Severity.ERROR
    assert "frobnicator" in out.message.lower()
    assert "claude" in out.message


@pytest.mark.parametrize(
    "name",
    ["help", "hotkeys", "new", "resume", "compact", "copy", "export", "handoff",
     "focus", "skills", "quit"],
)
def test_builtins_has_all_expected_commands(name):
    assert CommandRegistry.builtins().find(name).name == name


def test_resolve_export_without_args_is_default_path():
    out = resolve(ParsedCommand("export", ""), CommandRegistry.builtins())
    assert out == SlashOutcome.export(None)


def test_resolve_export_with_path_arg_carries_path():
    out = resolve(ParsedCommand("export", "  /tmp/out.html  "), CommandRegistry.builtins())
    assert out == SlashOutcome.export(Path("/tmp/out.html"))


def test_resolve_skills_and_resume():
    reg = CommandRegistry.builtins()
    assert resolve(ParsedCommand("skills", ""), reg).kind is Kind.SHOW_SKILLS
    assert resolve(ParsedCommand("resume", ""), reg).kind is Kind.REQUIRE_SESSION_PICK


def test_resolve_with_skills_dispatches_to_user_skill():
    reg = CommandRegistry.builtins()
    skills = _Skills(["security-review", "help"])

    out = resolve_with_skills(
        ParsedCommand("security-review", "branch=feature/x"), reg, skills
    )
    assert out == SlashOutcome.skill("security-review", "branch=feature/x")

    out = resolve_with_skills(ParsedCommand("help", ""), reg, skills)
    assert out == SlashOutcome.simple(Kind.SHOW_HELP)

    out = resolve_with_skills(ParsedCommand("ghost", ""), reg, skills)
    assert out.kind is Kind.SHOW_MESSAGE
    assert "/ghost" in out.message
    assert out.severity is Severity.ERROR


def test_resolve_without_skills_ignores_skill_names():
    out = resolve(ParsedCommand("security-review", ""), CommandRegistry.builtins())
    assert out.kind is Kind.SHOW_MESSAGE
    assert out.severity is Severity.ERROR


def test_parse_agent_values_and_errors():
    assert parse_agent(" Claude ") is Agent.CLAUDE
    with pytest.raises(ValueError, match="missing agent"):
        parse_agent("   ")
    with pytest.raises(ValueError, match="gemini"):
        parse_agent("gemini")


def test_parse_then_resolve_round_trip():
    out = resolve(parse("/FOCUS gpt"), CommandRegistry.builtins())
    assert out == SlashOutcome.focus(Agent.GPT)