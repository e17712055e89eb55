# tests/test_repl.py - REPL front end tests
"""
Tests for REPL builtins, highlighting and the prompt_toolkit adapters.
"""
import io

import pytest
from conftest import make_file
from prompt_toolkit.buffer import Buffer
from prompt_toolkit.document import Document
from pygments.token import Keyword, Name, Operator, Punctuation, String
from rich.console import Console

from pcomp.engine import CompletionSession, InsertUnique, NoOp, ShowList
from pcomp.parser import Evaluator
from pcomp.repl.commands import CommandExecutor
from pcomp.repl.completer import PcompCompleter
from pcomp.repl.keybinds import apply_action, insert_typed
from pcomp.repl.lexer import CommandLineLexer
from pcomp.repl.renderer import Renderer
from pcomp.repl.session import ReplSession
from pcomp.runtime import PcompConfig


@pytest.fixture
def output():
    return io.StringIO()


@pytest.fixture
def repl_session(make_completer, tmp_path):
    completer = make_completer()
    completer.evaluator = Evaluator(variables={})
    completer.tokenizer.evaluator = completer.evaluator
    return ReplSession(
        config=PcompConfig(),
        completer=completer,
        completion=CompletionSession(completer),
        history_file=tmp_path / "history",
    )


@pytest.fixture
def executor(repl_session, output):
    return CommandExecutor(repl_session, Renderer(Console(file=output, width=120)))


class TestBuiltins:
    def test_alias_defined(self, executor, repl_session):
        executor.execute("alias ll='ls -l'")

        assert repl_session.registry.lookup("ll").expansion == "ls -l"

    def test_unalias(self, executor, repl_session):
        executor.execute("alias ll='ls -l'")
        executor.execute("unalias ll")

        assert repl_session.registry.lookup("ll") is None

    def test_alias_completes(self, executor, repl_session):
        executor.execute("alias sublime=subl")

        _, found = repl_session.completer.complete_line("subl")

        assert "sublime" in found

    def test_self_referencing_alias_terminates(self, executor, output):
        executor.execute("alias ls='ls -la'")
        outcome = executor.execute("ls")

        assert not outcome.exit_repl
        assert "-la" in output.getvalue()

    def test_cd_changes_completion_directory(self, executor, repl_session, work_dir):
        sub = work_dir / "sub"
        sub.mkdir()
        make_file(sub / "inner.txt")

        executor.execute("cd sub")
        _, found = repl_session.completer.complete_line("cat in")

        assert repl_session.cwd == str(sub)
        assert found.names() == ["inner.txt"]

    def test_cd_missing_directory(self, executor, repl_session, work_dir, output):
        executor.execute("cd nowhere")

        assert repl_session.cwd == str(work_dir)
        assert "nowhere" in output.getvalue()

    def test_export_visible_to_tokenizer(self, executor, repl_session):
        executor.execute("export NAME=value")

        result = repl_session.completer.tokenizer.parse("echo $NAME")

        assert repl_session.variables["NAME"] == "value"
        assert result.values == ["echo", "value"]

    def test_echo(self, executor, output):
        executor.execute("echo 'hello  there' $((1 + 2))")

        assert "hello  there" in output.getvalue()

    def test_exit(self, executor):
        assert executor.execute("exit").exit_repl

    def test_parse_error_reported(self, executor, repl_session):
        outcome = executor.execute("echo 'open")

        assert not outcome.exit_repl
        assert repl_session.status_message == "Parse error"

    def test_other_lines_show_tokens(self, executor, repl_session, output):
        executor.execute("grep -n 'a b' file")

        assert repl_session.status_message == "Parsed 4 arguments"
        assert "Tokens" in output.getvalue()


class TestLexer:
    def tokens(self, line):
        return list(CommandLineLexer().get_tokens(line))

    def test_command_and_pipeline(self):
        tokens = self.tokens("ls -la | grep 'x'")

        assert (Name.Function, "ls") in tokens
        assert (Operator, "|") in tokens
        assert (Name.Function, "grep") in tokens
        assert (String.Single, "'x'") in tokens

    def test_builtin(self):
        assert (Keyword, "cd") in self.tokens("cd /tmp")

    def test_substitution(self):
        tokens = self.tokens("echo $(1 + 2) $HOME")

        assert (Punctuation, "$(") in tokens
        assert (Punctuation, ")") in tokens
        assert (Name.Variable, "$HOME") in tokens


class TestPromptAdapters:
    def test_menu_completions(self, make_completer, work_dir):
        make_file(work_dir / "foo.cpp")
        make_file(work_dir / "foo.txt")

        completions = list(
            PcompCompleter(make_completer()).get_completions(Document("cat fo", 6), None)
        )

        assert [c.text for c in completions] == ["foo.cpp", "foo.txt"]
        assert all(c.start_position == -2 for c in completions)

    def test_menu_empty_on_failure(self, make_completer):
        completer = PcompCompleter(make_completer())

        assert list(completer.get_completions(Document("echo ${x} ", 10), None)) == []

    def test_apply_insertion(self):
        buffer = Buffer(document=Document("cat s", 5))

        apply_action(buffer, InsertUnique(5, 5, "rc/"), lambda names: None)

        assert buffer.text == "cat src/"
        assert buffer.cursor_position == 8

    def test_apply_noop_inserts_fallback(self):
        buffer = Buffer(document=Document("x", 1))

        apply_action(buffer, NoOp("\t"), lambda names: None)

        assert buffer.text == "x\t"

    def test_apply_list(self):
        shown = []
        buffer = Buffer(document=Document("cat a", 5))

        apply_action(buffer, ShowList(("a1", "a2")), shown.append)

        assert shown == [("a1", "a2")]
        assert buffer.text == "cat a"

    def test_typed_text_inserted(self):
        buffer = Buffer(document=Document("ca", 2))

        insert_typed(buffer, "t", 2)

        assert buffer.text == "catt"

    @pytest.mark.parametrize("data", ["\x1b[15~", "\x1b", "\x00", ""])
    def test_unbound_sequences_dropped(self, data):
        buffer = Buffer(document=Document("ls", 2))

        insert_typed(buffer, data)

        assert buffer.text == "ls"
