# tests/test_context.py - Context resolution tests
"""
Tests for locating the stub under the cursor.
"""
from pcomp.engine import normalize_command, resolve
from pcomp.parser import Evaluator, Tokenizer
from pcomp.runtime import CompletionConfig


def context_for(line, cursor=None, config=None):
    result = Tokenizer(Evaluator(variables={})).parse(line, 0, cursor)
    return resolve(result.tokens, len(line) if cursor is None else cursor, config, result.incomplete)


class TestResolve:
    """Stub, index and command name."""

    def test_after_trailing_space(self):
        context = context_for("a b c ")

        assert context.stub == ""
        assert context.index == 3
        assert context.preceding_args == ("a", "b", "c")
        assert context.command_name == "a"
        assert context.stub_start == context.stub_end == 6
        assert not context.is_command_position

    def test_command_position(self):
        context = context_for("gi")

        assert context.is_command_position
        assert context.stub == "gi"
        assert context.command_name == ""

    def test_empty_line(self):
        context = context_for("")

        assert context.stub == ""
        assert context.index == 0

    def test_argument(self):
        context = context_for("gcc fo")

        assert context.command_name == "gcc"
        assert context.stub == "fo"
        assert (context.stub_start, context.stub_end) == (4, 6)
        assert context.stub_position == 1

    def test_cursor_inside_word(self):
        context = context_for("foo bar", cursor=2)

        assert context.index == 0
        assert context.stub == "fo"
        assert context.stub_end == 2

    def test_only_current_segment(self):
        context = context_for("make all && gcc fo")

        assert context.command_name == "gcc"
        assert context.preceding_args == ("gcc",)

    def test_command_given_as_path(self):
        assert context_for("/usr/bin/gcc fo").command_name == "gcc"

    def test_open_quote(self):
        context = context_for('ls "My Do')

        assert context.quote == '"'
        assert context.stub == "My Do"
        assert context.stub_start == 4
        assert context.raw_stub == "My Do"

    def test_quote_opened_mid_word(self):
        context = context_for("ls My' Do")

        assert context.quote == "'"
        assert context.stub == "My Do"
        assert context.stub_start == 3
        assert context.raw_stub == "My' Do"

    def test_open_quote_after_closed_quote(self):
        context = context_for("ls 'b'\"c")

        assert context.quote == '"'
        assert context.quote_position == 6
        assert context.stub == "bc"
        assert context.stub_start == 3
        assert context.raw_stub == "'b'\"c"

    def test_closed_quote_is_not_open(self):
        context = context_for("ls 'b'c")

        assert context.quote is None
        assert context.quote_position is None
        assert context.stub == "bc"


class TestExplicitMarker:
    """A leading ``*`` asks for executables only."""

    def test_marker_stripped_from_stub(self):
        context = context_for("*ls")

        assert context.explicit
        assert context.stub == "ls"
        assert context.stub_start == 1

    def test_marker_stripped_from_command_name(self):
        assert context_for("*gcc fo").command_name == "gcc"

    def test_marker_only_at_command_position(self):
        context = context_for("echo *ls")

        assert not context.explicit
        assert context.stub == "*ls"

    def test_marker_disabled(self):
        context = context_for("*ls", config=CompletionConfig(explicit_marker=""))

        assert not context.explicit
        assert context.stub == "*ls"


class TestNormalizeCommand:
    def test_suffix_kept_by_default_on_posix(self):
        config = CompletionConfig(strip_executable_suffix=False)

        assert normalize_command("gcc.exe", config) == "gcc.exe"

    def test_suffix_stripped(self):
        config = CompletionConfig(strip_executable_suffix=True)

        assert normalize_command("gcc.exe", config) == "gcc"
        assert normalize_command("C:\\tools\\GCC.EXE", config) == "GCC"

    def test_other_suffix_kept(self):
        config = CompletionConfig(strip_executable_suffix=True)

        assert normalize_command("script.py", config) == "script.py"
