# tests/test_tokenize.py - Tokenizer tests
"""
Tests for the command-line tokenizer and sub-expression evaluation.
"""
import pytest

from pcomp.errors import (
    EvaluationFailure,
    IncompleteBrace,
    IncompleteDelimiter,
    IncompleteParen,
    IncompleteQuote,
    TokenPositionMismatch,
)
from pcomp.parser import Evaluator, TokenKind, Tokenizer, tokenize


def values(line, **kwargs):
    return Tokenizer(Evaluator(variables={})).parse(line, **kwargs).values


class TestWords:
    """Argument boundaries and values."""

    def test_trailing_space_adds_empty_argument(self):
        """Completing after a space targets the next argument."""
        result = Tokenizer().parse("a b c ")

        assert len(result.tokens) == 4
        assert result.values == ["a", "b", "c", ""]
        last = result.tokens[-1]
        assert last.start == last.end == 6
        assert last.kind is TokenKind.WORD

    def test_no_trailing_token_without_space(self):
        assert values("a b c") == ["a", "b", "c"]

    def test_empty_line(self):
        assert Tokenizer().parse("").tokens == []

    def test_positions(self):
        result = Tokenizer().parse("ls  -la")

        assert [(t.start, t.end) for t in result.tokens] == [(0, 2), (4, 7)]
        assert [t.raw_text for t in result.tokens] == ["ls", "-la"]

    def test_quotes(self):
        assert values("echo \"hello world\" 'x y'") == ["echo", "hello world", "x y"]

    def test_single_quotes_are_literal(self):
        assert values(r"echo 'a\b $HOME'") == ["echo", r"a\b $HOME"]

    def test_double_quote_escapes(self):
        assert values(r'echo "say \"hi\" \\ \$x"') == ["echo", r'say "hi" \ $x']

    def test_backslash_escapes_space(self):
        assert values(r"cat My\ File.txt next") == ["cat", "My File.txt", "next"]

    def test_escaped_trailing_space_is_not_a_separator(self):
        assert values("a\\ ") == ["a "]

    def test_trailing_backslash_kept(self):
        assert values("a\\") == ["a\\"]

    def test_adjacent_pieces_concatenate(self):
        assert values("foo\"bar\"'baz'") == ["foobarbaz"]

    def test_empty_quoted_argument(self):
        result = Tokenizer().parse("echo ''")

        assert result.values == ["echo", ""]
        assert result.tokens[1].end - result.tokens[1].start == 2

    def test_range(self):
        result = Tokenizer().parse("foo bar baz", 4, 7)

        assert result.values == ["bar"]
        assert result.tokens[0].start == 4


class TestSegments:
    """Pipeline operators end the segment being completed."""

    def test_tokens_before_operator_discarded(self):
        result = Tokenizer().parse("ls foo | gr")

        assert result.values == ["gr"]
        assert [t.value for t in result.discarded] == ["ls", "foo", "|"]
        assert result.discarded[-1].kind is TokenKind.OPERATOR

    def test_operator_at_end_leaves_empty_segment(self):
        assert Tokenizer().parse("ls |").tokens == []

    def test_space_after_operator(self):
        assert Tokenizer().parse("ls | ").values == [""]

    @pytest.mark.parametrize("line", ["a;cd", "a&&cd", "a||cd", "a & cd", "x | y ; cd"])
    def test_operators(self, line):
        assert tokenize(line) == ["cd"]

    def test_operator_inside_quotes(self):
        assert values('echo "a|b" c') == ["echo", "a|b", "c"]


class TestReconstruct:
    """Balanced lines round-trip through token raw text."""

    @pytest.mark.parametrize("line", [
        "ls -la",
        "  cat   'My File.txt'  ",
        r"echo My\ Dir \"quoted\" done",
        "ls -la | grep 'x y' && echo \"a\\\"b\"",
        "a;b;c ",
        "",
    ])
    def test_round_trip(self, line):
        assert Tokenizer(Evaluator(variables={})).parse(line).reconstruct() == line


class TestIncomplete:
    """Unterminated delimiters."""

    def test_open_double_quote_yields_incomplete_token(self):
        result = Tokenizer().parse('ls "My Do')

        last = result.tokens[-1]
        assert last.kind is TokenKind.INCOMPLETE
        assert last.value == "My Do"
        assert result.incomplete.char == '"'
        assert result.incomplete.position == 3

    def test_strict_raises_incomplete_quote(self):
        with pytest.raises(IncompleteQuote) as info:
            Tokenizer().parse("echo 'abc", strict=True)

        assert info.value.char == "'"
        assert info.value.position == 5

    def test_open_paren(self):
        with pytest.raises(IncompleteParen) as info:
            Tokenizer().parse("echo $(1 + ")

        assert info.value.char == "("
        assert info.value.position == 6

    def test_open_brace(self):
        with pytest.raises(IncompleteBrace) as info:
            Tokenizer().parse("echo ${ls fo")

        assert info.value.char == "{"
        assert info.value.position == 6

    def test_open_angle(self):
        with pytest.raises(IncompleteBrace) as info:
            Tokenizer().parse("diff $<sort a")

        assert info.value.char == "<"
        assert info.value.position == 6

    def test_taxonomy(self):
        assert issubclass(IncompleteParen, IncompleteDelimiter)
        assert issubclass(TokenPositionMismatch, AssertionError)


class TestSubExpressions:
    """Embedded sub-expressions are evaluated while tokenizing."""

    def test_arithmetic(self):
        tokenizer = Tokenizer(Evaluator(variables={"N": "3"}))

        assert tokenizer.parse("echo $(1 + 2) $(N * 2)").values == ["echo", "3", "6"]

    def test_non_string_result_coerced(self):
        assert values("echo $(2.5 * 2)") == ["echo", "5.0"]

    def test_nested_parens_and_functions(self):
        tokenizer = Tokenizer(Evaluator(variables={}, functions={"max": max}))

        assert tokenizer.parse("echo $(max(1, (2 + 3)))").values == ["echo", "5"]

    def test_variables(self):
        tokenizer = Tokenizer(Evaluator(variables={"HOME": "/home/u"}))

        result = tokenizer.parse('ls $HOME/x "$HOME" $MISSING')

        assert result.values == ["ls", "/home/u/x", "/home/u", ""]

    def test_lone_dollar(self):
        assert values("echo $ x") == ["echo", "$", "x"]

    def test_escaped_dollar(self):
        assert values(r"echo \$HOME") == ["echo", "$HOME"]

    def test_command_substitution_needs_runner(self):
        with pytest.raises(EvaluationFailure):
            Tokenizer(Evaluator(variables={})).parse("echo ${date}")

    def test_command_substitution_with_runner(self):
        calls = []

        def runner(source, delimiter):
            calls.append((source, delimiter))
            return ["a", "b"]

        tokenizer = Tokenizer(Evaluator(variables={}, command_runner=runner))

        assert tokenizer.parse("echo ${ls -1} $<sort x>").values == ["echo", "a b", "a b"]
        assert calls == [("ls -1", "{"), ("sort x", "<")]

    def test_runner_error_is_evaluation_failure(self):
        def runner(source, delimiter):
            raise RuntimeError("boom")

        with pytest.raises(EvaluationFailure, match="boom"):
            Tokenizer(Evaluator(command_runner=runner)).parse("echo ${x}")

    @pytest.mark.parametrize("expr", ["1 / 0", "undefined_name", "1 +", "open('x')"])
    def test_evaluation_failures(self, expr):
        with pytest.raises(EvaluationFailure):
            values(f"echo $({expr})")

    def test_failing_callable(self):
        def lookup(key):
            return {}[key]

        tokenizer = Tokenizer(Evaluator(variables={}, functions={"lookup": lookup}))

        with pytest.raises(EvaluationFailure, match="lookup"):
            tokenizer.parse("echo $(lookup(1))")

    def test_deep_expression(self):
        with pytest.raises(EvaluationFailure, match="too deeply"):
            values("echo $(" + " + ".join(["1"] * 1500) + ")")

    @pytest.mark.parametrize("expr", ["9 ** 9 ** 9", "2 ** 100000", "'a' * 100000000"])
    def test_oversized_results_refused(self, expr):
        with pytest.raises(EvaluationFailure, match="too"):
            values(f"echo $({expr})")

    def test_small_powers(self):
        assert values("echo $(2 ** 10) $(0.5 ** 2)") == ["echo", "1024", "0.25"]
