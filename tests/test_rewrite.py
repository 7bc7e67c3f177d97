# tests/test_rewrite.py
"""
End-to-end tests for the Rewrite Driver: Go source → migrated Go source.
"""

import textwrap

import pytest

from logchain import ast as A
from logchain.config import MigrationConfig
from logchain.errors import GoParseError
from logchain.rewrite import (
    RewriteResult,
    apply_replacements,
    collect_replacements,
    rewrite,
    rewrite_source,
)
from tests.conftest import (
    GROUPED_IMPORT_GO,
    GROUPED_IMPORT_SLOG,
    MULTILINE_CHAIN_GO,
    NO_ZEROLOG_GO,
    SIMPLE_INFO_GO,
    SIMPLE_INFO_SLOG,
    SYNTAX_ERROR_GO,
    UNSUPPORTED_FIELD_GO,
)


def _in_main(body: str, imports: str = 'import "github.com/rs/zerolog/log"') -> str:
    return f"package main\n\n{imports}\n\nfunc main() {{\n\t{body}\n}}\n"


def _migrate(src: str, config: MigrationConfig = MigrationConfig()) -> str:
    return rewrite_source(src.encode(), "test.go", config).output.decode()


def _converted_line(body: str) -> str:
    """Rewrite a one-statement main() and return the statement line."""
    out = _migrate(_in_main(body))
    return out.split("func main() {\n\t", 1)[1].rsplit("\n}", 1)[0]


class TestScenarios:

    def test_simple_info(self):
        assert _migrate(SIMPLE_INFO_GO) == SIMPLE_INFO_SLOG

    def test_int_and_bool_fields(self):
        line = _converted_line('log.Debug().Int("num", 42).Bool("active", true).Msg("debugging")')
        assert line == (
            'slog.LogAttrs(ctx, slog.LevelDebug, "debugging", '
            'slog.Int("num", 42), slog.Bool("active", true))'
        )

    def test_send_without_message(self):
        line = _converted_line('log.Info().Str("key", "value").Send()')
        assert line == (
            'slog.LogAttrs(ctx, slog.LevelInfo, "zerolog event", slog.String("key", "value"))'
        )

    def test_msgf_drops_arguments(self):
        line = _converted_line('log.Warn().Msgf("user %s logged in", "testuser")')
        assert line == 'slog.LogAttrs(ctx, slog.LevelWarn, "user %s logged in")'

    def test_err_field(self):
        assert _migrate(GROUPED_IMPORT_GO) == GROUPED_IMPORT_SLOG

    def test_int8_conversion(self):
        line = _converted_line('log.Info().Int8("x", i8).Msg("m")')
        assert line == 'slog.LogAttrs(ctx, slog.LevelInfo, "m", slog.Int("x", int(i8)))'

    @pytest.mark.parametrize("level", ["Fatal", "Panic"])
    def test_fatal_and_panic(self, level):
        line = _converted_line(f'log.{level}().Msg("critical error")')
        assert line == 'slog.LogAttrs(ctx, slog.LevelError, "critical error")'

    def test_every_numeric_width(self):
        line = _converted_line(
            'log.Info().Uint8("u8", u8).Uint64("u64", u64)'
            '.Float32("f32", f32).Dur("d", d).Time("t", t).Msg("nums")'
        )
        assert line == (
            'slog.LogAttrs(ctx, slog.LevelInfo, "nums", '
            'slog.Uint64("u8", uint64(u8)), slog.UInt64("u64", u64), '
            'slog.Float64("f32", float64(f32)), slog.Duration("d", d), '
            'slog.Time("t", t))'
        )


class TestMultiline:

    def test_chain_collapses_to_one_call(self):
        out = _migrate(MULTILINE_CHAIN_GO)
        expected = textwrap.dedent('''\
            \t// report the failure
            \tslog.LogAttrs(ctx, slog.LevelError, "DB query failed for user", slog.Any("err", err), slog.String("context", "db_query"), slog.Int("userID", userID), slog.Bool("dbError", true))

            \t// A call that should be ignored
            \tfmt.Println("This is a regular function call")
            }
        ''')
        assert out.endswith(expected)

    def test_surroundings_untouched(self):
        out = _migrate(MULTILINE_CHAIN_GO)
        assert out.startswith(
            'package main\n\nimport (\n\t"errors"\n\n\t"log/slog"\n)\n\n// main logs a failure.\n'
        )

    def test_interior_comments_move_above_call(self):
        src = _in_main('log.Info().\n\t\t// request id\n\t\tInt("id", id).\n\t\tMsg("handled")')
        out = _migrate(src)
        assert '\t// request id\n\tslog.LogAttrs(ctx, slog.LevelInfo, "handled", slog.Int("id", id))\n}' in out

    def test_argument_formatting_is_kept(self):
        line = _converted_line('log.Info().Str("k", fmt.Sprintf("%d",  n)).Msg("m")')
        assert 'slog.String("k", fmt.Sprintf("%d",  n))' in line

    def test_trailing_comment_survives(self):
        out = _migrate(_in_main('log.Info().Msg("x") // trailing'))
        assert 'slog.LogAttrs(ctx, slog.LevelInfo, "x")' in out
        assert "// trailing" in out

    def test_import_comment_survives(self):
        src = _in_main('zl.Info().Msg("x")', imports='import zl /* keep me */ "github.com/rs/zerolog/log"')
        out = _migrate(src)
        assert 'import /* keep me */ "log/slog"\n' in out
        assert 'slog.LogAttrs(ctx, slog.LevelInfo, "x")' in out


class TestInvariants:

    def test_untouched_file_is_byte_identical(self):
        result = rewrite_source(NO_ZEROLOG_GO.encode(), "plain.go")
        assert result.output == NO_ZEROLOG_GO.encode()
        assert result.replacements == 0
        assert not result.changed

    def test_all_or_nothing(self):
        out = _migrate(UNSUPPORTED_FIELD_GO)
        assert '\tlog.Info().Str("a", "b").Caller().Msg("with caller")\n' in out
        assert "LogAttrs" not in out

    def test_idempotent(self):
        once = _migrate(MULTILINE_CHAIN_GO)
        twice = rewrite_source(once.encode(), "test.go")
        assert twice.replacements == 0
        assert twice.output.decode() == once
        assert "zerolog" not in once

    def test_field_order_preserved(self):
        names = ["a", "b", "c", "d", "e"]
        chain = "".join(f'.Str("{n}", {n})' for n in names)
        line = _converted_line(f"log.Info(){chain}.Msg(\"m\")")
        positions = [line.index(f'slog.String("{n}", {n})') for n in names]
        assert positions == sorted(positions)

    def test_chain_in_variable_untouched(self):
        src = _in_main('event := log.Info()\n\tevent.Str("a", "b").Msg("x")')
        out = _migrate(src)
        assert 'event.Str("a", "b").Msg("x")' in out

    def test_nested_blocks(self):
        src = _in_main('if err != nil {\n\t\tlog.Error().Err(err).Msg("bad")\n\t}')
        out = _migrate(src)
        assert '\t\tslog.LogAttrs(ctx, slog.LevelError, "bad", slog.Any("err", err))\n\t}' in out

    def test_func_literal_argument_is_not_rematched(self):
        body = 'log.Info().Str("k", func() string { log.Debug().Msg("inner"); return "" }()).Msg("outer")'
        line = _converted_line(body)
        assert line.startswith('slog.LogAttrs(ctx, slog.LevelInfo, "outer", slog.String("k", func()')
        assert 'log.Debug().Msg("inner")' in line


class TestDriverApi:

    def test_collect_is_read_only_and_identity_keyed(self, parse_go):
        tree = parse_go(SIMPLE_INFO_GO)
        replacements = collect_replacements(tree)
        assert len(replacements) == 2
        with pytest.raises(TypeError):
            replacements[tree] = tree
        originals = {n.shape for n in replacements}
        assert originals == {A.Shape.IMPORT_SPEC, A.Shape.EXPR_STMT}

    def test_collect_does_not_mutate_tree(self, parse_go):
        tree = parse_go(SIMPLE_INFO_GO)
        before = list(tree.walk())
        collect_replacements(tree)
        assert list(tree.walk()) == before

    def test_apply_and_rewrite_agree(self, parse_go):
        tree = parse_go(SIMPLE_INFO_GO)
        assert apply_replacements(tree, collect_replacements(tree)) == rewrite(tree)
        assert rewrite(tree).decode() == SIMPLE_INFO_SLOG

    def test_result_counts(self):
        result = rewrite_source(MULTILINE_CHAIN_GO.encode(), "m.go")
        assert isinstance(result, RewriteResult)
        assert result.replacements == 2
        assert result.placeholder_calls == 1

    def test_custom_config(self):
        config = MigrationConfig(context_expr="reqCtx", default_message="event")
        line = _migrate(_in_main('log.Info().Send()'), config)
        assert 'slog.LogAttrs(reqCtx, slog.LevelInfo, "event")' in line

    def test_parse_failure_propagates(self):
        with pytest.raises(GoParseError):
            rewrite_source(SYNTAX_ERROR_GO.encode(), "broken.go")
