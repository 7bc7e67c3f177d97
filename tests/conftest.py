# tests/conftest.py
"""
Shared Go sources and fixtures for the logchain test-suite.
"""

import textwrap

import pytest

from logchain import ast as A
from logchain.goparser import GoParser


def go(src: str) -> str:
    """Dedent an indented Go snippet (tabs inside are kept)."""
    return textwrap.dedent(src).lstrip("\n")


SIMPLE_INFO_GO = go('''\
    package main

    import "github.com/rs/zerolog/log"

    func main() {
    \tlog.Info().Msg("hello world")
    }
''')

SIMPLE_INFO_SLOG = go('''\
    package main

    import "log/slog"

    func main() {
    \tslog.LogAttrs(ctx, slog.LevelInfo, "hello world")
    }
''')

GROUPED_IMPORT_GO = go('''\
    package main

    import (
    \t"errors"
    \t"github.com/rs/zerolog/log"
    )

    func main() {
    \terr := errors.New("an error")
    \tlog.Error().Err(err).Msg("something went wrong")
    }
''')

GROUPED_IMPORT_SLOG = go('''\
    package main

    import (
    \t"errors"
    \t"log/slog"
    )

    func main() {
    \terr := errors.New("an error")
    \tslog.LogAttrs(ctx, slog.LevelError, "something went wrong", slog.Any("err", err))
    }
''')

MULTILINE_CHAIN_GO = go('''\
    package main

    import (
    \t"errors"

    \t"github.com/rs/zerolog/log"
    )

    // main logs a failure.
    func main() {
    \terr := errors.New("something failed")
    \tuserID := 123

    \t// report the failure
    \tlog.Error().
    \t\tErr(err).
    \t\tStr("context", "db_query").
    \t\tInt("userID", userID).
    \t\tBool("dbError", true).
    \t\tMsg("DB query failed for user")

    \t// A call that should be ignored
    \tfmt.Println("This is a regular function call")
    }
''')

NO_ZEROLOG_GO = go('''\
    package main

    import (
    \t"fmt"
    \t"log"
    )

    // Greeter says hello.
    type Greeter struct{ name string }

    func (g Greeter) Hello() {
    \tfmt.Println("hello", g.name)   // keep spacing
    \tlog.Printf("said hello to %s", g.name)


    \tlog.Println("done")
    }
''')

UNSUPPORTED_FIELD_GO = go('''\
    package main

    import "github.com/rs/zerolog/log"

    func main() {
    \tlog.Info().Str("a", "b").Caller().Msg("with caller")
    }
''')

SYNTAX_ERROR_GO = go('''\
    package main

    func main( {
    \tlog.Info().Msg("broken")
    }
''')


@pytest.fixture
def parser():
    return GoParser()


@pytest.fixture
def parse_go(parser):
    def _parse(src, filename="test.go"):
        if isinstance(src, str):
            src = src.encode("utf-8")
        return parser.parse(src, filename)
    return _parse


def find_all(tree, cls):
    """Every node of type *cls* in *tree*, in source order."""
    return [n for n in tree.walk() if isinstance(n, cls)]


def chain(handle, level, *links):
    """Build ``handle.level().link1(...).link2(...)`` from synthesised nodes.

    Each link is a ``(method, args)`` pair.
    """
    node = A.call(A.SelectorExpr(x=A.ident(handle), sel=A.ident(level)))
    for method, args in links:
        node = A.call(A.SelectorExpr(x=node, sel=A.ident(method)), *args)
    return node
