"""logchain — zerolog call-chain to slog flat-call migrator.

This package rewrites fluent ``github.com/rs/zerolog/log`` call chains in Go
source files into single ``log/slog`` ``LogAttrs`` calls, leaving every other
byte of the file untouched.

Submodules
----------
ast
    Closed set of syntax node shapes (``File``, ``ImportSpec``,
    ``ExprStmt``, ``CallExpr``, ``SelectorExpr``, ``Ident``, ``BasicLit``,
    ``Comment``, ``Opaque``) with source spans and decorations.

goparser
    tree-sitter based Go front-end producing :mod:`logchain.ast` trees.

fields
    Field Mapper: zerolog field method → ``slog.Attr`` constructor call.

chain
    Chain Extractor: level, message and ordered fields of one chain.

matcher
    Statement Matcher: per-node replacement decisions.

rewrite
    Rewrite Driver: collect replacements, apply them, serialise.

printer
    Lossless printer for parsed and synthesised nodes.

main
    CLI entry-point (``python -m logchain`` / ``logchain``).

Usage
-----
Command-line::

    python -m logchain --dir ./service            # dry run
    python -m logchain --dir ./service --replace  # overwrite files

Programmatic::

    from logchain.rewrite import rewrite_source

    result = rewrite_source(source_bytes, filename="main.go")
    print(result.replacements, result.output.decode())

"""

from __future__ import annotations

__version__: str = "0.1.0"
__all__: list[str] = [
    "__version__",
    "ast",
    "chain",
    "config",
    "errors",
    "fields",
    "goparser",
    "matcher",
    "printer",
    "rewrite",
]
