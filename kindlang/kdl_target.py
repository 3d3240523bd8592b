"""The Kindelia back end: flatten, compile and linearize a book."""

from __future__ import annotations

from kindlang import untyped
from kindlang.kdl_compile import KdlFile, Sender
from kindlang.kdl_compile import compile_book as _compile_flat_book
from kindlang.kdl_flatten import flatten
from kindlang.kdl_linearize import linearize_file


def compile_book(book: untyped.Book, sender: Sender, namespace: str) -> KdlFile:
    """Compile ``book`` to a Kindelia file.

    Diagnostics go to ``sender``; raises KdlCompilationError if any was an error.
    """
    flattened = flatten(book)
    file = _compile_flat_book(flattened, sender, namespace)
    return linearize_file(file)