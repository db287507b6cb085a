"""Tests for antlsp.handlers.completion — symbol-table completions."""
from __future__ import annotations

from lsprotocol import types as lsp

from antlsp.frontend.table import BUILTINS
from antlsp.handlers.completion import get_completions


def labels(items) -> list[str]:
    return [i.label for i in items]


class TestGetCompletions:
    def test_prefix_filters_table_entries(self):
        items = get_completions('foo = 1\nbar = 2\nfo', lsp.Position(line=2, character=2))
        assert labels(items) == ['foo']

    def test_items_are_variables_inserting_their_name(self):
        items = get_completions('alpha = 1\nal', lsp.Position(line=1, character=2))
        (item,) = items
        assert item.kind == lsp.CompletionItemKind.Variable
        assert item.insert_text == item.label == 'alpha'

    def test_empty_prefix_offers_everything(self):
        items = get_completions('foo = 1\n', lsp.Position(line=1, character=0))
        assert set(labels(items)) == set(BUILTINS) | {'foo'}

    def test_builtins_can_be_excluded(self):
        items = get_completions('foo = 1\n', lsp.Position(line=1, character=0),
                                include_builtins=False)
        assert labels(items) == ['foo']

    def test_matching_is_case_sensitive(self):
        items = get_completions('foo = 1\nFoo = 2\nf', lsp.Position(line=2, character=1))
        assert set(labels(items)) == {'foo', 'float'}

    def test_dangling_operator_keeps_earlier_bindings(self):
        items = get_completions('x = 1\ny = x +', lsp.Position(line=1, character=5))
        assert 'x' in labels(items)
        assert 'y' not in labels(items)

    def test_type_error_keeps_bindings_before_it_only(self):
        text = 'alpha = 1\nbeta = alpha + "s"\ngamma = 3\n'
        names = labels(get_completions(text, lsp.Position(line=3, character=0)))
        assert 'alpha' in names
        assert 'beta' not in names
        assert 'gamma' not in names

    def test_lexer_error_offers_no_document_names(self):
        items = get_completions('abc = 1 @\na', lsp.Position(line=1, character=1))
        assert items == []

    def test_locals_of_broken_function_are_offered(self):
        text = 'func f(count: int) -> int {\n  total = count\n  return co + 1\n}'
        names = labels(get_completions(text, lsp.Position(line=2, character=11)))
        assert names == ['count']

    def test_position_past_end_of_document(self):
        assert get_completions('x = 1', lsp.Position(line=10, character=0)) != []
