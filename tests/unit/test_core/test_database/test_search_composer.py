"""Tests for search query composition."""

from __future__ import annotations

import logging

import pytest
from sqlalchemy import func

from dynamic_search.core.database.search import (
    ColumnIdentifier,
    CompiledSearch,
    ComposedQuery,
    EmptyKeyword,
    InvalidKeyword,
    InvalidLanguage,
    InvalidSelector,
    NoAttributes,
    SearchRequest,
    UnresolvedTable,
    build_query,
    compile_search,
    compose,
)
from tests.models import Article, NotMapped, Shop

QUICK_FOX = CompiledSearch("quick:* & fox:*", "quick fox")


@pytest.mark.unit
class TestCompose:
    """Test SQL composition from validated metadata."""

    def test_single_column_sql(self):
        query = compose("Articles", "english", ["Title"], QUICK_FOX)

        assert query.sql == (
            'SELECT * FROM "Articles" WHERE '
            "(to_tsvector('english', \"Title\") @@ plainto_tsquery('english', $1)"
            ' OR "Title" ~* $2)'
        )

    def test_two_columns_bind_two_parameters(self):
        query = compose("Articles", "english", ["Title", "Body"], QUICK_FOX)

        assert query.parameters == ("quick:* & fox:*", "quick fox")
        assert query.sql.count("$1") == 2
        assert query.sql.count("$2") == 2
        assert "$3" not in query.sql

    @pytest.mark.parametrize("count", [1, 2, 3, 5])
    def test_one_predicate_pair_per_column(self, count):
        columns = [f"col{i}" for i in range(count)]

        query = compose("t", "english", columns, QUICK_FOX)

        assert query.sql.count("to_tsvector(") == count
        assert query.sql.count("~* $2") == count
        assert query.sql.count(") OR (") == count - 1
        assert len(query.parameters) == 2

    def test_predicates_follow_column_order(self):
        query = compose("t", "english", ["b", "a"], QUICK_FOX)

        assert query.sql.index('"b" ~*') < query.sql.index('"a" ~*')

    def test_language_used_in_both_functions(self):
        query = compose("t", "turkish", ["c"], QUICK_FOX)

        assert "to_tsvector('turkish', \"c\")" in query.sql
        assert "plainto_tsquery('turkish', $1)" in query.sql

    def test_keyword_never_interpolated(self):
        compiled = CompiledSearch("robert:* & drop:*", "robert'); drop table students;--")

        query = compose("t", "english", ["c"], compiled)

        assert "students" not in query.sql
        assert query.parameters[1] == "robert'); drop table students;--"

    def test_accepts_column_identifiers(self):
        query = compose("t", "english", [ColumnIdentifier("c")], QUICK_FOX)

        assert query.columns == (ColumnIdentifier("c"),)

    def test_records_metadata(self):
        query = compose("t", "simple", ["c", "d"], QUICK_FOX)

        assert query.table_name == "t"
        assert query.language == "simple"
        assert [str(column) for column in query.columns] == ["c", "d"]

    def test_no_columns_raises(self):
        with pytest.raises(NoAttributes):
            compose("t", "english", [], QUICK_FOX)

    def test_blank_ts_query_raises(self):
        with pytest.raises(EmptyKeyword):
            compose("t", "english", ["c"], CompiledSearch("  ", "x"))

    @pytest.mark.parametrize("table", ["", 'bad"name', "a;b", "x" * 64])
    def test_invalid_table_raises(self, table):
        with pytest.raises(UnresolvedTable):
            compose(table, "english", ["c"], QUICK_FOX)

    @pytest.mark.parametrize("language", ["", "english'", "english'); DROP TABLE t; --", "a b"])
    def test_invalid_language_raises(self, language):
        with pytest.raises(InvalidLanguage):
            compose("t", language, ["c"], QUICK_FOX)

    def test_schema_qualified_language_accepted(self):
        query = compose("t", "pg_catalog.english", ["c"], QUICK_FOX)

        assert "to_tsvector('pg_catalog.english'" in query.sql

    def test_invalid_column_raises(self):
        with pytest.raises(InvalidSelector):
            compose("t", "english", ['ti"tle'], QUICK_FOX)

    def test_logs_sql_only_when_requested(self, caplog):
        logger_name = "dynamic_search.core.database.search.composer"
        with caplog.at_level(logging.DEBUG, logger=logger_name):
            compose("t", "english", ["c"], QUICK_FOX)
            assert not any("Search SQL" in message for message in caplog.messages)

            compose("t", "english", ["c"], QUICK_FOX, log_sql=True)
            assert any("Search SQL" in message for message in caplog.messages)

        assert not any("quick fox" in message for message in caplog.messages)


@pytest.mark.unit
class TestComposedQueryStatement:
    """Test rendering as SQLAlchemy statements."""

    def test_statement_binds_both_values(self):
        query = compose("t", "english", ["c"], QUICK_FOX)

        compiled = query.statement().compile()

        assert compiled.params == {"ts_query": "quick:* & fox:*", "pattern": "quick fox"}

    def test_named_sql_required(self):
        with pytest.raises(TypeError):
            ComposedQuery(
                sql="SELECT 1",
                parameters=("fox:*", "fox"),
                table_name="t",
                language="english",
                columns=(ColumnIdentifier("c"),),
            )

    def test_named_sql_mirrors_positional_sql(self):
        query = compose("t", "english", ["c", "d"], QUICK_FOX)

        assert query.named_sql == query.sql.replace("$1", ":ts_query").replace("$2", ":pattern")

    def test_statement_uses_named_placeholders(self):
        query = compose("t", "english", ["c"], QUICK_FOX)

        sql = str(query.statement())

        assert ":ts_query" in sql
        assert ":pattern" in sql
        assert "$1" not in sql

    def test_for_entity_selects_from_text(self):
        query = build_query(SearchRequest(Article, "fox", attributes=(Article.title,)))

        statement = query.for_entity(Article)

        assert 'SELECT * FROM "articles"' in str(statement)


@pytest.mark.unit
class TestSearchRequest:
    """Test request validation."""

    def test_attributes_become_tuple(self):
        request = SearchRequest(Article, "fox", attributes=[Article.title])

        assert request.attributes == (Article.title,)
        assert request.language == "english"

    @pytest.mark.parametrize("keyword", ["", "   ", None])
    def test_blank_keyword_raises(self, keyword):
        with pytest.raises(EmptyKeyword):
            SearchRequest(Article, keyword, attributes=(Article.title,))

    def test_no_attributes_raises(self):
        with pytest.raises(NoAttributes):
            SearchRequest(Article, "fox")


@pytest.mark.unit
class TestBuildQuery:
    """Test the resolve, compile and compose pipeline."""

    def test_quick_fox(self):
        request = SearchRequest(Article, "quick fox", attributes=(Article.title, Article.body))

        query = build_query(request)

        assert query.parameters == ("quick:* & fox:*", "quick fox")
        assert 'FROM "articles"' in query.sql
        assert '"title" ~* $2' in query.sql
        assert '"content" ~* $2' in query.sql

    def test_turkish_keyword(self):
        request = SearchRequest(Shop, "Çiçek", "turkish", (Shop.name,))

        query = build_query(request)

        assert query.parameters == ("Çiçek:*", "cicek")
        assert query.sql == (
            'SELECT * FROM "Shops" WHERE '
            "(to_tsvector('turkish', \"Name\") @@ plainto_tsquery('turkish', $1)"
            ' OR "Name" ~* $2)'
        )

    def test_matches_compile_search(self):
        request = SearchRequest(Article, "Big Cat", attributes=("title",))

        query = build_query(request)

        compiled = compile_search("Big Cat")
        assert query.parameters == (compiled.ts_query_expression, compiled.normalized_keyword)

    def test_unmapped_entity_raises(self):
        with pytest.raises(UnresolvedTable):
            build_query(SearchRequest(NotMapped, "fox", attributes=("title",)))

    def test_invalid_selector_raises(self):
        with pytest.raises(InvalidSelector):
            build_query(SearchRequest(Article, "fox", attributes=(func.lower(Article.title),)))

    def test_max_keyword_length(self):
        request = SearchRequest(Article, "a" * 11, attributes=(Article.title,))

        with pytest.raises(InvalidKeyword):
            build_query(request, max_keyword_length=10)
