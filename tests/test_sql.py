"""
Test suite for the SQL fragment helpers.

Tests cover:
- Partial UPDATE SET lists
- Search WHERE clauses
- Column name resolution
- Executing `$N` statements through run_query
"""

import re

import pytest

from app.core.database import run_query
from app.core.exceptions import BadRequestError
from app.core.sql import (
    SqlFragment,
    prune_filters,
    quote_identifier,
    resolve_column,
    sql_for_filter,
    sql_for_partial_update,
)

USER_COLUMNS = {
    "firstName": "first_name",
    "lastName": "last_name",
    "isAdmin": "is_admin",
}

COMPANY_FILTERS = {
    "name": "name ILIKE ",
    "minEmployees": "num_employees >= ",
    "maxEmployees": "num_employees <= ",
}


class TestResolveColumn:
    """Tests for the field name mapper"""

    def test_mapped_key(self):
        assert resolve_column("firstName", USER_COLUMNS) == "first_name"

    def test_unmapped_key_falls_back_to_itself(self):
        assert resolve_column("age", USER_COLUMNS) == "age"
        assert resolve_column("age", {}) == "age"


class TestPartialUpdate:
    """Tests for sql_for_partial_update"""

    def test_renames_and_numbers_columns(self):
        result = sql_for_partial_update({"firstName": "Aliya", "age": 32}, {"firstName": "first_name"})

        assert result == SqlFragment('"first_name"=$1, "age"=$2', ["Aliya", 32])
        assert result.clause == '"first_name"=$1, "age"=$2'
        assert result.values == ["Aliya", 32]

    def test_single_field(self):
        set_cols, values = sql_for_partial_update({"isAdmin": True}, USER_COLUMNS)

        assert set_cols == '"is_admin"=$1'
        assert values == [True]

    @pytest.mark.parametrize("js_to_sql", [{}, USER_COLUMNS])
    def test_empty_data_is_rejected(self, js_to_sql):
        with pytest.raises(BadRequestError) as exc_info:
            sql_for_partial_update({}, js_to_sql)

        assert exc_info.value.status_code == 400
        assert exc_info.value.message == "No data"

    def test_placeholders_follow_key_order(self):
        data = {f"field{i}": i * 10 for i in range(12)}

        set_cols, values = sql_for_partial_update(data, {})

        assignments = set_cols.split(", ")
        assert len(assignments) == 12
        assert [int(n) for n in re.findall(r"\$(\d+)", set_cols)] == list(range(1, 13))
        assert assignments[10] == '"field10"=$11'
        assert values == list(data.values())

    def test_numbering_restarts_on_each_call(self):
        sql_for_partial_update({"a": 1, "b": 2}, {})
        set_cols, _ = sql_for_partial_update({"c": 3}, {})

        assert set_cols == '"c"=$1'

    def test_values_are_not_interpolated(self):
        set_cols, values = sql_for_partial_update({"firstName": "x'; DROP TABLE users; --"}, USER_COLUMNS)

        assert "DROP" not in set_cols
        assert values == ["x'; DROP TABLE users; --"]

    def test_embedded_quotes_in_column_are_escaped(self):
        assert quote_identifier('we"ird') == '"we""ird"'
        set_cols, _ = sql_for_partial_update({'we"ird': 1}, {})
        assert set_cols == '"we""ird"=$1'

    def test_input_is_not_mutated(self):
        data = {"firstName": "Aliya"}
        sql_for_partial_update(data, USER_COLUMNS)
        assert data == {"firstName": "Aliya"}


class TestFilter:
    """Tests for sql_for_filter"""

    def test_single_name_filter(self):
        where, values = sql_for_filter({"name": "and"}, {"name": "name ILIKE "})

        assert where == "WHERE name ILIKE $1"
        assert values == ["%and%"]

    def test_empty_filters_mean_no_filter(self):
        assert sql_for_filter({}, COMPANY_FILTERS) == SqlFragment("", [])

    def test_combined_filters(self):
        where, values = sql_for_filter(
            {"name": "arn", "minEmployees": "2", "maxEmployees": "3"},
            COMPANY_FILTERS
        )

        assert where == "WHERE name ILIKE $1 AND num_employees >= $2 AND num_employees <= $3"
        assert values == ["%arn%", "2", "3"]

    def test_predicate_count_matches_filters(self):
        filters = {"minEmployees": 5, "maxEmployees": 10}

        where, values = sql_for_filter(filters, COMPANY_FILTERS)

        assert where.startswith("WHERE ")
        assert len(where[len("WHERE "):].split(" AND ")) == 2
        assert values == [5, 10]

    def test_only_fuzzy_fields_are_wrapped(self):
        where, values = sql_for_filter(
            {"title": "eng", "minSalary": 1000},
            {"title": "title ILIKE ", "minSalary": "salary >= "},
            fuzzy_fields=("title",)
        )

        assert where == "WHERE title ILIKE $1 AND salary >= $2"
        assert values == ["%eng%", 1000]

    def test_name_not_wrapped_when_not_fuzzy(self):
        _, values = sql_for_filter({"name": "C1"}, {"name": "name = "}, fuzzy_fields=())
        assert values == ["C1"]

    def test_fuzzy_wildcards_are_escaped(self):
        _, values = sql_for_filter({"name": "50%_off\\"}, COMPANY_FILTERS)
        assert values == ["%50\\%\\_off\\\\%"]

    def test_input_is_not_mutated(self):
        filters = {"name": "arn", "minEmployees": 2}

        sql_for_filter(filters, COMPANY_FILTERS)

        assert filters == {"name": "arn", "minEmployees": 2}

    def test_unknown_filter_is_rejected(self):
        with pytest.raises(BadRequestError) as exc_info:
            sql_for_filter({"name": "arn", "color": "red"}, COMPANY_FILTERS)

        assert "color" in exc_info.value.message


class TestPruneFilters:
    def test_drops_missing_values_only(self):
        assert prune_filters({"name": None, "minEmployees": 0, "hasEquity": False}) == {
            "minEmployees": 0,
            "hasEquity": False,
        }


class TestRunQuery:
    """Tests for executing `$N` statements"""

    def test_positional_binds(self, db_session):
        result = run_query(db_session, "SELECT $1 + $2 AS total, $3 AS label", [1, 2, "x"])
        row = result.mappings().one()

        assert row["total"] == 3
        assert row["label"] == "x"

    def test_double_digit_placeholders(self, db_session):
        values = list(range(1, 12))
        sql = "SELECT " + " + ".join(f"${i}" for i in range(1, 12)) + " AS total"

        assert run_query(db_session, sql, values).scalar() == sum(values)

    def test_filter_fragment_runs_against_schema(self, db_session, seed):
        where, values = sql_for_filter({"name": "c", "minEmployees": 2}, COMPANY_FILTERS)

        rows = run_query(
            db_session,
            f"SELECT handle FROM companies {where} ORDER BY handle",
            values
        ).all()

        assert [row.handle for row in rows] == ["c2", "c3"]

    def test_update_fragment_runs_against_schema(self, db_session, seed):
        set_cols, values = sql_for_partial_update({"firstName": "New", "email": "new@user.com"}, USER_COLUMNS)

        run_query(
            db_session,
            f"UPDATE users SET {set_cols} WHERE username = ${len(values) + 1}",
            [*values, "u1"]
        )
        row = run_query(db_session, "SELECT first_name, email FROM users WHERE username = $1", ["u1"]).one()

        assert row.first_name == "New"
        assert row.email == "new@user.com"

    def test_wildcard_filter_runs_literally(self, db_session, seed):
        where, values = sql_for_filter({"name": "_"}, COMPANY_FILTERS)

        rows = run_query(db_session, f"SELECT handle FROM companies {where}", values).all()

        assert rows == []
