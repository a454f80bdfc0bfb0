"""Tests for the where() filter builder (query/filters.py)."""

import logging

import pytest

from dynamodb_orm.core.comparison_operator import ComparisonOperator
from dynamodb_orm.core.marshaler import Marshaler
from dynamodb_orm.exceptions import UnsupportedFeatureError
from dynamodb_orm.query.filters import FilterBuilder, FilterClause


@pytest.fixture
def builder():
    return FilterBuilder(Marshaler())


class TestWhereForms:
    """Argument shapes accepted by where()."""

    def test_two_arguments_default_to_equality(self, builder):
        builder.where('age', 30)

        assert builder.clauses['age'] == FilterClause(
            AttributeValueList=[{'N': '30'}],
            ComparisonOperator=ComparisonOperator.EQ
        )

    def test_shorthand_and_explicit_equality_match(self):
        shorthand = FilterBuilder(Marshaler())
        explicit = FilterBuilder(Marshaler())

        shorthand.where('age', 30)
        explicit.where('age', '=', 30)

        assert shorthand.clauses == explicit.clauses

    def test_explicit_operator(self, builder):
        builder.where('age', '>', 30)

        assert builder.to_conditions() == {
            'age': {'AttributeValueList': [{'N': '30'}], 'ComparisonOperator': 'GT'}
        }

    def test_unknown_operator_is_taken_as_value(self, builder):
        builder.where('name', 'bob', 'ignored')

        assert builder.to_conditions()['name'] == {
            'AttributeValueList': [{'S': 'bob'}],
            'ComparisonOperator': 'EQ'
        }

    def test_operator_symbol_as_two_argument_value(self, builder):
        builder.where('status', 'null')

        assert builder.to_conditions()['status'] == {
            'AttributeValueList': [{'S': 'null'}],
            'ComparisonOperator': 'EQ'
        }

    def test_later_clause_replaces_earlier_on_same_field(self, builder):
        builder.where('age', '>', 30)
        builder.where('age', '<', 50)

        assert len(builder) == 1
        assert builder.clauses['age'].comparison_operator == ComparisonOperator.LT

    def test_clauses_on_different_fields_accumulate(self, builder):
        builder.where('age', '>', 30)
        builder.where('name', 'begins_with', 'a')

        assert list(builder.to_conditions()) == ['age', 'name']
        assert 'name' in builder

    def test_missing_value(self, builder):
        with pytest.raises(TypeError):
            builder.where('age')


class TestMappingColumn:
    """where({...}) applies only the first pair."""

    def test_single_pair(self, builder):
        builder.where({'name': 'x'})

        assert builder.to_conditions() == {
            'name': {'AttributeValueList': [{'S': 'x'}], 'ComparisonOperator': 'EQ'}
        }

    def test_only_first_pair_is_applied(self, builder, caplog):
        with caplog.at_level(logging.WARNING, logger='dynamodb_orm'):
            builder.where({'name': 'x', 'age': 30})

        assert list(builder.clauses) == ['name']
        assert 'ignoring' in caplog.text

    def test_empty_mapping(self, builder):
        with pytest.raises(UnsupportedFeatureError):
            builder.where({})


class TestUnsupportedFeatures:
    """Shapes DynamoDB filters cannot express."""

    @pytest.mark.parametrize("boolean", ['or', 'OR', 'and not', ''])
    def test_non_and_boolean(self, builder, boolean):
        with pytest.raises(UnsupportedFeatureError, match='Only support "and"'):
            builder.where('age', '>', 30, boolean)

    def test_closure_column(self, builder):
        with pytest.raises(UnsupportedFeatureError, match='Closure'):
            builder.where(lambda query: query, '=', 1)

    def test_closure_value(self, builder):
        with pytest.raises(UnsupportedFeatureError, match='Closure'):
            builder.where('age', '=', lambda query: query)

    def test_closure_value_in_two_argument_form(self, builder):
        with pytest.raises(UnsupportedFeatureError):
            builder.where('age', lambda query: query)

    def test_nothing_is_recorded_on_failure(self, builder):
        with pytest.raises(UnsupportedFeatureError):
            builder.where('age', '>', 30, 'or')

        assert len(builder) == 0


class TestValueEncoding:
    """Operator-specific AttributeValueList shapes."""

    def test_between_spreads_bounds(self, builder):
        builder.where('age', 'between', [18, 65])

        assert builder.to_conditions()['age']['AttributeValueList'] == [{'N': '18'}, {'N': '65'}]

    def test_in_spreads_values(self, builder):
        builder.where('status', 'in', ('new', 'done'))

        assert builder.to_conditions()['status']['AttributeValueList'] == [{'S': 'new'}, {'S': 'done'}]

    @pytest.mark.parametrize("symbol", ['null', 'not_null'])
    def test_null_checks_have_no_values(self, builder, symbol):
        builder.where('deleted_at', symbol, None)

        assert builder.to_conditions()['deleted_at']['AttributeValueList'] == []

    def test_list_value_for_equality_is_one_list_attribute(self, builder):
        builder.where('tags', '=', ['a', 'b'])

        assert builder.to_conditions()['tags']['AttributeValueList'] == [
            {'L': [{'S': 'a'}, {'S': 'b'}]}
        ]
