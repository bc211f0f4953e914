# Copyright (c) Meta Platforms, Inc. and affiliates.
# All rights reserved.
#
# This source code is licensed under the terms described in the LICENSE file in
# the root directory of this source tree.

"""Unit tests for schema-bound filter sets."""

import pytest

from filterset import FieldValueError, FilterSet, FilterSetError, UnknownFieldError, UnknownOperatorError


class TestSchemaBoundFilterSet:
    """Test runtime checks enabled by binding a pydantic schema."""

    def test_known_field_accepted(self, user_schema):
        filters = FilterSet(schema=user_schema).add("name", "Max")
        assert filters.get_payload() == {"name": {"=": ["Max"]}}
        assert filters.schema is user_schema

    def test_unknown_field_rejected(self, user_schema):
        with pytest.raises(UnknownFieldError, match="Field 'nickname' is not declared"):
            FilterSet(schema=user_schema).add("nickname", "Maxi")

    def test_unknown_field_rejected_on_reads(self, user_schema):
        filters = FilterSet(schema=user_schema)
        with pytest.raises(UnknownFieldError):
            filters.exists("nickname", "Maxi")
        with pytest.raises(UnknownFieldError):
            filters.get_partial_payload("nickname")
        with pytest.raises(UnknownFieldError):
            filters.remove("nickname", "Maxi")

    def test_unknown_field_error_is_key_error(self, user_schema):
        with pytest.raises(KeyError):
            FilterSet(schema=user_schema).get_values("nickname")

    def test_unknown_operator_rejected(self, user_schema):
        with pytest.raises(UnknownOperatorError, match="Operator 'between' is not configured"):
            FilterSet(schema=user_schema).add("age", 3, "between")

    def test_operator_from_instance_config_accepted(self, user_schema):
        filters = FilterSet({"operators": ["=", "between"]}, schema=user_schema)
        assert filters.add("age", 3, "between").exists("age", 3, "between")

    def test_wrong_value_type_rejected(self, user_schema):
        with pytest.raises(FieldValueError, match="not valid for field 'age'"):
            FilterSet(schema=user_schema).add("age", "20")

    def test_wrong_value_in_list_rejected(self, user_schema):
        filters = FilterSet(schema=user_schema)
        with pytest.raises(FieldValueError):
            filters.add("age", [10, "twenty"])

    def test_values_are_not_coerced(self, user_schema):
        filters = FilterSet(schema=user_schema).add("is_active", True)
        assert filters.get_values("is_active") == [True]

    def test_errors_share_base(self, user_schema):
        with pytest.raises(FilterSetError):
            FilterSet(schema=user_schema).add("age", "20")

    def test_schema_propagates(self, user_schema):
        derived = FilterSet(schema=user_schema).add("name", "Max").add("age", 30).clear()
        assert derived.schema is user_schema
        with pytest.raises(UnknownFieldError):
            derived.add("nickname", "Maxi")

    def test_concat_checks_incoming_criteria(self, user_schema):
        strict = FilterSet(schema=user_schema).add("name", "Max")
        loose = FilterSet().add("nickname", "Maxi")
        with pytest.raises(UnknownFieldError):
            strict.concat(loose)

    def test_concat_onto_empty_checks_incoming_criteria(self, user_schema):
        with pytest.raises(UnknownFieldError):
            FilterSet(schema=user_schema).concat(FilterSet().add("nickname", "Maxi"))

    def test_concat_onto_empty_returns_valid_other(self, user_schema):
        other = FilterSet().add("name", "Max")
        assert FilterSet(schema=user_schema).concat(other) is other

    def test_from_payload_checks_criteria(self, user_schema):
        with pytest.raises(FieldValueError):
            FilterSet.from_payload({"age": {"=": ["old"]}}, schema=user_schema)

    def test_without_schema_everything_is_accepted(self):
        filters = FilterSet().add("anything", {"nested": [1, 2]}, "whatever")
        assert filters.exists("anything", {"nested": [1, 2]}, "whatever")
        assert filters.to_json() == '{"anything": {"whatever": [{"nested": [1, 2]}]}}'
