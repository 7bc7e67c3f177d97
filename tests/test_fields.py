# tests/test_fields.py
"""
Tests for the Field Mapper: zerolog field link → slog attribute call.
"""

import pytest

from logchain import ast as A
from logchain.config import MigrationConfig
from logchain.fields import FIELD_RULES, FieldMethod, convert_field
from logchain.printer import format_node


def _key(name="k"):
    return A.string_lit(name)


def _fmt(node):
    return format_node(node).decode()


class TestRuleTable:

    def test_every_method_has_a_rule(self):
        assert set(FIELD_RULES) == set(FieldMethod)

    def test_table_is_read_only(self):
        with pytest.raises(TypeError):
            FIELD_RULES[FieldMethod.BOOL] = None


class TestPassThrough:

    @pytest.mark.parametrize("method, target", [
        ("Bool", "Bool"),
        ("Dur", "Duration"),
        ("Float64", "Float64"),
        ("Str", "String"),
        ("Int", "Int"),
        ("Int64", "Int64"),
        ("Time", "Time"),
        ("Uint64", "UInt64"),
    ])
    def test_renamed_without_conversion(self, method, target):
        value = A.ident("v")
        attr = convert_field(method, [_key(), value])
        assert _fmt(attr) == f'slog.{target}("k", v)'
        assert attr.args[1] is value

    def test_arguments_are_reused(self):
        key, value = _key("num"), A.ident("n")
        attr = convert_field("Int", [key, value])
        assert attr.args[0] is key
        assert attr.args[1] is value


class TestWidening:

    @pytest.mark.parametrize("method", ["Int8", "Int16", "Int32"])
    def test_small_ints_become_int(self, method):
        attr = convert_field(method, [_key("x"), A.ident("i8")])
        assert _fmt(attr) == 'slog.Int("x", int(i8))'

    @pytest.mark.parametrize("method", ["Uint", "Uint8", "Uint16", "Uint32"])
    def test_unsigned_become_uint64(self, method):
        attr = convert_field(method, [_key("u"), A.ident("u8")])
        assert _fmt(attr) == 'slog.Uint64("u", uint64(u8))'

    def test_float32_becomes_float64(self):
        attr = convert_field("Float32", [_key("f"), A.ident("f32")])
        assert _fmt(attr) == 'slog.Float64("f", float64(f32))'

    def test_key_is_not_wrapped(self):
        key = _key("x")
        attr = convert_field("Int8", [key, A.ident("i8")])
        assert attr.args[0] is key


class TestErr:

    def test_err_gets_synthesised_key(self):
        err = A.ident("err")
        attr = convert_field("Err", [err])
        assert _fmt(attr) == 'slog.Any("err", err)'
        assert attr.args[1] is err

    def test_err_key_is_configurable(self):
        config = MigrationConfig(error_key="error")
        attr = convert_field("Err", [A.ident("e")], config)
        assert _fmt(attr) == 'slog.Any("error", e)'

    @pytest.mark.parametrize("nargs", [0, 2])
    def test_err_requires_one_argument(self, nargs):
        args = [A.ident(f"a{i}") for i in range(nargs)]
        assert convert_field("Err", args) is None


class TestFallback:

    def test_unknown_two_argument_method_becomes_any(self):
        attr = convert_field("Interface", [_key("obj"), A.ident("o")])
        assert _fmt(attr) == 'slog.Any("obj", o)'

    @pytest.mark.parametrize("method, nargs", [
        ("Caller", 0),
        ("Stack", 0),
        ("Fields", 1),
        ("Str", 1),
        ("Int8", 3),
    ])
    def test_unrecognised_shapes(self, method, nargs):
        args = [A.ident(f"a{i}") for i in range(nargs)]
        assert convert_field(method, args) is None


class TestTargetPackage:

    def test_package_name_comes_from_config(self):
        config = MigrationConfig(target_package="xslog")
        attr = convert_field("Str", [_key(), A.ident("v")], config)
        assert _fmt(attr) == 'xslog.String("k", v)'
