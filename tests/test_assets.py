"""Test suite for the asset registry"""

import pytest
import numpy as np

from opto.core.assets import Asset, AssetRegistry, ValidationError, OptoError, parse_numeric


# ================== Defaults ==================
def test_default_registry_contents(registry):
    """Default registry holds the four reference assets at equal weight"""
    assert registry.names == ['Stock A', 'Stock B', 'Bond C', 'Real Estate D']
    np.testing.assert_array_equal(registry.expected_returns, [0.10, 0.15, 0.05, 0.08])
    np.testing.assert_array_equal(registry.risks, [0.20, 0.25, 0.10, 0.15])
    np.testing.assert_array_equal(registry.weights, [0.25, 0.25, 0.25, 0.25])


def test_registries_do_not_share_assets():
    """Each default registry gets its own Asset objects"""
    a, b = AssetRegistry(), AssetRegistry()
    a.update_field(0, 'risk', '0.5')
    assert b[0].risk == 0.20


def test_registry_copies_input_assets():
    assets = [Asset('X', 0.1, 0.2, 1.0)]
    registry = AssetRegistry(assets)
    registry.update_field(0, 'name', 'Y')
    assert assets[0].name == 'X'


# ================== update_field ==================
def test_update_name_only_changes_name(registry):
    before = registry.to_records()
    registry.update_field(1, 'name', 'Growth Fund')

    after = registry.to_records()
    assert after[1]['name'] == 'Growth Fund'
    assert {k: v for k, v in after[1].items() if k != 'name'} == \
        {k: v for k, v in before[1].items() if k != 'name'}
    assert after[:1] + after[2:] == before[:1] + before[2:]


def test_update_numeric_from_text(registry):
    registry.update_field(2, 'expected_return', ' 0.065 ')
    registry.update_field(2, 'risk', '0.12')
    assert registry[2].expected_return == 0.065
    assert registry[2].risk == 0.12


def test_update_numeric_from_number(registry):
    registry.update_field(0, 'risk', 0.3)
    assert registry[0].risk == 0.3


@pytest.mark.parametrize("raw", ["abc", "", "nan", "inf", None, "-", ".e5", "1e999"])
def test_lenient_invalid_number_becomes_zero(registry, raw):
    """Unparsable input is coerced to 0 under the lenient policy"""
    registry.update_field(0, 'expected_return', raw)
    assert registry[0].expected_return == 0.0
    assert registry[0].risk == 0.20


@pytest.mark.parametrize("raw,expected", [
    ("12abc", 12.0),
    ("1.2.3", 1.2),
    ("5%", 5.0),
    (" -.5x", -0.5),
    ("2e-1e", 0.2),
])
def test_lenient_number_uses_leading_prefix(registry, raw, expected):
    """Text with a numeric prefix keeps the prefix under the lenient policy"""
    registry.update_field(1, 'risk', raw)
    assert registry[1].risk == expected


def test_strict_rejects_numeric_prefix(registry):
    registry.strict = True
    with pytest.raises(ValidationError):
        registry.update_field(1, 'risk', "12abc")
    assert registry[1].risk == 0.25


def test_strict_invalid_number_raises(registry):
    registry.strict = True
    with pytest.raises(ValidationError) as excinfo:
        registry.update_field(3, 'risk', 'high')

    assert excinfo.value.field == 'risk'
    assert excinfo.value.value == 'high'
    assert registry[3].risk == 0.15


def test_weight_is_not_editable(registry):
    with pytest.raises(ValidationError, match="not editable"):
        registry.update_field(0, 'weight', '0.9')
    assert registry[0].weight == 0.25


def test_unknown_field_rejected(registry):
    with pytest.raises(ValidationError):
        registry.update_field(0, 'volatility', '0.1')


def test_index_out_of_range(registry):
    with pytest.raises(IndexError):
        registry.update_field(4, 'name', 'X')
    with pytest.raises(IndexError):
        registry.update_field(-1, 'name', 'X')


def test_validation_error_is_value_error():
    err = ValidationError('risk', 'x')
    assert isinstance(err, ValueError)
    assert isinstance(err, OptoError)
    assert "risk" in str(err)


def test_parse_numeric_rejects_booleans():
    assert parse_numeric(True, 'risk') == 0.0
    with pytest.raises(ValidationError):
        parse_numeric(True, 'risk', strict=True)


# ================== Weights ==================
def test_apply_weights(registry):
    registry.apply_weights(np.array([0.1, 0.2, 0.3, 0.4]))
    np.testing.assert_array_equal(registry.weights, [0.1, 0.2, 0.3, 0.4])
    assert all(isinstance(a.weight, float) for a in registry)


def test_apply_weights_length_mismatch(registry):
    with pytest.raises(ValueError, match="4 assets"):
        registry.apply_weights([0.5, 0.5])


# ================== Snapshot key ==================
def test_snapshot_key_tracks_return_and_risk_only(registry):
    key = registry.snapshot_key()

    registry.update_field(0, 'name', 'Renamed')
    registry.apply_weights([0.7, 0.1, 0.1, 0.1])
    assert registry.snapshot_key() == key

    registry.update_field(0, 'risk', '0.21')
    assert registry.snapshot_key() != key


# ================== from_records ==================
def test_from_records_with_alias_and_default_weights():
    registry = AssetRegistry.from_records([
        {'name': 'A', 'return': '0.1', 'risk': 0.2},
        {'name': 'B', 'expected_return': 0.05, 'risk': '0.1'},
    ])
    assert registry.names == ['A', 'B']
    np.testing.assert_array_equal(registry.expected_returns, [0.1, 0.05])
    np.testing.assert_array_equal(registry.weights, [0.5, 0.5])


def test_from_records_missing_risk():
    with pytest.raises(ValidationError, match="no risk"):
        AssetRegistry.from_records([{'name': 'A', 'expected_return': 0.1}])


def test_from_records_strict_rejects_bad_number():
    with pytest.raises(ValidationError):
        AssetRegistry.from_records(
            [{'name': 'A', 'expected_return': 'x', 'risk': 0.1}], strict=True
        )


def test_to_records_round_trip(registry):
    rebuilt = AssetRegistry.from_records(registry.to_records())
    assert rebuilt.to_records() == registry.to_records()
