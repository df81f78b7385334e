"""Tests for engine inputs and design-file I/O."""

import dataclasses
import json

import numpy as np
import pytest

from tfan.core.config import (
    DesignState,
    EngineInputs,
    ProjectMeta,
    field_names,
    field_type,
    load_arrays_npz,
    load_design_json,
    load_inputs_json,
    parse_assignment,
    save_arrays_npz,
    save_design_json,
    save_inputs_json,
)


class TestEngineInputs:
    def test_reference_defaults(self):
        inp = EngineInputs()
        assert inp.altitude == 11.0
        assert inp.mach == 1.6
        assert inp.fan_pressure_ratio * inp.hpc_pressure_ratio == pytest.approx(17.0, rel=1e-3)
        assert inp.afterburner_on is True

    def test_frozen_and_hashable(self):
        inp = EngineInputs()
        with pytest.raises(dataclasses.FrozenInstanceError):
            inp.tt4 = 1900.0
        assert hash(inp) == hash(EngineInputs())

    def test_dict_roundtrip(self):
        inp = EngineInputs(bypass_ratio=1.2, afterburner_on=False)
        assert EngineInputs.from_dict(inp.to_dict()) == inp

    def test_missing_keys_take_defaults(self):
        assert EngineInputs.from_dict({"tt4": 1600.0}).mach == 1.6

    def test_unknown_key_rejected(self):
        with pytest.raises(ValueError, match="Unknown engine input"):
            EngineInputs.from_dict({"tt4": 1600.0, "thrust_ratio": 2.0})

    def test_field_helpers(self):
        assert "sigma_ab_wet" in field_names()
        assert field_type("afterburner_on") is bool
        assert field_type("tt4") is float
        with pytest.raises(ValueError):
            field_type("nope")


class TestParseAssignment:
    def test_number(self):
        assert parse_assignment("tt4=1650") == ("tt4", 1650.0)

    def test_whitespace(self):
        assert parse_assignment(" bypass_ratio = 0.8 ") == ("bypass_ratio", 0.8)

    @pytest.mark.parametrize("raw,expected", [("on", True), ("No", False), ("1", True), ("false", False)])
    def test_boolean(self, raw, expected):
        assert parse_assignment(f"afterburner_on={raw}") == ("afterburner_on", expected)

    @pytest.mark.parametrize(
        "expr,key,value",
        [
            ("altitude=36089 ft", "altitude", 11.0),
            ("altitude = 11000 m", "altitude", 11.0),
            ("mass_flow_design=220 lb/s", "mass_flow_design", 99.79),
        ],
    )
    def test_quantity_with_units(self, expr, key, value):
        parsed_key, parsed = parse_assignment(expr)
        assert parsed_key == key
        assert parsed == pytest.approx(value, rel=1e-3)

    def test_quantity_wrong_dimension(self):
        with pytest.raises(ValueError, match="in km"):
            parse_assignment("altitude=5 kg")

    @pytest.mark.parametrize("expr", ["tt4", "tt4=hot", "afterburner_on=maybe", "fuel=1"])
    def test_invalid(self, expr):
        with pytest.raises(ValueError):
            parse_assignment(expr)


class TestDesignFile:
    def test_save_load(self, tmp_path):
        path = tmp_path / "design.json"
        state = DesignState(
            meta=ProjectMeta(name="Test Fan"),
            inputs=EngineInputs(tt4=1700.0).to_dict(),
            performance={"Fs": 1000.0},
        )
        save_design_json(state, path)

        loaded = load_design_json(path)
        assert loaded.meta.name == "Test Fan"
        assert loaded.meta.created != ""
        assert loaded.engine_inputs().tt4 == 1700.0
        assert loaded.performance["Fs"] == 1000.0
        assert not (tmp_path / "design.npz").exists()

    def test_arrays_go_to_npz(self, tmp_path):
        path = tmp_path / "env.json"
        state = DesignState()
        state._array_data = {"envelope_sfc": np.array([[0.1, np.nan], [0.2, 0.3]])}
        save_design_json(state, path)

        assert "_array_data" not in json.loads(path.read_text())
        loaded = load_design_json(path)
        np.testing.assert_array_equal(loaded._array_data["envelope_sfc"], state._array_data["envelope_sfc"])

    def test_numpy_scalars_serialised(self, tmp_path):
        path = tmp_path / "np.json"
        state = DesignState(performance={"Fs": np.float64(1.5), "n": np.int64(3), "ok": np.bool_(True)})
        save_design_json(state, path)
        assert json.loads(path.read_text())["performance"] == {"Fs": 1.5, "n": 3, "ok": True}

    def test_bad_inputs_in_file(self, tmp_path):
        path = tmp_path / "bad.json"
        data = {"meta": {}, "inputs": {"tt5": 1000.0}}
        path.write_text(json.dumps(data))
        with pytest.raises(ValueError, match="tt5"):
            load_design_json(path)


class TestInputsFile:
    def test_flat_mapping(self, tmp_path):
        path = tmp_path / "inputs.json"
        save_inputs_json(EngineInputs(mach=0.9), path)
        assert load_inputs_json(path) == EngineInputs(mach=0.9)

    def test_from_design_file(self, tmp_path):
        path = tmp_path / "design.json"
        save_design_json(DesignState(inputs=EngineInputs(altitude=5.0).to_dict()), path)
        assert load_inputs_json(path).altitude == 5.0


class TestArrays:
    def test_npz_roundtrip(self, tmp_path):
        arrays = {"a": np.arange(4.0), "mask": np.array([True, False])}
        save_arrays_npz(arrays, tmp_path / "x.npz")
        loaded = load_arrays_npz(tmp_path / "x.npz")
        assert set(loaded) == {"a", "mask"}
        assert loaded["mask"].dtype == bool
