"""Tests for the per-component cycle models."""

import pytest

from tfan.core.atmosphere import free_stream
from tfan.cycle.components.afterburner import afterburn, nozzle_gas_properties
from tfan.cycle.components.combustor import burn, fuel_air_ratio
from tfan.cycle.components.compressor import compress, core_flow_fraction
from tfan.cycle.components.inlet import compute_inlet, empirical_recovery, inlet_recovery
from tfan.cycle.components.mixer import mix
from tfan.cycle.components.nozzle import (
    expand_nozzle,
    net_thrust,
    propulsive_efficiency,
    specific_fuel_consumption,
)
from tfan.cycle.components.turbine import expand, lpt_work, mix_cooling_air
from tfan.utils.constants import (
    ACCESSORY_POWER,
    CP_AIR,
    CP_GAS,
    FUEL_LHV,
    GAMMA_GAS,
    SFC_PENALTY,
)


class TestInlet:
    def test_subsonic_empirical_recovery(self):
        assert empirical_recovery(0.0) == pytest.approx(0.97)
        assert empirical_recovery(1.0) == pytest.approx(0.97)

    def test_supersonic_empirical_recovery(self):
        assert empirical_recovery(2.0) == pytest.approx(0.97 * (1 - 0.075))
        assert empirical_recovery(3.0) < empirical_recovery(2.0)

    def test_textbook_uses_fixed_sigma(self):
        assert inlet_recovery(2.5, 0.93, textbook_mode=True) == 0.93
        assert inlet_recovery(2.5, 0.93, textbook_mode=False) == pytest.approx(empirical_recovery(2.5))

    def test_adiabatic(self):
        fs = free_stream(11.0, 1.6, 100.0)
        inlet = compute_inlet(fs, 0.97, textbook_mode=True)
        assert inlet.Tt == fs.Tt0
        assert inlet.Pt == pytest.approx(fs.Pt0 * 0.97)


class TestCompressor:
    def test_pressure_ratio_applied(self):
        res = compress(100e3, 300.0, 4.0, 0.9)
        assert res.Pt == pytest.approx(400e3)
        assert res.Tt == pytest.approx(300.0 * (1 + (4.0 ** (0.4 / 1.4) - 1) / 0.9))

    def test_work_is_enthalpy_rise(self):
        res = compress(100e3, 300.0, 4.0, 0.9)
        assert res.specific_work == pytest.approx(CP_AIR * (res.Tt - 300.0))

    def test_core_flow_fraction(self):
        assert core_flow_fraction(0.01, 0.05, 0.05) == pytest.approx(0.89)


class TestCombustor:
    def test_energy_balance(self):
        f = fuel_air_ratio(800.0, 1800.0, 0.98)
        assert f == pytest.approx((CP_GAS * 1800 - CP_AIR * 800) / (0.98 * FUEL_LHV - CP_GAS * 1800))

    def test_normal_burn(self):
        res = burn(1e6, 800.0, 1800.0, 0.89, 0.98, 0.97)
        assert not res.limited
        assert res.Tt == 1800.0
        assert res.f > 0
        assert res.Pt == pytest.approx(0.97e6)
        assert res.m_rel == pytest.approx(0.89 * (1 + res.f))

    def test_limited_when_tt4_below_tt3(self):
        res = burn(1e6, 900.0, 850.0, 0.89, 0.98, 0.97)
        assert res.limited
        assert res.f == 0.0
        assert res.Tt == 900.0
        assert res.m_rel == pytest.approx(0.89)

    def test_limited_when_equal(self):
        assert burn(1e6, 900.0, 900.0, 0.89, 0.98, 0.97).limited


class TestTurbine:
    def test_cooling_mix_between_streams(self):
        Tt = mix_cooling_air(0.9, 1800.0, 0.05, 800.0)
        assert 800.0 < Tt < 1800.0

    def test_work_balance(self):
        res = expand(1e6, 1800.0, 0.9, 0.05, 800.0, work=300e3, eta_m=0.98, eta_t=0.9, Tt_floor=300.0)
        assert res.m_rel == pytest.approx(0.95)
        assert res.Tt == pytest.approx(res.Tt_mixed - 300e3 / (0.95 * CP_GAS * 0.98))
        assert res.Pt < 1e6
        assert not res.floor_active

    def test_floor(self):
        res = expand(1e6, 1000.0, 0.9, 0.05, 800.0, work=5e6, eta_m=0.98, eta_t=0.9, Tt_floor=330.0)
        assert res.floor_active
        assert res.Tt == 330.0

    def test_degenerate_expansion_holds_pressure(self):
        # Floor far below what a finite expansion at eta_t can reach
        res = expand(1e6, 1000.0, 0.9, 0.0, 800.0, work=5e6, eta_m=0.98, eta_t=0.5, Tt_floor=100.0)
        assert res.pressure_ratio is None
        assert res.Pt == 1e6

    def test_lpt_work_includes_bypass_and_accessories(self):
        fan = compress(100e3, 300.0, 3.0, 0.9)
        assert lpt_work(fan, 1.0, 0.98) == pytest.approx(2.0 * (fan.specific_work + ACCESSORY_POWER / 0.98))


class TestMixer:
    def test_no_bypass(self):
        res = mix(1.0, 1200.0, 300e3, 0.0, 400.0, 350e3, 0.98, 0.97)
        assert res.Tt == pytest.approx(1200.0)
        assert res.Pt == pytest.approx(300e3 * 0.97)
        assert res.cp == pytest.approx(CP_GAS)

    def test_mass_weighted(self):
        res = mix(1.0, 1200.0, 300e3, 1.0, 400.0, 300e3, 1.0, 1.0)
        assert 400.0 < res.Tt < 1200.0
        assert res.cp == pytest.approx(0.5 * (CP_GAS + CP_AIR))
        assert res.Pt == pytest.approx(300e3)
        assert res.m_total == 2.0

    def test_gamma_from_mixed_cp(self):
        res = mix(1.0, 1200.0, 300e3, 1.0, 400.0, 300e3, 1.0, 1.0)
        assert res.gamma == pytest.approx(res.cp / (res.cp - 287.0))


class TestAfterburner:
    @pytest.fixture
    def mixed(self):
        return mix(0.95, 1200.0, 300e3, 0.4, 450.0, 320e3, 0.98, 0.97)

    def test_dry(self, mixed):
        res = afterburn(mixed, False, 2000.0, 0.98, 0.95)
        assert not res.lit
        assert res.Tt == mixed.Tt
        assert res.Pt == pytest.approx(mixed.Pt * 0.98)
        assert res.fuel_fraction == 0.0
        assert res.m_rel == mixed.m_total

    def test_wet(self, mixed):
        res = afterburn(mixed, True, 2000.0, 0.98, 0.95)
        assert res.lit
        assert res.Tt == 2000.0
        assert res.Pt == pytest.approx(mixed.Pt * 0.95)
        assert res.fuel_fraction > 0
        assert res.m_rel == pytest.approx(mixed.m_total + res.fuel_fraction)

    def test_fuel_clamped(self, mixed):
        res = afterburn(mixed, True, 300.0, 0.98, 0.95)
        assert res.fuel_fraction == 0.0

    def test_gas_properties(self, mixed):
        assert nozzle_gas_properties(True, False, mixed) == (CP_GAS, GAMMA_GAS)
        assert nozzle_gas_properties(False, True, mixed) == (CP_GAS, GAMMA_GAS)
        assert nozzle_gas_properties(False, False, mixed) == (mixed.cp, mixed.gamma)


class TestNozzle:
    def test_expansion_to_ambient(self):
        res = expand_nozzle(100e3, 1000.0, 0.98, 20e3, 1.3)
        assert res.P == 20e3
        assert res.M > 1.0
        assert res.T < 1000.0
        assert res.V > 0

    def test_pressure_floored_at_ambient(self):
        res = expand_nozzle(10e3, 600.0, 0.98, 20e3, 1.3)
        assert res.Pt == 20e3
        assert res.M == 0.0
        assert res.V == 0.0

    def test_net_thrust(self):
        assert net_thrust(1.5, 1000.0, 1.4, 500.0) == pytest.approx(1500.0 - 700.0)

    def test_sfc(self):
        assert specific_fuel_consumption(0.05, 1000.0) == pytest.approx(0.05 * 3600 / 1000.0)

    def test_sfc_penalty(self):
        assert specific_fuel_consumption(0.05, 0.0) == SFC_PENALTY
        assert specific_fuel_consumption(0.05, -10.0) == SFC_PENALTY

    def test_propulsive_efficiency(self):
        F = net_thrust(1.0, 800.0, 1.0, 400.0)
        expected = F * 400.0 / (0.5 * 800.0**2 - 0.5 * 400.0**2)
        assert propulsive_efficiency(F, 400.0, 1.0, 800.0, 1.0) == pytest.approx(expected)
        assert expected == pytest.approx(2 / 3)

    def test_propulsive_efficiency_static(self):
        assert propulsive_efficiency(1000.0, 0.0, 1.0, 1000.0, 1.0) == 0.0

    def test_propulsive_efficiency_negative_thrust(self):
        assert propulsive_efficiency(-5.0, 300.0, 1.0, 290.0, 1.0) == 0.0
