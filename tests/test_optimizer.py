"""Tests for the cycle optimisation framework."""

import numpy as np
import pytest

from tfan.core.config import EngineInputs
from tfan.cycle.solver import RESULT_KEYS, solve_engine
from tfan.optimization.optimizer import (
    CONSTRAINT_PENALTY,
    Constraint,
    CycleOptimizer,
    DesignPoint,
    DesignVariable,
    Objective,
    engine_eval_function,
)


def _quadratic_eval(params: dict[str, float]) -> dict[str, float]:
    """f = (πL - 3)^2 + (B - 2)^2, keyed on real input names."""
    x = params.get("fan_pressure_ratio", 0.0)
    y = params.get("bypass_ratio", 0.0)
    return {"f": (x - 3.0) ** 2 + (y - 2.0) ** 2, "x_val": x}


def _quadratic_optimizer(**initial) -> CycleOptimizer:
    opt = CycleOptimizer()
    opt.add_variable(DesignVariable("fan_pressure_ratio", 0.0, 10.0, initial=initial.get("x")))
    opt.add_variable(DesignVariable("bypass_ratio", 0.0, 5.0, initial=initial.get("y")))
    opt.add_objective(Objective("f"))
    return opt


class TestDesignVariable:
    def test_default_initial(self):
        assert DesignVariable("tt4", 1000.0, 2000.0).initial == 1500.0

    def test_bounds_and_denormalise(self):
        v = DesignVariable("tt4", 1000.0, 2000.0)
        assert v.bounds == (1000.0, 2000.0)
        assert v.denormalise(0.25) == pytest.approx(1250.0)

    def test_inverted_bounds_rejected(self):
        with pytest.raises(ValueError, match="below lower bound"):
            DesignVariable("tt4", 2000.0, 1000.0)


class TestObjectiveAndConstraint:
    def test_minimize_and_maximize(self):
        assert Objective("SFC").cost(0.2) == pytest.approx(0.2)
        assert Objective("Fs", direction="maximize", weight=2.0).cost(1000.0) == pytest.approx(-2000.0)

    def test_target(self):
        assert Objective("Fs", target=1000.0).cost(1100.0) == pytest.approx(100.0)

    def test_bad_direction(self):
        with pytest.raises(ValueError, match="direction"):
            Objective("SFC", direction="sideways")

    def test_violation(self):
        c = Constraint("Fs", lower=0.0, upper=10.0)
        assert c.violation(5.0) == 0.0
        assert c.violation(-2.0) == pytest.approx(2.0)
        assert c.violation(13.0) == pytest.approx(3.0)


class TestDesignSpace:
    def test_unknown_variable(self):
        with pytest.raises(ValueError, match="Unknown design variable"):
            CycleOptimizer().add_variable(DesignVariable("x", 0.0, 1.0))

    def test_duplicate_variable(self):
        opt = CycleOptimizer()
        opt.add_variable(DesignVariable("tt4", 1000.0, 2000.0))
        with pytest.raises(ValueError, match="Duplicate"):
            opt.add_variable(DesignVariable("tt4", 1200.0, 1800.0))

    def test_no_variables_raises(self):
        opt = CycleOptimizer()
        opt.add_objective(Objective("f"))
        with pytest.raises(ValueError, match="No design variables"):
            opt.optimize(_quadratic_eval)

    def test_no_objectives_raises(self):
        opt = CycleOptimizer()
        opt.add_variable(DesignVariable("tt4", 1000.0, 2000.0))
        with pytest.raises(ValueError, match="No objectives"):
            opt.optimize(_quadratic_eval)

    def test_unknown_objective_key_rejected(self):
        opt = CycleOptimizer(result_keys=RESULT_KEYS)
        with pytest.raises(ValueError, match="Unknown objective key: sfc"):
            opt.add_objective(Objective("sfc"))
        assert opt.objectives == []

    def test_unknown_constraint_key_rejected(self):
        opt = CycleOptimizer(result_keys=RESULT_KEYS)
        with pytest.raises(ValueError, match="Unknown constraint key: fs"):
            opt.add_constraint(Constraint("fs", lower=800.0))

    def test_result_keys_match_engine_result(self):
        assert set(RESULT_KEYS) == set(solve_engine(EngineInputs()).as_dict())

    def test_missing_key_in_evaluation(self):
        opt = CycleOptimizer()
        opt.add_variable(DesignVariable("fan_pressure_ratio", 0.0, 10.0))
        opt.add_objective(Objective("g"))
        with pytest.raises(ValueError, match="no key 'g'"):
            opt.evaluate([3.0], _quadratic_eval)

    def test_missing_key_in_sensitivity(self):
        opt = _quadratic_optimizer()
        opt.add_objective(Objective("g"))
        with pytest.raises(ValueError, match="no key 'g'"):
            opt.sensitivity(_quadratic_eval)

    def test_infeasible_point_penalised(self):
        opt = _quadratic_optimizer()
        opt.add_constraint(Constraint("x_val", upper=1.0))
        point = opt.evaluate([3.0, 2.0], _quadratic_eval)
        assert not point.feasible
        assert point.cost == pytest.approx(2.0 * CONSTRAINT_PENALTY)


class TestOptimize:
    def test_quadratic_nelder_mead(self):
        result = _quadratic_optimizer().optimize(_quadratic_eval, method="nelder-mead")
        assert result.best.variables["fan_pressure_ratio"] == pytest.approx(3.0, abs=0.01)
        assert result.best.variables["bypass_ratio"] == pytest.approx(2.0, abs=0.01)
        assert result.n_evaluations == len(result.history)

    def test_quadratic_differential_evolution(self):
        result = _quadratic_optimizer().optimize(
            _quadratic_eval, method="differential_evolution", max_iter=50, seed=42
        )
        assert result.best.result["f"] < 1e-3

    def test_evaluations_stay_in_bounds(self):
        result = _quadratic_optimizer(x=9.9, y=4.9).optimize(_quadratic_eval, method="powell")
        for p in result.history:
            assert 0.0 <= p.variables["fan_pressure_ratio"] <= 10.0
            assert 0.0 <= p.variables["bypass_ratio"] <= 5.0

    def test_constraint_respected(self):
        opt = _quadratic_optimizer()
        opt.add_constraint(Constraint("x_val", upper=2.0))
        result = opt.optimize(_quadratic_eval, method="differential_evolution", max_iter=50, seed=1)
        assert result.best.feasible
        assert result.best.variables["fan_pressure_ratio"] <= 2.0

    def test_engine_sfc_minimum(self):
        base = EngineInputs()
        opt = CycleOptimizer()
        opt.add_variable(DesignVariable("hpc_pressure_ratio", 2.0, 15.0))
        opt.add_objective(Objective("SFC"))
        opt.add_constraint(Constraint("is_valid", lower=1.0))

        result = opt.optimize(engine_eval_function(base), method="differential_evolution", max_iter=5, seed=42)

        assert result.best.feasible
        assert result.best.result["SFC"] < solve_engine(base).SFC
        assert 4.5 < result.best.variables["hpc_pressure_ratio"] < 10.0


class TestEngineEvalFunction:
    def test_matches_direct_solve(self):
        base = EngineInputs()
        metrics = engine_eval_function(base)({"tt4": 1700.0})
        direct = solve_engine(base, {"tt4": 1700.0})
        assert metrics["Fs"] == pytest.approx(direct.Fs)
        assert metrics["is_valid"] == 1.0

    def test_boolean_field(self):
        metrics = engine_eval_function(EngineInputs())({"afterburner_on": 0.0})
        assert metrics["SFC"] == pytest.approx(solve_engine(EngineInputs(afterburner_on=False)).SFC)

    def test_capped_combustion_invalid(self):
        metrics = engine_eval_function(EngineInputs())({"tt4": 700.0})
        assert metrics["is_valid"] == 0.0


class TestSensitivity:
    def test_quadratic_off_optimum(self):
        # f0 = 4, Δf = 4 over Δx/range = 0.1
        sens = _quadratic_optimizer(x=5.0, y=2.0).sensitivity(_quadratic_eval)
        assert sens["fan_pressure_ratio"]["f"] == pytest.approx(10.0)
        assert sens["bypass_ratio"]["f"] == pytest.approx(0.0, abs=1e-12)

    def test_engine_tt4(self):
        opt = CycleOptimizer()
        opt.add_variable(DesignVariable("tt4", 1500.0, 2100.0, initial=1800.0))
        opt.add_objective(Objective("Fs"))
        opt.add_objective(Objective("SFC"))
        sens = opt.sensitivity(engine_eval_function(EngineInputs()))
        assert sens["tt4"]["Fs"] > 0
        assert sens["tt4"]["SFC"] < 0


class TestLatinHypercube:
    def test_count_and_bounds(self):
        points = _quadratic_optimizer().latin_hypercube(_quadratic_eval, n_samples=20, seed=42)
        assert len(points) == 20
        assert all(isinstance(p, DesignPoint) for p in points)
        for p in points:
            assert 0.0 <= p.variables["fan_pressure_ratio"] <= 10.0
            assert 0.0 <= p.variables["bypass_ratio"] <= 5.0

    def test_one_sample_per_stratum(self):
        points = _quadratic_optimizer().latin_hypercube(_quadratic_eval, n_samples=10, seed=7)
        bins = sorted(int(np.floor(p.variables["fan_pressure_ratio"])) for p in points)
        assert bins == list(range(10))

    def test_reproducible(self):
        opt = _quadratic_optimizer()
        a = opt.latin_hypercube(_quadratic_eval, n_samples=5, seed=123)
        b = opt.latin_hypercube(_quadratic_eval, n_samples=5, seed=123)
        assert [p.variables for p in a] == [p.variables for p in b]
