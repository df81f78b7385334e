"""Cycle design optimisation over EngineInputs parameters.

A ``CycleOptimizer`` holds the design space (named EngineInputs fields
with bounds), objectives taken from ``EngineResult.as_dict`` and optional
constraints on the same keys. The solver is wrapped into a plain
``dict → dict`` evaluation function, so any callable with that signature
can be optimised as well.

Supports:
- Bounded single-objective search with SciPy (``minimize`` methods or
  ``differential_evolution``)
- Weighted-sum and target-seeking objectives
- One-at-a-time sensitivity around a base point
- Latin-hypercube design of experiments
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from typing import Any, Callable, Collection

import numpy as np
from scipy.optimize import differential_evolution, minimize

from tfan.core.config import EngineInputs, field_names, field_type
from tfan.cycle.solver import solve_engine

logger = logging.getLogger(__name__)

EvalFunction = Callable[[dict[str, float]], dict[str, float]]

# Cost added per unit of constraint violation
CONSTRAINT_PENALTY = 1.0e6


def _result_value(raw: dict[str, float], key: str) -> float:
    try:
        return raw[key]
    except KeyError:
        raise ValueError(
            f"Evaluation result has no key '{key}'; available: {', '.join(sorted(raw))}"
        ) from None


@dataclass
class DesignVariable:
    """A continuous design variable.

    Args:
        name: EngineInputs field varied by the optimiser.
        lower: Lower bound.
        upper: Upper bound.
        initial: Starting value (bound midpoint when omitted).
        unit: Display unit.
    """

    name: str
    lower: float
    upper: float
    initial: float | None = None
    unit: str = ""

    def __post_init__(self) -> None:
        if self.upper < self.lower:
            raise ValueError(f"{self.name}: upper bound {self.upper} below lower bound {self.lower}")
        if self.initial is None:
            self.initial = 0.5 * (self.lower + self.upper)

    @property
    def bounds(self) -> tuple[float, float]:
        return (self.lower, self.upper)

    def denormalise(self, u: float) -> float:
        """Map u ∈ [0, 1] onto the bounds."""
        return self.lower + u * (self.upper - self.lower)


@dataclass
class Objective:
    """Quantity to minimise, maximise or drive to a target."""

    key: str  # EngineResult.as_dict key, e.g. "SFC"
    direction: str = "minimize"
    weight: float = 1.0
    target: float | None = None

    def __post_init__(self) -> None:
        if self.direction not in ("minimize", "maximize"):
            raise ValueError(f"direction must be 'minimize' or 'maximize', got '{self.direction}'")

    def cost(self, value: float) -> float:
        if self.target is not None:
            return self.weight * abs(value - self.target)
        sign = 1.0 if self.direction == "minimize" else -1.0
        return self.weight * sign * value


@dataclass
class Constraint:
    """Bound on a result quantity: ``lower <= value <= upper``."""

    key: str
    lower: float | None = None
    upper: float | None = None

    def violation(self, value: float) -> float:
        """Distance outside the bounds, 0 when satisfied."""
        v = 0.0
        if self.lower is not None:
            v += max(0.0, self.lower - value)
        if self.upper is not None:
            v += max(0.0, value - self.upper)
        return v


@dataclass
class DesignPoint:
    """One evaluated point of the design space."""

    variables: dict[str, float]
    result: dict[str, float]
    cost: float
    feasible: bool


@dataclass
class OptimizationResult:
    """Outcome of an optimisation run."""

    best: DesignPoint | None = None
    history: list[DesignPoint] = field(default_factory=list)
    converged: bool = False
    message: str = ""

    @property
    def n_evaluations(self) -> int:
        return len(self.history)


def engine_eval_function(base: EngineInputs) -> EvalFunction:
    """Wrap the cycle solver as a ``{field: value} → metrics`` function.

    Values for boolean fields are interpreted as truthy floats. Points
    with non-positive thrust or capped combustion report ``is_valid`` as
    0.0, which a ``Constraint("is_valid", lower=1.0)`` rejects.
    """

    def evaluate(params: dict[str, float]) -> dict[str, float]:
        changes: dict[str, Any] = {}
        for name, value in params.items():
            changes[name] = bool(value) if field_type(name) is bool else float(value)
        metrics = solve_engine(replace(base, **changes)).as_dict()
        return {k: float(v) for k, v in metrics.items()}

    return evaluate


class CycleOptimizer:
    """Design-space search over engine inputs.

    Usage (``RESULT_KEYS`` from :mod:`tfan.cycle.solver`)::

        opt = CycleOptimizer(result_keys=RESULT_KEYS)
        opt.add_variable(DesignVariable("hpc_pressure_ratio", 2.0, 15.0))
        opt.add_variable(DesignVariable("bypass_ratio", 0.0, 2.0))
        opt.add_objective(Objective("SFC"))
        opt.add_constraint(Constraint("Fs", lower=800.0))
        result = opt.optimize(engine_eval_function(EngineInputs()))
    """

    def __init__(self, result_keys: Collection[str] | None = None) -> None:
        # Known evaluation keys; objectives and constraints are checked
        # against them when given
        self.result_keys = frozenset(result_keys) if result_keys is not None else None
        self.variables: list[DesignVariable] = []
        self.objectives: list[Objective] = []
        self.constraints: list[Constraint] = []

    def add_variable(self, var: DesignVariable) -> None:
        """Add a design variable.

        Raises:
            ValueError: If the name is not an EngineInputs field or is
                already in the design space.
        """
        if var.name not in field_names():
            raise ValueError(f"Unknown design variable: {var.name}")
        if any(v.name == var.name for v in self.variables):
            raise ValueError(f"Duplicate design variable: {var.name}")
        self.variables.append(var)

    def _check_key(self, key: str, kind: str) -> None:
        if self.result_keys is not None and key not in self.result_keys:
            raise ValueError(
                f"Unknown {kind} key: {key}. Available: {', '.join(sorted(self.result_keys))}"
            )

    def add_objective(self, obj: Objective) -> None:
        """Add an objective.

        Raises:
            ValueError: If ``result_keys`` was given and does not hold the key.
        """
        self._check_key(obj.key, "objective")
        self.objectives.append(obj)

    def add_constraint(self, con: Constraint) -> None:
        self._check_key(con.key, "constraint")
        self.constraints.append(con)

    def _check_ready(self) -> None:
        if not self.variables:
            raise ValueError("No design variables defined")
        if not self.objectives:
            raise ValueError("No objectives defined")

    def evaluate(self, x: np.ndarray | list[float], eval_func: EvalFunction) -> DesignPoint:
        """Evaluate one point given as values in variable order."""
        params = {v.name: float(x[i]) for i, v in enumerate(self.variables)}
        raw = eval_func(params)

        cost = sum(obj.cost(_result_value(raw, obj.key)) for obj in self.objectives)
        violation = sum(con.violation(_result_value(raw, con.key)) for con in self.constraints)
        return DesignPoint(
            variables=params,
            result=raw,
            cost=cost + CONSTRAINT_PENALTY * violation,
            feasible=violation == 0.0,
        )

    def optimize(
        self,
        eval_func: EvalFunction,
        method: str = "nelder-mead",
        max_iter: int = 200,
        tol: float = 1e-6,
        seed: int | None = None,
    ) -> OptimizationResult:
        """Minimise the combined objective.

        Args:
            eval_func: ``dict → dict`` evaluation, usually from
                :func:`engine_eval_function`.
            method: Any ``scipy.optimize.minimize`` method, or
                ``"differential_evolution"`` for a global search.
            max_iter: Iteration or generation limit.
            tol: Convergence tolerance.
            seed: Seed for stochastic methods.

        Returns:
            OptimizationResult whose ``best`` is the lowest-cost feasible
            point evaluated (or the lowest-cost point overall when none
            is feasible).

        Raises:
            ValueError: If no variables or objectives are defined.
        """
        self._check_ready()
        bounds = [v.bounds for v in self.variables]
        history: list[DesignPoint] = []

        def cost_function(x: np.ndarray) -> float:
            # Nelder-Mead and Powell ignore bounds; clip so the solver
            # never sees values outside the design space.
            x = np.clip(x, [b[0] for b in bounds], [b[1] for b in bounds])
            point = self.evaluate(x, eval_func)
            history.append(point)
            return point.cost

        m = method.lower()
        if m == "differential_evolution":
            res = differential_evolution(cost_function, bounds=bounds, maxiter=max_iter, tol=tol, seed=seed)
        else:
            x0 = np.array([v.initial for v in self.variables])
            tol_key = {"nelder-mead": "fatol", "powell": "ftol", "l-bfgs-b": "ftol", "slsqp": "ftol"}.get(m)
            options: dict[str, Any] = {"maxiter": max_iter}
            if tol_key:
                options[tol_key] = tol
            res = minimize(cost_function, x0, method=method, bounds=bounds, options=options)

        feasible = [p for p in history if p.feasible]
        pool = feasible or history
        best = min(pool, key=lambda p: p.cost) if pool else None

        logger.info(
            "Optimisation (%s): %d evaluations, best cost %s",
            method, len(history), f"{best.cost:.6g}" if best else "n/a",
        )
        return OptimizationResult(
            best=best,
            history=history,
            converged=bool(res.success),
            message=str(getattr(res, "message", "")),
        )

    def sensitivity(
        self,
        eval_func: EvalFunction,
        perturbation: float = 0.05,
        base_point: dict[str, float] | None = None,
    ) -> dict[str, dict[str, float]]:
        """One-at-a-time normalised sensitivities.

        Each variable is moved by ±``perturbation`` of its range about
        the base point (clipped to bounds). The sensitivity of objective
        *f* to variable *x* is ``(Δf / f_base) / (Δx / range)``.

        Returns:
            ``{variable: {objective_key: sensitivity}}``.
        """
        self._check_ready()
        if base_point is None:
            base_point = {v.name: float(v.initial) for v in self.variables}
        base = eval_func(base_point)

        out: dict[str, dict[str, float]] = {}
        for var in self.variables:
            span = var.upper - var.lower
            if span == 0:
                continue
            step = perturbation * span
            up = {**base_point, var.name: min(base_point[var.name] + step, var.upper)}
            dn = {**base_point, var.name: max(base_point[var.name] - step, var.lower)}
            r_up, r_dn = eval_func(up), eval_func(dn)
            dx = (up[var.name] - dn[var.name]) / span

            row: dict[str, float] = {}
            for obj in self.objectives:
                f0 = _result_value(base, obj.key)
                if f0 == 0 or dx == 0:
                    row[obj.key] = 0.0
                else:
                    row[obj.key] = ((_result_value(r_up, obj.key) - _result_value(r_dn, obj.key)) / f0) / dx
            out[var.name] = row
        return out

    def latin_hypercube(
        self,
        eval_func: EvalFunction,
        n_samples: int = 50,
        seed: int | None = None,
    ) -> list[DesignPoint]:
        """Evaluate a Latin-hypercube sample of the design space."""
        self._check_ready()
        rng = np.random.default_rng(seed)
        # One stratum per sample in every dimension, shuffled per column
        strata = np.argsort(rng.random((n_samples, len(self.variables))), axis=0)
        unit = (strata + rng.random(strata.shape)) / n_samples
        points = []
        for row in unit:
            x = [v.denormalise(u) for v, u in zip(self.variables, row)]
            points.append(self.evaluate(x, eval_func))
        return points
