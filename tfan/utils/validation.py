"""Input validation and result checks for TFAN.

The cycle solver itself never rejects numeric inputs. These checks run in
the calling layers (CLI, design-file loading) to catch coefficients that
are outside their physical range and to surface the degraded conditions
the solver clamps silently.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from tfan.core.config import EngineInputs
    from tfan.cycle.solver import EngineResult


class Severity(Enum):
    """Severity level for validation messages."""

    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


@dataclass
class ValidationMessage:
    """A single validation finding."""

    severity: Severity
    parameter: str
    message: str
    value: Any = None
    limit: Any = None


@dataclass
class ValidationResult:
    """Aggregated validation result."""

    messages: list[ValidationMessage] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return not any(m.severity == Severity.ERROR for m in self.messages)

    @property
    def has_warnings(self) -> bool:
        return any(m.severity == Severity.WARNING for m in self.messages)

    @property
    def errors(self) -> list[ValidationMessage]:
        return [m for m in self.messages if m.severity == Severity.ERROR]

    @property
    def warnings(self) -> list[ValidationMessage]:
        return [m for m in self.messages if m.severity == Severity.WARNING]

    def add(self, severity: Severity, parameter: str, message: str, **kwargs: Any) -> None:
        self.messages.append(
            ValidationMessage(severity=severity, parameter=parameter, message=message, **kwargs)
        )

    def error(self, parameter: str, message: str, **kwargs: Any) -> None:
        self.add(Severity.ERROR, parameter, message, **kwargs)

    def warning(self, parameter: str, message: str, **kwargs: Any) -> None:
        self.add(Severity.WARNING, parameter, message, **kwargs)

    def info(self, parameter: str, message: str, **kwargs: Any) -> None:
        self.add(Severity.INFO, parameter, message, **kwargs)

    def merge(self, other: ValidationResult) -> None:
        self.messages.extend(other.messages)


# --- Common validators ---


def validate_positive(name: str, value: float, result: ValidationResult) -> None:
    """Validate that a value is strictly positive."""
    if value <= 0:
        result.error(name, f"{name} must be positive, got {value}", value=value, limit=0.0)


def validate_fraction(name: str, value: float, result: ValidationResult) -> None:
    """Validate an efficiency or recovery factor in (0, 1]."""
    if not 0.0 < value <= 1.0:
        result.error(name, f"{name} = {value} must lie in (0, 1]", value=value, limit=(0.0, 1.0))


def validate_range(
    name: str,
    value: float,
    low: float,
    high: float,
    result: ValidationResult,
    severity: Severity = Severity.ERROR,
) -> None:
    """Validate that a value falls within [low, high]."""
    if value < low or value > high:
        result.add(severity, name, f"{name} = {value} is outside [{low}, {high}]", value=value, limit=(low, high))


_EFFICIENCIES = ("eta_cL", "eta_cH", "eta_tH", "eta_tL", "eta_m", "eta_b")
_RECOVERIES = (
    "sigma_i", "sigma_b", "sigma_bypass", "sigma_m", "sigma_e", "sigma_ab_dry", "sigma_ab_wet",
)
_OFFTAKES = ("beta", "delta_1", "delta_2")


def validate_engine_inputs(inputs: EngineInputs) -> ValidationResult:
    """Check an engine configuration before it is solved.

    Errors mark inputs the cycle model cannot represent (efficiencies
    outside (0, 1], offtakes consuming all core flow, non-positive
    pressure ratios). Warnings mark inputs the model accepts but that
    are outside its calibrated range.
    """
    result = ValidationResult()

    for name in _EFFICIENCIES + _RECOVERIES:
        validate_fraction(name, getattr(inputs, name), result)

    for name in _OFFTAKES:
        validate_range(name, getattr(inputs, name), 0.0, 1.0, result)
    offtake = inputs.beta + inputs.delta_1 + inputs.delta_2
    if offtake >= 1.0:
        result.error("beta", f"Bleed plus cooling fractions sum to {offtake:.3f}; no core flow left")

    validate_positive("fan_pressure_ratio", inputs.fan_pressure_ratio, result)
    validate_positive("hpc_pressure_ratio", inputs.hpc_pressure_ratio, result)
    validate_positive("mass_flow_design", inputs.mass_flow_design, result)
    validate_positive("tt4", inputs.tt4, result)
    if inputs.bypass_ratio < 0:
        result.error("bypass_ratio", f"bypass_ratio must be non-negative, got {inputs.bypass_ratio}")
    if inputs.mach < 0:
        result.error("mach", f"mach must be non-negative, got {inputs.mach}")

    if inputs.altitude < 0 or inputs.altitude > 20.0:
        result.warning(
            "altitude",
            f"Altitude {inputs.altitude} km is outside the 0-20 km atmosphere model",
            value=inputs.altitude,
        )
    if inputs.fan_pressure_ratio < 1.0:
        result.warning("fan_pressure_ratio", "Fan pressure ratio below 1 expands instead of compressing")
    if inputs.hpc_pressure_ratio < 1.0:
        result.warning("hpc_pressure_ratio", "HPC pressure ratio below 1 expands instead of compressing")
    if inputs.afterburner_on and inputs.tt_ab <= inputs.tt4:
        result.warning(
            "tt_ab",
            f"Afterburner temperature {inputs.tt_ab:.0f} K is not above Tt4 {inputs.tt4:.0f} K",
        )

    return result


def check_result(inputs: EngineInputs, result: EngineResult) -> ValidationResult:
    """Report degraded conditions the solver clamped without raising."""
    checks = ValidationResult()
    Tt3 = result.station("3").Tt

    if result.combustion_limited:
        checks.warning(
            "tt4",
            f"Compressor exit temperature {Tt3:.1f} K exceeds Tt4 {result.tt4_requested:.1f} K; "
            "no heat added in the burner",
            value=Tt3,
            limit=result.tt4_requested,
        )
    if result.hpt_floor_active:
        checks.warning("eta_tH", "HPT cannot balance HPC work; exit temperature held at free-stream Tt")
    if result.lpt_floor_active:
        checks.warning("eta_tL", "LPT cannot balance fan work; exit temperature held at free-stream Tt")
    if not result.thrust_positive:
        checks.warning("Fs", f"Net thrust is not positive ({result.Fs:.1f} N·s/kg); SFC is a penalty value")
    if result.mass_flow_actual <= 0.0:
        checks.warning("mass_flow_design", "Actual mass flow is zero")
    return checks
