"""Tests for report generation and chart export."""

import pytest

from tfan.core.config import DesignState, EngineInputs, ProjectMeta
from tfan.cycle.solver import solve_engine
from tfan.optimization.sweeps import flight_envelope, sweep_bypass_ratio, sweep_overall_pressure_ratio
from tfan.reports.plots import envelope_figure, save_figure, sweep_figure
from tfan.reports.summary import (
    ReferenceDelta,
    generate_html_report,
    generate_text_report,
    reference_deltas,
    save_html_report,
    save_text_report,
)


def _solved_state(inputs: EngineInputs | None = None, name: str = "Reference Fan") -> DesignState:
    inputs = inputs or EngineInputs()
    res = solve_engine(inputs)
    return DesignState(
        meta=ProjectMeta(name=name),
        inputs=inputs.to_dict(),
        performance=res.as_dict(),
        stations=res.stations_dict(),
    )


class TestReferenceDeltas:
    def test_wet_pair(self):
        inputs = EngineInputs()
        fs, sfc = reference_deltas(inputs, solve_engine(inputs))
        assert fs.reference == inputs.ref_fs_wet
        assert sfc.reference == inputs.ref_sfc_wet
        assert abs(fs.percent) < 2.0

    def test_dry_pair_from_mapping(self):
        inputs = EngineInputs(afterburner_on=False)
        fs, sfc = reference_deltas(inputs, {"Fs": 650.0, "SFC": 0.13})
        assert fs.reference == inputs.ref_fs_dry
        assert fs.delta == pytest.approx(7.0)
        assert sfc.percent == pytest.approx(100.0 * (0.13 - 0.1275) / 0.1275)

    def test_zero_reference(self):
        assert ReferenceDelta("Fs", 10.0, 0.0).percent == 0.0


class TestTextReport:
    def test_sections(self):
        text = generate_text_report(_solved_state())
        assert "TFAN Cycle Report" in text
        assert "Reference Fan" in text
        assert "OPERATING POINT" in text
        assert "PERFORMANCE" in text
        assert "REFERENCE COMPARISON (WET)" in text
        assert "7 Afterburner exit" in text

    def test_inputs_only(self):
        text = generate_text_report(DesignState())
        assert "OPERATING POINT" in text
        assert "PERFORMANCE" not in text

    def test_flags_listed(self):
        text = generate_text_report(_solved_state(EngineInputs(tt4=700.0)))
        assert "Combustion Limited" in text

    def test_dry_comparison(self):
        text = generate_text_report(_solved_state(EngineInputs(afterburner_on=False)))
        assert "REFERENCE COMPARISON (DRY)" in text

    def test_save(self, tmp_path):
        path = tmp_path / "report.txt"
        save_text_report(_solved_state(), path)
        assert "TFAN Cycle Report" in path.read_text(encoding="utf-8")


class TestHtmlReport:
    def test_structure(self):
        html = generate_html_report(_solved_state())
        assert html.startswith("<!DOCTYPE html>")
        assert "<h2>Performance</h2>" in html
        assert "<h2>Stations</h2>" in html
        assert html.rstrip().endswith("</html>")

    def test_name_escaped(self):
        html = generate_html_report(_solved_state(name="<fan & co>"))
        assert "&lt;fan &amp; co&gt;" in html
        assert "<fan & co>" not in html

    def test_save(self, tmp_path):
        path = tmp_path / "report.html"
        save_html_report(_solved_state(), path)
        assert "<table>" in path.read_text(encoding="utf-8")


class TestPlots:
    def test_opr_sweep_png(self, tmp_path):
        sweep = sweep_overall_pressure_ratio(EngineInputs(), values=[10.0, 20.0, 30.0, 40.0])
        path = tmp_path / "opr.png"
        save_figure(sweep_figure(sweep), path)
        assert path.stat().st_size > 0

    def test_bypass_sweep_has_secondary_axis(self):
        sweep = sweep_bypass_ratio(EngineInputs(), values=[0.0, 0.5, 1.0])
        fig = sweep_figure(sweep)
        assert len(fig.axes) == 2

    @pytest.mark.parametrize("metric", ["sfc", "thrust"])
    def test_envelope_svg(self, tmp_path, metric):
        env = flight_envelope(EngineInputs(), altitudes=[0.0, 10.0, 20.0], machs=[0.5, 1.5, 3.5])
        path = tmp_path / f"env_{metric}.svg"
        save_figure(envelope_figure(env, metric, current=(1.6, 11.0)), path)
        assert path.read_text().lstrip().startswith("<?xml")

    def test_envelope_bad_metric(self):
        env = flight_envelope(EngineInputs(), altitudes=[0.0], machs=[0.5])
        with pytest.raises(ValueError, match="metric"):
            envelope_figure(env, "Tt3")
