"""Design-space exploration for TFAN.

Parametric sweeps, flight-envelope maps and SciPy-backed optimisation of
the cycle over EngineInputs parameters.
"""
