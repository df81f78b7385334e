"""Core calculation modules for TFAN.

- atmosphere: ISA model, corrected flow and free-stream state
- thermo: isentropic and polytropic gas-dynamic relations
- config: EngineInputs and design-file persistence (JSON + npz)
"""
