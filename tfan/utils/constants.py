"""Physical constants used throughout TFAN.

All values in SI units unless otherwise noted. Altitudes in the atmosphere
model are in km, matching the engine input convention.
"""

# Working fluid: cold section (air)
CP_AIR = 1005.0  # J/(kg·K)
GAMMA_AIR = 1.4
R_AIR = 287.0  # J/(kg·K)

# Working fluid: hot section (combustion products)
CP_GAS = 1244.0  # J/(kg·K)
GAMMA_GAS = 1.3

# Fuel
FUEL_LHV = 42.9e6  # J/kg, kerosene lower heating value
ETA_AFTERBURNER = 0.97  # afterburner combustion efficiency

# Accessory/electrical power extracted from the LP shaft per unit intake flow
ACCESSORY_POWER = 3.0e3  # W/(kg/s)

# SFC reported when net thrust is not positive
SFC_PENALTY = 99.0  # kg/(N·h)

# International Standard Atmosphere
T_SL = 288.15  # K, sea-level temperature
P_SL = 101325.0  # Pa, sea-level pressure
LAPSE_RATE = 6.5  # K/km, tropospheric lapse rate
TROPO_SCALE_HEIGHT = 44.308  # km, barometric power-law scale
BAROMETRIC_EXPONENT = 5.25588
TROPOPAUSE_ALTITUDE = 11.0  # km
T_TROPOPAUSE = 216.65  # K
P_TROPOPAUSE = 22632.0  # Pa
STRATOSPHERE_DECAY = 0.1577  # 1/km
TROPOPAUSE_GUARD = 0.1  # km, band above 11 km held at the reference pressure

# Time
SECONDS_PER_HOUR = 3600.0

# Conversion factors
KM_TO_M = 1.0e3
M_TO_KM = 1.0e-3
FT_TO_M = 0.3048
N_TO_KN = 1.0e-3
PA_TO_KPA = 1.0e-3
LBF_TO_N = 4.4482216152605
N_TO_LBF = 1.0 / LBF_TO_N
