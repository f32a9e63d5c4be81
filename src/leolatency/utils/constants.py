from __future__ import annotations

"""Physical constants and run defaults for the latency simulator.

Distances in km, durations in seconds, latencies in milliseconds.
"""

# --- Earth parameters (spherical model) ---
EARTH_RADIUS_KM: float = 6371.0
"""Mean Earth radius in km used by the haversine distance."""

# --- Latency model ---
SIGNAL_SPEED_KM_S: float = 300000.0
"""Assumed signal speed in km/s (rounded speed of light)."""

# --- Simulation defaults ---
DEFAULT_TICK_INTERVAL_S: float = 2.0
"""Interval between two simulation ticks in seconds."""

DEFAULT_GROUND_NODE_COUNT: int = 20
"""Number of randomly placed ground nodes."""

DEFAULT_GROUND_MAX_ABS_LAT_DEG: float = 70.0
"""Ground nodes are placed uniformly within +/- this latitude."""

DEFAULT_PERCENTILE: float = 0.95
"""Quantile reported as the tail latency."""

# --- Catalog source ---
CELESTRAK_GP_URL: str = "https://celestrak.org/NORAD/elements/gp.php"
"""CelesTrak general perturbations endpoint."""

DEFAULT_CELESTRAK_GROUP: str = "starlink"
"""Default CelesTrak satellite group."""

DEFAULT_SATELLITE_LIMIT: int = 40
"""Number of element sets tracked from the catalog by default."""

DEFAULT_HTTP_TIMEOUT_S: float = 30.0
"""Timeout for catalog HTTP requests in seconds."""
