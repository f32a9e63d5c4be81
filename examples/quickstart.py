"""leolatency Quickstart: project a satellite and measure one tick offline."""

from leolatency import (
    GeoPosition,
    GroundNode,
    LatencySimulation,
    format_status,
    parse_elements,
)

# ISS (ZARYA) element set
tle_text = """
ISS (ZARYA)
1 25544U 98067A   24045.54896019  .00016717  00000-0  30093-3 0  9993
2 25544  51.6412 207.4925 0004948 290.5508 178.9792 15.49583488439596
""".strip()

sets = parse_elements(tle_text)
iss = sets[0]

nodes = [
    GroundNode(0, GeoPosition(51.5, -0.1)),    # London
    GroundNode(1, GeoPosition(-33.9, 151.2)),  # Sydney
    GroundNode(2, GeoPosition(40.7, -74.0)),   # New York
]

sim = LatencySimulation(sets, nodes, clock=lambda: iss.epoch)
snapshot = sim.tick()

for sat in snapshot.satellites:
    print(f"{iss.name}: lat {sat.lat_deg:.2f}°, lon {sat.lon_deg:.2f}°")

for sample in snapshot.samples:
    print(f"Node {sample.node_id}: {sample.latency_ms:.2f} ms ({sample.distance_km:.0f} km)")

print(format_status(snapshot, len(nodes)))
