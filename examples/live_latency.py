"""leolatency Live: track Starlink from CelesTrak and print stats every tick.

Needs network access to celestrak.org.
"""

import logging
import time

from leolatency import CelestrakClient, LatencySimulation, format_status, random_ground_nodes

logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")

sets = CelestrakClient().fetch_group("starlink", limit=40)
nodes = random_ground_nodes(20)

with LatencySimulation(sets, nodes, interval_s=2.0) as sim:
    last_tick = 0
    try:
        while True:
            time.sleep(0.5)
            snapshot = sim.latest()
            if snapshot.tick != last_tick:
                last_tick = snapshot.tick
                print(format_status(snapshot, len(sim.ground_nodes)))
    except KeyboardInterrupt:
        pass
