"""Periodic latency simulation.

The controller owns the run state and the latest published snapshot. While
running, a background thread executes one tick per interval:
propagate -> project -> nearest-satellite latency -> aggregate -> publish.
"""
from __future__ import annotations

import logging
import threading
import time
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Callable, Iterable, Optional, Sequence

from leolatency.core.elements import ElementSet
from leolatency.core.latency import GroundNode, LatencySample, compute_latencies
from leolatency.core.projection import GeoPosition, project
from leolatency.core.propagation import (
    InertialPosition,
    PropagationResult,
    as_utc,
    present_positions,
    propagate_batch,
)
from leolatency.core.stats import StatsSnapshot, aggregate_samples
from leolatency.utils.constants import DEFAULT_TICK_INTERVAL_S

logger = logging.getLogger(__name__)

Propagator = Callable[[ElementSet, datetime], Optional[InertialPosition]]
Clock = Callable[[], datetime]


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class Snapshot:
    """Everything published by one tick.

    Attributes:
        tick: Sequence number of the tick (0 before the first tick).
        instant: Instant the tick was computed for.
        satellites: Geographic positions of the satellites with a valid
            propagation this tick.
        samples: One latency sample per ground node.
        stats: Summary of the covered samples.
    """

    tick: int
    instant: datetime | None
    satellites: tuple[GeoPosition, ...]
    samples: tuple[LatencySample, ...]
    stats: StatsSnapshot

    @classmethod
    def initial(cls) -> Snapshot:
        return cls(tick=0, instant=None, satellites=(), samples=(), stats=StatsSnapshot.empty())


def format_status(snapshot: Snapshot, ground_node_count: int) -> str:
    """One-line status summary of a snapshot."""
    stats = snapshot.stats
    return (
        f"Satellites: {len(snapshot.satellites)} | Ground Nodes: {ground_node_count} | "
        f"Mean: {stats.mean:.2f} ms | Median: {stats.median:.2f} ms | P95: {stats.p95:.2f} ms"
    )


class LatencySimulation:
    """Runs the latency pipeline on a fixed cadence.

    Args:
        element_sets: Element sets of the tracked satellites.
        ground_nodes: Fixed ground nodes for the whole run.
        interval_s: Tick interval in seconds.
        propagator: Optional ``(element_set, instant) -> InertialPosition | None``
            callable. Defaults to batched SGP4.
        workers: Thread pool size for the per-node latency search.
        clock: Callable returning the current instant. Defaults to UTC now.

    Example::

        with LatencySimulation(sets, nodes) as sim:
            time.sleep(5)
            print(format_status(sim.latest(), len(sim.ground_nodes)))
    """

    def __init__(
        self,
        element_sets: Iterable[ElementSet],
        ground_nodes: Iterable[GroundNode],
        *,
        interval_s: float = DEFAULT_TICK_INTERVAL_S,
        propagator: Propagator | None = None,
        workers: int | None = None,
        clock: Clock | None = None,
    ) -> None:
        if interval_s <= 0:
            logger.error("Invalid tick interval: %r", interval_s)
            raise ValueError(f"Tick interval must be positive, got {interval_s}")

        self._element_sets: tuple[ElementSet, ...] = tuple(element_sets)
        self._ground_nodes: tuple[GroundNode, ...] = tuple(ground_nodes)
        self._interval_s = float(interval_s)
        self._propagator = propagator
        self._workers = workers
        self._clock = clock or _utc_now

        # _state_lock guards run state and publication, _tick_lock serializes ticks.
        self._state_lock = threading.Lock()
        self._tick_lock = threading.Lock()
        self._running = False
        self._stop_event: threading.Event | None = None
        self._thread: threading.Thread | None = None
        self._snapshot = Snapshot.initial()

    # --- read accessors ---

    @property
    def running(self) -> bool:
        with self._state_lock:
            return self._running

    @property
    def interval_s(self) -> float:
        return self._interval_s

    @property
    def ground_nodes(self) -> tuple[GroundNode, ...]:
        return self._ground_nodes

    @property
    def element_sets(self) -> tuple[ElementSet, ...]:
        with self._state_lock:
            return self._element_sets

    def latest(self) -> Snapshot:
        """The most recently published snapshot."""
        with self._state_lock:
            return self._snapshot

    # --- control ---

    def start(self) -> None:
        """Begin ticking. No-op if already running."""
        with self._state_lock:
            if self._running:
                return
            self._running = True
            stop_event = threading.Event()
            self._stop_event = stop_event
            self._thread = threading.Thread(
                target=self._run, args=(stop_event,), name="leolatency-ticker", daemon=True
            )
            self._thread.start()

        logger.info(
            "Simulation started: %d satellites, %d ground nodes, %.2fs interval",
            len(self._element_sets), len(self._ground_nodes), self._interval_s,
        )

    def stop(self) -> None:
        """Stop scheduling ticks. No-op if already stopped.

        A tick already executing is not aborted and publishes its result.
        """
        with self._state_lock:
            if not self._running:
                return
            self._running = False
            if self._stop_event is not None:
                self._stop_event.set()

        logger.info("Simulation stopped")

    def join(self, timeout: float | None = None) -> None:
        """Wait for the scheduler thread to exit after ``stop()``."""
        thread = self._thread
        if thread is not None and thread is not threading.current_thread():
            thread.join(timeout)

    def update_element_sets(self, element_sets: Iterable[ElementSet]) -> None:
        """Replace the tracked element sets, effective from the next tick."""
        new_sets = tuple(element_sets)
        with self._state_lock:
            self._element_sets = new_sets
        logger.info("Tracking %d element sets from the next tick", len(new_sets))

    def __enter__(self) -> LatencySimulation:
        self.start()
        return self

    def __exit__(self, *exc_info) -> None:
        self.stop()
        self.join()

    # --- pipeline ---

    def tick(self) -> Snapshot:
        """Run one full pipeline pass and publish its snapshot.

        Ticks are serialized: a concurrent call waits for the running one.
        """
        with self._tick_lock:
            started = time.monotonic()
            instant = as_utc(self._clock())
            element_sets = self.element_sets

            results = self._propagate_all(element_sets, instant)
            positions = present_positions(results)
            if len(positions) < len(results):
                logger.info(
                    "Excluded %d of %d satellites without a valid position",
                    len(results) - len(positions), len(results),
                )

            satellites = tuple(project(p, instant) for p in positions)
            samples = tuple(compute_latencies(satellites, self._ground_nodes, self._workers))
            stats = aggregate_samples(samples)

            with self._state_lock:
                snapshot = Snapshot(
                    tick=self._snapshot.tick + 1,
                    instant=instant,
                    satellites=satellites,
                    samples=samples,
                    stats=stats,
                )
                self._snapshot = snapshot

            logger.debug(
                "Tick %d: %d satellites, %d/%d nodes covered, %.1f ms",
                snapshot.tick, len(satellites), stats.count, len(samples),
                (time.monotonic() - started) * 1000.0,
            )
            return snapshot

    def _propagate_all(
        self, element_sets: Sequence[ElementSet], instant: datetime
    ) -> list[PropagationResult]:
        if self._propagator is None:
            return propagate_batch(list(element_sets), instant)

        results = []
        for es in element_sets:
            try:
                position = self._propagator(es, instant)
            except Exception as exc:
                logger.warning("Propagation failed for %s at %s: %r", es.label, instant, exc)
                position = None
            if position is not None and not position.finite:
                logger.warning("Non-finite position for %s at %s, excluding it", es.label, instant)
                position = None
            error_code = 0 if position is not None else -1
            results.append(PropagationResult(name=es.label, position=position, error_code=error_code))
        return results

    def _run(self, stop_event: threading.Event) -> None:
        deadline = time.monotonic() + self._interval_s
        while not stop_event.wait(max(0.0, deadline - time.monotonic())):
            try:
                self.tick()
            except Exception:
                logger.exception("Simulation tick failed")

            now = time.monotonic()
            deadline += self._interval_s
            if deadline <= now:
                # Slow tick: start the next interval now, missed slots are dropped.
                deadline = now + self._interval_s
