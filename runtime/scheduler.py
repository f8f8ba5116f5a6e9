# runtime/scheduler.py

import logging
import time
from concurrent.futures import ThreadPoolExecutor
from typing import Callable, Dict, Hashable, Optional, Tuple

import numpy as np

from geometry.graph import Graph
from parameters.layout_parameters import LayoutParameters
from runtime.impulse import compute_impulse, compute_impulses
from runtime.initializer import initialize_layout
from runtime.layout_state import LayoutPhase, LayoutState
from runtime.publisher import publish_layout
from runtime.thermal import apply_thermal_update

logger = logging.getLogger("gem_layout")

ProgressCallback = Callable[[Dict[Hashable, Tuple[float, float]], int], None]


class RoundScheduler:
    """Drive GEM rounds over a graph until the layout cools down.

    Each round visits every vertex once in a fresh random order. In the
    default ``"in_place"`` mode a vertex moves as soon as its impulse is
    known, so vertices later in the round react to the ones already moved.
    ``"snapshot"`` mode computes every impulse from the positions at the
    start of the round (optionally on several threads) and then applies the
    moves in the round's order.

    ``cancel`` is any object with an ``is_set()`` method, typically a
    :class:`threading.Event`. It is polled before every round; a cancelled
    run publishes whatever coordinates it has reached.
    """

    def __init__(
        self,
        graph: Graph,
        params: Optional[LayoutParameters] = None,
        *,
        rng: Optional[np.random.Generator] = None,
        progress: Optional[ProgressCallback] = None,
        cancel=None,
    ) -> None:
        if params is None:
            params = LayoutParameters()
        elif isinstance(params, dict):
            params = LayoutParameters(params)
        self.params = params.validate()
        self.graph = graph
        self.rng = rng if rng is not None else np.random.default_rng(params.seed)
        self.progress = progress
        self.cancel = cancel
        self.state: Optional[LayoutState] = None
        self._initialized = False

    @property
    def phase(self) -> LayoutPhase:
        if not self._initialized:
            return LayoutPhase.UNINITIALIZED
        if self.state is None:
            return LayoutPhase.CONVERGED
        return self.state.phase

    def __repr__(self):
        msg = f"""### ROUND SCHEDULER ###
GRAPH:\t {self.graph!r}
PARAMETERS:\t {self.params}
STATE:\t {self.state!r}
############"""
        return msg

    def initialize(self) -> Optional[LayoutState]:
        """Create the simulation state; ``None`` for an empty graph."""
        logger.debug("Initializing layout for %r.", self.graph)
        self.state = initialize_layout(self.graph, self.params, self.rng)
        self._initialized = True
        return self.state

    def _cancel_requested(self) -> bool:
        return self.cancel is not None and bool(self.cancel.is_set())

    def _snapshot_impulses(self, order: np.ndarray, disturbances: np.ndarray) -> np.ndarray:
        state = self.state
        positions = state.positions.copy()
        sum_pos = state.sum_pos.copy()
        workers = min(int(self.params.workers), len(order))
        if workers <= 1:
            return compute_impulses(
                positions, sum_pos, state.neighbors, order, self.params, disturbances
            )

        bounds = np.array_split(np.arange(len(order)), workers)
        with ThreadPoolExecutor(max_workers=workers) as executor:
            futures = [
                executor.submit(
                    compute_impulses,
                    positions,
                    sum_pos,
                    state.neighbors,
                    order[idx],
                    self.params,
                    disturbances[idx],
                )
                for idx in bounds
            ]
            return np.concatenate([future.result() for future in futures])

    def run_round(self) -> float:
        """Process every vertex once; return the round's mean temperature."""
        if not self._initialized:
            self.initialize()
        state = self.state
        if state is None:
            return 0.0

        n = state.vertex_count
        width = float(self.params.disturbance)
        state.phase = LayoutPhase.RUNNING
        state.global_temperature = 0.0
        order = self.rng.permutation(n)

        if self.params.update_mode == "snapshot":
            disturbances = self.rng.uniform(-width, width, size=(n, 2))
            impulses = self._snapshot_impulses(order, disturbances)
            for k, row in enumerate(order):
                apply_thermal_update(state, int(row), impulses[k], self.params)
        else:
            for row in order:
                row = int(row)
                disturbance = self.rng.uniform(-width, width, size=2)
                impulse = compute_impulse(
                    state.positions,
                    state.sum_pos,
                    state.neighbors[row],
                    row,
                    self.params,
                    disturbance,
                )
                apply_thermal_update(state, row, impulse, self.params)

        state.global_temperature /= n
        state.rounds += 1
        return state.global_temperature

    def is_converged(self) -> bool:
        state = self.state
        if state is None:
            return self._initialized
        if state.rounds == 0:
            return False
        # A lone vertex has no pairwise or gravitational terms to settle.
        if state.vertex_count == 1:
            return True
        return (
            state.global_temperature <= self.params.desired_temperature
            or state.rounds >= state.max_rounds
        )

    def _notify(self) -> None:
        if self.progress is None or self.state is None:
            return
        self.progress(self.state.coordinates(), self.state.rounds)

    def run(self) -> dict:
        """Run rounds until convergence or cancellation and publish the result."""
        start = time.perf_counter()
        if not self._initialized:
            self.initialize()

        state = self.state
        if state is None:
            return {
                "positions": {},
                "rounds": 0,
                "global_temperature": 0.0,
                "converged": True,
                "cancelled": False,
                "elapsed": time.perf_counter() - start,
            }

        update_frequency = int(self.params.update_frequency)
        cancelled = False
        while True:
            if self._cancel_requested():
                cancelled = True
                state.phase = LayoutPhase.CANCELLED
                # An interrupted round leaves a partial, undivided sum behind.
                state.global_temperature = float(state.temperatures.mean())
                logger.info("Layout cancelled after %d rounds.", state.rounds)
                break

            self.run_round()
            logger.debug(
                "Round %d: global temperature %.4f, elapsed %.3fs",
                state.rounds,
                state.global_temperature,
                time.perf_counter() - start,
                extra={"layout_round": state.rounds},
            )

            if self.is_converged():
                state.phase = LayoutPhase.CONVERGED
                break
            if state.rounds % update_frequency == 0:
                self._notify()

        self._notify()
        positions = publish_layout(state, self.graph)
        elapsed = time.perf_counter() - start
        if not cancelled:
            logger.info(
                "Layout finished in %d rounds (limit %d); T=%.3f, %.3fs.",
                state.rounds,
                state.max_rounds,
                state.global_temperature,
                elapsed,
            )
        return {
            "positions": positions,
            "rounds": state.rounds,
            "global_temperature": state.global_temperature,
            "converged": not cancelled,
            "cancelled": cancelled,
            "elapsed": elapsed,
        }
