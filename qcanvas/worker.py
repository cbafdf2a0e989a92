"""
Background execution of simulations.

The UI posts a `SimulationRequest` and receives a `SimulationResponse`;
`handle_request` is the pure request -> response step and
`SimulationWorker` runs it on a thread pool. Every request carries an id;
when a newer request has been submitted, responses to older ones are
superseded and their callbacks are not invoked.
"""

from __future__ import annotations

import itertools
import logging
import threading
from concurrent.futures import Future, ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Mapping, Optional, Tuple

from qcanvas.core.ir import (
    CustomGateDefinition,
    NoiseModel,
    PlacedItem,
    custom_gate_from_dict,
    noise_model_from_dict,
    placed_item_from_dict,
)
from qcanvas.exceptions import QCanvasError
from qcanvas.logging.logging import setup_logging
from qcanvas.simulator import SimulationResult, simulate

logger = logging.getLogger(__name__)

_request_ids = itertools.count(1)


@dataclass(frozen=True)
class SimulationRequest:
    placed_items: Tuple[PlacedItem, ...] = ()
    num_qubits: int = 0
    custom_gate_definitions: Tuple[CustomGateDefinition, ...] = ()
    noise_model: NoiseModel = NoiseModel()
    step_limit: Optional[int] = None
    request_id: int = field(default_factory=lambda: next(_request_ids))

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "SimulationRequest":
        """
        Builds a request from the worker message
        ``{placedItems, numQubits, customGateDefs, noise, stepLimit?, requestId?}``
        """
        kwargs: Dict[str, Any] = {
            "placed_items": tuple(
                placed_item_from_dict(item) for item in data.get("placedItems", ())
            ),
            "num_qubits": int(data.get("numQubits", 0)),
            "custom_gate_definitions": tuple(
                custom_gate_from_dict(d) for d in data.get("customGateDefs", ())
            ),
            "noise_model": noise_model_from_dict(data.get("noise")),
            "step_limit": data.get("stepLimit"),
        }
        if data.get("requestId") is not None:
            kwargs["request_id"] = int(data["requestId"])
        return cls(**kwargs)


@dataclass(frozen=True)
class SimulationResponse:
    request_id: int
    type: str
    result: Optional[SimulationResult] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.type == "result"

    def to_dict(self) -> Dict[str, Any]:
        if self.ok:
            assert self.result is not None
            return {
                "type": "result",
                "requestId": self.request_id,
                "result": self.result.to_dict(),
            }
        return {"type": "error", "requestId": self.request_id, "error": self.error}


def handle_request(request: SimulationRequest) -> SimulationResponse:
    """
    Runs a simulation request, turning simulation errors into an error
    response
    """
    try:
        result = simulate(
            request.placed_items,
            request.num_qubits,
            request.custom_gate_definitions,
            request.noise_model,
            request.step_limit,
        )
    except (QCanvasError, ValueError) as exc:
        logger.error(
            "Simulation request %s failed: %s",
            request.request_id,
            exc,
            extra={"event": type(exc).__name__, "request_id": request.request_id},
        )
        return SimulationResponse(request.request_id, "error", error=str(exc))
    return SimulationResponse(request.request_id, "result", result=result)


class SimulationWorker:
    """
    Runs simulation requests off the calling thread

    With `configure_logging` the worker installs the qcanvas logging
    config (see `qcanvas.logging.logging.setup_logging`) before starting,
    optionally from the `logging_config` file.
    """

    def __init__(
        self,
        max_workers: int = 2,
        configure_logging: bool = False,
        logging_config: Optional[str] = None,
    ) -> None:
        if configure_logging:
            loaded = setup_logging(logging_config)
            logger.info("Logging configured from %s", loaded)
        self.executor = ThreadPoolExecutor(
            max_workers=max_workers, thread_name_prefix="qcanvas-sim"
        )
        self._lock = threading.Lock()
        self._latest_request_id: Optional[int] = None

    @property
    def latest_request_id(self) -> Optional[int]:
        with self._lock:
            return self._latest_request_id

    def is_superseded(self, response: SimulationResponse) -> bool:
        with self._lock:
            return (
                self._latest_request_id is not None
                and response.request_id != self._latest_request_id
            )

    def submit(
        self,
        request: SimulationRequest,
        callback: Optional[Callable[[SimulationResponse], None]] = None,
    ) -> "Future[SimulationResponse]":
        """
        Schedules `request`; `callback` receives the response unless a
        newer request was submitted in the meantime
        """

        def task() -> SimulationResponse:
            response = handle_request(request)
            if callback is not None:
                if self.is_superseded(response):
                    logger.debug(
                        "Dropping superseded response %s", response.request_id
                    )
                else:
                    callback(response)
            return response

        with self._lock:
            self._latest_request_id = request.request_id
            return self.executor.submit(task)

    def shutdown(self, wait: bool = True) -> None:
        logger.info("Shutting down SimulationWorker")
        self.executor.shutdown(wait=wait)

    def __enter__(self) -> "SimulationWorker":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.shutdown(wait=True)
