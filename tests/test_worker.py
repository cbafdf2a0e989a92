import threading

import pytest

from qcanvas.core.ir import NoiseModel, PlacedGate
from qcanvas.worker import (
    SimulationRequest,
    SimulationResponse,
    SimulationWorker,
    handle_request,
)

BELL_MESSAGE = {
    "placedItems": [
        {"gateId": "h", "qubit": 0, "left": 20},
        {"gateId": "cnot", "qubit": 1, "controlQubit": 0, "left": 50},
    ],
    "numQubits": 2,
    "customGateDefs": [],
    "noise": {"depolarizing": 0, "phaseDamping": 0},
}

CYCLIC_MESSAGE = {
    "placedItems": [{"kind": "customGate", "customGateId": "a", "qubit": 0, "left": 0}],
    "numQubits": 1,
    "customGateDefs": [
        {"id": "a", "gates": [{"customGateId": "b", "qubit": 0, "left": 0}]},
        {"id": "b", "gates": [{"customGateId": "a", "qubit": 0, "left": 0}]},
    ],
    "noise": None,
}


def test_request_from_dict():
    request = SimulationRequest.from_dict({**BELL_MESSAGE, "requestId": 42, "stepLimit": 1})
    assert request.request_id == 42
    assert request.num_qubits == 2
    assert request.step_limit == 1
    assert request.noise_model == NoiseModel()
    assert request.placed_items[1] == PlacedGate("cnot", 1, left=50, control_qubit=0)


def test_request_ids_are_increasing():
    first = SimulationRequest()
    second = SimulationRequest()
    assert second.request_id > first.request_id


def test_handle_request_returns_result():
    response = handle_request(SimulationRequest.from_dict(BELL_MESSAGE))
    assert response.ok
    data = response.to_dict()
    assert data["type"] == "result"
    assert data["requestId"] == response.request_id
    states = [p["state"] for p in data["result"]["probabilities"]]
    assert states == ["|00⟩", "|11⟩"]


def test_handle_request_reports_cycles_as_errors():
    response = handle_request(SimulationRequest.from_dict(CYCLIC_MESSAGE))
    assert not response.ok
    assert response.result is None
    assert "a -> b -> a" in response.error
    assert response.to_dict() == {
        "type": "error",
        "requestId": response.request_id,
        "error": response.error,
    }


def test_handle_request_reports_invalid_register():
    response = handle_request(SimulationRequest(num_qubits=-2))
    assert response.type == "error"


def test_worker_runs_request():
    with SimulationWorker(max_workers=1) as worker:
        future = worker.submit(SimulationRequest.from_dict(BELL_MESSAGE))
        response = future.result(timeout=60)
    assert isinstance(response, SimulationResponse)
    assert response.ok


def test_worker_invokes_callback():
    received = []
    done = threading.Event()

    def callback(response):
        received.append(response)
        done.set()

    with SimulationWorker(max_workers=1) as worker:
        request = SimulationRequest.from_dict(BELL_MESSAGE)
        worker.submit(request, callback).result(timeout=60)
    assert done.is_set()
    assert [r.request_id for r in received] == [request.request_id]


def test_superseded_responses_are_dropped():
    gate = threading.Event()
    received = []

    def blocking(response):
        received.append(response.request_id)

    with SimulationWorker(max_workers=1) as worker:
        # occupy the single thread so both requests queue up behind it
        blocker = worker.executor.submit(gate.wait, 60)
        old = SimulationRequest.from_dict(BELL_MESSAGE)
        new = SimulationRequest.from_dict(BELL_MESSAGE)
        old_future = worker.submit(old, blocking)
        new_future = worker.submit(new, blocking)
        assert worker.latest_request_id == new.request_id
        gate.set()
        blocker.result(timeout=60)
        old_response = old_future.result(timeout=60)
        new_future.result(timeout=60)

    assert worker.is_superseded(old_response)
    assert received == [new.request_id]


def test_superseded_error_responses_are_still_returned():
    with SimulationWorker(max_workers=1) as worker:
        old_future = worker.submit(SimulationRequest.from_dict(CYCLIC_MESSAGE))
        worker.submit(SimulationRequest.from_dict(BELL_MESSAGE)).result(timeout=60)
        assert old_future.result(timeout=60).type == "error"


def test_shutdown_rejects_new_work():
    worker = SimulationWorker()
    worker.shutdown()
    with pytest.raises(RuntimeError):
        worker.submit(SimulationRequest())
