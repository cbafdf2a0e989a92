"""
Circuit linearizer

Flattens the items placed on the canvas, primitive gates and (possibly
nested) custom gate instances, into the ordered list of `PrimitiveOp`
instances the state engine consumes.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Iterable, Iterator, List, Mapping, Optional, Tuple, Union

from qcanvas.core.ir import (
    CustomGateDefinition,
    PlacedCustomGate,
    PlacedGate,
    PlacedItem,
    PrimitiveOp,
    custom_gate_from_dict,
    placed_item_from_dict,
)
from qcanvas.exceptions import (
    CyclicGateDefinition,
    InvalidAngleExpression,
    InvalidQubitIndex,
    UnknownGateKind,
)
from qcanvas.extra.angle_expression import parse_angle
from qcanvas.operation.gate_operation import GateType
from qcanvas.qcanvas import Config
from qcanvas.state.engine import validate_operation

logger = logging.getLogger(__name__)

ItemLike = Union[PlacedItem, Mapping[str, Any]]
DefinitionLike = Union[CustomGateDefinition, Mapping[str, Any]]


def _definitions_by_id(
    custom_defs: Iterable[DefinitionLike],
) -> Dict[str, CustomGateDefinition]:
    definitions: Dict[str, CustomGateDefinition] = {}
    for raw in custom_defs:
        definition = custom_gate_from_dict(raw)
        definitions[definition.id] = definition
    return definitions


def expand_items(
    items: Iterable[ItemLike],
    definitions: Mapping[str, CustomGateDefinition],
    anchor: int = 0,
    left: Optional[float] = None,
    stack: Tuple[str, ...] = (),
) -> Iterator[PlacedGate]:
    """
    Recursively expands custom gate instances into primitive placements
    with absolute qubit indices

    Parameters
    ----------
    items: Iterable[ItemLike]
        Placed items, relative to `anchor`
    definitions: Mapping[str, CustomGateDefinition]
        Custom gate catalogue keyed by id
    anchor: int
        Qubit offset added to every relative qubit
    left: Optional[float]
        Position imposed on every expanded gate, None at the top level
    stack: Tuple[str, ...]
        Custom gate ids currently being expanded

    Raises
    ------
    CyclicGateDefinition
        If a definition (directly or indirectly) contains itself, or the
        nesting exceeds `Config().max_custom_gate_depth`
    """
    for raw in items:
        item = placed_item_from_dict(raw)
        position = item.left if left is None else left
        if isinstance(item, PlacedGate):
            yield PlacedGate(
                gate_id=item.gate_id,
                qubit=anchor + item.qubit,
                left=position,
                control_qubit=(
                    None
                    if item.control_qubit is None
                    else anchor + item.control_qubit
                ),
                params=item.params,
            )
            continue

        assert isinstance(item, PlacedCustomGate)
        chain = stack + (item.custom_gate_id,)
        if item.custom_gate_id in stack:
            raise CyclicGateDefinition(chain)
        if len(chain) > Config().max_custom_gate_depth:
            raise CyclicGateDefinition(chain, "nesting depth exceeded")
        definition = definitions.get(item.custom_gate_id)
        if definition is None:
            logger.warning(
                "Skipping instance of unknown custom gate '%s'",
                item.custom_gate_id,
                extra={"event": "UnknownCustomGate", "gate_id": item.custom_gate_id},
            )
            continue
        yield from expand_items(
            definition.gates,
            definitions,
            anchor=anchor + item.qubit,
            left=position,
            stack=chain,
        )


def resolve_gate(
    gate: PlacedGate, num_qubits: int, sequence: int = 0
) -> Optional[PrimitiveOp]:
    """
    Turns an absolute placement into a `PrimitiveOp`. Placements with an
    unknown gate id, an invalid angle or invalid qubits are logged and
    yield None.
    """
    try:
        gate_type = GateType.from_id(gate.gate_id)
        params = {
            name: parse_angle(gate.params[name])
            for name in gate_type.required_params
            if name in gate.params
        }
    except UnknownGateKind as exc:
        logger.warning(
            "Skipping gate: %s",
            exc,
            extra={"event": "UnknownGateKind", "gate_id": gate.gate_id},
        )
        return None
    except InvalidAngleExpression as exc:
        logger.warning(
            "Skipping gate '%s': %s",
            gate.gate_id,
            exc,
            extra={"event": "InvalidAngleExpression", "gate_id": gate.gate_id},
        )
        return None

    op = PrimitiveOp(
        gate=gate_type,
        target_qubit=gate.qubit,
        control_qubit=gate.control_qubit,
        params=params,
        order=gate.left,
        sequence=sequence,
    )
    try:
        validate_operation(op, num_qubits)
    except InvalidQubitIndex as exc:
        logger.warning(
            "Discarding gate '%s': %s",
            gate.gate_id,
            exc,
            extra={
                "event": "DiscardedInvalidGate",
                "gate_id": gate.gate_id,
                "qubit": exc.qubit,
            },
        )
        return None
    return op


def linearize(
    items: Iterable[ItemLike],
    custom_defs: Iterable[DefinitionLike] = (),
    num_qubits: int = 0,
) -> List[PrimitiveOp]:
    """
    Flattens the placed items into primitive operations

    Parameters
    ----------
    items: Iterable[ItemLike]
        Placed gates and custom gate instances (dataclasses or their
        JSON dict form)
    custom_defs: Iterable[DefinitionLike]
        Custom gate catalogue
    num_qubits: int
        Register size used to validate qubit indices

    Returns
    -------
    List[PrimitiveOp]
        Valid operations sorted by horizontal position; operations at the
        same position keep their placement order

    Raises
    ------
    CyclicGateDefinition
        If the custom gate catalogue contains a cycle
    """
    definitions = _definitions_by_id(custom_defs)
    ops: List[PrimitiveOp] = []
    for sequence, gate in enumerate(expand_items(items, definitions)):
        op = resolve_gate(gate, num_qubits, sequence)
        if op is not None:
            ops.append(op)
    return sorted(ops, key=lambda op: (op.order, op.sequence))
