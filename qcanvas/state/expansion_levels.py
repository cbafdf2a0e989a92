from enum import IntEnum


class ExpansionLevel(IntEnum):
    """
    Representation of a register state. A state is only ever expanded,
    from the state vector to the density matrix.
    """

    Vector = 1
    Matrix = 2
