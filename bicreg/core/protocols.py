"""
Core protocols for bicreg.

Structural interfaces that domain-specific implementations satisfy.
Protocol (structural typing) rather than ABC keeps backends free of
inheritance while still checkable with isinstance().
"""

from typing import Protocol, TypeVar, Any, runtime_checkable

P = TypeVar('P')  # Parameter payload type
D = TypeVar('D')  # Design type


@runtime_checkable
class DataSource(Protocol):
    """
    Minimal protocol for any data container used in a computation.

    Unknown capabilities passed to supports() MUST return False, never raise.
    """

    @property
    def n_observations(self) -> int:
        """Number of statistical units (rows)."""
        ...

    @property
    def metadata(self) -> dict[str, Any]:
        """Domain-specific metadata."""
        ...

    def supports(self, capability: str) -> bool:
        ...


@runtime_checkable
class Backend(Protocol[D, P]):
    """
    Protocol for computational backends.

    A backend takes a validated design and produces a Result[P]. Backends
    are stateless; everything they need comes from the design or their
    constructor.

    Naming convention for ``name``: '{device}_{algorithm}', e.g. 'cpu_qr'.
    """

    @property
    def name(self) -> str:
        ...

    def solve(self, design: D) -> 'Result[P]':
        """
        Execute the computation.

        Raises:
            NumericalError: If numerical issues prevent a solution
            ValidationError: If design is invalid for this backend
        """
        ...
