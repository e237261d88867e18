"""
Universal DataSource for bicreg.

DataSource is the "I have a table" abstraction. It doesn't know which
column is the response or that anyone is going to search over subsets.
It just provides named columns.

Usage:
    from bicreg.core.datasource import DataSource

    ds = DataSource.from_arrays(kid_score=y, mom_hs=hs, mom_iq=iq)
    ds = DataSource.from_file("kidiq.csv")
    ds = DataSource.from_dataframe(df)

    ds.keys()          # frozenset({'kid_score', 'mom_hs', 'mom_iq'})
    ds.columns         # ('kid_score', 'mom_hs', 'mom_iq')  -- insertion order
    y = ds['kid_score']
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, TYPE_CHECKING
import numpy as np
from numpy.typing import NDArray

from bicreg.core.exceptions import ValidationError, DimensionError
from bicreg.core.capabilities import (
    CAPABILITY_MATERIALIZED,
    CAPABILITY_REPEATABLE,
    CAPABILITY_NAMED_COLUMNS,
)

if TYPE_CHECKING:
    import pandas as pd


@dataclass
class DataSource:
    """
    Universal data container. Domain-agnostic.

    Construct via factory classmethods, not directly. Column order is
    preserved: it is the default predictor order downstream.
    """
    _data: dict[str, NDArray[np.floating[Any]]]
    _capabilities: frozenset[str]
    _metadata: dict[str, Any] = field(default_factory=dict)

    # === Array Access ===

    def keys(self) -> frozenset[str]:
        """Return the names of all available columns."""
        return frozenset(self._data.keys())

    @property
    def columns(self) -> tuple[str, ...]:
        """Column names in insertion order."""
        return tuple(self._data.keys())

    def __getitem__(self, key: str) -> NDArray[np.floating[Any]]:
        """
        Access a named column.

        Raises:
            KeyError: If key not found, with message listing available columns

        Example:
            >>> ds['age']  # KeyError: "DataSource has no column 'age'. Available: [...]"
        """
        if key not in self._data:
            raise KeyError(
                f"DataSource has no column '{key}'. Available: {list(self.columns)}"
            )
        return self._data[key]

    def __contains__(self, key: str) -> bool:
        return key in self._data

    # === Properties ===

    @property
    def n_observations(self) -> int:
        """Number of statistical units (rows)."""
        return self._metadata.get('n_observations', 0)

    @property
    def metadata(self) -> dict[str, Any]:
        """Domain-agnostic metadata."""
        return self._metadata.copy()

    def supports(self, capability: str) -> bool:
        """
        Check if this DataSource supports a capability.

        Unknown capabilities return False, never raise.
        """
        return capability in self._capabilities

    # === Factory Methods ===

    @classmethod
    def from_arrays(
        cls,
        *,
        data: NDArray | None = None,
        columns: list[str] | None = None,
        **named_arrays: NDArray,
    ) -> DataSource:
        """
        Construct from NumPy arrays.

        Either pass a 2D ``data`` matrix with ``columns`` naming its
        columns, or pass each column as a keyword argument.
        """
        storage: dict[str, NDArray[np.floating[Any]]] = {}

        if data is not None:
            data = np.asarray(data, dtype=np.float64)
            if data.ndim != 2:
                raise DimensionError(
                    f"data: expected 2D array, got {data.ndim}D with shape {data.shape}"
                )
            if columns is None:
                columns = [f"x{i + 1}" for i in range(data.shape[1])]
            if len(columns) != data.shape[1]:
                raise ValidationError(
                    f"columns: got {len(columns)} names for {data.shape[1]} columns"
                )
            for i, col in enumerate(columns):
                storage[str(col)] = data[:, i]

        for name, arr in named_arrays.items():
            arr = np.asarray(arr, dtype=np.float64)
            if arr.ndim != 1:
                raise DimensionError(
                    f"{name}: expected 1D column, got shape {arr.shape}"
                )
            storage[name] = arr

        return cls._build(storage, {'source': 'arrays'})

    @classmethod
    def from_dataframe(cls, df: 'pd.DataFrame', *, source_path: str | None = None) -> DataSource:
        """Construct from pandas DataFrame (every column must be numeric)."""
        storage: dict[str, NDArray[np.floating[Any]]] = {}

        for col in df.columns:
            try:
                storage[str(col)] = df[col].to_numpy(dtype=np.float64)
            except (ValueError, TypeError) as e:
                raise ValidationError(
                    f"column '{col}': cannot convert to float64: {e}"
                ) from e

        metadata: dict[str, Any] = {'source': 'dataframe'}
        if source_path:
            metadata['source_path'] = source_path

        return cls._build(storage, metadata)

    @classmethod
    def from_file(cls, path: str | Path, *, columns: list[str] | None = None) -> DataSource:
        """Construct from file (CSV, TSV, NPY)."""
        path = Path(path)
        suffix = path.suffix.lower()

        if suffix in ('.csv', '.tsv'):
            import pandas as pd
            sep = '\t' if suffix == '.tsv' else ','
            df = pd.read_csv(path, sep=sep, usecols=columns)
            return cls.from_dataframe(df, source_path=str(path))
        elif suffix == '.npy':
            data = np.load(path)
            return cls.from_arrays(data=data, columns=columns)
        else:
            raise ValidationError(f"Unknown file format: {suffix}")

    @classmethod
    def build(cls, *args, **kwargs) -> DataSource:
        """
        Convenience factory that dispatches to appropriate from_* method.

        Examples:
            DataSource.build(y=y, x1=x1)   # from_arrays
            DataSource.build("data.csv")   # from_file
            DataSource.build(df)           # from_dataframe
        """
        if args and isinstance(args[0], (str, Path)):
            return cls.from_file(args[0], **kwargs)
        if args and hasattr(args[0], 'columns') and hasattr(args[0], 'iloc'):
            return cls.from_dataframe(args[0], **kwargs)
        return cls.from_arrays(**kwargs)

    @classmethod
    def _build(cls, storage: dict[str, NDArray], metadata: dict[str, Any]) -> DataSource:
        lengths = {name: arr.shape[0] for name, arr in storage.items()}
        if len(set(lengths.values())) > 1:
            details = ", ".join(f"{k}={v}" for k, v in lengths.items())
            raise DimensionError(f"Inconsistent column lengths: {details}")

        metadata = dict(metadata)
        metadata['n_observations'] = next(iter(lengths.values()), 0)
        metadata['columns'] = list(storage.keys())

        return cls(
            _data=storage,
            _capabilities=frozenset({
                CAPABILITY_MATERIALIZED,
                CAPABILITY_REPEATABLE,
                CAPABILITY_NAMED_COLUMNS,
            }),
            _metadata=metadata,
        )
