from __future__ import annotations

import importlib
import importlib.util
import types
from typing import TYPE_CHECKING, Any, Union

if TYPE_CHECKING:
    import pandas as pd
    import polars as pl
    import pyarrow as pa

    #: Union of all supported tabular transaction sources.
    #:
    #: * ``pandas.DataFrame``
    #: * ``polars.DataFrame`` – converted to pandas
    #: * ``pyarrow.Table`` – converted to pandas
    DataFrame = Union[pd.DataFrame, pl.DataFrame, pa.Table]  # noqa: UP007


def require_backend(name: str, reason: str = "") -> types.ModuleType:
    """Import the optional table backend *name* or raise an ImportError naming its extra."""
    if importlib.util.find_spec(name) is None:
        msg = f"Missing optional dependency '{name}'. Install it with `pip install basketpairs[{name}]`."
        if reason:
            msg += f" {reason}"
        raise ImportError(msg)
    return importlib.import_module(name)


def frame_kind(data: Any) -> str:
    """Return ``'pyarrow'``, ``'polars'`` or ``'pandas'`` for the backend *data* came from."""
    _type = type(data)
    mod = getattr(_type, "__module__", "") or ""
    if _type.__name__ == "Table" and mod.startswith("pyarrow"):
        return "pyarrow"
    if _type.__name__ == "DataFrame" and mod.startswith("polars"):
        return "polars"
    return "pandas"


def to_pandas(data: Any) -> Any:
    """Coerce PyArrow / Polars tables to pandas; return everything else unchanged."""
    kind = frame_kind(data)

    if kind == "pyarrow":
        return data.to_pandas()

    if kind == "polars":
        # Polars -> pandas goes through Arrow
        require_backend("pyarrow", reason="It is required to convert Polars frames.")
        return data.to_pandas()

    return data


def from_pandas(df: pd.DataFrame, kind: str) -> Any:
    """Convert a pandas result table back to the backend named by *kind*."""
    if kind == "pyarrow":
        pa = require_backend("pyarrow")
        return pa.Table.from_pandas(df, preserve_index=False)

    if kind == "polars":
        pl = require_backend("polars")
        return pl.from_pandas(df)

    return df
