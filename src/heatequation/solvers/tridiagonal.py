# tridiagonal.py
"""
Tridiagonal Linear Systems
==========================
Thomas algorithm (TDMA) for systems A·x = d where A is tridiagonal:

    a[i-1]·x[i-1] + b[i]·x[i] + c[i]·x[i+1] = d[i]

with a the sub-diagonal (n-1), b the diagonal (n) and c the super-diagonal
(n-1). Elimination without pivoting is stable for diagonally dominant
matrices, which the implicit diffusion operators always are.

All functions are stateless; scratch arrays are allocated per call.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

import numpy as np
import numba as nb
import scipy as sp

from heatequation import config
from heatequation.exceptions import InvalidParameterError, NumericalError

if TYPE_CHECKING:
    import numpy.typing as npt

# ---- JIT’d Thomas kernels (single system + batched) ----

@nb.njit(cache=True)
def thomas_kernel(
    a: npt.NDArray[np.float64],
    b: npt.NDArray[np.float64],
    c: npt.NDArray[np.float64],
    d: npt.NDArray[np.float64],
    x: npt.NDArray[np.float64],
    tolerance: float,
) -> int:
    """
    Solve one tridiagonal system into x.

    Returns:
        -1 on success, otherwise the row whose pivot b[i] - a[i-1]·c'[i-1]
        vanished relative to its terms (x is then left incomplete).
    """
    n = b.size
    c_prime = np.empty(n, np.float64)
    d_prime = np.empty(n, np.float64)

    # Forward elimination
    for i in range(n):
        if i == 0:
            m = 0.0
            rhs = d[0]
        else:
            m = a[i - 1] * c_prime[i - 1]
            rhs = d[i] - a[i - 1] * d_prime[i - 1]
        denom = b[i] - m
        scale = abs(b[i]) + abs(m)
        # also rejects NaN pivots
        if not abs(denom) > tolerance * scale:
            return i
        if i < n - 1:
            c_prime[i] = c[i] / denom
        d_prime[i] = rhs / denom

    # Back substitution
    x[n - 1] = d_prime[n - 1]
    for i in range(n - 2, -1, -1):
        x[i] = d_prime[i] - c_prime[i] * x[i + 1]
    return -1


@nb.njit(cache=True, parallel=True)
def thomas_batch_kernel(
    a: npt.NDArray[np.float64],
    b: npt.NDArray[np.float64],
    c: npt.NDArray[np.float64],
    d: npt.NDArray[np.float64],
    x: npt.NDArray[np.float64],
    tolerance: float,
    status: npt.NDArray[np.int64],
) -> None:
    """
    Solve the independent systems d[k] (shared coefficients) into x[k].

    Rows are distributed over worker threads; the call returns once every
    system is solved. status[k] receives the kernel result of system k.
    """
    for k in nb.prange(d.shape[0]):
        status[k] = thomas_kernel(a, b, c, d[k], x[k], tolerance)


# ---- Python entry points ----

def _as_vector(name: str, values: npt.ArrayLike, length: int) -> npt.NDArray[np.float64]:
    array = np.ascontiguousarray(values, dtype=np.float64)
    if array.ndim != 1 or array.size != length:
        raise InvalidParameterError(
            f"Coefficient '{name}' must be a vector of length {length}, got shape {array.shape}."
        )
    return array


def _as_coefficients(
    a: npt.ArrayLike,
    b: npt.ArrayLike,
    c: npt.ArrayLike,
) -> tuple[npt.NDArray[np.float64], npt.NDArray[np.float64], npt.NDArray[np.float64]]:
    b = np.ascontiguousarray(b, dtype=np.float64)
    if b.ndim != 1 or b.size < 1:
        raise InvalidParameterError(f"Diagonal must be a non-empty vector, got shape {b.shape}.")
    n = b.size
    return _as_vector("a", a, n - 1), b, _as_vector("c", c, n - 1)


def solve_tridiagonal(
    a: npt.ArrayLike,
    b: npt.ArrayLike,
    c: npt.ArrayLike,
    d: npt.ArrayLike,
    tolerance: float = config.PIVOT_TOLERANCE,
) -> npt.NDArray[np.float64]:
    """
    Solve a tridiagonal system with the Thomas algorithm.

    Args:
        a: Sub-diagonal, length n-1 (a[i-1] multiplies x[i-1] in row i).
        b: Diagonal, length n.
        c: Super-diagonal, length n-1 (c[i] multiplies x[i+1] in row i).
        d: Right-hand side, length n.
        tolerance: Relative pivot threshold.

    Returns:
        Solution vector x, length n.

    Raises:
        InvalidParameterError: Inconsistent coefficient lengths.
        NumericalError: A pivot vanished (singular or ill-conditioned matrix).
    """
    a, b, c = _as_coefficients(a, b, c)
    d = _as_vector("d", d, b.size)

    x = np.empty(b.size, dtype=np.float64)
    row = thomas_kernel(a, b, c, d, x, tolerance)
    if row >= 0:
        raise NumericalError(f"Tridiagonal system is singular or ill-conditioned: zero pivot in row {row}.")
    return x


def solve_tridiagonal_batch(
    a: npt.ArrayLike,
    b: npt.ArrayLike,
    c: npt.ArrayLike,
    d: npt.ArrayLike,
    tolerance: float = config.PIVOT_TOLERANCE,
) -> npt.NDArray[np.float64]:
    """
    Solve m independent tridiagonal systems sharing the same matrix.

    Args:
        a, b, c: Matrix coefficients as in solve_tridiagonal.
        d: Right-hand sides, shape (m, n); one system per row.

    Returns:
        Solutions, shape (m, n).
    """
    a, b, c = _as_coefficients(a, b, c)
    d = np.ascontiguousarray(d, dtype=np.float64)
    if d.ndim != 2 or d.shape[1] != b.size:
        raise InvalidParameterError(
            f"Right-hand sides must have shape (m, {b.size}), got {d.shape}."
        )

    x = np.empty_like(d)
    if d.shape[0] == 0:
        return x

    status = np.empty(d.shape[0], dtype=np.int64)
    thomas_batch_kernel(a, b, c, d, x, tolerance, status)

    failed = np.flatnonzero(status >= 0)
    if failed.size:
        k = int(failed[0])
        raise NumericalError(
            f"Tridiagonal system {k} of {d.shape[0]} is singular or ill-conditioned: "
            f"zero pivot in row {int(status[k])}."
        )
    return x


@dataclass(frozen=True, eq=False)
class TridiagonalSystem:
    """
    A tridiagonal system A·x = d, stored as its three diagonals.
    """
    a: npt.NDArray[np.float64]
    b: npt.NDArray[np.float64]
    c: npt.NDArray[np.float64]
    d: npt.NDArray[np.float64]

    def __post_init__(self) -> None:
        a, b, c = _as_coefficients(self.a, self.b, self.c)
        object.__setattr__(self, "a", a)
        object.__setattr__(self, "b", b)
        object.__setattr__(self, "c", c)
        object.__setattr__(self, "d", _as_vector("d", self.d, b.size))

    @property
    def size(self) -> int:
        return self.b.size

    def solve(self, tolerance: float = config.PIVOT_TOLERANCE) -> npt.NDArray[np.float64]:
        return solve_tridiagonal(self.a, self.b, self.c, self.d, tolerance=tolerance)

    def matvec(self, x: npt.ArrayLike) -> npt.NDArray[np.float64]:
        """Compute A·x."""
        x = _as_vector("x", x, self.size)
        y = self.b * x
        y[:-1] += self.c * x[1:]
        y[1:] += self.a * x[:-1]
        return y

    def residual(self, x: npt.ArrayLike) -> npt.NDArray[np.float64]:
        """Compute A·x - d."""
        return self.matvec(x) - self.d

    def is_diagonally_dominant(self) -> bool:
        """|b[i]| >= |a[i-1]| + |c[i]| for every row."""
        off_diagonal = np.zeros(self.size, dtype=np.float64)
        off_diagonal[1:] += np.abs(self.a)
        off_diagonal[:-1] += np.abs(self.c)
        return bool(np.all(np.abs(self.b) >= off_diagonal))

    def to_sparse(self) -> sp.sparse.csr_matrix:
        """Assemble A as a scipy CSR matrix."""
        n = self.size
        idx = np.arange(n, dtype=np.int64)
        rows = np.concatenate((idx, idx[1:], idx[:-1]))
        cols = np.concatenate((idx, idx[:-1], idx[1:]))
        data = np.concatenate((self.b, self.a, self.c))
        return sp.sparse.coo_matrix((data, (rows, cols)), shape=(n, n), dtype=np.float64).tocsr()
