"""Success-or-errors value used by every changelog sub-parser.

Grammar violations are never raised.  A parser returns a :class:`Result`
carrying either a value or a non-empty, ordered tuple of human-readable
error strings, and parents merge their children with :func:`combine` so a
single run reports every defect.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Generic, Iterable, TypeVar

from changelog_lint.core.errors import ChangelogError

T = TypeVar("T")
U = TypeVar("U")


@dataclass(frozen=True)
class Result(Generic[T]):
    value: T | None = None
    errors: tuple[str, ...] = ()

    @property
    def ok(self) -> bool:
        return not self.errors

    def map(self, fn: Callable[[T], U]) -> Result[U]:
        if self.errors:
            return Result(errors=self.errors)
        return Result(value=fn(self.value))  # type: ignore[arg-type]

    def unwrap(self) -> T:
        """Return the value, raising :class:`ChangelogError` on failure."""
        if self.errors:
            raise ChangelogError(self.errors)
        return self.value  # type: ignore[return-value]


def success(value: T) -> Result[T]:
    return Result(value=value)


def failure(errors: Iterable[str]) -> Result:
    errs = tuple(errors)
    if not errs:
        raise ValueError("failure() requires at least one error")
    return Result(errors=errs)


def combine(results: Iterable[Result[T]]) -> Result[list[T]]:
    """Collect values in order, or concatenate every error list."""
    values: list[T] = []
    errors: list[str] = []
    for result in results:
        if result.errors:
            errors.extend(result.errors)
        else:
            values.append(result.value)  # type: ignore[arg-type]
    if errors:
        return failure(errors)
    return success(values)
