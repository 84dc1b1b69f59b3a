"""
Batch conversion settings.

Environment
-----------
SMALLFILE_HALT_ON_ERROR : stop the batch at the first fatal row (default: collect best-effort output)
SMALLFILE_MAX_WORKERS   : number of worker threads converting rows (default: 1, serial)
"""

import os
import typing
from dataclasses import dataclass

HALT_ON_ERROR_ENV = "SMALLFILE_HALT_ON_ERROR"
MAX_WORKERS_ENV = "SMALLFILE_MAX_WORKERS"


def _to_bool(value: typing.Any) -> bool:
    if isinstance(value, bool):
        return value
    if value is None:
        return False
    s = str(value).strip().lower()
    if s in {"1", "true", "t", "yes", "y"}:
        return True
    if s in {"0", "false", "f", "no", "n", ""}:
        return False
    raise ValueError(f"Not a boolean value: {value!r}")


@dataclass(frozen=True)
class ConversionSettings:
    """
    Attributes:
        halt_on_error: stop at the first fatal row; rows converted before it are kept.
        max_workers: worker threads used to convert rows; results keep input order.
    """

    halt_on_error: bool = False
    max_workers: int = 1

    def __post_init__(self):
        if self.max_workers < 1:
            raise ValueError(f"max_workers must be at least 1, got {self.max_workers}")

    @classmethod
    def from_env(cls, environ: typing.Optional[typing.Mapping[str, str]] = None) -> "ConversionSettings":
        environ = os.environ if environ is None else environ
        return cls(
            halt_on_error=_to_bool(environ.get(HALT_ON_ERROR_ENV)),
            max_workers=int(environ.get(MAX_WORKERS_ENV) or 1),
        )
