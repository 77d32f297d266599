from dataclasses import dataclass
from typing import Any, Optional

@dataclass
class Outcome:
    """
    Result of a console operation that never raises to its caller.

    ``ok`` is False for transport failures and non-2xx responses; ``error``
    then holds a short description. ``status_code`` is set whenever the
    server answered.
    """
    ok: bool
    value: Any = None
    error: Optional[str] = None
    status_code: Optional[int] = None

    @classmethod
    def success(cls, value: Any = None, status_code: Optional[int] = None) -> "Outcome":
        return cls(ok=True, value=value, status_code=status_code)

    @classmethod
    def failure(cls, error: str, status_code: Optional[int] = None) -> "Outcome":
        return cls(ok=False, error=error, status_code=status_code)
