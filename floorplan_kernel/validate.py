from typing import Iterable, Optional


class ContractError(ValueError):
    pass


def require_non_negative(name: str, value: float) -> float:
    if value is None or value < 0:
        raise ContractError(f'{name} must be non-negative (got {value!r})')
    return float(value)


def require_positive(name: str, value: float) -> float:
    if value is None or value <= 0:
        raise ContractError(f'{name} must be positive (got {value!r})')
    return float(value)


def require_choice(name: str, value: Optional[str], choices: Iterable[str]) -> str:
    allowed = tuple(choices)
    if value not in allowed:
        raise ContractError(f'unknown {name} "{value}" (expected one of: {", ".join(allowed)})')
    return value
