"""Checked uint256 integer and wad fixed-point arithmetic

Every helper either returns the exact result rounded toward zero or raises
ArithmeticFailure. Nothing here holds state.
"""
from .errors import ArithmeticFailure
from .constants import WAD, MAX_UINT256


def _check_operand(value: int) -> int:
    if value < 0:
        raise ArithmeticFailure(f"Negative operand {value}")
    if value > MAX_UINT256:
        raise ArithmeticFailure("Operand exceeds uint256")
    return value


def _check_result(result: int, op: str) -> int:
    if result > MAX_UINT256:  # uint256 max
        raise ArithmeticFailure(f"Arithmetic overflow in {op}")
    return result


def checked_add(a: int, b: int) -> int:
    """Add with overflow checking"""
    return _check_result(_check_operand(a) + _check_operand(b), "addition")


def checked_sub(a: int, b: int) -> int:
    """Subtract with underflow checking"""
    result = _check_operand(a) - _check_operand(b)
    if result < 0:
        raise ArithmeticFailure("Arithmetic underflow in subtraction")
    return result


def checked_mul(a: int, b: int) -> int:
    """Multiply with overflow checking"""
    return _check_result(_check_operand(a) * _check_operand(b), "multiplication")


def checked_div(a: int, b: int) -> int:
    """Divide, rounding down"""
    if _check_operand(b) == 0:
        raise ArithmeticFailure("Division by zero")
    return _check_operand(a) // b


def mul_div(a: int, b: int, c: int) -> int:
    """a * b / c rounded down, with a full precision intermediate.

    Only the final quotient has to fit in uint256, matching a 512-bit
    mulDiv.
    """
    if _check_operand(c) == 0:
        raise ArithmeticFailure("Division by zero")
    return _check_result((_check_operand(a) * _check_operand(b)) // c, "mul_div")


def mul_div_up(a: int, b: int, c: int) -> int:
    """a * b / c rounded up. Reserved for amounts owed to the pool."""
    if _check_operand(c) == 0:
        raise ArithmeticFailure("Division by zero")
    product = _check_operand(a) * _check_operand(b)
    return _check_result(-(-product // c), "mul_div_up")


def wad_mul(a: int, b: int) -> int:
    """a * b / WAD, rounded down"""
    return checked_div(checked_mul(a, b), WAD)


def wad_div(a: int, b: int) -> int:
    """a * WAD / b, rounded down"""
    return checked_div(checked_mul(a, WAD), b)


def wad_min(a: int, b: int) -> int:
    return min(_check_operand(a), _check_operand(b))
