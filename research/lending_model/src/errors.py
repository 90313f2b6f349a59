"""Custom errors for the lending pool model"""

class LendingError(Exception):
    """Base error class for lending pool errors"""
    pass

class ArithmeticFailure(LendingError):
    """Error for arithmetic overflow, underflow or division by zero"""
    pass

class InsufficientLiquidity(LendingError):
    """Error for a payout exceeding the pool's available cash"""
    pass

class UnauthorizedAccess(LendingError):
    """Error for a caller lacking the borrower or admin capability"""
    pass

class ReentrancyViolation(LendingError):
    """Error for a mutating call made while another is in flight"""
    pass

class InvalidAmount(LendingError):
    """Error for amounts that are not positive or round to nothing"""
    pass

class InvalidParameter(LendingError):
    """Error for invalid rate model parameters or configuration"""
    pass

class InsufficientBalance(LendingError):
    """Error for a transfer or burn exceeding an account balance"""
    pass
