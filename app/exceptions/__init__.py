"""Custom exceptions for the grocery store backend."""


class GroceryError(Exception):
    """Base exception for all application errors."""
    def __init__(self, message="An internal error occurred", status_code=500, payload=None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.payload = payload

    def to_dict(self):
        rv = dict(self.payload or ())
        rv['message'] = self.message
        rv['status'] = 'error'
        return rv


class BusinessLogicError(GroceryError):
    """Exception raised for business logic violations."""
    def __init__(self, message, status_code=400, payload=None):
        super().__init__(message, status_code, payload)


class InvalidArgumentError(BusinessLogicError):
    """Raised when caller input is rejected (empty cart, unknown status, bad field)."""
    def __init__(self, reason, payload=None):
        super().__init__(reason, status_code=400, payload=payload)
        self.reason = reason


class InsufficientStockError(BusinessLogicError):
    """Raised when an operation fails due to lack of stock."""
    def __init__(self, product_name, requested, available):
        message = (
            f"Insufficient stock for product '{product_name}'. "
            f"Requested: {requested}, Available: {available}"
        )
        payload = {
            'product_name': product_name,
            'requested': requested,
            'available': available,
        }
        super().__init__(message, status_code=400, payload=payload)
        self.product_name = product_name
        self.requested = requested
        self.available = available


class NotFoundError(GroceryError):
    """Exception raised when a resource is not found."""
    def __init__(self, entity="Resource", entity_id=None, message=None):
        if message is None:
            if entity_id is None:
                message = f"{entity} not found"
            else:
                message = f"{entity} not found with ID: {entity_id}"
        super().__init__(message, 404, {'entity': entity})
        self.entity = entity
        self.entity_id = entity_id


class InvalidStateError(GroceryError):
    """Raised when a state transition is not allowed (e.g. cancelling a delivered order)."""
    def __init__(self, reason):
        super().__init__(reason, 409)
        self.reason = reason


class ConflictError(GroceryError):
    """Raised when a unique resource already exists."""
    def __init__(self, message):
        super().__init__(message, 409)


class AuthenticationError(GroceryError):
    """Raised when a request carries no valid credentials."""
    def __init__(self, message="Authentication required"):
        super().__init__(message, 401)


class InvalidCredentialsError(AuthenticationError):
    """Raised on login with an unknown email or a wrong password."""
    def __init__(self):
        super().__init__("Invalid email or password")


class ForbiddenError(GroceryError):
    """Raised when a user lacks permission for an action."""
    def __init__(self, message="Access denied"):
        super().__init__(message, 403)
