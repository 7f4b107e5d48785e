"""
Error taxonomy shared by the bill service, report export and views
"""


class TaxAdminError(Exception):
    """Base error carrying a caller-facing kind and HTTP status"""
    kind = 'internal'
    status_code = 500

    def __init__(self, message=None):
        self.message = message or self.default_message()
        super().__init__(self.message)

    def default_message(self):
        return 'An unexpected error occurred. Please try again.'

    def as_dict(self):
        return {'kind': self.kind, 'message': self.message}


class Unauthenticated(TaxAdminError):
    kind = 'unauthenticated'
    status_code = 401

    def default_message(self):
        return 'The function must be called while authenticated.'


class PermissionDenied(TaxAdminError):
    kind = 'permission-denied'
    status_code = 403

    def default_message(self):
        return 'You do not have permission to perform this action.'


class NotFound(TaxAdminError):
    kind = 'not-found'
    status_code = 404

    def default_message(self):
        return 'The requested resource was not found.'


class InvalidArgument(TaxAdminError):
    kind = 'invalid-argument'
    status_code = 400

    def default_message(self):
        return 'Please check your input and try again.'


class RateLimited(TaxAdminError):
    kind = 'resource-exhausted'
    status_code = 429

    def default_message(self):
        return 'Too many requests. Please wait before trying again.'


class InternalError(TaxAdminError):
    pass
