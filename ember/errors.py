from ember.types import Error


class EmberSyntaxError(Exception):
    """Base class for errors detected before evaluation starts."""


class LexError(EmberSyntaxError):
    pass


class ParseError(EmberSyntaxError):
    pass


class EmberError(Exception):
    """Exception type used to propagate Ember runtime failures.

    Each failure carries an :class:`~ember.types.Error` value; the
    interpreter converts it back into that value at the top-level
    statement boundary.
    """
    error_name = 'RuntimeError'

    def __init__(self, message: str):
        self.err = Error(self.error_name, message)
        super().__init__(f"{self.err.name}: {self.err.message}")


class TypeMismatch(EmberError):
    error_name = 'TypeError'


class NotAnInstance(EmberError):
    error_name = 'TypeError'


class UnboundIdentifier(EmberError):
    error_name = 'NameError'


class DivideByZero(EmberError):
    error_name = 'ZeroDivisionError'


class IntegerOverflow(EmberError):
    error_name = 'OverflowError'


class ArityMismatch(EmberError):
    error_name = 'ArityError'


class NotCallable(EmberError):
    error_name = 'CallError'


class PropertyNotFound(EmberError):
    error_name = 'PropertyError'


class ThisOutsideMethod(EmberError):
    error_name = 'ThisError'
