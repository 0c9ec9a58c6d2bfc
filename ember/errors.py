"""Exception hierarchy for the Ember runtime.

Every failure a script can observe is an EmberError carrying a message.
Native code raises these; the evaluator lets the debug controller intercept
them before they propagate to the host.
"""


class EmberError(Exception):
    """ Base class for all Ember errors"""

    def __init__(self, message: str = ""):
        super().__init__(message)
        self.message = message
        # Set once the debug controller has had its chance at this failure
        self.intercepted = False

    def __str__(self) -> str:
        return self.message


class EmberTypeError(EmberError):
    """ Raised when an operation receives a value of the wrong kind"""


class EmberArityError(EmberError):
    """ Raised when the number of arguments passed to a function is incorrect"""


class EmberUnboundSymbol(EmberError):
    """ Raised when a symbol is looked up or assigned before it is bound"""


class EmberIndexError(EmberError):
    """ Raised when a vector index is out of bounds"""


class EmberDomainError(EmberError):
    """ Raised when an argument has the right kind but an unusable value"""


class EmberDivideByZero(EmberDomainError):
    """ Raised on division or remainder by zero"""


class EmberSyntaxError(EmberError):
    """ Raised when the reader finds malformed source text"""


class EmberRecursionError(EmberError):
    """ Raised when nested evaluation exhausts the host's stack depth"""
