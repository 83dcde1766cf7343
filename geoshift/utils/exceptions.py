class GeoshiftException(Exception):
    """
    Base class for all errors raised by geoshift.
    """


class RegistryException(GeoshiftException):
    """
    An error raised by a CRS registry.
    """


class UnregisteredCRSError(RegistryException):
    """
    A CRS code was used that has not been registered.
    """

    def __init__(self, code: str):
        super().__init__(f"CRS {code!r} is not registered")
        self.code = code


class NoTransformPathError(RegistryException):
    """
    Both codes are registered but no direct or hub edge connects them.
    """

    def __init__(self, source: str, target: str):
        super().__init__(f"no transform path from {source!r} to {target!r}")
        self.source = source
        self.target = target


class DuplicateCRSError(RegistryException):
    """
    A CRS with the same code was already registered.
    """


class RegistryFrozenError(RegistryException):
    """
    The registry was frozen and can no longer be modified.
    """
