class SimError(Exception): ...


class InputError(SimError): ...


class PlanError(SimError): ...


class CatalogError(PlanError): ...


class ConfigError(SimError): ...


def require(condition: bool, message: str, exc: type[SimError] = SimError):
    """Raise the given exception if condition is False."""
    if not condition:
        raise exc(message)
