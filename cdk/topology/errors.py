"""Errors raised while building the deployment plan, before any stack exists."""


class TopologyError(ValueError):
    """Base class for declaration-time validation failures."""


class PolicyValidationError(TopologyError):
    pass


class RouteConflictError(TopologyError):
    pass


class BehaviorConfigError(TopologyError):
    pass


class SettingsError(TopologyError):
    pass
