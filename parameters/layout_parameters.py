# layout_parameters.py

import math

from core.exceptions import ConfigurationError

DISTANCE_METRICS = ("euclidean", "manhattan")
UPDATE_MODES = ("in_place", "snapshot")

_POSITIVE_KEYS = (
    "desired_edge_length",
    "max_temperature",
    "layout_extent",
    "oscillation_sensitivity",
)


class LayoutParameters:
    def __init__(self, initial_params=None):
        """
        all parameters are defined with underscore, _, instead of spaces
        """
        self._params = {
            # Mean vertex temperature at which a run counts as converged.
            "desired_temperature": 3.0,
            # Ceiling for every vertex temperature; also the starting value.
            "max_temperature": 256.0,
            "desired_edge_length": 128.0,
            "gravitational_constant": 1.0 / 32.0,
            "oscillation_opening_angle": math.pi / 2,
            "rotation_opening_angle": math.pi,
            "oscillation_sensitivity": 1.1,
            # Distance used by both the repulsion and attraction terms:
            #   "euclidean" – sqrt(dx² + dy²)
            #   "manhattan" – |dx| + |dy|
            "distance_metric": "euclidean",
            # Rounds between progress callbacks. The final round always
            # triggers one regardless of this value.
            "update_frequency": 9999,
            # Half-width of the uniform random disturbance added per axis.
            "disturbance": 20.0,
            # Side of the square (centered at the origin) used for the
            # initial random placement.
            "layout_extent": 2048.0,
            # How vertices see each other within a round:
            #   "in_place" – positions move as soon as a vertex is processed,
            #                later vertices see the moved ones.
            #   "snapshot" – all impulses come from the positions at the
            #                start of the round; can be spread over workers.
            "update_mode": "in_place",
            "workers": 1,
            "seed": None,
        }
        if initial_params:
            self.update(initial_params)

    def __getattr__(self, name):
        """Attribute access for known parameter keys.

        ``params.desired_edge_length`` and ``params.get("desired_edge_length")``
        read the same storage.
        """
        params = self.__dict__.get("_params")
        if params is not None and name in params:
            return params[name]
        raise AttributeError(
            f"{type(self).__name__!s} object has no attribute {name!r}"
        )

    def __setattr__(self, name, value):
        if name == "_params":
            object.__setattr__(self, name, value)
            return
        params = self.__dict__.get("_params")
        if params is not None and name in params:
            params[name] = value
            return
        object.__setattr__(self, name, value)

    def get(self, key, default=None):
        """Retrieve a parameter value, or return a default if not found."""
        return self._params.get(key, default)

    def set(self, key, value):
        """Set or update a parameter."""
        self._params[key] = value

    def update(self, params):
        """Update multiple parameters at once."""
        self._params.update(params)

    def copy(self):
        return LayoutParameters(dict(self._params))

    def validate(self):
        """Raise :class:`ConfigurationError` for values the engine cannot use."""
        metric = self._params["distance_metric"]
        if metric not in DISTANCE_METRICS:
            raise ConfigurationError(
                "distance_metric",
                metric,
                f"Unknown distance metric {metric!r}; expected one of {DISTANCE_METRICS}.",
            )
        mode = self._params["update_mode"]
        if mode not in UPDATE_MODES:
            raise ConfigurationError(
                "update_mode",
                mode,
                f"Unknown update mode {mode!r}; expected one of {UPDATE_MODES}.",
            )
        for key in ("update_frequency", "workers"):
            value = self._params[key]
            if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
                raise ConfigurationError(
                    key, value, f"'{key}' must be a positive integer, got {value!r}."
                )
        seed = self._params["seed"]
        if seed is not None and (
            isinstance(seed, bool) or not isinstance(seed, int) or seed < 0
        ):
            raise ConfigurationError(
                "seed", seed, f"'seed' must be a non-negative integer, got {seed!r}."
            )
        for key in _POSITIVE_KEYS:
            value = self._params[key]
            if not isinstance(value, (int, float)) or not value > 0:
                raise ConfigurationError(key, value)
        for key in ("desired_temperature", "gravitational_constant", "disturbance"):
            value = self._params[key]
            if not isinstance(value, (int, float)) or value < 0:
                raise ConfigurationError(key, value)
        return self

    def __contains__(self, key):
        return key in self._params

    def __repr__(self):
        return f"LayoutParameters({self._params})"

    def to_dict(self):
        """Convert the parameters to a dictionary for serialization."""
        return self._params
