"""Exception hierarchy for the meter reading pipeline."""


class MeterReadingError(Exception):
    """Base meter reading exception."""


class ConfigurationError(MeterReadingError, ValueError):
    """Raised when a DetectionConfig is internally inconsistent."""


class ShapeMismatchError(MeterReadingError, ValueError):
    """Raised when a raw output tensor does not match the configured shape."""


class InferenceError(MeterReadingError, RuntimeError):
    """Raised when the injected inference call fails."""


class InferenceUnavailableError(InferenceError):
    """Raised when no model is loaded or the model cannot be loaded."""


class DegenerateGeometryError(MeterReadingError, ValueError):
    """Raised when a box collapses to zero width or height.

    Callers recover locally by dropping the box; it never aborts a pipeline run.
    """
