# core/errors.py


class WearMonitorError(Exception):
    """Base class for wear monitor errors."""


class InvalidMeasurement(WearMonitorError, ValueError):
    def __init__(self, point_id, message: str):
        self.point_id = point_id
        super().__init__(f"point {point_id}: {message}")


class EmptySessionError(WearMonitorError, ValueError):
    pass


class FormulaConfigError(WearMonitorError, KeyError):
    def __init__(self, extruder_type, message: str):
        self.extruder_type = extruder_type
        self.message = message
        super().__init__(f"{extruder_type}: {message}")

    def __str__(self):
        # KeyError quotes its argument otherwise
        return f"{self.extruder_type}: {self.message}"
