class PanelError(Exception):

    pass


class ConfigurationError(PanelError):

    pass


class StorageError(PanelError):

    pass


class ValidationError(PanelError):

    pass


class InvalidValueError(ValidationError):

    def __init__(self, value: object) -> None:
        self.value = value
        super().__init__(f"Expected a numeric value, got {value!r}")


class WeatherServiceError(PanelError):

    pass


class WeatherDataError(WeatherServiceError):

    pass


class GeocodeServiceError(PanelError):

    pass
