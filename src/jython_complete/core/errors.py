class JythonCompleteError(Exception):
    def __init__(self, message: str, cause: Exception | None = None):
        super().__init__(message)
        self.cause = cause

    def __str__(self) -> str:
        if self.cause:
            return f"{self.args[0]} (caused by: {self.cause})"
        return str(self.args[0])


class ConfigurationError(JythonCompleteError):
    pass


class ParsingError(JythonCompleteError):
    def __init__(
        self,
        message: str,
        line: int | None = None,
        cause: Exception | None = None,
    ):
        super().__init__(message, cause)
        self.line = line


class ReflectionError(JythonCompleteError):
    pass


class HostClassNotFoundError(ReflectionError):
    def __init__(self, class_name: str, cause: Exception | None = None):
        super().__init__(f"Host class not found: {class_name}", cause)
        self.class_name = class_name


class ModuleIndexError(JythonCompleteError):
    def __init__(
        self,
        message: str,
        module_path: str | None = None,
        cause: Exception | None = None,
    ):
        super().__init__(message, cause)
        self.module_path = module_path
