from .logger import logger


class BaseCustomException(Exception):
    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ConfigError(BaseCustomException):
    def __init__(self, reason: str):
        super().__init__(f"Invalid toolchain config: {reason}")


class CredentialsError(BaseCustomException):
    def __init__(self, reason: str):
        super().__init__(f"Missing signing credentials: {reason}")


class PluginError(BaseCustomException):
    def __init__(self, reason: str):
        super().__init__(f"Failed to register plugin: {reason}")


class NodeError(BaseCustomException):
    def __init__(self, reason: str):
        super().__init__(f"Failed to query network endpoint: {reason}")


class CompilerError(BaseCustomException):
    def __init__(self, reason: str):
        super().__init__(f"Failed to resolve compiler: {reason}")


class ExceptionHandler:
    raise_exception = True

    @staticmethod
    def initialize(raise_exception: bool) -> None:
        ExceptionHandler.raise_exception = raise_exception

    @staticmethod
    def raise_exception_or_log(custom_exception: BaseCustomException) -> None:
        if ExceptionHandler.raise_exception:
            raise custom_exception
        logger.error(str(custom_exception))
