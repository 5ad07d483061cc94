class AppException(Exception):
    """应用程序异常基类"""

    def __init__(self, message: str, code: str = "APP_ERROR", status_code: int = 400):
        self.message = message
        self.code = code
        self.status_code = status_code
        super().__init__(self.message)


class NotFoundError(AppException):
    """资源不存在错误"""

    def __init__(self, message: str = "Resource not found"):
        super().__init__(message, "NOT_FOUND", 404)


class ValidationError(AppException):
    """数据验证错误"""

    def __init__(self, message: str = "Validation failed"):
        super().__init__(message, "VALIDATION_ERROR", 400)


class InfrastructureError(AppException):
    """存储或外部服务不可用"""

    def __init__(self, message: str = "服务器错误，请稍后再试"):
        super().__init__(message, "INFRASTRUCTURE_ERROR", 500)
