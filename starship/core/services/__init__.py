from starship.core.services.container import ServiceContainer
from starship.core.services.error_response_service import ErrorResponseService

__all__ = ["ServiceContainer", "ErrorResponseService"]
