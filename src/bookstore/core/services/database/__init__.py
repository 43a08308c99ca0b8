from .db_manage import DbManageService
from .db_session import DbSessionService
from .storage_gateway import StorageGateway

__all__ = ["DbManageService", "DbSessionService", "StorageGateway"]
