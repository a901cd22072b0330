from .gateway import StorageGateway

__all__ = ["StorageGateway"]
