from .image_session import ImageSession
from .statistics_service import StatisticsService
from .transform_service import TransformService

__all__ = ["ImageSession", "StatisticsService", "TransformService"]
