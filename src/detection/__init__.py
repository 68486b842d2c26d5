"""Object detection package."""

from .base import BaseDetector, Detection, ModelUnavailable
from .adapter import DetectionAdapter, generate_node_id
from .detectron2_wrapper import Detectron2Detector

__all__ = [
    'BaseDetector', 'Detection', 'ModelUnavailable',
    'DetectionAdapter', 'generate_node_id', 'Detectron2Detector'
]
