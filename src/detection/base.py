"""
Base interface for object detection models.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Dict, List, Tuple
from pathlib import Path


SUPPORTED_IMAGE_SUFFIXES = ['.jpg', '.jpeg', '.png', '.bmp']


class ModelUnavailable(RuntimeError):
    """Raised when detection is requested before the model has loaded."""


@dataclass
class Detection:
    """
    Raw detector output for a single object.
    
    Attributes:
        label: Class label (e.g., "cup")
        score: Confidence in [0, 1]
        bbox: (x, y, width, height) in image pixel coordinates
    """
    label: str
    score: float
    bbox: Tuple[float, float, float, float]


class BaseDetector(ABC):
    """
    Abstract base class for object detection models.
    
    All detector wrappers should inherit from this. A detector is ready once
    ``load_model`` has set ``self.model``.
    """
    
    def __init__(self, config: Dict[str, Any]):
        """
        Initialize the detector.
        
        Args:
            config: Configuration dictionary containing model paths and parameters
        """
        self.config = config
        self.model = None
    
    @property
    def is_ready(self) -> bool:
        """True once the model has finished loading."""
        return self.model is not None
    
    @abstractmethod
    def load_model(self) -> None:
        """Load the detection model and weights."""
        pass
    
    @abstractmethod
    def detect(self, image: Any) -> List[Detection]:
        """
        Run object detection on an image.
        
        Args:
            image: Image accepted by the concrete detector (path, array, ...)
        
        Returns:
            List of detections with boxes as (x, y, width, height)
        """
        pass
    
    def validate_image(self, image_path: str) -> None:
        """
        Validate that the image exists and is readable.
        
        Args:
            image_path: Path to check
        
        Raises:
            FileNotFoundError: If image doesn't exist
            ValueError: If the file suffix is not a supported image format
        """
        path = Path(image_path)
        if not path.exists():
            raise FileNotFoundError(f"Image not found: {image_path}")
        if path.suffix.lower() not in SUPPORTED_IMAGE_SUFFIXES:
            raise ValueError(f"Unsupported image format: {path.suffix}")
