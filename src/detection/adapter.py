"""
Turns raw detector output into scene graph nodes.
"""

import time
import uuid
from typing import Any, List

from scene_graph.schema import SceneNode
from .base import BaseDetector, Detection, ModelUnavailable


def generate_node_id() -> str:
    """Unique node ID: millisecond timestamp plus a random suffix."""
    return f"node_{int(time.time() * 1000)}_{uuid.uuid4().hex[:9]}"


class DetectionAdapter:
    """
    Wraps a detector and builds one SceneNode per detection.
    
    Nodes come back without relations; run the relation engine over them
    afterwards.
    """
    
    def __init__(self, detector: BaseDetector):
        self.detector = detector
    
    def detect(self, image: Any) -> List[SceneNode]:
        """
        Detect objects in an image and convert them to scene nodes.
        
        Args:
            image: Image in any form the wrapped detector accepts
        
        Returns:
            One node per detection, in detector order
        
        Raises:
            ModelUnavailable: If the detector has not finished loading
        """
        if not self.detector.is_ready:
            raise ModelUnavailable(
                f"{self.detector.__class__.__name__} model not loaded"
            )
        
        detections = self.detector.detect(image)
        return [self.create_scene_node(detection) for detection in detections]
    
    def create_scene_node(self, detection: Detection) -> SceneNode:
        label = detection.label
        return SceneNode(
            id=generate_node_id(),
            object_class=label,
            confidence=detection.score,
            bbox=tuple(detection.bbox),
            metadata={
                "positive_prompt": f"A {label} in the scene",
                "negative_prompt": f"No {label} in the scene"
            }
        )
