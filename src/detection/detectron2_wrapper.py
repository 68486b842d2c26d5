"""
Wrapper for Detectron2 COCO object detection models.
"""

from pathlib import Path
from typing import Any, Dict, List
import numpy as np
from PIL import Image

from .base import BaseDetector, Detection


DEFAULT_CONFIG_FILE = "COCO-Detection/faster_rcnn_R_50_FPN_3x.yaml"


class Detectron2Detector(BaseDetector):
    """
    Wrapper for Detectron2 instance detectors (Faster R-CNN, RetinaNet, ...).
    
    ``config_file`` may be a local YAML path or a model zoo name such as
    "COCO-Detection/faster_rcnn_R_50_FPN_3x.yaml". When ``weights`` is not
    given, the model zoo checkpoint for that name is used.
    """
    
    def __init__(self, config: Dict[str, Any]):
        """
        Initialize Detectron2 detector.
        
        Args:
            config: Configuration dict with keys:
                - config_file: Model config path or model zoo name
                - weights: Path or URL to model weights (optional)
                - use_cuda: Run on GPU (default: True)
                - score_threshold: Minimum detection score (default: 0.5)
        """
        super().__init__(config)
        self.config_file = config.get('config_file', DEFAULT_CONFIG_FILE)
        self.weights = config.get('weights')
        self.score_threshold = float(config.get('score_threshold', 0.5))
        self.class_names: List[str] = []
    
    def load_model(self) -> None:
        """
        Load the detection model using Detectron2's DefaultPredictor.
        """
        try:
            from detectron2 import model_zoo
            from detectron2.config import get_cfg
            from detectron2.data import MetadataCatalog
            from detectron2.engine import DefaultPredictor
        except ImportError as e:
            raise ImportError(
                f"Failed to import Detectron2. "
                f"Make sure detectron2 is properly installed.\n"
                f"Error: {str(e)}"
            ) from e
        
        cfg = get_cfg()
        from_zoo = not Path(self.config_file).exists()
        if from_zoo:
            cfg.merge_from_file(model_zoo.get_config_file(self.config_file))
        else:
            cfg.merge_from_file(self.config_file)
        
        if self.weights:
            cfg.MODEL.WEIGHTS = self.weights
        elif from_zoo:
            cfg.MODEL.WEIGHTS = model_zoo.get_checkpoint_url(self.config_file)
        
        cfg.MODEL.ROI_HEADS.SCORE_THRESH_TEST = self.score_threshold
        cfg.MODEL.RETINANET.SCORE_THRESH_TEST = self.score_threshold
        cfg.MODEL.DEVICE = 'cuda' if self.config.get('use_cuda', True) else 'cpu'
        
        metadata = MetadataCatalog.get(cfg.DATASETS.TEST[0])
        self.class_names = list(metadata.get("thing_classes", []))
        self.cfg = cfg
        self.model = DefaultPredictor(cfg)
        
        if self.config.get('verbose', False):
            print(f"✓ Detectron2 model loaded: {self.config_file}")
    
    def detect(self, image: Any) -> List[Detection]:
        """
        Run object detection using Detectron2.
        
        Args:
            image: Image path, BGR numpy array, or PIL image
        
        Returns:
            Detections with boxes as (x, y, width, height)
        """
        frame = self._to_bgr_array(image)
        outputs = self.model(frame)
        
        instances = outputs["instances"].to("cpu")
        boxes = instances.pred_boxes.tensor.numpy()
        scores = instances.scores.numpy()
        classes = instances.pred_classes.numpy()
        
        detections = []
        for (x1, y1, x2, y2), score, class_id in zip(boxes, scores, classes):
            detections.append(Detection(
                label=self._class_name(int(class_id)),
                score=float(score),
                bbox=(float(x1), float(y1), float(x2 - x1), float(y2 - y1))
            ))
        return detections
    
    def _class_name(self, class_id: int) -> str:
        if 0 <= class_id < len(self.class_names):
            return self.class_names[class_id]
        return str(class_id)
    
    def _to_bgr_array(self, image: Any) -> np.ndarray:
        """Convert a supported image input to the BGR array Detectron2 expects."""
        if isinstance(image, (str, Path)):
            self.validate_image(str(image))
            with Image.open(image) as pil_image:
                rgb = np.asarray(pil_image.convert("RGB"))
            return np.ascontiguousarray(rgb[:, :, ::-1])
        if isinstance(image, Image.Image):
            rgb = np.asarray(image.convert("RGB"))
            return np.ascontiguousarray(rgb[:, :, ::-1])
        if isinstance(image, np.ndarray):
            return image
        raise TypeError(f"Unsupported image input: {type(image).__name__}")
