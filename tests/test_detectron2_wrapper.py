from types import SimpleNamespace

import numpy as np
import pytest
from PIL import Image

from detection import Detectron2Detector


class FakeTensor:
    def __init__(self, values):
        self.values = np.asarray(values)

    def numpy(self):
        return self.values


class FakeInstances:
    def __init__(self, boxes, scores, classes):
        self.pred_boxes = SimpleNamespace(tensor=FakeTensor(boxes))
        self.scores = FakeTensor(scores)
        self.pred_classes = FakeTensor(classes)

    def to(self, device):
        return self


class FakePredictor:
    def __init__(self, instances):
        self.instances = instances
        self.frames = []

    def __call__(self, frame):
        self.frames.append(frame)
        return {"instances": self.instances}


@pytest.fixture
def detector():
    detector = Detectron2Detector({"score_threshold": 0.4})
    detector.class_names = ["person", "cup"]
    detector.model = FakePredictor(FakeInstances(
        boxes=[[10, 20, 30, 60], [0, 0, 5, 5]],
        scores=[0.9, 0.6],
        classes=[1, 7],
    ))
    return detector


def test_defaults():
    detector = Detectron2Detector({})
    assert detector.config_file == "COCO-Detection/faster_rcnn_R_50_FPN_3x.yaml"
    assert detector.weights is None
    assert detector.score_threshold == 0.5
    assert not detector.is_ready


def test_detect_converts_boxes_to_xywh(detector):
    detections = detector.detect(np.zeros((8, 8, 3), dtype=np.uint8))

    assert [d.label for d in detections] == ["cup", "7"]
    assert detections[0].bbox == (10.0, 20.0, 20.0, 40.0)
    assert detections[0].score == pytest.approx(0.9)
    assert isinstance(detections[0].score, float)


def test_pil_image_is_converted_to_bgr(detector):
    image = Image.new("RGB", (4, 3), color=(255, 0, 0))
    detector.detect(image)

    frame = detector.model.frames[0]
    assert frame.shape == (3, 4, 3)
    assert tuple(frame[0, 0]) == (0, 0, 255)


def test_image_path_is_loaded(detector, tmp_path):
    path = tmp_path / "scene.png"
    Image.new("RGB", (2, 2), color=(0, 255, 0)).save(path)
    detector.detect(str(path))
    assert tuple(detector.model.frames[0][1, 1]) == (0, 255, 0)


def test_missing_image_path(detector, tmp_path):
    with pytest.raises(FileNotFoundError):
        detector.detect(str(tmp_path / "missing.jpg"))


def test_unsupported_input(detector):
    with pytest.raises(TypeError):
        detector.detect(42)
