import pytest

from detection import BaseDetector, Detection
from scene_graph import SceneNode


class FakeDetector(BaseDetector):
    """Detector returning a fixed list of detections."""

    def __init__(self, detections=None, loaded=True):
        super().__init__({})
        self.detections = list(detections or [])
        self.calls = []
        if loaded:
            self.load_model()

    def load_model(self):
        self.model = object()

    def detect(self, image):
        self.calls.append(image)
        return list(self.detections)


def make_node(node_id, bbox, object_class="object"):
    return SceneNode(id=node_id, object_class=object_class, confidence=0.9, bbox=bbox)


@pytest.fixture
def cup_and_table():
    return [
        Detection(label="cup", score=0.9, bbox=(0, 0, 10, 10)),
        Detection(label="table", score=0.95, bbox=(0, 20, 10, 10)),
    ]
