import pytest

from detection import DetectionAdapter, ModelUnavailable
from scene_graph import CodifiedOpinion, SceneGraphGenerator, SpatialRelationEngine
from conftest import FakeDetector


class FakeOpinionClient:
    def __init__(self):
        self.calls = []

    def reinterpret_prompts(self, positive_prompt, negative_prompt, opinion_prompt):
        self.calls.append((positive_prompt, negative_prompt, opinion_prompt))
        return CodifiedOpinion(style=[1.0], mood=[0.0], quality=[0.5], parameters={"contrast": 0.6})


def make_generator(detections, **kwargs):
    return SceneGraphGenerator(DetectionAdapter(FakeDetector(detections)), verbose=False, **kwargs)


def test_cup_and_table_scenario(cup_and_table):
    graph = make_generator(cup_and_table).generate("image.jpg")

    cup, table = graph.get_nodes()
    assert (cup.object_class, table.object_class) == ("cup", "table")
    assert [r.to_dict() for r in cup.relations] == [
        {"from": cup.id, "to": table.id, "type": "below", "confidence": 0.8}
    ]
    assert [r.to_dict() for r in table.relations] == [
        {"from": table.id, "to": cup.id, "type": "above", "confidence": 0.8}
    ]


def test_ledger_mirrors_node_relations(cup_and_table):
    graph = make_generator(cup_and_table).generate("image.jpg")
    cup, table = graph.get_nodes()

    assert [(r.source, r.target, r.relation) for r in graph.get_relations()] == [
        (cup.id, table.id, "below"),
        (table.id, cup.id, "above"),
    ]
    assert graph.get_node_by_id(table.id) is table
    assert graph.metadata["image_path"] == "image.jpg"
    assert graph.metadata["model"] == "FakeDetector"


def test_custom_relation_confidence(cup_and_table):
    generator = make_generator(cup_and_table, relation_engine=SpatialRelationEngine(confidence=0.3))
    graph = generator.generate("image.jpg")
    assert {r.confidence for r in graph.get_relations()} == {0.3}


def test_unloaded_detector_fails_without_graph(cup_and_table):
    detector = FakeDetector(cup_and_table, loaded=False)
    generator = SceneGraphGenerator(DetectionAdapter(detector), verbose=False)
    with pytest.raises(ModelUnavailable):
        generator.generate("image.jpg")


def test_opinion_annotation(cup_and_table):
    opinion_client = FakeOpinionClient()
    graph = make_generator(cup_and_table, opinion_client=opinion_client).generate(
        "image.jpg", opinion_prompt="warm light"
    )

    assert opinion_client.calls == [
        ("A cup in the scene", "No cup in the scene", "warm light"),
        ("A table in the scene", "No table in the scene", "warm light"),
    ]
    for node in graph.get_nodes():
        assert node.metadata["opinion_prompt"] == "warm light"
        assert node.metadata["codified_opinion"].parameters == {"contrast": 0.6}


def test_opinion_skipped_without_prompt(cup_and_table):
    opinion_client = FakeOpinionClient()
    graph = make_generator(cup_and_table, opinion_client=opinion_client).generate("image.jpg")
    assert opinion_client.calls == []
    assert "opinion_prompt" not in graph.get_nodes()[0].metadata


def test_each_analysis_is_independent(cup_and_table):
    generator = make_generator(cup_and_table)
    first = generator.generate("image.jpg")
    second = generator.generate("image.jpg")

    assert len(first.get_relations()) == len(second.get_relations()) == 2
    assert {n.id for n in first.get_nodes()}.isdisjoint(n.id for n in second.get_nodes())


def test_verbose_output(cup_and_table, capsys):
    generator = SceneGraphGenerator(DetectionAdapter(FakeDetector(cup_and_table)), verbose=True)
    generator.generate("image.jpg")
    out = capsys.readouterr().out
    assert "Detecting objects with FakeDetector" in out
    assert "Nodes: 2" in out


def test_from_config_requires_api_key_when_vlm_enabled(monkeypatch, cup_and_table):
    import detection

    class LoadedDetector(FakeDetector):
        def __init__(self, config):
            super().__init__(cup_and_table, loaded=False)
            self.config = config

    monkeypatch.setattr(detection, "Detectron2Detector", LoadedDetector)

    generator = SceneGraphGenerator.from_config({
        "verbose": False,
        "detection": {"use_cuda": False},
        "relations": {"confidence": 0.7},
    })
    assert generator.adapter.detector.is_ready
    assert generator.adapter.detector.config["use_cuda"] is False
    assert generator.relation_engine.confidence == 0.7
    assert generator.opinion_client is None

    with pytest.raises(ValueError):
        SceneGraphGenerator.from_config({"verbose": False, "vlm": {"enabled": True}})
