"""
Scene graph data structures built from object detections.

- SceneNode: one detected object instance with its bounding box
- SceneRelation: directed spatial edge owned by its originating node
- SceneGraph: addressable store of nodes plus a flat relation ledger
"""

from dataclasses import dataclass, field
from typing import List, Dict, Any, Optional, Tuple
import json


_READ_ONLY_NODE_FIELDS = ("id", "object_class", "confidence", "bbox")


@dataclass
class SceneRelation:
    """
    Directed, typed spatial edge between two nodes.
    
    Attributes:
        from_id: ID of the originating node
        to_id: ID of the target node
        relation: Relation type (e.g., "to_the_left_of", "above")
        confidence: Score in [0, 1]
    """
    from_id: str
    to_id: str
    relation: str
    confidence: float
    
    def inverted(self) -> 'SceneRelation':
        """Return the same edge seen from the target node."""
        from .relations import invert_relation_type
        return SceneRelation(
            from_id=self.to_id,
            to_id=self.from_id,
            relation=invert_relation_type(self.relation),
            confidence=self.confidence
        )
    
    def to_dict(self) -> Dict[str, Any]:
        """Convert relation to dictionary format."""
        return {
            "from": self.from_id,
            "to": self.to_id,
            "type": self.relation,
            "confidence": self.confidence
        }


@dataclass
class SceneNode:
    """
    Represents a detected object in the scene graph.
    
    Attributes:
        id: Unique identifier, stable for the node's lifetime
        object_class: Class label from the detector (e.g., "cup")
        confidence: Detector score in [0, 1]
        bbox: (x, y, width, height) in image pixel coordinates
        relations: Outgoing relations, filled by the relation engine
        metadata: Free-form annotations (prompts, codified opinion)
    
    id, object_class, confidence and bbox are fixed once the node is
    created; assigning them again raises AttributeError. ``relations`` and
    ``metadata`` stay mutable.
    """
    id: str
    object_class: str
    confidence: float
    bbox: Tuple[float, float, float, float]
    relations: List[SceneRelation] = field(default_factory=list)
    metadata: Dict[str, Any] = field(default_factory=dict)
    
    def __setattr__(self, name: str, value: Any) -> None:
        if name in _READ_ONLY_NODE_FIELDS and name in self.__dict__:
            raise AttributeError(f"SceneNode.{name} is read-only")
        super().__setattr__(name, value)
    
    @property
    def center(self) -> Tuple[float, float]:
        """Center of the bounding box."""
        x, y, width, height = self.bbox
        return x + width / 2, y + height / 2
    
    def to_dict(self) -> Dict[str, Any]:
        """Convert node to dictionary format."""
        metadata = dict(self.metadata)
        opinion = metadata.get("codified_opinion")
        if isinstance(opinion, CodifiedOpinion):
            metadata["codified_opinion"] = opinion.to_dict()
        return {
            "id": self.id,
            "type": self.object_class,
            "confidence": self.confidence,
            "bbox": list(self.bbox),
            "metadata": metadata,
            "relations": [relation.to_dict() for relation in self.relations]
        }


@dataclass
class SpatialRelation:
    """
    Entry of the scene graph's flat relation ledger.
    
    Attributes:
        source: ID of the source node
        target: ID of the target node
        relation: Relation type
        confidence: Score in [0, 1]
    """
    source: str
    target: str
    relation: str
    confidence: float
    
    @classmethod
    def from_scene_relation(cls, relation: SceneRelation) -> 'SpatialRelation':
        return cls(
            source=relation.from_id,
            target=relation.to_id,
            relation=relation.relation,
            confidence=relation.confidence
        )
    
    def to_dict(self) -> Dict[str, Any]:
        return {
            "source": self.source,
            "target": self.target,
            "relation": self.relation,
            "confidence": self.confidence
        }


@dataclass
class CodifiedOpinion:
    """
    Numeric reading of a node's prompts.
    
    Attributes:
        style: Style weights
        mood: Mood weights
        quality: Quality weights
        parameters: Named rendering parameters (e.g., {"contrast": 0.6})
    """
    style: List[float] = field(default_factory=list)
    mood: List[float] = field(default_factory=list)
    quality: List[float] = field(default_factory=list)
    parameters: Dict[str, float] = field(default_factory=dict)
    
    def to_dict(self) -> Dict[str, Any]:
        return {
            "style": list(self.style),
            "mood": list(self.mood),
            "quality": list(self.quality),
            "parameters": dict(self.parameters)
        }
    
    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'CodifiedOpinion':
        """Create opinion from dictionary."""
        return cls(
            style=[float(v) for v in data.get("style", [])],
            mood=[float(v) for v in data.get("mood", [])],
            quality=[float(v) for v in data.get("quality", [])],
            parameters={str(k): float(v) for k, v in data.get("parameters", {}).items()}
        )


class SceneGraph:
    """
    Addressable collection of scene nodes and relations.
    
    Nodes are keyed by ID. Re-adding an ID overwrites the stored node but
    keeps its original position. The relation ledger is a flat list kept
    apart from each node's own ``relations``; the two are not required to
    agree.
    
    Not safe for concurrent writers.
    """
    
    def __init__(self):
        self._nodes: Dict[str, SceneNode] = {}
        self._relations: List[SpatialRelation] = []
        self.metadata: Dict[str, Any] = {}
    
    def add_node(self, node: SceneNode) -> None:
        """Add a node, replacing any node with the same ID."""
        self._nodes[node.id] = node
    
    def add_relation(self, relation: SpatialRelation) -> None:
        """Append a relation to the ledger."""
        self._relations.append(relation)
    
    def get_nodes(self) -> List[SceneNode]:
        """All nodes in insertion order of their IDs."""
        return list(self._nodes.values())
    
    def get_node_by_id(self, node_id: str) -> Optional[SceneNode]:
        """Retrieve a node by its ID, or None."""
        return self._nodes.get(node_id)
    
    def get_relations(self) -> List[SpatialRelation]:
        """Relation ledger in insertion order."""
        return list(self._relations)
    
    def to_dict(self) -> Dict[str, Any]:
        """Convert scene graph to dictionary format."""
        return {
            "nodes": [node.to_dict() for node in self._nodes.values()],
            "relations": [relation.to_dict() for relation in self._relations],
            "metadata": self.metadata
        }
    
    def to_json(self, indent: int = 2) -> str:
        """Convert scene graph to JSON string."""
        return json.dumps(self.to_dict(), indent=indent)
    
    def __len__(self) -> int:
        return len(self._nodes)
    
    def __str__(self) -> str:
        return f"SceneGraph(nodes={len(self._nodes)}, relations={len(self._relations)})"
