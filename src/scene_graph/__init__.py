"""Scene graph generation package."""

from .schema import SceneNode, SceneRelation, SpatialRelation, CodifiedOpinion, SceneGraph
from .relations import SpatialRelationEngine, invert_relation_type
from .generator import SceneGraphGenerator

__all__ = [
    'SceneNode', 'SceneRelation', 'SpatialRelation', 'CodifiedOpinion', 'SceneGraph',
    'SpatialRelationEngine', 'invert_relation_type', 'SceneGraphGenerator'
]
