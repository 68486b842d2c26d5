"""
Spatial relation inference between detected objects.

Relations come from bounding-box centers only: whichever axis carries the
larger displacement decides between a horizontal and a vertical relation.
Image coordinates grow downwards, so a larger y means lower in the image.
"""

from typing import List, Dict

from .schema import SceneNode, SceneRelation


TO_THE_RIGHT_OF = "to_the_right_of"
TO_THE_LEFT_OF = "to_the_left_of"
ABOVE = "above"
BELOW = "below"

RELATION_TYPES = (TO_THE_RIGHT_OF, TO_THE_LEFT_OF, ABOVE, BELOW)

INVERSE_RELATIONS: Dict[str, str] = {
    TO_THE_RIGHT_OF: TO_THE_LEFT_OF,
    TO_THE_LEFT_OF: TO_THE_RIGHT_OF,
    ABOVE: BELOW,
    BELOW: ABOVE,
}

# Placeholder score shared by every heuristic relation.
DEFAULT_RELATION_CONFIDENCE = 0.8


def invert_relation_type(relation: str) -> str:
    """
    Return the relation seen from the other endpoint.
    
    Unknown relation types are returned unchanged.
    """
    return INVERSE_RELATIONS.get(relation, relation)


class SpatialRelationEngine:
    """
    Computes pairwise directional relations over a fixed set of nodes.
    
    The engine keeps no state between calls. Running it twice over the same
    nodes appends every relation a second time, so callers that want to
    recompute must clear ``node.relations`` first.
    """
    
    def __init__(self, confidence: float = DEFAULT_RELATION_CONFIDENCE):
        """
        Args:
            confidence: Score assigned to every relation, regardless of
                geometry or direction
        """
        self.confidence = confidence
    
    def infer_relations(self, nodes: List[SceneNode]) -> List[SceneNode]:
        """
        Attach a relation and its inverse for every unordered pair of nodes.
        
        For a pair (i, j) with i < j, node i receives the relation i -> j
        and node j receives the inverted relation j -> i.
        
        Args:
            nodes: Nodes to relate; mutated in place
        
        Returns:
            The same list of nodes
        """
        for i in range(len(nodes)):
            for j in range(i + 1, len(nodes)):
                relation = self.relation_between(nodes[i], nodes[j])
                nodes[i].relations.append(relation)
                nodes[j].relations.append(relation.inverted())
        return nodes
    
    def relation_between(self, node1: SceneNode, node2: SceneNode) -> SceneRelation:
        """
        Relation from node1 to node2, describing where node2 lies.
        
        Bounding boxes are used as given; negative sizes or non-finite
        coordinates still produce a relation.
        """
        x1, y1 = node1.center
        x2, y2 = node2.center
        dx = x2 - x1
        dy = y2 - y1
        
        # Ties fall through to the vertical branch
        if abs(dx) > abs(dy):
            relation = TO_THE_RIGHT_OF if dx > 0 else TO_THE_LEFT_OF
        else:
            relation = BELOW if dy > 0 else ABOVE
        
        return SceneRelation(
            from_id=node1.id,
            to_id=node2.id,
            relation=relation,
            confidence=self.confidence
        )
