"""
Main scene graph generator that orchestrates the full pipeline.
"""

from typing import Optional, Dict, Any, List
import time

from .schema import SceneGraph, SceneNode, SpatialRelation
from .relations import SpatialRelationEngine, DEFAULT_RELATION_CONFIDENCE


class SceneGraphGenerator:
    """
    Main orchestrator for scene graph generation.
    
    Pipeline:
    1. Run the object detector and build scene nodes
    2. Infer pairwise spatial relations between nodes
    3. Optionally codify an opinion prompt for every node
    4. Collect nodes and relations into a SceneGraph
    """
    
    def __init__(
        self,
        adapter,
        relation_engine: Optional[SpatialRelationEngine] = None,
        opinion_client=None,
        verbose: bool = True
    ):
        """
        Initialize the scene graph generator.
        
        Args:
            adapter: DetectionAdapter wrapping a loaded detector
            relation_engine: Spatial relation engine (default confidence 0.8)
            opinion_client: Optional client with ``reinterpret_prompts``
            verbose: Print progress messages
        """
        self.adapter = adapter
        self.relation_engine = relation_engine or SpatialRelationEngine()
        self.opinion_client = opinion_client
        self.verbose = verbose
    
    def generate(self, image: Any, opinion_prompt: Optional[str] = None) -> SceneGraph:
        """
        Generate scene graph from an image.
        
        Args:
            image: Image accepted by the detector (path, array, ...)
            opinion_prompt: Optional opinion to codify for every node
        
        Returns:
            SceneGraph object
        
        Raises:
            ModelUnavailable: If the detector has not finished loading
        """
        if self.verbose:
            print(f"\n{'='*60}")
            print(f"Generating Scene Graph")
            print(f"{'='*60}")
            if isinstance(image, str):
                print(f"Image: {image}")
        
        start_time = time.time()
        
        # Step 1: Detection must finish before any relation is computed
        if self.verbose:
            detector_name = self.adapter.detector.__class__.__name__
            print(f"\n[1/3] Detecting objects with {detector_name}...")
        
        nodes = self.adapter.detect(image)
        
        # Step 2: Spatial relations
        if self.verbose:
            print(f"\n[2/3] Inferring spatial relations for {len(nodes)} objects...")
        
        self.relation_engine.infer_relations(nodes)
        
        if opinion_prompt and self.opinion_client is not None:
            if self.verbose:
                print(f"      Codifying opinion: {opinion_prompt}")
            self.annotate_opinions(nodes, opinion_prompt)
        
        # Step 3: Collect
        if self.verbose:
            print(f"\n[3/3] Structuring scene graph...")
        
        scene_graph = self._build_scene_graph(nodes, image)
        
        elapsed = time.time() - start_time
        
        if self.verbose:
            print(f"\n{'='*60}")
            print(f"✓ Scene Graph Generation Complete")
            print(f"  Time: {elapsed:.2f}s")
            print(f"  Nodes: {len(scene_graph.get_nodes())}")
            print(f"  Relations: {len(scene_graph.get_relations())}")
            print(f"{'='*60}\n")
        
        return scene_graph
    
    def annotate_opinions(self, nodes: List[SceneNode], opinion_prompt: str) -> None:
        """Attach the opinion prompt and its codified form to each node's metadata."""
        for node in nodes:
            node.metadata["opinion_prompt"] = opinion_prompt
            node.metadata["codified_opinion"] = self.opinion_client.reinterpret_prompts(
                node.metadata.get("positive_prompt", ""),
                node.metadata.get("negative_prompt", ""),
                opinion_prompt
            )
    
    def _build_scene_graph(self, nodes: List[SceneNode], image: Any) -> SceneGraph:
        scene_graph = SceneGraph()
        scene_graph.metadata = {
            "model": self.adapter.detector.__class__.__name__,
            "relation_confidence": self.relation_engine.confidence
        }
        if isinstance(image, str):
            scene_graph.metadata["image_path"] = image
        
        for node in nodes:
            scene_graph.add_node(node)
        
        # The ledger duplicates the per-node relations. A single adjacency
        # map keyed by node ID could serve both views.
        for node in nodes:
            for relation in node.relations:
                scene_graph.add_relation(SpatialRelation.from_scene_relation(relation))
        
        return scene_graph
    
    @classmethod
    def from_config(cls, config: Dict[str, Any]) -> 'SceneGraphGenerator':
        """
        Create SceneGraphGenerator from unified configuration.
        
        Loads the detector before returning, so the generator is ready to use.
        
        Args:
            config: Configuration dictionary
        
        Returns:
            Initialized SceneGraphGenerator
        """
        from detection import DetectionAdapter, Detectron2Detector
        
        verbose = config.get('verbose', True)
        
        det_config = dict(config.get('detection', {}))
        det_config.setdefault('verbose', verbose)
        detector = Detectron2Detector(det_config)
        detector.load_model()
        
        rel_config = config.get('relations', {})
        relation_engine = SpatialRelationEngine(
            confidence=rel_config.get('confidence', DEFAULT_RELATION_CONFIDENCE)
        )
        
        opinion_client = None
        vlm_config = config.get('vlm', {})
        if vlm_config.get('enabled', False):
            from vlm import GPT4oClient
            
            api_key = vlm_config.get('api_key')
            if not api_key:
                raise ValueError("vlm.enabled is set but no API key is configured")
            opinion_client = GPT4oClient(
                api_key=api_key,
                model=vlm_config.get('model', 'gpt-4o'),
                max_tokens=vlm_config.get('max_tokens', 500)
            )
        
        return cls(
            adapter=DetectionAdapter(detector),
            relation_engine=relation_engine,
            opinion_client=opinion_client,
            verbose=verbose
        )
