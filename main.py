#!/usr/bin/env python3
"""
Main CLI for scene graph generation with spatial relations.

Usage:
    python main.py --image path/to/image.jpg
    python main.py --image path/to/image.jpg --opinion "warm and cozy"
    python main.py --image path/to/image.jpg --config configs/my_config.yaml
"""

import argparse
from contextlib import redirect_stdout
import sys
from pathlib import Path
import yaml
import os

sys.path.insert(0, str(Path(__file__).parent / 'src'))

from scene_graph import SceneGraphGenerator


def load_config(config_path: str) -> dict:
    """Load configuration from YAML file."""
    with open(config_path, 'r') as f:
        config = yaml.safe_load(f) or {}
    
    if 'OPENAI_API_KEY' in os.environ:
        if 'vlm' not in config:
            config['vlm'] = {}
        config['vlm']['api_key'] = os.environ['OPENAI_API_KEY']
    
    return config


def main(argv=None):
    parser = argparse.ArgumentParser(
        description='Detect objects in an image and infer spatial relations between them',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Basic usage
  python main.py --image data/input/photo.jpg
  
  # Codify an opinion prompt for every detected object (needs vlm.enabled)
  python main.py --image photo.jpg --opinion "soft, muted colors"
  
  # Use different config
  python main.py --image photo.jpg --config configs/my_config.yaml
        """
    )
    
    parser.add_argument(
        '--image', '-i',
        type=str,
        required=True,
        help='Path to input image'
    )
    
    parser.add_argument(
        '--config', '-c',
        type=str,
        default='configs/config.yaml',
        help='Path to configuration file (default: configs/config.yaml)'
    )
    
    parser.add_argument(
        '--opinion',
        type=str,
        default=None,
        help='Optional opinion prompt to codify for every object'
    )
    
    parser.add_argument(
        '--cpu',
        action='store_true',
        help='Run the detector on CPU'
    )
    
    parser.add_argument(
        '--verbose', '-v',
        action='store_true',
        help='Enable verbose output'
    )
    
    args = parser.parse_args(argv)
    
    if not Path(args.image).exists():
        print(f"Error: Image not found: {args.image}")
        sys.exit(1)
    
    try:
        config = load_config(args.config)
    except FileNotFoundError:
        print(f"Error: Config file not found: {args.config}")
        sys.exit(1)
    except Exception as e:
        print(f"Error loading config: {e}")
        sys.exit(1)
    
    config['verbose'] = args.verbose
    if args.cpu:
        config.setdefault('detection', {})['use_cuda'] = False
    
    vlm_config = config.get('vlm', {})
    if vlm_config.get('enabled', False):
        api_key = vlm_config.get('api_key', '')
        if not api_key or api_key == 'your-api-key-here':
            print("Error: GPT-4o API key not configured!")
            print("Please either:")
            print("  1. Set OPENAI_API_KEY environment variable")
            print("  2. Update vlm.api_key in configs/config.yaml")
            print("  3. Set vlm.enabled to false to skip opinion codification")
            sys.exit(1)
    elif args.opinion:
        print("Error: --opinion requires vlm.enabled in the config")
        sys.exit(1)
    
    # Progress messages go to stderr so stdout holds only the graph JSON
    with redirect_stdout(sys.stderr):
        try:
            generator = SceneGraphGenerator.from_config(config)
        except Exception as e:
            print(f"Error initializing generator: {e}")
            sys.exit(1)
        
        try:
            scene_graph = generator.generate(
                image=args.image,
                opinion_prompt=args.opinion
            )
        except Exception as e:
            print(f"Error: {e}")
            if config['verbose']:
                import traceback
                traceback.print_exc()
            sys.exit(1)
        
        if config['verbose']:
            print(f"\nScene Graph Summary:")
            print(f"  Objects: {len(scene_graph.get_nodes())}")
            print(f"  Relations: {len(scene_graph.get_relations())}")
            for node in scene_graph.get_nodes()[:5]:
                print(f"    - {node.object_class} ({node.confidence:.0%})")
    
    print(scene_graph.to_json())


if __name__ == '__main__':
    main()
