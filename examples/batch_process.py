#!/usr/bin/env python3
"""
Example script for analyzing every image in a directory.

Usage:
    python examples/batch_process.py --input_dir data/input
"""

import argparse
import sys
from pathlib import Path
from tqdm import tqdm

# Add project root and src to path
sys.path.insert(0, str(Path(__file__).parent.parent))
sys.path.insert(0, str(Path(__file__).parent.parent / 'src'))

from main import load_config
from detection.base import SUPPORTED_IMAGE_SUFFIXES
from scene_graph import SceneGraphGenerator


def get_image_files(input_dir: Path) -> list:
    """Get all image files from directory."""
    return sorted(f for f in input_dir.iterdir() if f.suffix.lower() in SUPPORTED_IMAGE_SUFFIXES)


def main():
    parser = argparse.ArgumentParser(description='Batch analyze images into scene graphs')
    parser.add_argument('--input_dir', '-i', required=True, help='Input directory with images')
    parser.add_argument('--config', '-c', default='configs/config.yaml', help='Config file')
    parser.add_argument('--opinion', default=None, help='Optional opinion prompt for every object')
    
    args = parser.parse_args()
    
    input_dir = Path(args.input_dir)
    if not input_dir.exists():
        print(f"Error: Input directory not found: {input_dir}")
        sys.exit(1)
    
    image_files = get_image_files(input_dir)
    print(f"Found {len(image_files)} images in {input_dir}")
    
    if not image_files:
        print("No images found!")
        sys.exit(1)
    
    config = load_config(args.config)
    config['verbose'] = False
    
    generator = SceneGraphGenerator.from_config(config)
    
    success_count = 0
    failed_images = []
    
    for image_file in tqdm(image_files, desc="Processing images"):
        try:
            # Each image gets its own node set and graph
            scene_graph = generator.generate(image=str(image_file), opinion_prompt=args.opinion)
            success_count += 1
            tqdm.write(f"✓ {image_file.name}: {scene_graph}")
            for node in scene_graph.get_nodes():
                relations = ', '.join(
                    f"{relation.relation} {scene_graph.get_node_by_id(relation.to_id).object_class}"
                    for relation in node.relations
                )
                tqdm.write(f"    {node.object_class}: {relations or '-'}")
        
        except Exception as e:
            tqdm.write(f"✗ {image_file.name}: {str(e)}")
            failed_images.append(image_file.name)
    
    print(f"\n{'='*60}")
    print(f"Batch Processing Complete")
    print(f"{'='*60}")
    print(f"Total images: {len(image_files)}")
    print(f"Successful: {success_count}")
    print(f"Failed: {len(failed_images)}")
    
    if failed_images:
        print(f"\nFailed images:")
        for img in failed_images:
            print(f"  - {img}")


if __name__ == '__main__':
    main()
