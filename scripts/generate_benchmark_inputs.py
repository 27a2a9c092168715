#!/usr/bin/env python3
"""
Generate benchmark input files and the file list that names them.

Each file is built by replicating a source text until the target size is
reached. Without --source a seeded pseudo-random text is used, so repeated
runs produce the same inputs.
"""

import random
import argparse
from pathlib import Path

# Configuration
DEFAULT_OUTPUT_DIR = Path("benchmark_inputs")
DEFAULT_FILES = 16
DEFAULT_SIZE_KB = 512

VOCABULARY = (
    "the of and to in is was that for on with as by at from this be or an are "
    "which one had not but what all were when we there can been has more if "
    "will would who so no out up into them some could him time than only other "
    "new about over such after first also two most where many through"
).split()


def synthetic_text(words: int = 20000, seed: int = 42) -> bytes:
    """Seeded word soup with sentence punctuation and mixed case."""
    rng = random.Random(seed)
    parts = []
    for i in range(words):
        word = rng.choice(VOCABULARY)
        if i % 12 == 0:
            word = word.capitalize()
        parts.append(word)
        if i % 12 == 11:
            parts[-1] += '.'
    return ' '.join(parts).encode('ascii')


def generate_file(output_path: Path, target_size: int, source_content: bytes) -> int:
    """
    Generate a file by replicating source content until target size is reached.

    Args:
        output_path: Path where the output file should be written
        target_size: Target file size in bytes
        source_content: The content to replicate

    Returns:
        Size of the written file in bytes
    """
    source_size = len(source_content)
    if source_size == 0:
        raise ValueError("Source file is empty!")

    replications = target_size // source_size
    with open(output_path, 'wb') as f:
        for _ in range(replications):
            f.write(source_content)
        remaining = target_size - replications * source_size
        if remaining > 0:
            f.write(source_content[:remaining])

    return output_path.stat().st_size


def main():
    parser = argparse.ArgumentParser(description="Generate word-count benchmark inputs")
    parser.add_argument("--output-dir", type=Path, default=DEFAULT_OUTPUT_DIR,
                        help="Directory for input files (default: %(default)s)")
    parser.add_argument("--files", type=int, default=DEFAULT_FILES,
                        help="Number of input files (default: %(default)s)")
    parser.add_argument("--size-kb", type=int, default=DEFAULT_SIZE_KB,
                        help="Size of each file in KB (default: %(default)s)")
    parser.add_argument("--source", type=Path, default=None,
                        help="Text file to replicate instead of generated text")
    args = parser.parse_args()

    print("=" * 70)
    print("Generating Benchmark Input Files")
    print("=" * 70)

    if args.source is not None:
        if not args.source.exists():
            print(f"❌ Source file not found: {args.source}")
            return 1
        source_content = args.source.read_bytes()
        print(f"\nSource file: {args.source} ({len(source_content)} bytes)")
    else:
        source_content = synthetic_text()
        print(f"\nGenerated source text ({len(source_content)} bytes)")

    args.output_dir.mkdir(parents=True, exist_ok=True)
    target_size = args.size_kb * 1024
    paths = []
    total_size = 0

    for i in range(args.files):
        output_path = args.output_dir / f"input_{i:03d}.txt"
        try:
            total_size += generate_file(output_path, target_size, source_content)
        except (OSError, ValueError) as e:
            print(f"  ❌ Error generating {output_path.name}: {e}")
            return 1
        paths.append(str(output_path.resolve()))

    filelist = args.output_dir / "filelist.txt"
    filelist.write_text('\n'.join(paths) + '\n')

    print(f"\n✓ Created {len(paths)} files, {total_size / (1024 * 1024):.2f} MB total")
    print(f"File list: {filelist}")
    print("=" * 70)
    return 0


if __name__ == "__main__":
    exit(main())
