"""Write large synthetic JSON arrays for trying the filter on big inputs.

    python scripts/generate_test_files.py --out test-files --sizes 1 10 50
"""
from __future__ import annotations

import argparse
import json
import logging
import os
from datetime import datetime, timedelta, timezone

from json_field_filter.logging_setup import init_logging

logger = logging.getLogger(__name__)

CITIES = ['New York', 'Los Angeles', 'Chicago', 'Houston', 'Phoenix']


def generate_record(index: int) -> dict:
    created = datetime.now(timezone.utc) - timedelta(days=index)
    return {
        'id': index,
        'name': f'User {index}',
        'email': f'user{index}@example.com',
        'age': 20 + (index % 50),
        'isActive': index % 2 == 0,
        'createdAt': created.isoformat(),
        'address': {
            'street': f'{index} Main Street',
            'city': CITIES[index % 5],
            'zipCode': str(10000 + index),
            'country': 'USA',
        },
        'tags': ['tag1', 'tag2', 'tag3'][: (index % 3) + 1],
        'metadata': {
            'source': 'generated',
            'version': index % 10,
            'flags': {
                'verified': index % 3 == 0,
                'premium': index % 5 == 0,
            },
        },
    }


def generate_file(output_path: str, target_size_mb: float) -> int:
    """Write records until the file reaches `target_size_mb`; returns the record count."""
    target_size = int(target_size_mb * 1024 * 1024)
    current_size = 0
    index = 0
    with open(output_path, 'w', encoding='utf-8') as f:
        f.write('[\n')
        current_size += 2
        while current_size < target_size:
            chunk = ('' if index == 0 else ',\n') + json.dumps(generate_record(index), indent=2)
            f.write(chunk)
            current_size += len(chunk)
            index += 1
            if index % 10000 == 0:
                logger.info("Generated %d records, %.2f MB", index, current_size / 1024 / 1024)
        f.write('\n]')
    logger.info("Done: %s (%d records, %.2f MB)", output_path, index, current_size / 1024 / 1024)
    return index


def main(argv=None) -> None:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("--out", dest="out_dir", default="test-files")
    parser.add_argument("--sizes", nargs="+", type=float, default=[1, 10, 50], help="File sizes in MB")
    args = parser.parse_args(argv)

    init_logging()
    os.makedirs(args.out_dir, exist_ok=True)
    for size in args.sizes:
        generate_file(os.path.join(args.out_dir, f"test-{size:g}mb.json"), size)


if __name__ == "__main__":
    main()
