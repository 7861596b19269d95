#!/usr/bin/env python3
"""
Generate a taper plan from a JSON request file.

Usage: python3 regenerate_taper.py <request_file.json>

This script reads a taper request from a JSON file and outputs
the generated plan as JSON to stdout.
"""

import json
import logging
import sys

# Assumes api/_python is on the path or the script is run from there
from taper_tools import generate_taper_plan


def main() -> None:
    if len(sys.argv) != 2:
        print(json.dumps({"error": "Usage: regenerate_taper.py <request_file.json>"}))
        sys.exit(1)

    logging.basicConfig(level=logging.WARNING, stream=sys.stderr)
    request_file = sys.argv[1]

    try:
        with open(request_file) as f:
            data = json.load(f)

        print(json.dumps(generate_taper_plan(data)))

    except FileNotFoundError:
        print(json.dumps({"error": f"Request file not found: {request_file}"}))
        sys.exit(1)
    except json.JSONDecodeError as e:
        print(json.dumps({"error": f"Invalid JSON in request file: {e}"}))
        sys.exit(1)
    except ValueError as e:
        print(json.dumps({"error": f"Invalid request: {e}"}))
        sys.exit(1)
    except Exception as e:
        print(json.dumps({"error": f"Taper generation failed: {e}"}))
        sys.exit(1)


if __name__ == "__main__":
    main()
