"""Print every todo of an app.

Usage:
    INSTANT_APP_ID=... INSTANT_ADMIN_TOKEN=... python examples/basic.py
"""

import json
import sys

from instantdb import InstantClient, InstantError, set_debug


def main() -> int:
    if "--debug" in sys.argv[1:]:
        set_debug()

    try:
        with InstantClient.from_env() as client:
            result = client.query({"todos": {}})
    except InstantError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    print(json.dumps(result.data, indent=2))
    return 0


if __name__ == "__main__":
    sys.exit(main())
