# config/tools/validate_config.py

import sys           # for exit codes
from pprint import pprint  # for structured printing

# make src discoverable if running as a script
from pathlib import Path
# __file__ is .../config/tools/validate_config.py
# parents[2] is the project root; append ROOT/src
PROJECT_ROOT = Path(__file__).resolve().parents[2]
sys.path.append(str(PROJECT_ROOT / "src"))

from env.loader import load_coordination_config  # noqa: E402


def main(argv=None) -> int:
    """Load and print the coordination config; non-zero exit on errors."""
    argv = sys.argv[1:] if argv is None else argv
    path = Path(argv[0]) if argv else None
    try:
        config = load_coordination_config(path)
    except (FileNotFoundError, ValueError, KeyError) as e:
        print("Config validation FAILED:", file=sys.stderr)
        print(repr(e), file=sys.stderr)
        return 1

    print("Config validation OK.")
    print("\nBlock namespace:", config.block_namespace)
    print("\nCoordinator:")
    pprint(config.coordinator)
    print("\nBuild action:")
    pprint(config.build_action)
    print("\nMonitoring:")
    pprint(config.monitoring)
    return 0


if __name__ == "__main__":
    sys.exit(main())
