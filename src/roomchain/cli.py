from __future__ import annotations

import json
import logging
import sys

from .config import build_settings, parse_args
from .errors import ConfigurationError, GenerationFailedError
from .logging_config import configure_logging

logger = logging.getLogger(__name__)


def main(argv=None) -> int:
    args = parse_args(argv)
    configure_logging(level=logging.DEBUG if args.debug else logging.INFO)

    try:
        settings = build_settings(args)
        layout = settings.build_generator().generate()
    except ConfigurationError as e:
        logger.error("Invalid configuration: %s", e)
        return 2
    except GenerationFailedError as e:
        summary = ", ".join(f"{reason.value}={n}" for reason, n in e.reasons.most_common())
        logger.error("%s (%s)", e, summary or "no attempts")
        return 1

    if args.format == "ascii":
        print("\n".join(layout.grid.to_str_lines()))
    else:
        # Print JSON summary so it can be diffed across runs
        print(json.dumps(layout.to_dict(), indent=2, sort_keys=True))
    return 0


if __name__ == "__main__":
    raise SystemExit(main(sys.argv[1:]))
