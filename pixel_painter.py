#!/usr/bin/env python3
# -*- coding: utf-8 -*-

# archivo principal (mínimo)

import sys

from painter.config import ConfigurationError, load_settings
from painter.run import run_painter

if __name__ == "__main__":
    try:
        settings = load_settings()
        run_painter(settings)
    except ConfigurationError as e:
        print(f"[CONFIG] {e}", file=sys.stderr)
        sys.exit(2)
    except KeyboardInterrupt:
        pass
