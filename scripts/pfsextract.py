#!/usr/bin/env python3
import os
import sys
import logging

from pfsextractor.cli import main


logging.basicConfig(level=logging.DEBUG if 'DEBUG' in os.environ else logging.INFO)


if __name__ == '__main__':
    sys.exit(main(sys.argv))
