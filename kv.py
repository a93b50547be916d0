# Command line entry point for the key-value store: python3 kv.py <command> ...
import sys

from kv_lib.cli import main

if __name__ == "__main__":
    sys.exit(main(sys.argv[1:]))
