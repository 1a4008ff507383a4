#!/usr/bin/env python
import os
import sys


def main():
    os.environ.setdefault("DJANGO_SETTINGS_MODULE", "config.settings")
    from django.core.management import execute_from_command_line

    argv = list(sys.argv)
    # runserver listens on $PORT unless an address is given explicitly.
    if argv[1:] == ["runserver"]:
        argv.append(f"0.0.0.0:{os.getenv('PORT', '8000')}")
    execute_from_command_line(argv)


if __name__ == "__main__":
    main()
