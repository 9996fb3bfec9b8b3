"""Run almond-cmdline with ``python -m almond_cmdline``."""

from almond_cmdline.cli import main

if __name__ == "__main__":
    main()
