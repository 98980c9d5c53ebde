"""Allow running cxxbuild with ``python -m cxxbuild``."""

from cxxbuild.cli import main

if __name__ == "__main__":
    main()
