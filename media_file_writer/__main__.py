"""Allow ``python -m media_file_writer`` as an alias for ``main.py``."""

from main import main

raise SystemExit(main())
