"""Entry point for ``python -m logchain``."""

from logchain.main import main

raise SystemExit(main())
