"""Allows ``python -m guildhall``."""
from guildhall.main import main

raise SystemExit(main())
