"""Allow ``python -m student_manager``."""

from student_manager.app import main

raise SystemExit(main())
