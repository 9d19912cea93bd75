from pyvfs.cli import main

raise SystemExit(main())
