from shapecheck.cli import main

raise SystemExit(main())
