from spotwatch.cli import main

raise SystemExit(main())
