from logpull_exporter.cli import main

raise SystemExit(main())
