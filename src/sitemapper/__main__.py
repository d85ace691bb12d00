from sitemapper.cli import main

raise SystemExit(main())
