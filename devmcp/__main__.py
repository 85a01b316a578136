from devmcp.cli import main

raise SystemExit(main())
