from tree_manifest.cli import main

raise SystemExit(main())
