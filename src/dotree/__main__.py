from dotree.cli import main

raise SystemExit(main())
