from brewpub.cli import main

raise SystemExit(main())
