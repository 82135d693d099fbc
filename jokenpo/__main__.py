from jokenpo.cli import main

raise SystemExit(main())
