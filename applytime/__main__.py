from applytime.cli import main

raise SystemExit(main())
