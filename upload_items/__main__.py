from upload_items.cli import main

raise SystemExit(main())
