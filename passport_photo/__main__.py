from passport_photo.cli import main

raise SystemExit(main())
