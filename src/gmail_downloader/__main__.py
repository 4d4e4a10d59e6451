import sys

from gmail_downloader.cli import main

sys.exit(main())
