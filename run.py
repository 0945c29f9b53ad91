"""Project root entry point for launching the web interface."""

from __future__ import annotations

import os
from pathlib import Path


def main():
    from transtree.web import create_app

    project_path = Path(os.environ.get("TRANSTREE_PROJECT", Path.cwd()))
    app = create_app(project_path=project_path)
    app.run(host="127.0.0.1", port=5500, debug=False)


if __name__ == "__main__":
    main()
