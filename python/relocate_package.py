#!/usr/bin/env python
import json
import sys
from pathlib import Path

def main():
    if len(sys.argv) < 2:
        print("Usage: relocate_package.py '{\"project_root\": \"/path\", \"package\": \"com.example.tools\", \"include_dependencies\": false}'", file=sys.stderr)
        sys.exit(2)

    try:
        payload = json.loads(sys.argv[1])
        project_root = Path(payload["project_root"]).resolve()
        package = payload["package"]
        include_dependencies = bool(payload.get("include_dependencies", False))
    except Exception as e:
        print(f"Invalid payload: {e}", file=sys.stderr)
        sys.exit(2)

    try:
        # Import here so the editor integration fails gracefully if pkgmover isn't installed yet
        from pkgmover import ManifestRegistry, PackageRelocator, ProjectSession, RelocationError, RelocatorConfig
        from pkgmover.progress import LoggingProgressReporter
    except Exception as e:
        print("Could not import 'pkgmover'. Make sure it is installed in the selected Python environment.", file=sys.stderr)
        print(str(e), file=sys.stderr)
        sys.exit(3)

    config = RelocatorConfig.for_project(project_root, payload.get("asset_root"))
    with ManifestRegistry(project_root) as registry:
        session = ProjectSession([registry.sync_lock_file])
        relocator = PackageRelocator(registry, registry, session, LoggingProgressReporter(), config)
        try:
            batch = relocator.move(package, include_dependencies=include_dependencies)
        except RelocationError as e:
            print(e.describe(), file=sys.stderr)
            sys.exit(1)

    if batch is None:
        print(f"{package} is not a package", file=sys.stderr)
        sys.exit(2)

    # The host refreshes its views for these names
    print(json.dumps({"moved": batch.names}))
    sys.exit(0)

if __name__ == "__main__":
    main()
