"""Build orchestration module.

This module handles:
- Running cargo for the resolved target
- Detecting binary architecture
- Packaging binaries as bootstrap or bootstrap.zip
- Sequencing the whole pipeline

Access submodules via lambda_build.builds.runner, .packager, .service.
"""
